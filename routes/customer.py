from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, current_app
from flask_login import current_user
from models import db
from models.dealership import Dealership
from models.vehicle import Vehicle
from models.dispute import Dispute
from forms.customer_forms import DisputeForm
from forms.dealership_forms import BODY_TYPES
from routes.auth import role_required
from utils.logger import get_logger

logger = get_logger(__name__)

customer_bp = Blueprint('customer', __name__, url_prefix='/customer')


def current_customer():
    customer = current_user.customer
    if customer is None:
        abort(404, description='Customer profile not found')
    return customer


def _price_arg(name):
    value = request.args.get(name, '').strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def search_filters():
    """Catalogue filters from the query string"""
    return {
        'vin': request.args.get('vin', '').strip() or None,
        'make': request.args.get('make', '').strip() or None,
        'min_price': _price_arg('minPrice'),
        'max_price': _price_arg('maxPrice'),
        'body_type': request.args.get('bodyType', '').strip() or None,
    }


@customer_bp.route('/dashboard')
@role_required('customer')
def dashboard():
    customer = current_customer()
    recent_disputes = customer.disputes.order_by(Dispute.created_at.desc(), Dispute.id.desc()).limit(5).all()
    return render_template('customer/dashboard.html', title='Customer Dashboard',
                           customer=customer, recent_disputes=recent_disputes)


@customer_bp.route('/browse-dealerships')
def browse_dealerships():
    dealerships = (
        Dealership.query
        .filter_by(certification_status='active')
        .order_by(Dealership.business_name)
        .all()
    )
    return render_template('customer/browse_dealerships.html', title='Certified Dealerships',
                           dealerships=dealerships)


@customer_bp.route('/vehicles')
def vehicles():
    filters = search_filters()
    page = request.args.get('page', 1, type=int)
    per_page = current_app.config['VEHICLES_PER_PAGE']
    pagination, single_match = Vehicle.search(filters, page=page, per_page=per_page)

    if single_match is not None:
        return redirect(url_for('vehicle.vehicle_details', vehicle_id=single_match.id))

    return render_template('customer/vehicles.html', title='Browse Vehicles',
                           vehicles=pagination.items,
                           filters=request.args,
                           body_types=BODY_TYPES,
                           pagination=pagination,
                           current_page=pagination.page,
                           total_pages=pagination.pages,
                           total_vehicles=pagination.total)


@customer_bp.route('/report-dispute', methods=['GET', 'POST'])
@role_required('customer')
def report_dispute():
    customer = current_customer()
    form = DisputeForm()
    vehicle = None
    vehicle_id = request.args.get('vehicleId', type=int)
    if request.method == 'GET' and vehicle_id:
        vehicle = Vehicle.query.get_or_404(vehicle_id)
        form.vehicle_id.data = vehicle.id

    if form.validate_on_submit():
        try:
            vehicle = db.session.get(Vehicle, int(form.vehicle_id.data))
        except ValueError:
            vehicle = None
        if vehicle is None:
            abort(404, description='Vehicle not found')
        dispute = Dispute(
            customer_id=customer.id,
            vehicle_id=vehicle.id,
            discrepancy_type=form.discrepancy_type.data,
            description=form.description.data.strip()
        )
        db.session.add(dispute)
        db.session.commit()
        logger.info(f"Customer {customer.id} opened dispute {dispute.id} on vehicle {vehicle.id} ({dispute.discrepancy_type})")
        flash('Your dispute has been submitted', 'success')
        return redirect(url_for('customer.my_disputes'))

    if vehicle is None and str(form.vehicle_id.data or '').isdigit():
        vehicle = db.session.get(Vehicle, int(form.vehicle_id.data))
    return render_template('customer/report_dispute.html', title='Report Discrepancy',
                           customer=customer, vehicle=vehicle, form=form)


@customer_bp.route('/my-disputes')
@role_required('customer')
def my_disputes():
    customer = current_customer()
    disputes = customer.disputes.order_by(Dispute.created_at.desc(), Dispute.id.desc()).all()
    return render_template('customer/my_disputes.html', title='My Disputes', disputes=disputes)
