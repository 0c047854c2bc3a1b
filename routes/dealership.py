from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify, abort
from flask_login import current_user
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timedelta
from models import db
from models.vehicle import Vehicle, VEHICLE_STATUSES
from forms.dealership_forms import DealershipProfileForm, VehicleForm
from routes.auth import require_role_for
from utils.uploads import save_vehicle_images, remove_files, image_path
from utils.qr import generate_vehicle_qr, qr_file_path
from utils.logger import get_logger

logger = get_logger(__name__)

dealership_bp = Blueprint('dealership', __name__, url_prefix='/dealership')
require_role_for(dealership_bp, 'dealership')


def current_dealership():
    """The logged in user's dealership profile, 404 when there is none"""
    dealership = current_user.dealership
    if dealership is None:
        abort(404, description='Dealership profile not found')
    return dealership


@dealership_bp.route('/dashboard')
def dashboard():
    dealership = current_dealership()
    stats = dealership.get_vehicle_stats()
    return render_template('dealership/dashboard.html', title='Dealership Dashboard',
                           dealership=dealership, stats=stats)


@dealership_bp.route('/profile')
def profile():
    dealership = current_dealership()
    form = DealershipProfileForm(obj=dealership)
    return render_template('dealership/profile.html', title='My Profile', dealership=dealership, form=form)


@dealership_bp.route('/profile/update', methods=['POST'])
def update_profile():
    dealership = current_dealership()
    form = DealershipProfileForm()
    if form.validate_on_submit():
        form.populate_obj(dealership)
        db.session.commit()
        logger.info(f"Dealership {dealership.id} updated its profile")
        flash('Profile updated successfully', 'success')
        return redirect(url_for('dealership.profile'))
    flash('Error updating profile', 'danger')
    return render_template('dealership/profile.html', title='My Profile', dealership=dealership, form=form)


@dealership_bp.route('/add-vehicle', methods=['GET', 'POST'])
def add_vehicle():
    dealership = current_dealership()
    form = VehicleForm()
    if form.validate_on_submit():
        # UploadError propagates to the application's 400 handler
        image_urls, saved_paths = save_vehicle_images(request.files.getlist(form.vehicle_images.name))

        vehicle = Vehicle(
            dealership_id=dealership.id,
            vin=form.vin.data,
            make=form.make.data.strip(),
            model=form.model.data.strip(),
            year=form.year.data,
            mileage=form.mileage.data,
            price=form.price.data,
            color=form.color.data,
            body_type=form.body_type.data,
            fuel_type=form.fuel_type.data,
            transmission=form.transmission.data,
            previous_owners=form.previous_owners.data or 0,
            registration_authority=form.registration_authority.data,
            plate_number=form.plate_number.data,
            engine_number=form.engine_number.data,
            tare_weight=form.tare_weight.data,
            date_liability_licensing=form.date_liability_licensing.data,
            vehicle_status=form.vehicle_status.data,
            date_liable_registration=form.date_liable_registration.data,
            engine_type=form.engine_type.data,
            engine_capacity=form.engine_capacity.data,
            service_history=form.service_history.data,
            accident_history=form.accident_history.data,
            recall_information=form.recall_information.data,
            additional_features=form.additional_features.data,
            description=form.description.data
        )
        vehicle.images = image_urls
        vehicle.licenses = form.license_numbers()

        qr_path = None
        try:
            db.session.add(vehicle)
            db.session.flush()
            qr_path = qr_file_path(vehicle)
            vehicle.qr_code_path = generate_vehicle_qr(vehicle)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            remove_files(saved_paths)
            logger.info(f"Dealership {dealership.id} submitted duplicate VIN {form.vin.data}")
            flash('Error adding vehicle. VIN may already exist.', 'danger')
            return render_template('dealership/add_vehicle.html', title='Add Vehicle', form=form)
        except Exception:
            db.session.rollback()
            remove_files(saved_paths + [qr_path])
            raise

        logger.info(f"Dealership {dealership.id} submitted vehicle {vehicle.id} ({vehicle.vin}) for verification")
        flash('Vehicle submitted for verification', 'success')
        return redirect(url_for('dealership.vehicles'))
    return render_template('dealership/add_vehicle.html', title='Add Vehicle', form=form)


@dealership_bp.route('/vehicles')
def vehicles():
    dealership = current_dealership()
    status = request.args.get('status', 'all')
    query = dealership.vehicles
    if status in VEHICLE_STATUSES:
        query = query.filter_by(status=status)
    else:
        status = 'all'
    vehicles = query.order_by(Vehicle.created_at.desc(), Vehicle.id.desc()).all()
    return render_template('dealership/vehicles.html', title='My Vehicles', vehicles=vehicles,
                           selected_status=status, statuses=VEHICLE_STATUSES)


@dealership_bp.route('/vehicle/<int:vehicle_id>')
def vehicle_details(vehicle_id):
    dealership = current_dealership()
    vehicle = Vehicle.query.filter_by(id=vehicle_id, dealership_id=dealership.id).first()
    if vehicle is None:
        abort(404, description='Vehicle not found or you do not have permission to view it')
    return render_template('dealership/vehicle_details.html', title=vehicle.title, vehicle=vehicle)


@dealership_bp.route('/vehicle/<int:vehicle_id>/delete', methods=['POST'])
def delete_vehicle(vehicle_id):
    dealership = current_dealership()
    vehicle = Vehicle.query.filter_by(id=vehicle_id, dealership_id=dealership.id).first()
    if vehicle is None:
        abort(404, description='Vehicle not found or you do not have permission to delete it')

    if not vehicle.can_be_deleted_by(dealership):
        flash('Only vehicles still pending verification can be deleted', 'warning')
        return redirect(url_for('dealership.vehicles'))

    files = [image_path(url) for url in vehicle.images]
    files.append(qr_file_path(vehicle))
    db.session.delete(vehicle)
    db.session.commit()
    remove_files(files)
    logger.info(f"Dealership {dealership.id} deleted pending vehicle {vehicle_id}")
    flash('Vehicle deleted', 'success')
    return redirect(url_for('dealership.vehicles'))


@dealership_bp.route('/api/recent-vehicles')
def api_recent_vehicles():
    dealership = current_dealership()
    vehicles = (
        dealership.vehicles
        .filter_by(status='verified')
        .order_by(Vehicle.updated_at.desc())
        .limit(5)
        .all()
    )
    return jsonify([{
        'id': v.id,
        'vin': v.vin,
        'title': v.title,
        'price': v.price,
        'business_name': dealership.business_name,
        'verified_at': v.verified_at.isoformat() if v.verified_at else None
    } for v in vehicles])


@dealership_bp.route('/api/verification-analytics')
def api_verification_analytics():
    dealership = current_dealership()
    since = datetime.utcnow() - timedelta(days=183)
    vehicles = dealership.vehicles.filter(Vehicle.created_at >= since).all()

    # group by month and status
    counts = {}
    for v in vehicles:
        key = (v.created_at.strftime('%Y-%m'), v.status)
        counts[key] = counts.get(key, 0) + 1
    analytics = [{'month': month, 'status': status, 'count': count}
                 for (month, status), count in counts.items()]
    analytics.sort(key=lambda row: (row['month'], row['status']), reverse=True)
    return jsonify(analytics)
