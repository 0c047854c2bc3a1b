from flask import Blueprint, render_template, redirect, url_for, flash, send_file
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.dealership import Dealership
from models.vehicle import Vehicle
from models.dispute import Dispute
from forms.admin_forms import VerificationForm, CertificationStatusForm, DisputeUpdateForm
from routes.auth import require_role_for
from utils.logger import get_logger
import pandas as pd
import io

logger = get_logger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')
require_role_for(admin_bp, 'admin')

EXPORT_COLUMNS = ['Dispute', 'Customer', 'VIN', 'Vehicle', 'Dealership', 'Type', 'Status', 'Submitted', 'Resolved', 'Response']


@admin_bp.route('/dashboard')
def dashboard():
    stats = {
        'total_dealerships': Dealership.query.count(),
        'active_dealerships': Dealership.query.filter_by(certification_status='active').count(),
        'pending_dealerships': Dealership.query.filter_by(certification_status='pending').count(),
        'total_vehicles': Vehicle.query.count(),
        'pending_vehicles': Vehicle.query.filter_by(status='pending_verification').count(),
        'verified_vehicles': Vehicle.query.filter_by(status='verified').count(),
        'total_disputes': Dispute.query.count(),
        'open_disputes': Dispute.query.filter(Dispute.status.in_(['submitted', 'under_review'])).count(),
    }
    return render_template('admin/dashboard.html', title='Admin Dashboard', stats=stats)


# Dealerships

@admin_bp.route('/dealerships')
def dealerships():
    dealerships = Dealership.query.order_by(Dealership.created_at.desc()).all()
    return render_template('admin/dealerships.html', title='Manage Dealerships', dealerships=dealerships)


@admin_bp.route('/dealership/<int:dealership_id>')
def dealership_details(dealership_id):
    dealership = Dealership.query.get_or_404(dealership_id)
    vehicles = dealership.vehicles.order_by(Vehicle.created_at.desc()).all()
    form = CertificationStatusForm(status=dealership.certification_status)
    return render_template('admin/dealership_details.html', title='Dealership Details',
                           dealership=dealership, vehicles=vehicles, form=form)


@admin_bp.route('/dealership/<int:dealership_id>/update-status', methods=['POST'])
def update_dealership_status(dealership_id):
    dealership = Dealership.query.get_or_404(dealership_id)
    form = CertificationStatusForm()
    if form.validate_on_submit():
        dealership.certification_status = form.status.data
        db.session.commit()
        logger.info(f"Admin {current_user.username} set dealership {dealership.id} certification to {form.status.data}")
        flash('Certification status updated', 'success')
    else:
        flash('Invalid certification status', 'danger')
    return redirect(url_for('admin.dealership_details', dealership_id=dealership.id))


# Vehicle verification

@admin_bp.route('/verify-vehicles')
def verify_vehicles():
    vehicles = (
        Vehicle.query
        .filter_by(status='pending_verification')
        .order_by(Vehicle.created_at.asc(), Vehicle.id.asc())
        .all()
    )
    return render_template('admin/verify_vehicles.html', title='Verify Vehicles', vehicles=vehicles)


@admin_bp.route('/verify-vehicle/<int:vehicle_id>', methods=['GET', 'POST'])
def verify_vehicle(vehicle_id):
    vehicle = Vehicle.query.get_or_404(vehicle_id)
    form = VerificationForm()
    if form.validate_on_submit():
        try:
            if form.action.data == 'approve':
                vehicle.approve(current_user, form.notes.data, form.checklist_flags())
            else:
                vehicle.reject(current_user, form.notes.data, form.rejection_reason.data)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Recording verification decision for vehicle {vehicle_id} failed")
            flash('Error recording the verification decision, nothing was changed', 'danger')
            return render_template('admin/verify_vehicle_detail.html', title='Verify Vehicle',
                                   vehicle=vehicle, form=form)
        logger.info(f"Admin {current_user.username} marked vehicle {vehicle.id} ({vehicle.vin}) {vehicle.status}")
        flash(f'Vehicle {vehicle.vin} marked {vehicle.get_status_display().lower()}', 'success')
        return redirect(url_for('admin.verify_vehicles'))
    return render_template('admin/verify_vehicle_detail.html', title='Verify Vehicle', vehicle=vehicle, form=form)


@admin_bp.route('/verified-vehicles')
def verified_vehicles():
    vehicles = (
        Vehicle.query
        .filter_by(status='verified')
        .order_by(Vehicle.verified_at.desc())
        .all()
    )
    return render_template('admin/verified_vehicles.html', title='Verified Vehicles', vehicles=vehicles)


# Disputes

@admin_bp.route('/disputes')
def disputes():
    disputes = Dispute.query.order_by(Dispute.created_at.desc(), Dispute.id.desc()).all()
    return render_template('admin/disputes.html', title='Manage Disputes', disputes=disputes,
                           form=DisputeUpdateForm())


@admin_bp.route('/dispute/<int:dispute_id>/update', methods=['POST'])
def update_dispute(dispute_id):
    dispute = Dispute.query.get_or_404(dispute_id)
    form = DisputeUpdateForm()
    if form.validate_on_submit():
        dispute.apply_admin_update(form.status.data, form.admin_response.data)
        db.session.commit()
        logger.info(f"Admin {current_user.username} set dispute {dispute.id} to {dispute.status}")
        flash('Dispute updated', 'success')
    else:
        flash('Invalid dispute status', 'danger')
    return redirect(url_for('admin.disputes'))


@admin_bp.route('/disputes/export')
def export_disputes():
    disputes = Dispute.query.order_by(Dispute.created_at.desc()).all()
    data = [{
        'Dispute': d.id,
        'Customer': d.customer.full_name,
        'VIN': d.vehicle.vin,
        'Vehicle': d.vehicle.title,
        'Dealership': d.vehicle.dealership.business_name,
        'Type': d.get_discrepancy_display(),
        'Status': d.get_status_display(),
        'Submitted': d.created_at.strftime('%Y-%m-%d %H:%M'),
        'Resolved': d.resolved_at.strftime('%Y-%m-%d %H:%M') if d.resolved_at else '',
        'Response': d.admin_response or ''
    } for d in disputes]
    df = pd.DataFrame(data, columns=EXPORT_COLUMNS)
    output = io.BytesIO()
    df.to_excel(output, index=False)
    output.seek(0)
    return send_file(output, as_attachment=True, download_name='disputes_export.xlsx',
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
