from flask import Blueprint, render_template, request, abort
from models.vehicle import Vehicle, is_valid_vin

vehicle_bp = Blueprint('vehicle', __name__, url_prefix='/vehicle')


@vehicle_bp.route('/<int:vehicle_id>')
def vehicle_details(vehicle_id):
    vehicle = Vehicle.query.filter_by(id=vehicle_id, status='verified').first()
    if vehicle is None:
        abort(404, description='Vehicle not found or not verified')
    return render_template('vehicle/details.html', title=vehicle.title, vehicle=vehicle)


@vehicle_bp.route('/vin/<vin>')
def vehicle_by_vin(vin):
    """Target of the vehicle QR codes"""
    vin = vin.strip().upper()
    if not is_valid_vin(vin):
        abort(400, description='Invalid VIN format (17 characters, no I, O, Q)')
    vehicle = Vehicle.query.filter_by(vin=vin, status='verified').first()
    if vehicle is None:
        abort(404, description='Vehicle not found or not verified')
    return render_template('vehicle/details.html', title=vehicle.title, vehicle=vehicle)


@vehicle_bp.route('/search/vin')
def search_vin():
    vin = request.args.get('vin', '').strip()
    if not vin:
        return render_template('vehicle/search_vin.html', title='Search Vehicle', vehicle=None, searched=False)

    vehicle = Vehicle.query.filter_by(vin=vin.upper(), status='verified').first()
    return render_template('vehicle/search_vin.html', title='Search Vehicle', vehicle=vehicle,
                           searched=True, searched_vin=vin)
