"""QR code images for vehicles, one PNG per vehicle named by its id."""

import os

import qrcode
from flask import current_app

from utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_PREFIX = '/static/qr-codes'


def qr_filename(vehicle_id):
    return f'vehicle_{vehicle_id}.png'


def generate_vehicle_qr(vehicle):
    """Write the QR image for ``vehicle`` and return its public path."""
    qr_dir = current_app.config['QR_FOLDER']
    os.makedirs(qr_dir, exist_ok=True)

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(vehicle.qr_payload())
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")

    filename = qr_filename(vehicle.id)
    image.save(os.path.join(qr_dir, filename))
    logger.info(f"Generated QR code for vehicle {vehicle.id} ({vehicle.vin})")
    return f'{PUBLIC_PREFIX}/{filename}'


def qr_file_path(vehicle):
    return os.path.join(current_app.config['QR_FOLDER'], qr_filename(vehicle.id))
