"""
Vehicle image uploads.

Images are checked for count, extension, MIME type and size before anything
is written; a failure raises ``UploadError`` which the application turns into
a 400 page.
"""

import os
import time
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_PREFIX = '/static/uploads/vehicles'


class UploadError(Exception):
    """Raised when an uploaded file breaks the upload rules."""


def _extension(filename):
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def _file_size(storage):
    stream = storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def validate_images(files):
    """Drop empty file inputs and check the rest against the upload limits."""
    config = current_app.config
    allowed = config['ALLOWED_IMAGE_EXTENSIONS']
    files = [f for f in files if f and f.filename]

    if len(files) > config['MAX_IMAGES_PER_VEHICLE']:
        raise UploadError(f"Too many files. Maximum is {config['MAX_IMAGES_PER_VEHICLE']} files.")

    for storage in files:
        extension = _extension(storage.filename)
        mime_subtype = (storage.mimetype or '').split('/')[-1].lower()
        if extension not in allowed or mime_subtype not in allowed:
            raise UploadError('Only image files are allowed (jpeg, jpg, png, gif, webp)')
        if _file_size(storage) > config['MAX_IMAGE_SIZE']:
            raise UploadError('File size exceeds the maximum limit of 5MB.')
    return files


def save_vehicle_images(files):
    """Validate and store images. Returns ``(public_urls, saved_paths)``."""
    files = validate_images(files)
    upload_dir = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_dir, exist_ok=True)

    urls, paths = [], []
    try:
        for storage in files:
            name = secure_filename(
                f'vehicle-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{_extension(storage.filename)}')
            path = os.path.join(upload_dir, name)
            storage.save(path)
            paths.append(path)
            urls.append(f'{PUBLIC_PREFIX}/{name}')
    except OSError:
        remove_files(paths)
        raise
    return urls, paths


def image_path(url):
    """Filesystem path of a stored image from its public url"""
    if not url or not url.startswith(PUBLIC_PREFIX + '/'):
        return None
    return os.path.join(current_app.config['UPLOAD_FOLDER'], url[len(PUBLIC_PREFIX) + 1:])


def remove_files(paths):
    """Best-effort cleanup; failures are logged and not retried."""
    for path in paths:
        if not path:
            continue
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove orphaned file {path}: {e}")
