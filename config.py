import os
import tempfile
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'before-you-sign-secret-key'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'dealership.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BABEL_DEFAULT_LOCALE = os.environ.get('BABEL_DEFAULT_LOCALE') or 'en'

    APP_ENV = os.environ.get('APP_ENV') or 'development'
    SHOW_ERROR_DETAILS = APP_ENV != 'production'

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')

    # Uploaded images and QR codes are served from the static folder
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'static', 'uploads', 'vehicles')
    QR_FOLDER = os.environ.get('QR_FOLDER') or os.path.join(BASE_DIR, 'static', 'qr-codes')
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    MAX_IMAGES_PER_VEHICLE = 10
    ALLOWED_IMAGE_EXTENSIONS = {'jpeg', 'jpg', 'png', 'gif', 'webp'}
    MAX_CONTENT_LENGTH = MAX_IMAGES_PER_VEHICLE * MAX_IMAGE_SIZE + 1024 * 1024

    VEHICLES_PER_PAGE = 9
    CURRENCY = os.environ.get('CURRENCY') or 'ZAR'

    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = APP_ENV == 'production'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    SHOW_ERROR_DETAILS = True
    LOG_DIR = os.path.join(tempfile.gettempdir(), 'before-you-sign-logs')
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'before-you-sign-tests', 'uploads')
    QR_FOLDER = os.path.join(tempfile.gettempdir(), 'before-you-sign-tests', 'qr-codes')
