from flask import Flask, render_template
from flask_login import LoginManager
from flask_babel import Babel, format_currency, format_datetime
from flask_wtf.csrf import CSRFProtect
from werkzeug.exceptions import HTTPException
from config import Config
import os
from models import db
from models.user import User
from models.dealership import Dealership
from models.vehicle import Vehicle
from utils.logger import configure_logging, get_logger
from utils.uploads import UploadError

logger = get_logger(__name__)

# Initialize extensions
login_manager = LoginManager()
babel = Babel()
csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config['LOG_LEVEL'], app.config['LOG_DIR'])
    for folder in (app.config['UPLOAD_FOLDER'], app.config['QR_FOLDER']):
        os.makedirs(folder, exist_ok=True)

    db.init_app(app)
    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to continue'
    login_manager.login_message_category = 'warning'

    def get_locale():
        return app.config['BABEL_DEFAULT_LOCALE']
    babel.init_app(app, locale_selector=get_locale)

    # Flask-Login user loader
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Register Blueprints
    from routes.auth import auth_bp, enforce_role_access
    app.register_blueprint(auth_bp)
    from routes.dealership import dealership_bp
    app.register_blueprint(dealership_bp)
    from routes.admin import admin_bp
    app.register_blueprint(admin_bp)
    from routes.customer import customer_bp
    app.register_blueprint(customer_bp)
    from routes.vehicle import vehicle_bp
    app.register_blueprint(vehicle_bp)

    # one role check per request, driven by the blueprint or view being hit
    app.before_request(enforce_role_access)

    @app.route("/")
    def index():
        recent_vehicles = (
            Vehicle.query
            .filter_by(status='verified')
            .order_by(Vehicle.verified_at.desc())
            .limit(6)
            .all()
        )
        certified_count = Dealership.query.filter_by(certification_status='active').count()
        return render_template('index.html', title='Before You Sign',
                               recent_vehicles=recent_vehicles,
                               certified_count=certified_count)

    @app.template_filter('money')
    def money(value):
        return format_currency(value or 0, app.config['CURRENCY'])

    @app.template_filter('datetime')
    def datetime_filter(value):
        return format_datetime(value, 'medium') if value else '-'

    register_error_handlers(app)
    logger.info(f"Application created ({app.config['APP_ENV']})")
    return app


def register_error_handlers(app):
    def render_error(title, message, status, error=None):
        if not app.config['SHOW_ERROR_DETAILS']:
            error = None
        return render_template('error.html', title=title, message=message, error=error), status

    @app.errorhandler(UploadError)
    def handle_upload_error(e):
        logger.info(f"Upload rejected: {e}")
        return render_error('Upload Error', str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 413:
            return render_error('Upload Error', 'Upload is too large. Images are limited to 5MB each.', 400)
        return render_error(e.name, e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception("Unhandled error")
        return render_error('Server Error', 'Something went wrong! Please try again later.', 500, error=repr(e))


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
