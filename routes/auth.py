from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, current_app
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import IntegrityError
from forms.auth_forms import LoginForm, DealershipRegisterForm, CustomerRegisterForm
from models import db
from models.user import User
from models.dealership import Dealership
from models.customer import Customer
from utils.logger import get_logger

logger = get_logger(__name__)

auth_bp = Blueprint('auth', __name__)

# blueprint name -> role every view on that blueprint requires
BLUEPRINT_ROLES = {}


def require_role_for(blueprint, role):
    BLUEPRINT_ROLES[blueprint.name] = role


def role_required(role):
    """Declare the role a single view needs; checked by enforce_role_access."""
    def decorator(f):
        f.required_role = role
        return f
    return decorator


def required_role_for_request():
    if request.endpoint is None:
        return None
    view = current_app.view_functions.get(request.endpoint)
    return getattr(view, 'required_role', None) or BLUEPRINT_ROLES.get(request.blueprint)


def enforce_role_access():
    """Role check run once per request against the logged in user."""
    role = required_role_for_request()
    if role is None:
        return None
    if not current_user.is_authenticated:
        return current_app.login_manager.unauthorized()
    if current_user.role != role:
        logger.warning(f"User {current_user.username} ({current_user.role}) denied access to {request.path}")
        abort(403)
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for(current_user.dashboard_endpoint()))
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(username=form.username.data.strip()).first()
        if user and user.check_password(form.password.data):
            login_user(user)
            logger.info(f"User {user.username} logged in as {user.role}")
            return redirect(url_for(user.dashboard_endpoint()))
        logger.info(f"Failed login for username {form.username.data!r}")
        flash('Invalid username or password', 'danger')
    return render_template('auth/login.html', title='Login', form=form)


def _new_user(form, role):
    user = User(username=form.username.data.strip(), email=form.email.data.strip().lower(), role=role)
    user.set_password(form.password.data)
    return user


@auth_bp.route('/register/dealership', methods=['GET', 'POST'])
def register_dealership():
    form = DealershipRegisterForm()
    if form.validate_on_submit():
        user = _new_user(form, 'dealership')
        user.dealership = Dealership(
            business_name=form.business_name.data,
            registration_number=form.registration_number.data.strip(),
            license_number=form.license_number.data,
            year_established=form.year_established.data,
            email=user.email,
            phone=form.phone.data,
            address=form.address.data,
            city=form.city.data,
            postal_code=form.postal_code.data,
            website=form.website.data,
            operating_hours=form.operating_hours.data,
            description=form.description.data
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info(f"Dealership registration rejected as duplicate: {form.username.data!r}")
            flash('Username, email or registration number already exists', 'danger')
        else:
            logger.info(f"Registered dealership {user.dealership.business_name} (user {user.username})")
            flash('Registration successful, you can now log in', 'success')
            return redirect(url_for('auth.login'))
    return render_template('auth/register_dealership.html', title='Dealership Registration', form=form)


@auth_bp.route('/register/customer', methods=['GET', 'POST'])
def register_customer():
    form = CustomerRegisterForm()
    if form.validate_on_submit():
        user = _new_user(form, 'customer')
        user.customer = Customer(
            full_name=form.full_name.data,
            phone=form.phone.data,
            address=form.address.data,
            city=form.city.data,
            postal_code=form.postal_code.data
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info(f"Customer registration rejected as duplicate: {form.username.data!r}")
            flash('Username or email already exists', 'danger')
        else:
            logger.info(f"Registered customer {user.username}")
            flash('Registration successful, you can now log in', 'success')
            return redirect(url_for('auth.login'))
    return render_template('auth/register_customer.html', title='Customer Registration', form=form)


@auth_bp.route('/logout')
def logout():
    if current_user.is_authenticated:
        logger.info(f"User {current_user.username} logged out")
    logout_user()
    flash('You have been logged out', 'success')
    return redirect(url_for('index'))
