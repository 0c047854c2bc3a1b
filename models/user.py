from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from models import db
from datetime import datetime

ROLES = ('dealership', 'admin', 'customer')

# Role -> endpoint of that role's landing page
DASHBOARDS = {
    'admin': 'admin.dashboard',
    'dealership': 'dealership.dashboard',
    'customer': 'customer.dashboard',
}


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    __table_args__ = (
        db.CheckConstraint("role IN ('dealership', 'admin', 'customer')", name='ck_users_role'),
    )
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # one profile per user, enforced by the unique user_id on each profile table
    dealership = db.relationship('Dealership', back_populates='user', uselist=False,
                                 cascade='all, delete-orphan')
    customer = db.relationship('Customer', back_populates='user', uselist=False,
                               cascade='all, delete-orphan')

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def is_admin(self):
        return self.role == 'admin'

    def is_dealership(self):
        return self.role == 'dealership'

    def is_customer(self):
        return self.role == 'customer'

    def dashboard_endpoint(self):
        return DASHBOARDS.get(self.role, 'index')
