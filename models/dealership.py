from models import db
from datetime import datetime

CERTIFICATION_STATUSES = ('pending', 'active', 'suspended')


class Dealership(db.Model):
    __tablename__ = 'dealerships'
    __table_args__ = (
        db.CheckConstraint("certification_status IN ('pending', 'active', 'suspended')",
                           name='ck_dealerships_certification_status'),
    )
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    business_name = db.Column(db.String(128), nullable=False)
    registration_number = db.Column(db.String(64), unique=True, nullable=False)
    license_number = db.Column(db.String(64))
    year_established = db.Column(db.Integer)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(64), nullable=False)
    postal_code = db.Column(db.String(16))
    website = db.Column(db.String(255))
    operating_hours = db.Column(db.String(128))
    description = db.Column(db.Text)
    certification_status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', back_populates='dealership')
    vehicles = db.relationship('Vehicle', back_populates='dealership', cascade='all, delete-orphan',
                               passive_deletes=True, lazy='dynamic')

    def __repr__(self):
        return f'<Dealership {self.business_name}>'

    def is_certified(self):
        return self.certification_status == 'active'

    def get_vehicle_stats(self):
        """Vehicle counts per status and the value of verified stock"""
        from models.vehicle import Vehicle

        row = db.session.query(
            db.func.count(Vehicle.id),
            db.func.sum(db.case((Vehicle.status == 'verified', 1), else_=0)),
            db.func.sum(db.case((Vehicle.status == 'pending_verification', 1), else_=0)),
            db.func.sum(db.case((Vehicle.status == 'rejected', 1), else_=0)),
            db.func.sum(db.case((Vehicle.status == 'verified', Vehicle.price), else_=0)),
        ).filter(Vehicle.dealership_id == self.id).one()

        return {
            'total': row[0] or 0,
            'verified': row[1] or 0,
            'pending': row[2] or 0,
            'rejected': row[3] or 0,
            'total_value': row[4] or 0,
        }

    def verified_vehicle_count(self):
        return self.vehicles.filter_by(status='verified').count()

    def get_status_badge_class(self):
        status_classes = {
            'pending': 'warning',
            'active': 'success',
            'suspended': 'danger'
        }
        return status_classes.get(self.certification_status, 'secondary')
