from models import db
from datetime import datetime

DISPUTE_STATUSES = ('submitted', 'under_review', 'resolved', 'closed')

DISCREPANCY_TYPES = (
    ('vin_mismatch', 'VIN mismatch'),
    ('mileage', 'Mileage discrepancy'),
    ('service_history', 'Service history'),
    ('accident_history', 'Undisclosed accident'),
    ('ownership', 'Ownership'),
    ('recall', 'Outstanding recall'),
    ('registration', 'Registration details'),
    ('other', 'Other'),
)


class Dispute(db.Model):
    __tablename__ = 'disputes'
    __table_args__ = (
        db.CheckConstraint("status IN ('submitted', 'under_review', 'resolved', 'closed')",
                           name='ck_disputes_status'),
    )
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    vehicle_id = db.Column(db.Integer, db.ForeignKey('vehicles.id', ondelete='CASCADE'), nullable=False)
    discrepancy_type = db.Column(db.String(32), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='submitted')
    admin_response = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    resolved_at = db.Column(db.DateTime, nullable=True)

    customer = db.relationship('Customer', back_populates='disputes')
    vehicle = db.relationship('Vehicle', back_populates='disputes')

    def __repr__(self):
        return f'<Dispute {self.id} {self.status}>'

    def apply_admin_update(self, status, admin_response):
        if status not in DISPUTE_STATUSES:
            raise ValueError(f'Unknown dispute status: {status}')
        self.status = status
        self.admin_response = admin_response
        # recomputed on every update, cleared whenever the dispute is not resolved
        self.resolved_at = datetime.utcnow() if status == 'resolved' else None

    def get_discrepancy_display(self):
        return dict(DISCREPANCY_TYPES).get(self.discrepancy_type, self.discrepancy_type)

    def get_status_display(self):
        status_map = {
            'submitted': 'Submitted',
            'under_review': 'Under review',
            'resolved': 'Resolved',
            'closed': 'Closed'
        }
        return status_map.get(self.status, self.status)

    def get_status_badge_class(self):
        status_classes = {
            'submitted': 'secondary',
            'under_review': 'warning',
            'resolved': 'success',
            'closed': 'dark'
        }
        return status_classes.get(self.status, 'secondary')
