from models import db
from datetime import datetime
import json
import re

VIN_PATTERN = re.compile(r'^[A-HJ-NPR-Z0-9]{17}$')

VEHICLE_STATUSES = ('pending_verification', 'verified', 'rejected')

# larger pages overflow the SQLite offset
MAX_PAGE = 10 ** 6

# Facts the administrator asserts when approving a vehicle
CHECKLIST_FIELDS = (
    'vin_verified',
    'mileage_verified',
    'service_history_verified',
    'ownership_verified',
    'accident_history_verified',
    'recall_verified',
    'plate_number_verified',
    'engine_number_verified',
    'registration_verified',
    'engine_specs_verified',
)


def is_valid_vin(vin):
    return bool(vin) and VIN_PATTERN.match(vin) is not None


class Vehicle(db.Model):
    __tablename__ = 'vehicles'
    __table_args__ = (
        db.CheckConstraint("status IN ('pending_verification', 'verified', 'rejected')",
                           name='ck_vehicles_status'),
    )
    id = db.Column(db.Integer, primary_key=True)
    dealership_id = db.Column(db.Integer, db.ForeignKey('dealerships.id', ondelete='CASCADE'), nullable=False)

    # identification
    vin = db.Column(db.String(17), unique=True, nullable=False)
    make = db.Column(db.String(64), nullable=False)
    model = db.Column(db.String(64), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    mileage = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)
    color = db.Column(db.String(32))
    body_type = db.Column(db.String(32))
    fuel_type = db.Column(db.String(32))
    transmission = db.Column(db.String(32))
    previous_owners = db.Column(db.Integer, default=0)

    # registration certificate
    registration_authority = db.Column(db.String(128))
    plate_number = db.Column(db.String(32))
    engine_number = db.Column(db.String(64))
    tare_weight = db.Column(db.Integer)
    date_liability_licensing = db.Column(db.String(32))
    vehicle_status = db.Column(db.String(64))
    date_liable_registration = db.Column(db.String(32))
    license_numbers = db.Column(db.Text)  # JSON list
    engine_type = db.Column(db.String(64))
    engine_capacity = db.Column(db.String(32))

    # history
    service_history = db.Column(db.Text)
    accident_history = db.Column(db.Text)
    recall_information = db.Column(db.Text)
    additional_features = db.Column(db.Text)
    description = db.Column(db.Text)

    image_urls = db.Column(db.Text)  # JSON list
    qr_code_path = db.Column(db.String(255))

    # verification
    status = db.Column(db.String(32), nullable=False, default='pending_verification')
    verification_notes = db.Column(db.Text)
    verified_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    verified_at = db.Column(db.DateTime, nullable=True)
    rejection_reason = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    dealership = db.relationship('Dealership', back_populates='vehicles')
    verifier = db.relationship('User', foreign_keys=[verified_by])
    checklist = db.relationship('VerificationChecklist', back_populates='vehicle', uselist=False,
                                cascade='all, delete-orphan', passive_deletes=True)
    disputes = db.relationship('Dispute', back_populates='vehicle', cascade='all, delete-orphan',
                               passive_deletes=True, lazy='dynamic')

    def __repr__(self):
        return f'<Vehicle {self.vin}>'

    @property
    def title(self):
        return f'{self.year} {self.make} {self.model}'

    @property
    def images(self):
        return json.loads(self.image_urls) if self.image_urls else []

    @images.setter
    def images(self, urls):
        self.image_urls = json.dumps(list(urls))

    @property
    def licenses(self):
        return json.loads(self.license_numbers) if self.license_numbers else []

    @licenses.setter
    def licenses(self, numbers):
        self.license_numbers = json.dumps([n for n in numbers if n])

    def qr_payload(self):
        return json.dumps({
            'vehicleId': self.id,
            'vin': self.vin,
            'plateNumber': self.plate_number,
            'dealershipId': self.dealership_id,
        })

    def is_pending(self):
        return self.status == 'pending_verification'

    def is_verified(self):
        return self.status == 'verified'

    def can_be_deleted_by(self, dealership):
        return dealership is not None and self.dealership_id == dealership.id and self.is_pending()

    def approve(self, admin, notes, checks):
        """Mark verified and upsert the checklist. The caller commits."""
        now = datetime.utcnow()
        self.status = 'verified'
        self.verification_notes = notes
        self.verified_by = admin.id
        self.verified_at = now
        self.rejection_reason = None

        checklist = self.checklist
        if checklist is None:
            checklist = VerificationChecklist()
            self.checklist = checklist
        for field in CHECKLIST_FIELDS:
            setattr(checklist, field, bool(checks.get(field)))
        checklist.created_at = now
        return checklist

    def reject(self, admin, notes, rejection_reason):
        """Mark rejected. The checklist is left as it is. The caller commits."""
        if not rejection_reason or not rejection_reason.strip():
            raise ValueError('A rejection reason is required')
        self.status = 'rejected'
        self.rejection_reason = rejection_reason.strip()
        self.verification_notes = notes
        self.verified_by = admin.id
        self.verified_at = datetime.utcnow()

    def get_status_display(self):
        status_map = {
            'pending_verification': 'Pending verification',
            'verified': 'Verified',
            'rejected': 'Rejected'
        }
        return status_map.get(self.status, self.status)

    def get_status_badge_class(self):
        status_classes = {
            'pending_verification': 'warning',
            'verified': 'success',
            'rejected': 'danger'
        }
        return status_classes.get(self.status, 'secondary')

    @classmethod
    def search_query(cls, vin=None, make=None, min_price=None, max_price=None, body_type=None):
        """Verified vehicles matching the catalogue filters, newest first.

        vin and make are case-insensitive substring matches, the price bounds
        are inclusive and a body type of ``all`` means no body type filter.
        """
        query = cls.query.filter(cls.status == 'verified')
        if vin:
            query = query.filter(cls.vin.icontains(vin.strip(), autoescape=True))
        if make:
            query = query.filter(cls.make.icontains(make.strip(), autoescape=True))
        if min_price is not None:
            query = query.filter(cls.price >= min_price)
        if max_price is not None:
            query = query.filter(cls.price <= max_price)
        if body_type and body_type != 'all':
            query = query.filter(cls.body_type == body_type)
        return query.order_by(cls.created_at.desc(), cls.id.desc())

    @classmethod
    def search(cls, filters, page=1, per_page=9):
        """Run a catalogue search.

        Returns ``(pagination, single_match)``; ``single_match`` is the only
        matching vehicle when a VIN filter narrows the results to one, so the
        caller can go straight to its detail page.
        """
        query = cls.search_query(**filters)
        page = min(max(page or 1, 1), MAX_PAGE)
        pagination = query.paginate(page=page, per_page=per_page, error_out=False)
        single_match = None
        if filters.get('vin') and pagination.total == 1:
            single_match = query.first()
        return pagination, single_match


class VerificationChecklist(db.Model):
    __tablename__ = 'verification_checklist'
    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(db.Integer, db.ForeignKey('vehicles.id', ondelete='CASCADE'), unique=True, nullable=False)
    vin_verified = db.Column(db.Boolean, default=False, nullable=False)
    mileage_verified = db.Column(db.Boolean, default=False, nullable=False)
    service_history_verified = db.Column(db.Boolean, default=False, nullable=False)
    ownership_verified = db.Column(db.Boolean, default=False, nullable=False)
    accident_history_verified = db.Column(db.Boolean, default=False, nullable=False)
    recall_verified = db.Column(db.Boolean, default=False, nullable=False)
    plate_number_verified = db.Column(db.Boolean, default=False, nullable=False)
    engine_number_verified = db.Column(db.Boolean, default=False, nullable=False)
    registration_verified = db.Column(db.Boolean, default=False, nullable=False)
    engine_specs_verified = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    vehicle = db.relationship('Vehicle', back_populates='checklist')

    def as_dict(self):
        return {field: getattr(self, field) for field in CHECKLIST_FIELDS}

    def passed_count(self):
        return sum(1 for field in CHECKLIST_FIELDS if getattr(self, field))
