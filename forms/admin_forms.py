from flask_wtf import FlaskForm
from wtforms import BooleanField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, ValidationError
from models.dealership import CERTIFICATION_STATUSES
from models.dispute import DISPUTE_STATUSES
from models.vehicle import CHECKLIST_FIELDS


class VerificationForm(FlaskForm):
    action = SelectField('Decision', choices=[('approve', 'Approve'), ('reject', 'Reject')], validators=[DataRequired()])
    notes = TextAreaField('Verification notes', validators=[Optional()])
    rejection_reason = TextAreaField('Rejection reason')

    vin_verified = BooleanField('VIN matches the registration certificate')
    mileage_verified = BooleanField('Mileage confirmed')
    service_history_verified = BooleanField('Service history confirmed')
    ownership_verified = BooleanField('Ownership confirmed')
    accident_history_verified = BooleanField('Accident history checked')
    recall_verified = BooleanField('No outstanding recalls')
    plate_number_verified = BooleanField('Plate number confirmed')
    engine_number_verified = BooleanField('Engine number confirmed')
    registration_verified = BooleanField('Registration details confirmed')
    engine_specs_verified = BooleanField('Engine type and capacity confirmed')

    submit = SubmitField('Record decision')

    def validate_rejection_reason(self, field):
        if self.action.data == 'reject' and not (field.data or '').strip():
            raise ValidationError('A rejection reason is required to reject a vehicle')

    def checklist_flags(self):
        return {name: self[name].data for name in CHECKLIST_FIELDS}

    def checklist_fields(self):
        return [self[name] for name in CHECKLIST_FIELDS]


class CertificationStatusForm(FlaskForm):
    status = SelectField('Certification status', choices=[(s, s.title()) for s in CERTIFICATION_STATUSES], validators=[DataRequired()])
    submit = SubmitField('Update')


class DisputeUpdateForm(FlaskForm):
    status = SelectField('Status', choices=[(s, s.replace('_', ' ').title()) for s in DISPUTE_STATUSES], validators=[DataRequired()])
    admin_response = TextAreaField('Response', validators=[Optional()])
    submit = SubmitField('Update dispute')
