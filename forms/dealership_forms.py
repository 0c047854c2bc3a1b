from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, FloatField, TextAreaField, SelectField, SubmitField, MultipleFileField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, Regexp
from models.vehicle import VIN_PATTERN


def _upper(value):
    return value.strip().upper() if value else value


BODY_TYPES = [('sedan', 'Sedan'), ('hatchback', 'Hatchback'), ('suv', 'SUV'), ('bakkie', 'Bakkie / Pickup'),
              ('coupe', 'Coupe'), ('convertible', 'Convertible'), ('wagon', 'Wagon'), ('van', 'Van')]
FUEL_TYPES = [('petrol', 'Petrol'), ('diesel', 'Diesel'), ('hybrid', 'Hybrid'), ('electric', 'Electric')]
TRANSMISSIONS = [('manual', 'Manual'), ('automatic', 'Automatic')]


class DealershipProfileForm(FlaskForm):
    business_name = StringField('Business name', validators=[DataRequired(), Length(max=128)])
    phone = StringField('Phone', validators=[DataRequired(), Length(max=32)])
    address = StringField('Address', validators=[DataRequired(), Length(max=255)])
    city = StringField('City', validators=[DataRequired(), Length(max=64)])
    postal_code = StringField('Postal code', validators=[Optional(), Length(max=16)])
    website = StringField('Website', validators=[Optional(), Length(max=255)])
    operating_hours = StringField('Operating hours', validators=[Optional(), Length(max=128)])
    description = TextAreaField('Description', validators=[Optional()])
    submit = SubmitField('Save profile')


class VehicleForm(FlaskForm):
    vin = StringField('VIN', filters=[_upper], validators=[
        DataRequired(), Regexp(VIN_PATTERN, message='Invalid VIN format (17 characters, no I, O, Q)')])
    make = StringField('Make', validators=[DataRequired(), Length(max=64)])
    model = StringField('Model', validators=[DataRequired(), Length(max=64)])
    year = IntegerField('Year', validators=[InputRequired(), NumberRange(min=1900, max=2100)])
    mileage = IntegerField('Mileage (km)', validators=[InputRequired(), NumberRange(min=0)])
    price = FloatField('Price', validators=[InputRequired(), NumberRange(min=0)])
    color = StringField('Colour', validators=[Optional(), Length(max=32)])
    body_type = SelectField('Body type', choices=BODY_TYPES, validators=[Optional()])
    fuel_type = SelectField('Fuel type', choices=FUEL_TYPES, validators=[Optional()])
    transmission = SelectField('Transmission', choices=TRANSMISSIONS, validators=[Optional()])
    previous_owners = IntegerField('Previous owners', default=0, validators=[Optional(), NumberRange(min=0)])

    registration_authority = StringField('Registering authority', validators=[Optional(), Length(max=128)])
    plate_number = StringField('Plate number', filters=[_upper], validators=[Optional(), Length(max=32)])
    engine_number = StringField('Engine number', filters=[_upper], validators=[Optional(), Length(max=64)])
    tare_weight = IntegerField('Tare weight (kg)', validators=[Optional(), NumberRange(min=0)])
    date_liability_licensing = StringField('Date liable for licensing', validators=[Optional(), Length(max=32)])
    vehicle_status = StringField('Registration status', validators=[Optional(), Length(max=64)])
    date_liable_registration = StringField('Date liable for registration', validators=[Optional(), Length(max=32)])
    license_number_1 = StringField('License number 1', validators=[Optional(), Length(max=64)])
    license_number_2 = StringField('License number 2', validators=[Optional(), Length(max=64)])
    license_number_3 = StringField('License number 3', validators=[Optional(), Length(max=64)])
    engine_type = StringField('Engine type', validators=[Optional(), Length(max=64)])
    engine_capacity = StringField('Engine capacity', validators=[Optional(), Length(max=32)])

    service_history = TextAreaField('Service history', validators=[Optional()])
    accident_history = TextAreaField('Accident history', validators=[Optional()])
    recall_information = TextAreaField('Recall information', validators=[Optional()])
    additional_features = TextAreaField('Additional features', validators=[Optional()])
    description = TextAreaField('Description', validators=[Optional()])

    vehicle_images = MultipleFileField('Images')
    submit = SubmitField('Submit for verification')

    def license_numbers(self):
        return [self.license_number_1.data, self.license_number_2.data, self.license_number_3.data]
