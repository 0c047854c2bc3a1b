from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, Length, EqualTo, Email, Optional, NumberRange


class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
    submit = SubmitField('Log in')


class AccountForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=64)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    confirm_password = PasswordField('Confirm password', validators=[DataRequired(), EqualTo('password', message='Passwords do not match')])


class DealershipRegisterForm(AccountForm):
    business_name = StringField('Business name', validators=[DataRequired(), Length(max=128)])
    registration_number = StringField('Registration number', validators=[DataRequired(), Length(max=64)])
    license_number = StringField('Dealer license number', validators=[Optional(), Length(max=64)])
    year_established = IntegerField('Year established', validators=[Optional(), NumberRange(min=1900, max=2100)])
    phone = StringField('Phone', validators=[DataRequired(), Length(max=32)])
    address = StringField('Address', validators=[DataRequired(), Length(max=255)])
    city = StringField('City', validators=[DataRequired(), Length(max=64)])
    postal_code = StringField('Postal code', validators=[Optional(), Length(max=16)])
    website = StringField('Website', validators=[Optional(), Length(max=255)])
    operating_hours = StringField('Operating hours', validators=[Optional(), Length(max=128)])
    description = TextAreaField('Description', validators=[Optional()])
    submit = SubmitField('Register dealership')


class CustomerRegisterForm(AccountForm):
    full_name = StringField('Full name', validators=[DataRequired(), Length(max=128)])
    phone = StringField('Phone', validators=[Optional(), Length(max=32)])
    address = StringField('Address', validators=[Optional(), Length(max=255)])
    city = StringField('City', validators=[Optional(), Length(max=64)])
    postal_code = StringField('Postal code', validators=[Optional(), Length(max=16)])
    submit = SubmitField('Create account')
