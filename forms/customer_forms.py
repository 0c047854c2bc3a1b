from flask_wtf import FlaskForm
from wtforms import HiddenField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length
from models.dispute import DISCREPANCY_TYPES


class DisputeForm(FlaskForm):
    vehicle_id = HiddenField('Vehicle', validators=[DataRequired()])
    discrepancy_type = SelectField('Discrepancy type', choices=list(DISCREPANCY_TYPES), validators=[DataRequired()])
    description = TextAreaField('Description', validators=[DataRequired(), Length(min=10, max=5000)])
    submit = SubmitField('Submit dispute')
