from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, SelectField, TextAreaField, SubmitField, DateField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, InputRequired
from bloodbank.models.user import BLOOD_GROUPS
from bloodbank.models.blood import STOCK_STATUSES
from bloodbank.models.event import EVENT_STATUSES


class BloodStockForm(FlaskForm):
    blood_group = SelectField('Blood Group', choices=[(bg, bg) for bg in BLOOD_GROUPS], validators=[DataRequired()])
    units = IntegerField('Units', validators=[InputRequired(), NumberRange(min=0, max=10000)])
    location = StringField('Location', validators=[DataRequired(), Length(max=200)])
    expiry_date = DateField('Expiry Date', validators=[DataRequired()])
    status = SelectField('Status', choices=[(s, s) for s in STOCK_STATUSES], validators=[DataRequired()])
    submit = SubmitField('Save Stock')


class EventForm(FlaskForm):
    name = StringField('Event Name', validators=[DataRequired(), Length(max=200)])
    event_date = DateField('Date', validators=[DataRequired()])
    location = StringField('Location', validators=[DataRequired(), Length(max=200)])
    organizer = StringField('Organizer', validators=[DataRequired(), Length(max=100)])
    contact = StringField('Contact', validators=[Optional(), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=2000)])
    registered_donors = IntegerField('Registered Donors', default=0, validators=[Optional(), NumberRange(min=0)])
    units_collected = IntegerField('Units Collected', default=0, validators=[Optional(), NumberRange(min=0)])
    status = SelectField('Status', choices=[(s, s) for s in EVENT_STATUSES], validators=[DataRequired()])
    submit = SubmitField('Save Event')
