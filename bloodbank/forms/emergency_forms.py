from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, SelectField, SubmitField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Email, Optional, Regexp
from bloodbank.models.user import BLOOD_GROUPS
from bloodbank.models.blood import URGENCY_LEVELS


class EmergencyRequestForm(FlaskForm):
    patient_name = StringField('Patient Name', validators=[DataRequired(), Length(max=100)])
    hospital_name = StringField('Hospital Name', validators=[DataRequired(), Length(max=200)])
    blood_group = SelectField('Blood Group', choices=[(bg, bg) for bg in BLOOD_GROUPS], validators=[DataRequired()])
    units_required = IntegerField('Units Required', validators=[InputRequired(), NumberRange(min=1, max=50)])
    urgency = SelectField('Urgency Level', choices=[(u, u) for u in URGENCY_LEVELS],
                          validators=[DataRequired()], default='High')
    contact_person = StringField('Contact Person', validators=[DataRequired(), Length(max=100)])
    phone = StringField('Phone', validators=[
        DataRequired(),
        Regexp(r'^\+?[0-9\s\-()]{7,20}$', message='Invalid phone number format.')
    ])
    email = StringField('Email (for status updates)', validators=[Optional(), Email(), Length(max=255)])
    submit = SubmitField('Submit Emergency Request')
