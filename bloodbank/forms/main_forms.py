from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, SelectField, TextAreaField
from wtforms.validators import DataRequired, Length, Email, Optional
from bloodbank.models.user import BLOOD_GROUPS


class ContactForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=255)])
    subject = StringField('Subject', validators=[DataRequired(), Length(max=200)])
    message = TextAreaField('Message', validators=[DataRequired(), Length(max=5000)])
    submit = SubmitField('Send Message')


class StockSearchForm(FlaskForm):
    class Meta:
        csrf = False

    location = StringField('Location', validators=[Optional(), Length(max=200)])
    blood_group = SelectField('Blood Group',
                              choices=[('all', 'All Blood Groups')] + [(bg, bg) for bg in BLOOD_GROUPS],
                              default='all')
