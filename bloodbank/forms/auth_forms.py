from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, BooleanField, SelectField, IntegerField, FloatField
from wtforms.validators import DataRequired, Length, Email, NumberRange, ValidationError
from bloodbank.models.user import User, BLOOD_GROUPS, GENDERS


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember = BooleanField('Remember Me')
    submit = SubmitField('Login')


class DonorRegistrationForm(FlaskForm):
    name = StringField('Full Name', validators=[DataRequired(), Length(min=2, max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField('Password', validators=[Length(max=128)])
    phone = StringField('Phone', validators=[DataRequired(), Length(min=7, max=20)])
    age = IntegerField('Age', validators=[DataRequired(), NumberRange(min=18, max=65)])
    gender = SelectField('Gender', choices=[(g, g) for g in GENDERS], validators=[DataRequired()])
    weight = FloatField('Weight (kg)', validators=[DataRequired(), NumberRange(min=45)])
    blood_group = SelectField('Blood Group', choices=[(bg, bg) for bg in BLOOD_GROUPS], validators=[DataRequired()])
    address = StringField('Address', validators=[DataRequired(), Length(min=5, max=200)])
    submit = SubmitField('Register as Donor')

    def __init__(self, *args, new_account=True, **kwargs):
        super().__init__(*args, **kwargs)
        self.new_account = new_account

    def validate_email(self, email):
        if not self.new_account:
            return
        user = User.query.filter_by(email=email.data.strip().lower()).first()
        if user:
            raise ValidationError('That email is already registered. Please choose a different one or login.')

    def validate_password(self, password):
        # Signed-in users completing a donor profile keep their existing password
        if not self.new_account:
            return
        if not password.data:
            raise ValidationError('Password is required.')
        if len(password.data) < 6:
            raise ValidationError('Password must be at least 6 characters long.')
