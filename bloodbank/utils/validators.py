"""
Payload validation for the JSON email handlers.

Every validator runs its checks in order and stops at the first failure.
It returns a ``(data, error)`` tuple: the cleaned payload and ``None`` on
success, or ``None`` and a user-facing message on failure.
"""
import re

from bloodbank.models.blood import REQUEST_STATUSES, URGENCY_LEVELS
from bloodbank.models.user import BADGES, BLOOD_GROUPS

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_REGEX = re.compile(r'^\+?[0-9\s\-()]{7,20}$')

MAX_EMAIL_LENGTH = 255
MIN_UNITS = 1
MAX_UNITS = 50


def _is_blank(value):
    return not isinstance(value, str) or not value.strip()


def _check_text(data, field, label, max_length):
    value = data.get(field)
    if _is_blank(value):
        return f'{label} is required'
    if len(value) > max_length:
        return f'{label} must be less than {max_length} characters'
    return None


def _check_email(value):
    if _is_blank(value):
        return 'Email is required'
    value = value.strip()
    if not EMAIL_REGEX.match(value) or len(value) > MAX_EMAIL_LENGTH:
        return 'Invalid email address'
    return None


def _parse_units(value):
    # bool is an int subclass, never a unit count
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or value < MIN_UNITS or value > MAX_UNITS:
        return None
    return value


def validate_contact_input(data):
    if not isinstance(data, dict):
        return None, 'Invalid request body'

    error = (_check_text(data, 'name', 'Name', 100)
             or _check_email(data.get('email'))
             or _check_text(data, 'subject', 'Subject', 200)
             or _check_text(data, 'message', 'Message', 5000))
    if error:
        return None, error

    return {
        'name': data['name'].strip(),
        'email': data['email'].strip().lower(),
        'subject': data['subject'].strip(),
        'message': data['message'].strip(),
    }, None


def validate_status_notification(data):
    if not isinstance(data, dict):
        return None, 'Invalid request body'

    email = data.get('email')
    if not isinstance(email, str):
        return None, 'Invalid email'
    email = email.strip()
    if not EMAIL_REGEX.match(email) or len(email) > MAX_EMAIL_LENGTH:
        return None, 'Invalid email address'

    patient_name = data.get('patient_name')
    if _is_blank(patient_name) or len(patient_name) > 100:
        return None, 'Invalid patient name'

    hospital_name = data.get('hospital_name')
    if _is_blank(hospital_name) or len(hospital_name) > 200:
        return None, 'Invalid hospital name'

    blood_group = data.get('blood_group')
    if blood_group not in BLOOD_GROUPS:
        return None, 'Invalid blood group'

    units = _parse_units(data.get('units_required'))
    if units is None:
        return None, 'Invalid units required'

    status = data.get('status')
    if status not in REQUEST_STATUSES:
        return None, 'Invalid status'

    contact_person = data.get('contact_person')
    if _is_blank(contact_person) or len(contact_person) > 100:
        return None, 'Invalid contact person'

    return {
        'email': email.strip().lower(),
        'patient_name': patient_name.strip(),
        'hospital_name': hospital_name.strip(),
        'blood_group': blood_group,
        'units_required': units,
        'status': status,
        'contact_person': contact_person.strip(),
    }, None


def validate_emergency_alert(data):
    if not isinstance(data, dict):
        return None, 'Invalid request body'

    error = (_check_text(data, 'patient_name', 'Patient name', 100)
             or _check_text(data, 'hospital_name', 'Hospital name', 200))
    if error:
        return None, error

    if data.get('blood_group') not in BLOOD_GROUPS:
        return None, 'Invalid blood group'

    units = _parse_units(data.get('units_required'))
    if units is None:
        return None, 'Invalid units required'

    if data.get('urgency') not in URGENCY_LEVELS:
        return None, 'Invalid urgency'

    error = _check_text(data, 'contact_person', 'Contact person', 100)
    if error:
        return None, error

    phone = data.get('phone')
    if _is_blank(phone) or not PHONE_REGEX.match(phone.strip()):
        return None, 'Invalid phone number'

    email = data.get('email')
    if email is not None and email != '':
        error = _check_email(email)
        if error:
            return None, error

    return {
        'patient_name': data['patient_name'].strip(),
        'hospital_name': data['hospital_name'].strip(),
        'blood_group': data['blood_group'],
        'units_required': units,
        'urgency': data['urgency'],
        'contact_person': data['contact_person'].strip(),
        'phone': phone.strip(),
        'email': email.strip().lower() if email else None,
    }, None


def validate_login_notification(data):
    if not isinstance(data, dict):
        return None, 'Invalid request body'

    error = _check_text(data, 'name', 'Name', 100) or _check_email(data.get('email'))
    if error:
        return None, error

    if data.get('blood_group') not in BLOOD_GROUPS:
        return None, 'Invalid blood group'

    error = (_check_text(data, 'phone', 'Phone', 20)
             or _check_text(data, 'address', 'Address', 200))
    if error:
        return None, error

    age = data.get('age')
    if isinstance(age, bool) or not isinstance(age, int) or age <= 0:
        return None, 'Invalid age'

    error = _check_text(data, 'gender', 'Gender', 10)
    if error:
        return None, error

    weight = data.get('weight')
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
        return None, 'Invalid weight'

    donation_count = data.get('donation_count')
    if isinstance(donation_count, bool) or not isinstance(donation_count, int) or donation_count < 0:
        return None, 'Invalid donation count'

    if data.get('badge') not in BADGES:
        return None, 'Invalid badge'

    if not isinstance(data.get('eligible'), bool):
        return None, 'Invalid eligibility'

    login_time = data.get('login_time')
    if login_time is not None and not isinstance(login_time, str):
        return None, 'Invalid login time'

    return {
        'name': data['name'].strip(),
        'email': data['email'].strip().lower(),
        'blood_group': data['blood_group'],
        'phone': data['phone'].strip(),
        'address': data['address'].strip(),
        'age': age,
        'gender': data['gender'].strip(),
        'weight': weight,
        'donation_count': donation_count,
        'badge': data['badge'],
        'eligible': data['eligible'],
        'login_time': login_time.strip() if login_time else None,
    }, None


def validate_welcome_email(data):
    if not isinstance(data, dict):
        return None, 'Invalid request body'

    error = _check_text(data, 'name', 'Name', 100) or _check_email(data.get('email'))
    if error:
        return None, error

    if data.get('blood_group') not in BLOOD_GROUPS:
        return None, 'Invalid blood group'

    return {
        'name': data['name'].strip(),
        'email': data['email'].strip().lower(),
        'blood_group': data['blood_group'],
    }, None
