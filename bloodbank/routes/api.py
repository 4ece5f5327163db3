"""
JSON email handlers.

Each handler checks the payload size, validates the JSON body, relays the
email and answers ``{"success": true}``. Failures answer ``{"error": ...}``
with 400 (validation), 401 (authentication), 413 (payload too large) or
500 (the mail relay failed).
"""
from flask import Blueprint, request, jsonify, current_app
from functools import wraps

from bloodbank.utils import validators
from bloodbank.utils import email as email_utils
from bloodbank.utils.tokens import verify_api_token

api = Blueprint('api', __name__)


def _error(message, status):
    return jsonify({'error': message}), status


@api.errorhandler(413)
def request_too_large(error):
    return _error('Request too large', 413)


def api_admin_required(f):
    """Require an admin bearer token issued by the admin dashboard"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization', '')
        if not auth_header.startswith('Bearer '):
            current_app.logger.info("No authorization header")
            return _error('Unauthorized', 401)

        user = verify_api_token(auth_header[len('Bearer '):])
        if user is None or not user.is_admin():
            return _error('Unauthorized', 401)
        return f(*args, **kwargs)
    return decorated_function


def _relay(validate, send, failure_message='Failed to send email'):
    if request.content_length and request.content_length > current_app.config['MAX_PAYLOAD_BYTES']:
        return _error('Request too large', 413)

    payload = request.get_json(silent=True)
    data, error = validate(payload)
    if error:
        current_app.logger.info(f"Validation failed for {request.path}: {error}")
        return _error(error, 400)

    try:
        send(data)
    except Exception as e:
        current_app.logger.error(f"Error in {request.path}: {str(e)}")
        return _error(failure_message, 500)

    return jsonify({'success': True}), 200


@api.route('/send-contact-email', methods=['POST'])
def send_contact_email():
    return _relay(validators.validate_contact_input, email_utils.send_contact_email)


@api.route('/send-emergency-alert', methods=['POST'])
def send_emergency_alert():
    return _relay(validators.validate_emergency_alert, email_utils.send_emergency_alert)


@api.route('/send-login-notification', methods=['POST'])
def send_login_notification():
    return _relay(validators.validate_login_notification, email_utils.send_login_notification)


@api.route('/send-status-notification', methods=['POST'])
@api_admin_required
def send_status_notification():
    return _relay(validators.validate_status_notification,
                  email_utils.send_status_notification,
                  failure_message='Failed to send notification')


@api.route('/send-welcome-email', methods=['POST'])
def send_welcome_email():
    return _relay(validators.validate_welcome_email, email_utils.send_welcome_email)
