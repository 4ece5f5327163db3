from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
import logging

from bloodbank import db
from bloodbank.models.user import User

logger = logging.getLogger(__name__)

API_TOKEN_SALT = 'api-token'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'])


def generate_api_token(user):
    """
    Generate a signed bearer token for the JSON email handlers
    """
    return _serializer().dumps(user.id, salt=API_TOKEN_SALT)


def verify_api_token(token):
    """
    Return the user the token was issued to, or None if it is invalid or expired
    """
    try:
        user_id = _serializer().loads(
            token,
            salt=API_TOKEN_SALT,
            max_age=current_app.config['API_TOKEN_MAX_AGE']
        )
    except SignatureExpired:
        logger.info("Expired API token presented")
        return None
    except BadSignature:
        logger.info("Invalid API token presented")
        return None
    return db.session.get(User, user_id)
