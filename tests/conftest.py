import pytest
import os
import sys
from datetime import date, timedelta

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bloodbank import create_app, db, bcrypt, mail
from bloodbank.models.user import User, UserRole, Donor
from bloodbank.models.blood import BloodStock, BloodRequest
from bloodbank.models.event import Event

ADMIN_EMAIL = 'admin@bloodbankpro.org'
ADMIN_PASSWORD = 'admin-pass'
DONOR_EMAIL = 'asha.rao@mail.com'
DONOR_PASSWORD = 'donor-pass'


@pytest.fixture
def app():
    """Create an application backed by an in-memory database."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test_secret_key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'WTF_CSRF_ENABLED': False,
        'MAIL_SUPPRESS_SEND': True,
        'MAIL_DEFAULT_SENDER': 'BloodBank Pro <noreply@bloodbankpro.org>',
        'ADMIN_ALERT_EMAIL': 'alerts@bloodbankpro.org',
        'CONTACT_EMAIL': 'contact@bloodbankpro.org',
        'BCRYPT_LOG_ROUNDS': 4,
        'SCHEDULER_ENABLED': False,
    })

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(app):
    """Capture every email sent while the test runs."""
    with mail.record_messages() as messages:
        yield messages


def _create_user(email, password, role):
    user = User(email=email, password=bcrypt.generate_password_hash(password).decode('utf-8'))
    db.session.add(user)
    db.session.flush()
    db.session.add(UserRole(user_id=user.id, role=role))
    return user


@pytest.fixture
def admin_user(app):
    with app.app_context():
        user = _create_user(ADMIN_EMAIL, ADMIN_PASSWORD, 'admin')
        db.session.commit()
        return user.id


@pytest.fixture
def donor_user(app):
    """A donor account with a complete profile. Returns the donor profile id."""
    with app.app_context():
        user = _create_user(DONOR_EMAIL, DONOR_PASSWORD, 'donor')
        donor = Donor(
            user_id=user.id,
            name='Asha Rao',
            age=29,
            gender='Female',
            blood_group='O+',
            weight=58.5,
            phone='+91 9876543210',
            email=DONOR_EMAIL,
            address='12 MG Road, Bengaluru'
        )
        db.session.add(donor)
        db.session.commit()
        return donor.id


@pytest.fixture
def login(client):
    def _login(email, password):
        return client.post('/auth/login', data={'email': email, 'password': password})
    return _login


@pytest.fixture
def admin_client(client, admin_user, login):
    login(ADMIN_EMAIL, ADMIN_PASSWORD)
    return client


@pytest.fixture
def donor_client(client, donor_user, login):
    login(DONOR_EMAIL, DONOR_PASSWORD)
    return client


@pytest.fixture
def sample_stock(app):
    """Stock across two cities. Returns the ids in insertion order."""
    today = date.today()
    with app.app_context():
        rows = [
            BloodStock(blood_group='O+', units=12, location='Bengaluru Central Blood Bank',
                       expiry_date=today + timedelta(days=20), status='Available'),
            BloodStock(blood_group='A-', units=3, location='Mumbai Red Cross',
                       expiry_date=today + timedelta(days=5), status='Low Stock'),
            BloodStock(blood_group='O+', units=2, location='Mumbai Red Cross',
                       expiry_date=today - timedelta(days=1), status='Available'),
        ]
        db.session.add_all(rows)
        db.session.commit()
        return [row.id for row in rows]


@pytest.fixture
def pending_request(app):
    with app.app_context():
        blood_request = BloodRequest(
            patient_name='Ravi Kumar',
            hospital_name='City General Hospital',
            blood_group='B+',
            units_required=3,
            urgency='Critical',
            contact_person='Meena Kumar',
            phone='+91 9123456780',
            email='meena.kumar@mail.com'
        )
        db.session.add(blood_request)
        db.session.commit()
        return blood_request.id


@pytest.fixture
def sample_events(app):
    today = date.today()
    with app.app_context():
        rows = [
            Event(name='Campus Drive', event_date=today + timedelta(days=10), location='IISc',
                  organizer='NSS', status='Upcoming'),
            Event(name='Corporate Camp', event_date=today + timedelta(days=2), location='Whitefield',
                  organizer='Rotary Club', status='Upcoming', registered_donors=40),
            Event(name='Monsoon Camp', event_date=today - timedelta(days=3), location='Jayanagar',
                  organizer='Red Cross', status='Upcoming', units_collected=25),
        ]
        db.session.add_all(rows)
        db.session.commit()
        return [row.id for row in rows]
