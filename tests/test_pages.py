from smtplib import SMTPException
from unittest.mock import patch

import pytest
from flask import url_for

from bloodbank import mail
from bloodbank.models.blood import BloodRequest


@pytest.fixture
def emergency_form():
    return {
        'patient_name': 'Ravi Kumar',
        'hospital_name': 'City General Hospital',
        'blood_group': 'B+',
        'units_required': '3',
        'urgency': 'Critical',
        'contact_person': 'Meena Kumar',
        'phone': '+91 9123456780',
        'email': '',
    }


def test_home_shows_live_stats(client, donor_user, sample_stock, pending_request, sample_events):
    response = client.get('/')

    assert response.status_code == 200
    assert b'Save Lives Through Blood Donation' in response.data
    assert b'<strong>17</strong><span>Blood Units</span>' in response.data
    assert b'<strong>1</strong><span>Registered Donors</span>' in response.data
    assert b'<strong>3</strong><span>Donation Events</span>' in response.data


def test_home_on_empty_database(client):
    response = client.get('/home')
    assert b'<strong>0</strong><span>Blood Units</span>' in response.data


def test_home_links_to_site_root(app):
    with app.test_request_context():
        assert url_for('main.home') == '/'


class TestSearch:

    def test_lists_all_stock(self, client, sample_stock):
        response = client.get('/search')

        assert response.status_code == 200
        assert b'Bengaluru Central Blood Bank' in response.data
        assert b'Mumbai Red Cross' in response.data

    def test_filter_by_blood_group(self, client, sample_stock):
        response = client.get('/search', query_string={'blood_group': 'A-'})

        assert b'Mumbai Red Cross' in response.data
        assert b'Bengaluru Central Blood Bank' not in response.data

    def test_location_match_is_case_insensitive(self, client, sample_stock):
        response = client.get('/search', query_string={'location': 'bengaluru'})

        assert b'Bengaluru Central Blood Bank' in response.data
        assert b'Mumbai Red Cross' not in response.data

    def test_combined_filters(self, client, sample_stock):
        response = client.get('/search', query_string={'blood_group': 'A-', 'location': 'Bengaluru'})
        assert b'No blood stock found' in response.data

    def test_unknown_blood_group_shows_everything(self, client, sample_stock):
        response = client.get('/search', query_string={'blood_group': 'Z+'})
        assert b'Bengaluru Central Blood Bank' in response.data
        assert b'Mumbai Red Cross' in response.data

    @pytest.mark.parametrize('term', ['_', '%', 'Mumbai%'])
    def test_wildcard_characters_match_literally(self, client, sample_stock, term):
        response = client.get('/search', query_string={'location': term})
        assert b'No blood stock found' in response.data

    def test_flags_stock_past_expiry(self, client, sample_stock):
        response = client.get('/search', query_string={'location': 'Mumbai'})
        assert response.data.count(b'badge-expired') == 1

        response = client.get('/search', query_string={'location': 'Bengaluru'})
        assert b'badge-expired' not in response.data

    def test_empty_state(self, client):
        response = client.get('/search')
        assert b'No blood stock found' in response.data


def test_events_are_listed_by_date(client, sample_events):
    response = client.get('/events')
    html = response.data

    assert response.status_code == 200
    assert html.index(b'Monsoon Camp') < html.index(b'Corporate Camp') < html.index(b'Campus Drive')
    assert b'40 registered donors' in html


def test_events_empty_state(client):
    response = client.get('/events')
    assert b'No events scheduled' in response.data


class TestEmergencyRequest:

    def test_form_page(self, client):
        response = client.get('/emergency/')
        assert response.status_code == 200
        assert b'Submit Emergency Request' in response.data

    def test_submission_creates_pending_request(self, app, client, emergency_form, outbox):
        response = client.post('/emergency/', data=emergency_form)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/')

        with app.app_context():
            blood_request = BloodRequest.query.one()
            assert blood_request.status == 'Pending'
            assert blood_request.patient_name == 'Ravi Kumar'
            assert blood_request.units_required == 3
            assert blood_request.email is None

        assert len(outbox) == 1
        assert outbox[0].subject == 'URGENT: Emergency Blood Request - B+ - Critical'
        assert outbox[0].recipients == ['alerts@bloodbankpro.org']

    def test_success_message(self, client, emergency_form):
        response = client.post('/emergency/', data=emergency_form, follow_redirects=True)
        assert b'Emergency request submitted successfully! Our team will contact you shortly.' in response.data

    def test_optional_email_is_stored(self, app, client, emergency_form):
        emergency_form['email'] = 'Meena.Kumar@mail.com'
        client.post('/emergency/', data=emergency_form)

        with app.app_context():
            assert BloodRequest.query.one().email == 'meena.kumar@mail.com'

    def test_alert_failure_keeps_the_request(self, app, client, emergency_form):
        with patch.object(mail, 'send', side_effect=SMTPException('relay down')):
            response = client.post('/emergency/', data=emergency_form)

        assert response.status_code == 302
        with app.app_context():
            assert BloodRequest.query.count() == 1

    @pytest.mark.parametrize('field, value, message', [
        ('phone', 'call me', b'Invalid phone number format.'),
        ('units_required', '0', b'Number must be between 1 and 50.'),
        ('units_required', '51', b'Number must be between 1 and 50.'),
    ])
    def test_invalid_submission(self, app, client, emergency_form, outbox, field, value, message):
        emergency_form[field] = value
        response = client.post('/emergency/', data=emergency_form)

        assert response.status_code == 200
        assert message in response.data
        assert outbox == []
        with app.app_context():
            assert BloodRequest.query.count() == 0


class TestContact:

    form = {
        'name': 'Priya Sharma',
        'email': 'priya.sharma@mail.com',
        'subject': 'Volunteering',
        'message': 'I would like to help at the next camp.',
    }

    def test_form_page(self, client):
        assert client.get('/contact').status_code == 200

    def test_message_is_relayed(self, client, outbox):
        response = client.post('/contact', data=self.form)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/contact')
        assert [msg.recipients for msg in outbox] == [['contact@bloodbankpro.org'], ['priya.sharma@mail.com']]

    def test_mail_failure_is_reported(self, client):
        with patch.object(mail, 'send', side_effect=SMTPException('relay down')):
            response = client.post('/contact', data=self.form)

        assert response.status_code == 200
        assert b'Failed to send your message. Please try again later.' in response.data

    def test_invalid_email(self, client, outbox):
        response = client.post('/contact', data=dict(self.form, email='priya'))

        assert response.status_code == 200
        assert outbox == []


def test_unknown_page(client):
    response = client.get('/no-such-page')

    assert response.status_code == 404
    assert b'Oops! Page not found' in response.data
