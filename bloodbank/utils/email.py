from flask import current_app, render_template
from flask_mail import Message
import logging

from bloodbank import mail
from bloodbank.utils.timezone import get_ist_now

logger = logging.getLogger(__name__)

URGENCY_COLORS = {
    'Critical': '#DC2626',
    'High': '#EA580C',
    'Medium': '#F59E0B',
}
DEFAULT_URGENCY_COLOR = '#10B981'

BADGE_COLORS = {
    'Gold': '#fbbf24',
    'Silver': '#9ca3af',
    'Platinum': '#8b5cf6',
}
DEFAULT_BADGE_COLOR = '#cd7f32'


def get_urgency_color(urgency):
    return URGENCY_COLORS.get(urgency, DEFAULT_URGENCY_COLOR)


def get_badge_color(badge):
    return BADGE_COLORS.get(badge, DEFAULT_BADGE_COLOR)


def _timestamp():
    return get_ist_now().strftime('%d %b %Y, %I:%M %p IST')


def send_contact_email(data):
    """
    Relay a contact form submission to the blood bank and confirm receipt to the sender
    """
    admin_msg = Message(
        subject=f"Contact Form: {data['subject']}",
        recipients=[current_app.config['CONTACT_EMAIL']],
        reply_to=data['email']
    )
    admin_msg.html = render_template('emails/contact_admin.html', data=data)

    confirmation = Message(
        subject='We received your message!',
        recipients=[data['email']]
    )
    confirmation.html = render_template('emails/contact_confirmation.html', data=data)

    mail.send(admin_msg)
    mail.send(confirmation)
    logger.info(f"Contact email relayed for {data['email']}")


def send_emergency_alert(data):
    """
    Alert the blood bank admin about a new emergency blood request
    """
    msg = Message(
        subject=f"URGENT: Emergency Blood Request - {data['blood_group']} - {data['urgency']}",
        recipients=[current_app.config['ADMIN_ALERT_EMAIL']]
    )
    msg.html = render_template(
        'emails/emergency_alert.html',
        data=data,
        urgency_color=get_urgency_color(data['urgency']),
        timestamp=_timestamp()
    )
    mail.send(msg)
    logger.info(f"Emergency alert sent for patient {data['patient_name']}")


def send_login_notification(data):
    """
    Tell the admin and the donor that the donor has signed in
    """
    msg = Message(
        subject=f"User Login Alert - {data['name']} ({data['blood_group']})",
        recipients=[current_app.config['ADMIN_ALERT_EMAIL'], data['email']]
    )
    msg.html = render_template(
        'emails/login_notification.html',
        data=data,
        badge_color=get_badge_color(data['badge']),
        login_time=data.get('login_time') or _timestamp()
    )
    mail.send(msg)
    logger.info(f"Login notification sent for {data['email']}")


def send_status_notification(data):
    """
    Tell the requester whether their blood request was approved
    """
    is_approved = data['status'] == 'Approved'
    status_text = 'APPROVED ✓' if is_approved else 'REJECTED ✗'
    msg = Message(
        subject=f"Blood Request {status_text} - {data['blood_group']}",
        recipients=[data['email']]
    )
    msg.html = render_template(
        'emails/status_notification.html',
        data=data,
        is_approved=is_approved,
        status_text=status_text,
        status_color='#10B981' if is_approved else '#EF4444',
        timestamp=_timestamp()
    )
    mail.send(msg)
    logger.info(f"Status notification ({data['status']}) sent to {data['email']}")


def send_welcome_email(data):
    """
    Welcome a newly registered donor
    """
    msg = Message(
        subject='Welcome to BloodBank Pro!',
        recipients=[data['email']]
    )
    msg.html = render_template('emails/welcome.html', data=data)
    mail.send(msg)
    logger.info(f"Welcome email sent to {data['email']}")


def send_best_effort(send_func, data):
    """
    Send an email without letting a delivery failure reach the caller.
    Returns True if the email went out.
    """
    try:
        send_func(data)
        return True
    except Exception as e:
        logger.warning(f"{send_func.__name__} failed: {str(e)}")
        return False
