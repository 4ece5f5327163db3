from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from sqlalchemy import func
from bloodbank import db
from bloodbank.models.user import Donor
from bloodbank.models.blood import BloodStock, BloodRequest
from bloodbank.models.event import Event
from bloodbank.forms.main_forms import ContactForm, StockSearchForm
from bloodbank.utils.email import send_contact_email

main = Blueprint('main', __name__)


@main.route('/home')
@main.route('/')
def home():
    stats = {
        'donors': Donor.query.count(),
        'units': db.session.query(func.coalesce(func.sum(BloodStock.units), 0)).scalar(),
        'requests': BloodRequest.query.count(),
        'events': Event.query.count(),
    }
    return render_template('main/home.html', title='Home', stats=stats)


@main.route('/search')
def search():
    form = StockSearchForm(request.args)
    blood_group = form.blood_group.data if form.validate() else 'all'
    location = (form.location.data or '').strip()

    query = BloodStock.query
    if blood_group and blood_group != 'all':
        query = query.filter_by(blood_group=blood_group)
    if location:
        query = query.filter(func.lower(BloodStock.location).contains(location.lower(), autoescape=True))

    stock = query.order_by(BloodStock.blood_group).all()

    return render_template('main/search.html',
                           title='Search Blood Stock',
                           form=form,
                           stock=stock)


@main.route('/events')
def events():
    all_events = Event.query.order_by(Event.event_date.asc()).all()
    return render_template('main/events.html', title='Donation Events', events=all_events)


@main.route('/contact', methods=['GET', 'POST'])
def contact():
    form = ContactForm()

    if form.validate_on_submit():
        data = {
            'name': form.name.data.strip(),
            'email': form.email.data.strip().lower(),
            'subject': form.subject.data.strip(),
            'message': form.message.data.strip(),
        }
        try:
            send_contact_email(data)
        except Exception as e:
            current_app.logger.error(f"Error sending contact email: {str(e)}")
            flash('Failed to send your message. Please try again later.', 'danger')
            return render_template('main/contact.html', title='Contact Us', form=form)

        flash("Message sent! We'll get back to you soon.", 'success')
        return redirect(url_for('main.contact'))

    return render_template('main/contact.html', title='Contact Us', form=form)
