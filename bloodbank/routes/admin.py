from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, jsonify, current_app
from flask_login import login_required, current_user
from functools import wraps
from sqlalchemy import func
from bloodbank import db
from bloodbank.models.user import Donor
from bloodbank.models.blood import BloodStock, BloodRequest, REQUEST_STATUSES
from bloodbank.models.event import Event
from bloodbank.forms.admin_forms import BloodStockForm, EventForm
from bloodbank.utils.email import send_best_effort, send_status_notification
from bloodbank.utils.tokens import generate_api_token

admin = Blueprint('admin', __name__)


# Admin access decorator
def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin():
            abort(403)
        return f(*args, **kwargs)
    return decorated_function


@admin.route('/dashboard')
@login_required
@admin_required
def dashboard():
    donor_count = Donor.query.count()
    total_units = db.session.query(func.coalesce(func.sum(BloodStock.units), 0)).scalar()
    pending_requests = BloodRequest.query.filter_by(status='Pending').count()
    upcoming_events = Event.query.filter_by(status='Upcoming').count()

    blood_stock = BloodStock.query.order_by(BloodStock.blood_group, BloodStock.expiry_date).all()
    recent_requests = BloodRequest.query.order_by(BloodRequest.created_at.desc()).limit(10).all()
    events = Event.query.order_by(Event.event_date.asc()).limit(5).all()

    return render_template('admin/dashboard.html',
                           title='Admin Dashboard',
                           donor_count=donor_count,
                           total_units=total_units,
                           pending_requests=pending_requests,
                           upcoming_events=upcoming_events,
                           blood_stock=blood_stock,
                           recent_requests=recent_requests,
                           events=events)


@admin.route('/stock/new', methods=['GET', 'POST'])
@login_required
@admin_required
def add_stock():
    form = BloodStockForm()

    if form.validate_on_submit():
        stock = BloodStock()
        form.populate_obj(stock)
        stock.location = stock.location.strip()
        db.session.add(stock)
        try:
            db.session.commit()
            flash(f'Added {stock.units} units of {stock.blood_group} at {stock.location}.', 'success')
            return redirect(url_for('admin.dashboard'))
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error adding blood stock: {str(e)}")
            flash('Error adding blood stock.', 'danger')

    return render_template('admin/stock_form.html', title='Add Stock', form=form)


@admin.route('/stock/<int:stock_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_stock(stock_id):
    stock = BloodStock.query.get_or_404(stock_id)
    form = BloodStockForm(obj=stock)

    if form.validate_on_submit():
        form.populate_obj(stock)
        try:
            db.session.commit()
            flash(f'Blood stock has been updated! New stock: {stock.units} units', 'success')
            return redirect(url_for('admin.dashboard'))
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating blood stock {stock_id}: {str(e)}")
            flash('Error updating blood stock.', 'danger')

    return render_template('admin/stock_form.html', title='Edit Stock', form=form, stock=stock)


@admin.route('/stock/<int:stock_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_stock(stock_id):
    stock = BloodStock.query.get_or_404(stock_id)
    db.session.delete(stock)
    try:
        db.session.commit()
        flash(f'Stock entry for {stock.blood_group} at {stock.location} has been deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting blood stock {stock_id}: {str(e)}")
        flash('Error deleting blood stock.', 'danger')
    return redirect(url_for('admin.dashboard'))


@admin.route('/requests')
@login_required
@admin_required
def all_requests():
    page = request.args.get('page', 1, type=int)
    status = request.args.get('status', 'all')

    query = BloodRequest.query
    if status in REQUEST_STATUSES:
        query = query.filter_by(status=status)
    else:
        status = 'all'

    blood_requests = query.order_by(BloodRequest.created_at.desc()).paginate(page=page, per_page=15)

    return render_template('admin/requests.html',
                           title='Blood Requests',
                           blood_requests=blood_requests,
                           statuses=REQUEST_STATUSES,
                           current_status=status)


def _notify_requester(blood_request):
    if not blood_request.email:
        return
    sent = send_best_effort(send_status_notification, blood_request.to_notification_payload())
    if sent:
        flash(f'Status email sent to {blood_request.email}.', 'info')
    else:
        flash('Status updated, but the notification email could not be sent.', 'warning')


def _decide_request(request_id, approve):
    blood_request = BloodRequest.query.get_or_404(request_id)

    if not blood_request.is_pending:
        flash('This blood request has already been processed.', 'warning')
        return redirect(url_for('admin.all_requests'))

    if approve:
        blood_request.mark_approved()
    else:
        blood_request.mark_rejected()

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating blood request {request_id}: {str(e)}")
        flash(f'Error updating request: {str(e)}', 'danger')
        return redirect(url_for('admin.all_requests'))

    current_app.logger.info(f"Blood request {request_id} {blood_request.status.lower()} by {current_user.email}")
    flash(f'Request {blood_request.status.lower()} successfully!', 'success')
    _notify_requester(blood_request)

    return redirect(url_for('admin.all_requests'))


@admin.route('/requests/<int:request_id>/approve', methods=['POST'])
@login_required
@admin_required
def approve_request(request_id):
    return _decide_request(request_id, approve=True)


@admin.route('/requests/<int:request_id>/reject', methods=['POST'])
@login_required
@admin_required
def reject_request(request_id):
    return _decide_request(request_id, approve=False)


@admin.route('/requests/<int:request_id>/complete', methods=['POST'])
@login_required
@admin_required
def complete_request(request_id):
    blood_request = BloodRequest.query.get_or_404(request_id)

    if blood_request.status != 'Approved':
        flash('Only approved requests can be marked as completed.', 'warning')
        return redirect(url_for('admin.all_requests'))

    blood_request.mark_completed()
    try:
        db.session.commit()
        flash('Request has been marked as completed.', 'success')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error completing blood request {request_id}: {str(e)}")
        flash(f'Error completing request: {str(e)}', 'danger')

    return redirect(url_for('admin.all_requests'))


@admin.route('/requests/<int:request_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_request(request_id):
    blood_request = BloodRequest.query.get_or_404(request_id)
    db.session.delete(blood_request)
    try:
        db.session.commit()
        flash('Blood request has been deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting blood request {request_id}: {str(e)}")
        flash('Error deleting request.', 'danger')
    return redirect(url_for('admin.all_requests'))


@admin.route('/events/new', methods=['GET', 'POST'])
@login_required
@admin_required
def add_event():
    form = EventForm()

    if form.validate_on_submit():
        event = Event()
        form.populate_obj(event)
        event.registered_donors = event.registered_donors or 0
        event.units_collected = event.units_collected or 0
        db.session.add(event)
        try:
            db.session.commit()
            flash(f'Event "{event.name}" has been created!', 'success')
            return redirect(url_for('admin.dashboard'))
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error creating event: {str(e)}")
            flash('Error creating event.', 'danger')

    return render_template('admin/event_form.html', title='Add Event', form=form)


@admin.route('/events/<int:event_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_event(event_id):
    event = Event.query.get_or_404(event_id)
    form = EventForm(obj=event)

    if form.validate_on_submit():
        form.populate_obj(event)
        event.registered_donors = event.registered_donors or 0
        event.units_collected = event.units_collected or 0
        try:
            db.session.commit()
            flash(f'Event "{event.name}" has been updated!', 'success')
            return redirect(url_for('admin.dashboard'))
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating event {event_id}: {str(e)}")
            flash('Error updating event.', 'danger')

    return render_template('admin/event_form.html', title='Edit Event', form=form, event=event)


@admin.route('/events/<int:event_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_event(event_id):
    event = Event.query.get_or_404(event_id)
    db.session.delete(event)
    try:
        db.session.commit()
        flash(f'Event "{event.name}" has been deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting event {event_id}: {str(e)}")
        flash('Error deleting event.', 'danger')
    return redirect(url_for('admin.dashboard'))


@admin.route('/donors')
@login_required
@admin_required
def manage_donors():
    page = request.args.get('page', 1, type=int)
    blood_group = request.args.get('blood_group', '')

    query = Donor.query
    if blood_group:
        query = query.filter_by(blood_group=blood_group)

    donors = query.order_by(Donor.name).paginate(page=page, per_page=15)

    return render_template('admin/donors.html',
                           title='Manage Donors',
                           donors=donors,
                           current_blood_group=blood_group)


@admin.route('/donors/<int:donor_id>/record-donation', methods=['POST'])
@login_required
@admin_required
def record_donation(donor_id):
    donor_profile = Donor.query.get_or_404(donor_id)
    donor_profile.refresh_eligibility()

    if not donor_profile.eligible:
        flash(f'{donor_profile.name} is not eligible to donate until {donor_profile.eligible_date}.', 'warning')
        return redirect(url_for('admin.manage_donors'))

    donor_profile.record_donation(current_app.config['DONATION_INTERVAL_DAYS'])
    try:
        db.session.commit()
        flash(f'Donation recorded for {donor_profile.name}. Total donations: {donor_profile.donation_count}', 'success')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error recording donation for donor {donor_id}: {str(e)}")
        flash('Error recording donation.', 'danger')

    return redirect(url_for('admin.manage_donors'))


@admin.route('/api-token')
@login_required
@admin_required
def api_token():
    return jsonify({
        'token': generate_api_token(current_user),
        'expires_in': current_app.config['API_TOKEN_MAX_AGE']
    })
