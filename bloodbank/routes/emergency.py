from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from bloodbank import db
from bloodbank.models.blood import BloodRequest
from bloodbank.forms.emergency_forms import EmergencyRequestForm
from bloodbank.utils.email import send_best_effort, send_emergency_alert

emergency = Blueprint('emergency', __name__)


@emergency.route('/', methods=['GET', 'POST'])
def request_blood():
    form = EmergencyRequestForm()

    if form.validate_on_submit():
        blood_request = BloodRequest(
            patient_name=form.patient_name.data.strip(),
            hospital_name=form.hospital_name.data.strip(),
            blood_group=form.blood_group.data,
            units_required=form.units_required.data,
            urgency=form.urgency.data,
            contact_person=form.contact_person.data.strip(),
            phone=form.phone.data.strip(),
            email=form.email.data.strip().lower() if form.email.data else None
        )
        db.session.add(blood_request)

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error saving emergency request: {str(e)}")
            flash('Failed to submit request. Please try again or call the emergency hotline.', 'danger')
            return render_template('emergency/request.html', title='Emergency Blood Request', form=form)

        current_app.logger.info(
            f"Emergency request {blood_request.id} created: {blood_request.blood_group} x{blood_request.units_required} ({blood_request.urgency})"
        )
        send_best_effort(send_emergency_alert, blood_request.to_notification_payload())

        flash('Emergency request submitted successfully! Our team will contact you shortly.', 'success')
        return redirect(url_for('main.home'))

    return render_template('emergency/request.html', title='Emergency Blood Request', form=form)
