from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from flask_login import login_required, current_user
from bloodbank import db

donor = Blueprint('donor', __name__)


@donor.route('/dashboard')
@login_required
def dashboard():
    donor_profile = current_user.donor_profile
    if donor_profile is None:
        flash('Please complete your donor profile first.', 'info')
        return redirect(url_for('auth.register'))

    # Waiting period may have ended since the last maintenance run
    if donor_profile.refresh_eligibility():
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating eligibility for donor {donor_profile.id}: {str(e)}")

    return render_template('donor/dashboard.html',
                           title='Donor Dashboard',
                           donor=donor_profile)
