from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, current_user, logout_user
from bloodbank import db, bcrypt
from bloodbank.models.user import User, UserRole, Donor
from bloodbank.forms.auth_forms import DonorRegistrationForm, LoginForm
from bloodbank.utils.email import send_best_effort, send_login_notification, send_welcome_email

auth = Blueprint('auth', __name__)


def _landing_page(user):
    if user.is_admin():
        return url_for('admin.dashboard')
    return url_for('donor.dashboard')


def _is_safe_next(target):
    return bool(target) and target.startswith('/') and not target.startswith('//')


@auth.route('/register', methods=['GET', 'POST'])
def register():
    new_account = not current_user.is_authenticated

    if not new_account and current_user.donor_profile:
        return redirect(url_for('donor.dashboard'))

    form = DonorRegistrationForm(new_account=new_account)
    if not new_account:
        # Signed-in users register a donor profile under their account email
        form.email.data = current_user.email

    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        try:
            if new_account:
                hashed_password = bcrypt.generate_password_hash(form.password.data).decode('utf-8')
                user = User(email=email, password=hashed_password)
                db.session.add(user)
                db.session.flush()  # Flush to get the user ID
                db.session.add(UserRole(user_id=user.id, role='donor'))
            else:
                user = current_user

            donor_profile = Donor(
                user_id=user.id,
                name=form.name.data.strip(),
                age=form.age.data,
                gender=form.gender.data,
                blood_group=form.blood_group.data,
                weight=form.weight.data,
                phone=form.phone.data.strip(),
                email=email,
                address=form.address.data.strip()
            )
            db.session.add(donor_profile)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error registering donor {email}: {str(e)}")
            flash('Registration failed. Please try again.', 'danger')
            return render_template('auth/register.html',
                                   title='Donor Registration',
                                   form=form,
                                   new_account=new_account)

        current_app.logger.info(f"Donor profile created for {email}")
        send_best_effort(send_welcome_email, {
            'name': donor_profile.name,
            'email': donor_profile.email,
            'blood_group': donor_profile.blood_group,
        })

        if new_account:
            flash('Registration successful! You can now log in.', 'success')
            return redirect(url_for('auth.login'))

        flash('Donor profile created successfully!', 'success')
        return redirect(url_for('donor.dashboard'))

    return render_template('auth/register.html',
                           title='Donor Registration',
                           form=form,
                           new_account=new_account)


@auth.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(_landing_page(current_user))

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()
        if user and bcrypt.check_password_hash(user.password, form.password.data):
            login_user(user, remember=form.remember.data)
            current_app.logger.info(f"User {user.email} logged in")

            if user.donor_profile:
                send_best_effort(send_login_notification, user.donor_profile.to_notification_payload())

            next_page = request.args.get('next')
            if _is_safe_next(next_page):
                return redirect(next_page)
            return redirect(_landing_page(user))

        flash('Login unsuccessful. Please check email and password.', 'danger')

    return render_template('auth/login.html', title='Login', form=form)


@auth.route('/logout')
def logout():
    logout_user()
    flash('Logged out successfully', 'success')
    return redirect(url_for('main.home'))
