import click

from bloodbank import db, bcrypt
from bloodbank.models.user import User, UserRole


def register_commands(app):

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.argument('password')
    def create_admin(email, password):
        """Create an admin account, or promote an existing user to admin."""
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        if user is None:
            hashed_password = bcrypt.generate_password_hash(password).decode('utf-8')
            user = User(email=email, password=hashed_password)
            db.session.add(user)
            db.session.flush()  # Flush to get the user ID

        if user.user_role is None:
            db.session.add(UserRole(user_id=user.id, role='admin'))
        else:
            user.user_role.role = 'admin'

        db.session.commit()
        click.echo(f"Admin account ready: {email}")

    @app.cli.command('refresh-status')
    def refresh_status():
        """Expire old stock, restore donor eligibility and roll event statuses."""
        from bloodbank.utils.scheduler import refresh_statuses
        summary = refresh_statuses()
        click.echo(
            f"Expired stock: {summary['expired_stock']}, "
            f"eligible donors: {summary['eligible_donors']}, "
            f"events updated: {summary['events_updated']}"
        )
