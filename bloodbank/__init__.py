from flask import Flask, render_template, request
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_mail import Mail
from flask_wtf.csrf import CSRFProtect
from flask_migrate import Migrate
from flask_cors import CORS
from apscheduler.schedulers.background import BackgroundScheduler
import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize Flask extensions
db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = 'info'
mail = Mail()
csrf = CSRFProtect()
migrate = Migrate()
cors = CORS()
scheduler = BackgroundScheduler()


def _env_flag(name, default='false'):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


def create_app(config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'default_secret_key_for_development')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URI', 'sqlite:///blood_bank.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['WTF_CSRF_ENABLED'] = True

    # Email configuration
    app.config['MAIL_SERVER'] = os.getenv('MAIL_SERVER', 'smtp.gmail.com')
    app.config['MAIL_PORT'] = int(os.getenv('MAIL_PORT', 587))
    app.config['MAIL_USE_TLS'] = _env_flag('MAIL_USE_TLS', 'true')
    app.config['MAIL_USERNAME'] = os.getenv('MAIL_USERNAME')
    app.config['MAIL_PASSWORD'] = os.getenv('MAIL_PASSWORD')
    app.config['MAIL_DEFAULT_SENDER'] = os.getenv('MAIL_DEFAULT_SENDER', 'BloodBank Pro <noreply@bloodbankpro.com>')
    app.config['ADMIN_ALERT_EMAIL'] = os.getenv('ADMIN_ALERT_EMAIL', 'admin@bloodbankpro.com')
    app.config['CONTACT_EMAIL'] = os.getenv('CONTACT_EMAIL', 'contact@bloodbankpro.com')

    # JSON email handlers
    app.config['MAX_PAYLOAD_BYTES'] = int(os.getenv('MAX_PAYLOAD_BYTES', 50000))
    app.config['API_TOKEN_MAX_AGE'] = int(os.getenv('API_TOKEN_MAX_AGE', 3600))
    app.config['CORS_ORIGINS'] = os.getenv('CORS_ORIGINS', '*')

    # Donor rules and background jobs
    app.config['DONATION_INTERVAL_DAYS'] = int(os.getenv('DONATION_INTERVAL_DAYS', 90))
    app.config['SCHEDULER_ENABLED'] = _env_flag('SCHEDULER_ENABLED')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        app.config.update(config)

    # Werkzeug enforces the limit on bodies sent without a Content-Length
    if app.config.get('MAX_CONTENT_LENGTH') is None:
        app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_PAYLOAD_BYTES']

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions with app
    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    mail.init_app(app)
    csrf.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    # Register blueprints
    from bloodbank.routes.auth import auth
    from bloodbank.routes.donor import donor
    from bloodbank.routes.admin import admin
    from bloodbank.routes.emergency import emergency
    from bloodbank.routes.api import api
    from bloodbank.routes.main import main

    csrf.exempt(api)

    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(donor, url_prefix='/donor')
    app.register_blueprint(admin, url_prefix='/admin')
    app.register_blueprint(emergency, url_prefix='/emergency')
    app.register_blueprint(api, url_prefix='/api')
    app.register_blueprint(main)

    from bloodbank.utils.timezone import format_ist_datetime
    app.add_template_filter(format_ist_datetime, 'ist')

    @app.errorhandler(403)
    def forbidden(error):
        return render_template('errors/403.html', title='Access Denied'), 403

    @app.errorhandler(404)
    def not_found(error):
        app.logger.warning(f"404 Error: User attempted to access non-existent route: {request.path}")
        return render_template('errors/404.html', title='Page Not Found'), 404

    from bloodbank.commands import register_commands
    register_commands(app)

    # Create database tables
    from bloodbank.models import user, blood, event  # noqa: F401
    with app.app_context():
        db.create_all()

    if app.config['SCHEDULER_ENABLED']:
        from bloodbank.utils.scheduler import start_scheduler
        start_scheduler(app)

    return app
