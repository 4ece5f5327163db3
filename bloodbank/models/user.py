from bloodbank import db, login_manager
from flask_login import UserMixin
from datetime import datetime, date, timedelta

BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']
GENDERS = ['Male', 'Female', 'Other']
ROLES = ['admin', 'donor']

# (minimum donation count, badge) from highest to lowest
BADGE_TIERS = [
    (25, 'Platinum'),
    (10, 'Gold'),
    (5, 'Silver'),
    (0, 'Bronze'),
]
BADGES = [badge for _, badge in reversed(BADGE_TIERS)]


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def badge_for(donation_count):
    for minimum, badge in BADGE_TIERS:
        if donation_count >= minimum:
            return badge
    return 'Bronze'


class User(db.Model, UserMixin):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(60), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    user_role = db.relationship('UserRole', backref='user', uselist=False, cascade='all, delete-orphan')
    donor_profile = db.relationship('Donor', backref='user', uselist=False, cascade='all, delete-orphan')

    @property
    def role(self):
        return self.user_role.role if self.user_role else None

    def is_donor(self):
        return self.role == 'donor'

    def is_admin(self):
        return self.role == 'admin'

    def __repr__(self):
        return f"User('{self.email}', '{self.role}')"


class UserRole(db.Model):
    __tablename__ = 'user_roles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, unique=True)
    role = db.Column(db.String(20), nullable=False, default='donor')  # admin, donor

    def __repr__(self):
        return f"UserRole({self.user_id}, '{self.role}')"


class Donor(db.Model):
    __tablename__ = 'donors'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    gender = db.Column(db.String(10), nullable=False)
    blood_group = db.Column(db.String(5), nullable=False)
    weight = db.Column(db.Float, nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(200), nullable=False)
    donation_count = db.Column(db.Integer, nullable=False, default=0)
    badge = db.Column(db.String(20), nullable=False, default='Bronze')
    eligible = db.Column(db.Boolean, nullable=False, default=True)
    eligible_date = db.Column(db.Date, nullable=True)
    last_donation_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def record_donation(self, interval_days, donated_on=None):
        """
        Count a completed donation and start the waiting period before the
        donor is eligible again.
        """
        donated_on = donated_on or date.today()
        self.donation_count = (self.donation_count or 0) + 1
        self.badge = badge_for(self.donation_count)
        self.last_donation_date = donated_on
        self.eligible = False
        self.eligible_date = donated_on + timedelta(days=interval_days)

    def refresh_eligibility(self, today=None):
        """Restore eligibility once the waiting period is over. Returns True if it changed."""
        today = today or date.today()
        if not self.eligible and self.eligible_date and self.eligible_date <= today:
            self.eligible = True
            return True
        return False

    def to_notification_payload(self):
        return {
            'name': self.name,
            'email': self.email,
            'blood_group': self.blood_group,
            'phone': self.phone,
            'address': self.address,
            'age': self.age,
            'gender': self.gender,
            'weight': self.weight,
            'donation_count': self.donation_count,
            'badge': self.badge,
            'eligible': self.eligible,
        }

    def __repr__(self):
        return f"Donor('{self.name}', '{self.blood_group}')"
