from bloodbank import db
from datetime import datetime, date

STOCK_STATUSES = ['Available', 'Low Stock', 'Critical', 'Expired']
URGENCY_LEVELS = ['Low', 'Medium', 'High', 'Critical']
REQUEST_STATUSES = ['Pending', 'Approved', 'Rejected', 'Completed']


class BloodStock(db.Model):
    __tablename__ = 'blood_stock'

    id = db.Column(db.Integer, primary_key=True)
    blood_group = db.Column(db.String(5), nullable=False)
    units = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(200), nullable=False)
    expiry_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Available')
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_expired(self, today=None):
        return self.expiry_date < (today or date.today())

    def __repr__(self):
        return f"BloodStock('{self.blood_group}', '{self.units} units', '{self.location}')"


class BloodRequest(db.Model):
    __tablename__ = 'blood_requests'

    id = db.Column(db.Integer, primary_key=True)
    patient_name = db.Column(db.String(100), nullable=False)
    hospital_name = db.Column(db.String(200), nullable=False)
    blood_group = db.Column(db.String(5), nullable=False)
    units_required = db.Column(db.Integer, nullable=False)
    urgency = db.Column(db.String(20), nullable=False, default='Medium')
    contact_person = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Pending')  # Pending, Approved, Rejected, Completed
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"BloodRequest('{self.patient_name}', '{self.blood_group}', '{self.status}')"

    @property
    def is_pending(self):
        return self.status == 'Pending'

    def mark_approved(self):
        self.status = 'Approved'
        self.updated_at = datetime.utcnow()

    def mark_rejected(self):
        self.status = 'Rejected'
        self.updated_at = datetime.utcnow()

    def mark_completed(self):
        self.status = 'Completed'
        self.updated_at = datetime.utcnow()

    def to_notification_payload(self):
        return {
            'email': self.email,
            'patient_name': self.patient_name,
            'hospital_name': self.hospital_name,
            'blood_group': self.blood_group,
            'units_required': self.units_required,
            'urgency': self.urgency,
            'status': self.status,
            'contact_person': self.contact_person,
            'phone': self.phone,
        }
