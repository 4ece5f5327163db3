from bloodbank import db
from datetime import datetime

EVENT_STATUSES = ['Upcoming', 'Ongoing', 'Completed', 'Cancelled']


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    event_date = db.Column(db.Date, nullable=False)
    location = db.Column(db.String(200), nullable=False)
    organizer = db.Column(db.String(100), nullable=False)
    contact = db.Column(db.String(100), nullable=True)
    description = db.Column(db.Text, nullable=True)
    registered_donors = db.Column(db.Integer, nullable=False, default=0)
    units_collected = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='Upcoming')  # Upcoming, Ongoing, Completed, Cancelled
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def roll_status(self, today):
        """Move an active event along by date. Returns True if the status changed."""
        if self.status not in ('Upcoming', 'Ongoing'):
            return False
        if self.event_date < today:
            self.status = 'Completed'
            return True
        if self.event_date == today and self.status == 'Upcoming':
            self.status = 'Ongoing'
            return True
        return False

    def __repr__(self):
        return f"Event('{self.name}', '{self.event_date}', '{self.status}')"
