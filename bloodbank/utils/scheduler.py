from datetime import date
import logging

from bloodbank import db, scheduler
from bloodbank.models.user import Donor
from bloodbank.models.blood import BloodStock
from bloodbank.models.event import Event

logger = logging.getLogger(__name__)


def refresh_statuses(today=None):
    """
    Daily maintenance: expire old stock, restore donor eligibility and move
    events along by date. Must run inside an application context.
    """
    today = today or date.today()

    expired_stock = BloodStock.query.filter(
        BloodStock.expiry_date < today,
        BloodStock.status != 'Expired'
    ).all()
    for stock in expired_stock:
        stock.status = 'Expired'

    waiting_donors = Donor.query.filter(
        Donor.eligible.is_(False),
        Donor.eligible_date <= today
    ).all()
    eligible_count = sum(1 for donor in waiting_donors if donor.refresh_eligibility(today))

    active_events = Event.query.filter(Event.status.in_(['Upcoming', 'Ongoing'])).all()
    event_count = sum(1 for event in active_events if event.roll_status(today))

    db.session.commit()

    summary = {
        'expired_stock': len(expired_stock),
        'eligible_donors': eligible_count,
        'events_updated': event_count,
    }
    logger.info(f"Status refresh complete: {summary}")
    return summary


def _run_refresh(app):
    with app.app_context():
        try:
            refresh_statuses()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Scheduled status refresh failed: {str(e)}")


def start_scheduler(app):
    """
    Start the background scheduler for automated tasks
    """
    if scheduler.running:
        return

    scheduler.add_job(
        func=_run_refresh,
        args=[app],
        trigger='interval',
        hours=24,  # Run once a day
        id='status_refresh_job',
        replace_existing=True
    )
    scheduler.start()
    app.logger.info("Background scheduler started")
