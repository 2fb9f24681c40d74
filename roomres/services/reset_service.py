import threading
from datetime import datetime, timedelta
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.models import Slot
from roomres.models.slot import FREE, OCCUPIED
from roomres.utils.clock import local_now


def reset_room_statuses(on_date):
    """Reclaim every pending/reserved slot of a date back to free. Idempotent."""
    try:
        affected = Slot.query.filter(
            Slot.availability_date == on_date,
            Slot.status.in_(OCCUPIED)
        ).update({'status': FREE, 'student_id': None, 'booking_id': None}, synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Room status reset error for {on_date}: {e}")
        raise
    current_app.logger.info(f"Room statuses reset for: {on_date} ({affected} slots)")
    return affected


def seconds_until_midnight(now):
    next_midnight = datetime.combine(now.date() + timedelta(days=1), datetime.min.time())
    return (next_midnight - now).total_seconds()


class DailyResetScheduler:
    """
    Fires the reset once shortly after start, then at the next local
    midnight and every interval after that. Each run targets the day
    after the run time, so it never touches slots being booked today.
    """

    def __init__(self, app, clock=None):
        self.app = app
        self.clock = clock
        self._timers = []
        self._lock = threading.Lock()
        self._stopped = False

    def _now(self):
        if self.clock is not None:
            return self.clock()
        return local_now()

    def start(self):
        startup_delay = self.app.config['RESET_STARTUP_DELAY']
        with self.app.app_context():
            delay = seconds_until_midnight(self._now())
        self._schedule(startup_delay, self.run_once)
        self._schedule(delay, self._run_and_repeat)
        self.app.logger.info(f"Daily reset scheduled in {delay:.0f}s")

    def stop(self):
        with self._lock:
            self._stopped = True
            for timer in self._timers:
                timer.cancel()
            self._timers = []

    def run_once(self):
        with self.app.app_context():
            tomorrow = self._now().date() + timedelta(days=1)
            try:
                return reset_room_statuses(tomorrow)
            except SQLAlchemyError:
                # Already logged; the next run retries
                return None

    def _run_and_repeat(self):
        self.run_once()
        self._schedule(self.app.config['RESET_INTERVAL_SECONDS'], self._run_and_repeat)

    def _schedule(self, delay, func):
        with self._lock:
            if self._stopped:
                return None
            timer = threading.Timer(delay, func)
            timer.daemon = True
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
            timer.start()
            return timer
