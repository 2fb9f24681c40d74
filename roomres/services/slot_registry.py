from datetime import datetime
from flask import current_app
from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.models import Slot
from roomres.models.slot import FREE
from roomres.errors import StorageError, ValidationError

_UNIQUE_KEY = ['room_id', 'availability_date', 'time_slot']


def parse_time_slot(label):
    """Split "HH:MM-HH:MM" into (start, end) times. Raises ValidationError if malformed."""
    parts = label.split('-') if isinstance(label, str) else []
    if len(parts) != 2:
        raise ValidationError(f"Invalid time slot '{label}'.")
    try:
        start, end = (datetime.strptime(p.strip(), "%H:%M").time() for p in parts)
    except ValueError:
        raise ValidationError(f"Invalid time slot '{label}'.")
    if start >= end:
        raise ValidationError(f"Invalid time slot '{label}'.")
    return start, end


def is_slot_open(label, on_date, now):
    """A slot stays bookable until its end time on its own date."""
    if on_date < now.date():
        return False
    if on_date > now.date():
        return True
    _, end = parse_time_slot(label)
    return now.time() < end


class SlotRegistry:

    @staticmethod
    def labels():
        return list(current_app.config['TIME_SLOTS'])

    @staticmethod
    def validate_label(label):
        if label not in SlotRegistry.labels():
            raise ValidationError(f"Unknown time slot '{label}'.")
        parse_time_slot(label)
        return label

    @staticmethod
    def _insert_missing(room_id, on_date):
        """Conditional insert of every configured label, keyed by the unique constraint."""
        rows = [
            {'room_id': room_id, 'availability_date': on_date, 'time_slot': label,
             'status': FREE, 'student_id': None, 'booking_id': None}
            for label in SlotRegistry.labels()
        ]
        dialect = db.session.get_bind().dialect.name
        if dialect == 'postgresql':
            stmt = postgresql.insert(Slot).values(rows).on_conflict_do_nothing(index_elements=_UNIQUE_KEY)
        elif dialect in ('mysql', 'mariadb'):
            stmt = insert(Slot).values(rows).prefix_with('IGNORE')
        else:
            stmt = sqlite.insert(Slot).values(rows).on_conflict_do_nothing(index_elements=_UNIQUE_KEY)
        db.session.execute(stmt)

    @staticmethod
    def ensure_slots(room_id, on_date, now=None):
        """
        Return the slots of a room for a date, materializing the configured
        labels as free slots on first access.

        When ``now`` is given only slots that are still open are returned
        (student-facing views). Staff and lecturer views pass no ``now``.
        """
        try:
            slots = SlotRegistry._fetch(room_id, on_date)
            if len(slots) < len(SlotRegistry.labels()):
                SlotRegistry._insert_missing(room_id, on_date)
                db.session.commit()
                slots = SlotRegistry._fetch(room_id, on_date)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to materialize slots for room {room_id} on {on_date}: {e}")
            raise StorageError('Failed to initialize time slots') from e

        if now is not None:
            slots = [s for s in slots if is_slot_open(s.time_slot, on_date, now)]
        return slots

    @staticmethod
    def get_slot(room_id, on_date, label):
        return Slot.query.filter_by(
            room_id=room_id, availability_date=on_date, time_slot=label
        ).first()

    @staticmethod
    def _fetch(room_id, on_date):
        return Slot.query.filter_by(
            room_id=room_id, availability_date=on_date
        ).order_by(Slot.time_slot).all()
