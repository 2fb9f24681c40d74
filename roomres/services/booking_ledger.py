from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from roomres.extensions import db
from roomres.models import Booking
from roomres.models.booking import PENDING
from roomres.errors import Conflict, DailyLimitExceeded, NotFound, StorageError, ValidationError

DAILY_LIMIT_MESSAGE = 'You can only book one slot per day'


def is_daily_limit_violation(error):
    """True when an IntegrityError comes from the (student, date) unique key."""
    message = str(getattr(error, 'orig', error))
    if 'uq_booking_student_day' in message:
        return True
    # SQLite names the columns rather than the constraint
    return 'UNIQUE' in message and 'student_id' in message and 'booking_date' in message


class BookingLedger:
    """Append/update log of booking requests, one row per request."""

    @staticmethod
    def has_booking_on(student_id, on_date):
        return db.session.query(
            Booking.query.filter_by(student_id=student_id, booking_date=on_date).exists()
        ).scalar()

    @staticmethod
    def get(booking_id):
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFound('Booking not found')
        return booking

    @staticmethod
    def create_booking(student_id, room_id, on_date, label, now):
        """Insert a Pending booking. The unique (student, date) constraint backs the daily limit."""
        if BookingLedger.has_booking_on(student_id, on_date):
            raise DailyLimitExceeded(DAILY_LIMIT_MESSAGE)

        booking = Booking(
            student_id=student_id,
            room_id=room_id,
            booking_date=on_date,
            time_slot=label,
            status=PENDING,
            booked_at=now
        )
        try:
            db.session.add(booking)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if is_daily_limit_violation(e):
                raise DailyLimitExceeded(DAILY_LIMIT_MESSAGE) from e
            raise ValidationError('Unknown student or room') from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Database error creating booking') from e
        return booking

    @staticmethod
    def decide_booking(booking_id, status, approver_id, now):
        """
        Record a lecturer decision. Only a Pending booking can be decided;
        the conditional update makes a concurrent second decision lose.
        """
        booking = BookingLedger.get(booking_id)
        if booking.status != PENDING:
            raise Conflict(f'Booking already {booking.status.lower()}')

        try:
            affected = Booking.query.filter(
                Booking.id == booking_id,
                Booking.status == PENDING
            ).update({
                'status': status,
                'approved_by': approver_id,
                'approved_at': now
            }, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Update failed') from e

        if affected != 1:
            raise Conflict('Booking already decided')
        db.session.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(booking_id):
        """Compensation only: remove a booking created earlier in the same request."""
        Booking.query.filter_by(id=booking_id).delete(synchronize_session=False)
        db.session.commit()
