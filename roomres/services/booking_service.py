import traceback
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.models import Room
from roomres.models.booking import APPROVED, DECISIONS
from roomres.services.slot_registry import SlotRegistry, is_slot_open
from roomres.services.availability_service import AvailabilityService
from roomres.services.booking_ledger import BookingLedger, DAILY_LIMIT_MESSAGE
from roomres.errors import (
    CompensationFailure, DailyLimitExceeded, NotFound, ReservationError,
    SlotExpired, SlotUnavailable, StorageError, ValidationError
)

class BookingService:

    @staticmethod
    def book(student_id, room_id, time_slot, now):
        """
        Main entry point to book a slot for today.

        Each step is a gate that short-circuits with a specific error. The
        slot is claimed with a compare-and-swap before the booking row is
        written, so at most one booking can ever hold a slot. A failure
        after the claim undoes every earlier write and re-raises the
        original error.
        """
        if not student_id or not room_id or not time_slot:
            raise ValidationError('Missing required fields')
        try:
            room_id = int(room_id)
        except (TypeError, ValueError):
            raise ValidationError('Invalid room id')
        SlotRegistry.validate_label(time_slot)

        on_date = now.date()
        try:
            room = db.session.get(Room, room_id)
            if not room:
                raise NotFound('Room not found')

            # 1. Expiry
            if not is_slot_open(time_slot, on_date, now):
                raise SlotExpired('This time slot has already passed and cannot be booked')

            # 2. One booking per student per day
            if BookingLedger.has_booking_on(student_id, on_date):
                raise DailyLimitExceeded(DAILY_LIMIT_MESSAGE)

            # 3. Availability
            if room.is_disabled:
                raise SlotUnavailable('Room is disabled', reason='room_disabled')
            SlotRegistry.ensure_slots(room_id, on_date)
            BookingService._check_available(room_id, on_date, time_slot)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Server error checking availability') from e

        # 4. Claim: free -> pending, only if nobody got there first
        if not AvailabilityService.claim_slot(room_id, on_date, time_slot, student_id):
            BookingService._check_available(room_id, on_date, time_slot)
            raise SlotUnavailable('Time slot not available', reason='missing')

        # 5. Ledger entry
        try:
            booking = BookingLedger.create_booking(student_id, room_id, on_date, time_slot, now)
        except ReservationError:
            BookingService._compensate(room_id, on_date, time_slot, student_id)
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            BookingService._compensate(room_id, on_date, time_slot, student_id)
            raise StorageError('Database error creating booking') from e

        # 6. Link the booking to the slot
        booking_id = booking.id
        try:
            AvailabilityService.link_booking(room_id, on_date, time_slot, student_id, booking_id)
        except (SQLAlchemyError, StorageError) as e:
            db.session.rollback()
            BookingService._compensate(room_id, on_date, time_slot, student_id, booking_id=booking_id)
            if isinstance(e, StorageError):
                raise
            raise StorageError('Booking update failed') from e

        current_app.logger.info(
            f"Booking {booking.id} created: student {student_id}, room {room_id}, {on_date} {time_slot}"
        )
        return booking

    @staticmethod
    def _check_available(room_id, on_date, time_slot):
        slot = SlotRegistry.get_slot(room_id, on_date, time_slot)
        reason, message = AvailabilityService.describe_unavailable(slot)
        if reason:
            raise SlotUnavailable(message, reason=reason)

    @staticmethod
    def _undo(description, step):
        try:
            step()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise CompensationFailure(f"Could not {description}") from e

    @staticmethod
    def _compensate(room_id, on_date, time_slot, student_id, booking_id=None):
        """Best-effort undo of a partial booking. Failures are logged, never raised."""
        steps = []
        if booking_id is not None:
            steps.append((f"delete booking {booking_id}", lambda: BookingLedger.delete_booking(booking_id)))
        steps.append((
            f"release slot {time_slot} of room {room_id} on {on_date}",
            lambda: AvailabilityService.release_slot(room_id, on_date, time_slot, student_id)
        ))

        for description, step in steps:
            try:
                BookingService._undo(description, step)
            except CompensationFailure as e:
                current_app.logger.error(f"{e}: {e.__cause__}\n{traceback.format_exc()}")

    @staticmethod
    def decide(booking_id, status, approver_id, now):
        """
        Approve or reject a pending booking and move its slot accordingly.

        The booking row is the source of truth: if the slot write fails the
        decision stands and the divergence is logged for the next reset pass.
        """
        if status not in DECISIONS:
            raise ValidationError(f"Status must be one of: {', '.join(DECISIONS)}")
        if not approver_id:
            raise ValidationError('Missing required fields')

        booking = BookingLedger.decide_booking(booking_id, status, approver_id, now)

        target = 'reserved' if booking.status == APPROVED else 'free'
        try:
            affected = AvailabilityService.apply_decision(booking)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(
                f"Failed to update room availability for booking {booking.id} to {target}: {e}"
            )
            return booking

        if affected != 1:
            current_app.logger.warning(
                f"Booking {booking.id} decided {booking.status} but no pending slot matched "
                f"(room {booking.room_id}, {booking.booking_date} {booking.time_slot})"
            )
        else:
            current_app.logger.info(f"Booking {booking.id} {booking.status.lower()} by {approver_id}")
        return booking
