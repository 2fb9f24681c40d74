from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.models import Room, Slot
from roomres.models.slot import FREE, PENDING, RESERVED, DISABLED, OCCUPIED
from roomres.models.booking import APPROVED
from roomres.services.slot_registry import SlotRegistry
from roomres.errors import Conflict, NotFound, StorageError

UNAVAILABLE_MESSAGES = {
    PENDING: 'Time slot is already pending approval',
    RESERVED: 'Time slot is already reserved',
    DISABLED: 'Time slot is disabled',
    'taken': 'Time slot is already booked by another student',
}


class AvailabilityService:
    """
    Owns the per-slot status lifecycle.

    Every transition is a conditional UPDATE on the expected source status,
    checked by affected-row count, so two writers can never both move the
    same slot out of the same state.
    """

    @staticmethod
    def _slot_filter(room_id, on_date, label):
        return Slot.query.filter(
            Slot.room_id == room_id,
            Slot.availability_date == on_date,
            Slot.time_slot == label
        )

    @staticmethod
    def _get_room(room_id):
        room = db.session.get(Room, room_id)
        if not room:
            raise NotFound('Room not found')
        return room

    @staticmethod
    def describe_unavailable(slot):
        """Return (reason, message) explaining why a slot cannot be booked."""
        if slot is None:
            return 'missing', 'Time slot not available'
        if slot.status in (PENDING, RESERVED, DISABLED):
            return slot.status, UNAVAILABLE_MESSAGES[slot.status]
        if slot.student_id:
            return 'taken', UNAVAILABLE_MESSAGES['taken']
        return None, None

    # --- Booking transitions ---

    @staticmethod
    def claim_slot(room_id, on_date, label, student_id):
        """free -> pending, binding the student. Returns False if the slot was not free."""
        try:
            affected = AvailabilityService._slot_filter(room_id, on_date, label).filter(
                Slot.status == FREE,
                Slot.student_id.is_(None)
            ).update({'status': PENDING, 'student_id': student_id}, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Server error checking availability') from e
        return affected == 1

    @staticmethod
    def link_booking(room_id, on_date, label, student_id, booking_id):
        affected = AvailabilityService._slot_filter(room_id, on_date, label).filter(
            Slot.status == PENDING,
            Slot.student_id == student_id
        ).update({'booking_id': booking_id}, synchronize_session=False)
        db.session.commit()
        if affected != 1:
            raise StorageError('Booking update failed')

    @staticmethod
    def release_slot(room_id, on_date, label, student_id):
        """pending -> free for the given student. Used only to undo a claim."""
        affected = AvailabilityService._slot_filter(room_id, on_date, label).filter(
            Slot.status == PENDING,
            Slot.student_id == student_id
        ).update({'status': FREE, 'student_id': None, 'booking_id': None}, synchronize_session=False)
        db.session.commit()
        return affected

    @staticmethod
    def apply_decision(booking):
        """Move the slot bound to a decided booking: Approved -> reserved, otherwise free."""
        query = AvailabilityService._slot_filter(
            booking.room_id, booking.booking_date, booking.time_slot
        ).filter(
            Slot.status == PENDING,
            Slot.student_id == booking.student_id
        )
        if booking.status == APPROVED:
            values = {'status': RESERVED}
        else:
            values = {'status': FREE, 'student_id': None, 'booking_id': None}
        affected = query.update(values, synchronize_session=False)
        db.session.commit()
        return affected

    # --- Staff transitions ---

    @staticmethod
    def disable_slot(room_id, label, on_date, today=None):
        room = AvailabilityService._get_room(room_id)
        SlotRegistry.validate_label(label)
        SlotRegistry.ensure_slots(room_id, on_date)

        try:
            affected = AvailabilityService._slot_filter(room_id, on_date, label).filter(
                Slot.status == FREE
            ).update({'status': DISABLED}, synchronize_session=False)
            if affected != 1:
                db.session.rollback()
                raise Conflict('Can only disable free time slots')

            remaining = Slot.query.filter(
                Slot.room_id == room_id,
                Slot.availability_date == on_date,
                Slot.status != DISABLED
            ).count()
            if remaining == 0 and not AvailabilityService._occupied_on(room_id, on_date, today):
                room.is_disabled = True
                current_app.logger.info(f"All slots of room {room_id} disabled on {on_date}; room disabled")
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to disable time slot') from e
        return room

    @staticmethod
    def enable_slot(room_id, label, on_date):
        room = AvailabilityService._get_room(room_id)
        SlotRegistry.validate_label(label)
        SlotRegistry.ensure_slots(room_id, on_date)

        try:
            affected = AvailabilityService._slot_filter(room_id, on_date, label).filter(
                Slot.status == DISABLED
            ).update({'status': FREE}, synchronize_session=False)
            if affected != 1:
                db.session.rollback()
                raise Conflict('Can only enable disabled time slots')
            # A free slot means the room is usable again
            room.is_disabled = False
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to enable time slot') from e
        return room

    @staticmethod
    def disable_room(room_id, on_date, today=None):
        """
        Disable a room and all its free slots for a date.

        Rejected with Conflict while any slot of the room on that date, or on
        ``today``, is pending or reserved. The room flag hides the room on
        every day, so a booking held today blocks it too. The occupancy
        check is repeated after the update, inside the same transaction, so
        a booking that claimed a slot in between makes the whole operation
        roll back.
        """
        room = AvailabilityService._get_room(room_id)
        SlotRegistry.ensure_slots(room_id, on_date)

        if AvailabilityService._occupied_on(room_id, on_date, today):
            raise Conflict('Cannot disable room with booked or pending slots')

        try:
            affected = Slot.query.filter(
                Slot.room_id == room_id,
                Slot.availability_date == on_date,
                Slot.status == FREE
            ).update({'status': DISABLED}, synchronize_session=False)

            if AvailabilityService._occupied_on(room_id, on_date, today):
                db.session.rollback()
                raise Conflict('Cannot disable room with booked or pending slots')

            room.is_disabled = True
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to disable room {room_id}: {e}")
            raise StorageError('Failed to disable room') from e

        current_app.logger.info(f"Room {room_id} disabled, {affected} time slots disabled")
        return affected

    @staticmethod
    def enable_room(room_id, on_date):
        room = AvailabilityService._get_room(room_id)
        try:
            affected = Slot.query.filter(
                Slot.room_id == room_id,
                Slot.availability_date == on_date,
                Slot.status == DISABLED
            ).update({'status': FREE}, synchronize_session=False)
            room.is_disabled = False
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to enable room {room_id}: {e}")
            raise StorageError('Failed to enable room') from e

        current_app.logger.info(f"Room {room_id} enabled, {affected} time slots enabled")
        return affected

    @staticmethod
    def count_occupied(room_id, on_date):
        return db.session.query(func.count(Slot.id)).filter(
            Slot.room_id == room_id,
            Slot.availability_date == on_date,
            Slot.status.in_(OCCUPIED)
        ).scalar()

    @staticmethod
    def _occupied_on(room_id, on_date, today=None):
        dates = {on_date, today or on_date}
        return db.session.query(func.count(Slot.id)).filter(
            Slot.room_id == room_id,
            Slot.availability_date.in_(dates),
            Slot.status.in_(OCCUPIED)
        ).scalar()
