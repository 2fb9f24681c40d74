"""
Read-only reporting over rooms, slots and bookings.

Nothing in this module writes to the store; it only aggregates the state
maintained by the booking and availability services.
"""
from datetime import timedelta
from sqlalchemy import case, func
from roomres.extensions import db
from roomres.models import Booking, Room, Slot
from roomres.models.booking import PENDING as BOOKING_PENDING, APPROVED, REJECTED
from roomres.models.slot import SLOT_STATUSES, FREE, PENDING, RESERVED, DISABLED

class ReportService:

    @staticmethod
    def slot_counts(on_date):
        rows = db.session.query(Slot.status, func.count(Slot.id)).filter(
            Slot.availability_date == on_date
        ).group_by(Slot.status).all()
        counts = {status: 0 for status in SLOT_STATUSES}
        counts.update(dict(rows))
        return counts

    @staticmethod
    def booking_counts(on_date, approver_id=None):
        query = db.session.query(Booking.status, func.count(Booking.id)).filter(
            Booking.booking_date == on_date
        )
        if approver_id is not None:
            query = query.filter(Booking.approved_by == approver_id)
        counts = {status: 0 for status in (BOOKING_PENDING, APPROVED, REJECTED)}
        counts.update(dict(query.group_by(Booking.status).all()))
        return counts

    @staticmethod
    def disabled_rooms_count():
        return Room.query.filter(Room.is_disabled.is_(True)).count()

    @staticmethod
    def dashboard_stats(on_date):
        slots = ReportService.slot_counts(on_date)
        return {
            'free_slots': slots[FREE],
            'pending_slots': slots[PENDING],
            'reserved_slots': slots[RESERVED],
            'disabled_rooms': ReportService.disabled_rooms_count()
        }

    @staticmethod
    def stats_today(on_date):
        stats = ReportService.dashboard_stats(on_date)
        bookings = ReportService.booking_counts(on_date)
        stats['pending_requests'] = bookings[BOOKING_PENDING]
        stats['approved_today'] = bookings[APPROVED]
        return stats

    @staticmethod
    def lecturer_dashboard(lecturer_id, on_date):
        slots = ReportService.slot_counts(on_date)
        return {
            'free_slots': slots[FREE],
            'pending_requests': ReportService.booking_counts(on_date)[BOOKING_PENDING],
            'approved_bookings': ReportService.booking_counts(on_date, approver_id=lecturer_id)[APPROVED],
            'disabled_rooms': ReportService.disabled_rooms_count(),
            'reserved_slots': slots[RESERVED]
        }

    # --- Rooms ---

    @staticmethod
    def _listed_rooms():
        # Skip half-created rows
        return Room.query.filter(
            Room.name.isnot(None),
            Room.name != '',
            Room.name != 'Unknown',
            Room.category.isnot(None)
        )

    @staticmethod
    def _room_slot_counts(on_date):
        rows = db.session.query(Slot.room_id, Slot.status, func.count(Slot.id)).filter(
            Slot.availability_date == on_date
        ).group_by(Slot.room_id, Slot.status).all()
        counts = {}
        for room_id, status, count in rows:
            counts.setdefault(room_id, {s: 0 for s in SLOT_STATUSES})[status] = count
        return counts

    @staticmethod
    def rooms_with_status(on_date):
        """All rooms, disabled ones included, with per-status slot counts (staff/lecturer view)."""
        counts = ReportService._room_slot_counts(on_date)
        rooms = ReportService._listed_rooms().order_by(Room.is_disabled, Room.category, Room.name).all()
        results = []
        for room in rooms:
            c = counts.get(room.id, {s: 0 for s in SLOT_STATUSES})
            data = room.to_dict()
            data.update({
                'free_slots': c[FREE],
                'pending_slots': c[PENDING],
                'reserved_slots': c[RESERVED],
                'disabled_slots': c[DISABLED],
                'can_disable': c[FREE] > 0 and c[PENDING] == 0 and c[RESERVED] == 0,
                'can_enable': bool(room.is_disabled)
            })
            results.append(data)
        return results

    @staticmethod
    def rooms_availability(on_date):
        """Enabled rooms with how many of today's slots are still free (student view)."""
        counts = ReportService._room_slot_counts(on_date)
        rooms = ReportService._listed_rooms().filter(
            Room.is_disabled.is_(False)
        ).order_by(Room.category, Room.name).all()
        results = []
        for room in rooms:
            c = counts.get(room.id, {s: 0 for s in SLOT_STATUSES})
            data = room.to_dict()
            data.update({
                'available_slots': c[FREE],
                'total_slots': sum(c.values()),
                'is_available': c[FREE] > 0
            })
            results.append(data)
        return results

    @staticmethod
    def room_detail(room, slots):
        data = room.to_dict()
        data['time_slots'] = [{
            'time_slot': s.time_slot,
            'status': s.status,
            'student_id': s.student_id,
            'student_name': s.student.full_name if s.student else None
        } for s in slots]
        return data

    # --- Bookings ---

    @staticmethod
    def booking_row(booking):
        data = booking.to_dict()
        data.update({
            'room_name': booking.room.name if booking.room else None,
            'location': booking.room.location if booking.room else None,
            'image_url': booking.room.image_url if booking.room else None,
            'student_name': booking.student.full_name if booking.student else None,
            'approved_by_name': booking.approver.full_name if booking.approver else None
        })
        return data

    @staticmethod
    def all_bookings():
        bookings = Booking.query.order_by(Booking.booked_at.desc()).all()
        return [ReportService.booking_row(b) for b in bookings]

    @staticmethod
    def student_bookings(student_id):
        bookings = Booking.query.filter_by(student_id=student_id).order_by(
            Booking.booking_date.desc(), Booking.time_slot.desc()
        ).all()
        return [ReportService.booking_row(b) for b in bookings]

    @staticmethod
    def student_bookings_on(student_id, on_date):
        status_rank = case(
            (Booking.status == BOOKING_PENDING, 1),
            (Booking.status == APPROVED, 2),
            (Booking.status == REJECTED, 3),
            else_=4
        )
        bookings = Booking.query.filter_by(student_id=student_id, booking_date=on_date).order_by(
            status_rank, Booking.time_slot
        ).all()
        return [ReportService.booking_row(b) for b in bookings]

    @staticmethod
    def pending_bookings(on_date):
        bookings = Booking.query.filter_by(
            status=BOOKING_PENDING, booking_date=on_date
        ).order_by(Booking.booked_at.asc()).all()
        return [ReportService.booking_row(b) for b in bookings]

    @staticmethod
    def decision_history(lecturer_id, now, days=30):
        since = now - timedelta(days=days)
        bookings = Booking.query.filter(
            Booking.approved_by == lecturer_id,
            Booking.approved_at >= since
        ).order_by(Booking.approved_at.desc()).all()
        return [ReportService.booking_row(b) for b in bookings]
