from roomres.extensions import db

FREE = 'free'
PENDING = 'pending'
RESERVED = 'reserved'
DISABLED = 'disabled'

SLOT_STATUSES = (FREE, PENDING, RESERVED, DISABLED)
OCCUPIED = (PENDING, RESERVED)

class Slot(db.Model):
    """One bookable time window for one room on one date."""
    __tablename__ = 'room_availability'
    __table_args__ = (
        db.UniqueConstraint('room_id', 'availability_date', 'time_slot', name='uq_room_date_slot'),
        # pending/reserved <=> bound to a student
        db.CheckConstraint(
            "(status IN ('pending', 'reserved') AND student_id IS NOT NULL) OR "
            "(status IN ('free', 'disabled') AND student_id IS NULL)",
            name='ck_slot_student_binding'
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)
    availability_date = db.Column(db.Date, nullable=False, index=True)
    time_slot = db.Column(db.String(11), nullable=False)  # e.g. "08:00-10:00"
    status = db.Column(db.String(10), nullable=False, default=FREE)
    student_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=True)
    booking_id = db.Column(db.Integer, db.ForeignKey('bookings.id'), nullable=True)

    room = db.relationship('Room', lazy=True)
    student = db.relationship('User', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'room_id': self.room_id,
            'availability_date': self.availability_date.isoformat(),
            'time_slot': self.time_slot,
            'status': self.status,
            'student_id': self.student_id,
            'booking_id': self.booking_id
        }
