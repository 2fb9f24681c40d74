from roomres.extensions import db
from datetime import datetime

PENDING = 'Pending'
APPROVED = 'Approved'
REJECTED = 'Rejected'

DECISIONS = (APPROVED, REJECTED)

class Booking(db.Model):
    __tablename__ = 'bookings'
    __table_args__ = (
        # One booking per student per day, whatever its status
        db.UniqueConstraint('student_id', 'booking_date', name='uq_booking_student_day'),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id'), nullable=False)

    booking_date = db.Column(db.Date, nullable=False, index=True)
    time_slot = db.Column(db.String(11), nullable=False)

    status = db.Column(db.String(10), nullable=False, default=PENDING) # Pending, Approved, Rejected

    booked_at = db.Column(db.DateTime, default=datetime.utcnow)
    approved_by = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)

    room = db.relationship('Room', lazy=True)
    student = db.relationship('User', foreign_keys=[student_id], lazy=True)
    approver = db.relationship('User', foreign_keys=[approved_by], lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'student_id': self.student_id,
            'room_id': self.room_id,
            'booking_date': self.booking_date.isoformat(),
            'time_slot': self.time_slot,
            'status': self.status,
            'booked_at': self.booked_at.isoformat() if self.booked_at else None,
            'approved_by': self.approved_by,
            'approved_at': self.approved_at.isoformat() if self.approved_at else None
        }
