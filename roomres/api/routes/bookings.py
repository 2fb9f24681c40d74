from flask import Blueprint, jsonify, current_app
from roomres.services.booking_service import BookingService
from roomres.services.booking_ledger import BookingLedger
from roomres.services.report_service import ReportService
from roomres.utils.clock import local_now
from roomres.utils.decorators import json_body_required, reservation_errors

bookings_bp = Blueprint('bookings', __name__)

@bookings_bp.route('', methods=['POST'])
@reservation_errors
@json_body_required
def create_booking(data):
    booking = BookingService.book(
        student_id=data.get('studentId'),
        room_id=data.get('roomId'),
        time_slot=data.get('timeSlot'),
        now=local_now()
    )
    return jsonify({'success': True, 'message': 'Booking created', 'bookingId': booking.id}), 201

@bookings_bp.route('', methods=['GET'])
@reservation_errors
def get_bookings():
    return jsonify(ReportService.all_bookings())

@bookings_bp.route('/<int:booking_id>/status', methods=['PUT'])
@reservation_errors
@json_body_required
def update_booking_status(data, booking_id):
    booking = BookingService.decide(
        booking_id=booking_id,
        status=data.get('status'),
        approver_id=data.get('approvedBy'),
        now=local_now()
    )
    return jsonify({'success': True, 'message': 'Booking status updated', 'booking': booking.to_dict()})

@bookings_bp.route('/pending', methods=['GET'])
@reservation_errors
def get_pending_bookings():
    return jsonify(ReportService.pending_bookings(local_now().date()))

@bookings_bp.route('/history/<lecturer_id>', methods=['GET'])
@reservation_errors
def get_decision_history(lecturer_id):
    days = current_app.config['HISTORY_DAYS']
    return jsonify(ReportService.decision_history(lecturer_id, local_now(), days=days))

@bookings_bp.route('/student/<student_id>', methods=['GET'])
@reservation_errors
def get_student_bookings(student_id):
    return jsonify(ReportService.student_bookings(student_id))

@bookings_bp.route('/student/<student_id>/today', methods=['GET'])
@reservation_errors
def get_student_bookings_today(student_id):
    return jsonify(ReportService.student_bookings_on(student_id, local_now().date()))

@bookings_bp.route('/student/<student_id>/has-booked-today', methods=['GET'])
@reservation_errors
def has_booked_today(student_id):
    return jsonify({'hasBooked': BookingLedger.has_booking_on(student_id, local_now().date())})
