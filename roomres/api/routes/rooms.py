from flask import Blueprint, request, jsonify
from roomres.models import Room
from roomres.services.availability_service import AvailabilityService
from roomres.services.report_service import ReportService
from roomres.services.room_service import RoomService
from roomres.services.slot_registry import SlotRegistry
from roomres.utils.clock import local_now, parse_date
from roomres.utils.decorators import json_body_required, reservation_errors
from roomres.errors import ValidationError

rooms_bp = Blueprint('rooms', __name__)

def _target_date():
    """Staff may act on another day with ?date=YYYY-MM-DD; defaults to today."""
    try:
        return parse_date(request.args.get('date')) or local_now().date()
    except ValueError:
        raise ValidationError('Invalid date, expected YYYY-MM-DD')

# --- Student views ---

@rooms_bp.route('', methods=['GET'])
@reservation_errors
def get_rooms():
    return jsonify([r.to_dict() for r in Room.query.order_by(Room.category, Room.name).all()])

@rooms_bp.route('/availability', methods=['GET'])
@reservation_errors
def get_rooms_availability():
    return jsonify(ReportService.rooms_availability(local_now().date()))

@rooms_bp.route('/<int:room_id>/time-slots', methods=['GET'])
@reservation_errors
def get_time_slots(room_id):
    RoomService.get_room(room_id)
    now = local_now()
    slots = SlotRegistry.ensure_slots(room_id, now.date(), now=now)
    return jsonify([s.to_dict() for s in slots])

# --- Lecturer / staff views ---

@rooms_bp.route('/all', methods=['GET'])
@rooms_bp.route('/lecturer', methods=['GET'])
@reservation_errors
def get_all_rooms():
    return jsonify(ReportService.rooms_with_status(_target_date()))

@rooms_bp.route('/lecturer/<int:room_id>', methods=['GET'])
@reservation_errors
def get_room_detail(room_id):
    room = RoomService.get_room(room_id)
    slots = SlotRegistry.ensure_slots(room_id, _target_date())
    return jsonify(ReportService.room_detail(room, slots))

# --- Staff management ---

@rooms_bp.route('', methods=['POST'])
@reservation_errors
@json_body_required
def create_room(data):
    room = RoomService.create_room(
        name=data.get('name'),
        category=data.get('category'),
        location=data.get('location'),
        description=data.get('description'),
        today=local_now().date()
    )
    return jsonify({'success': True, 'roomId': room.id, 'room': room.to_dict()}), 201

@rooms_bp.route('/<int:room_id>', methods=['PUT'])
@reservation_errors
@json_body_required
def update_room(data, room_id):
    room = RoomService.update_room(room_id, data)
    return jsonify({'success': True, 'room': room.to_dict()})

@rooms_bp.route('/<int:room_id>/disable', methods=['PATCH'])
@reservation_errors
def disable_room(room_id):
    affected = AvailabilityService.disable_room(room_id, _target_date(), today=local_now().date())
    return jsonify({'success': True, 'message': 'Room disabled successfully', 'affectedSlots': affected})

@rooms_bp.route('/<int:room_id>/enable', methods=['PATCH'])
@reservation_errors
def enable_room(room_id):
    affected = AvailabilityService.enable_room(room_id, _target_date())
    return jsonify({'success': True, 'message': 'Room enabled successfully', 'affectedSlots': affected})

@rooms_bp.route('/<int:room_id>/time-slots/<time_slot>/disable', methods=['PATCH'])
@reservation_errors
def disable_time_slot(room_id, time_slot):
    room = AvailabilityService.disable_slot(room_id, time_slot, _target_date(), today=local_now().date())
    return jsonify({'success': True, 'roomDisabled': room.is_disabled})

@rooms_bp.route('/<int:room_id>/time-slots/<time_slot>/enable', methods=['PATCH'])
@reservation_errors
def enable_time_slot(room_id, time_slot):
    room = AvailabilityService.enable_slot(room_id, time_slot, _target_date())
    return jsonify({'success': True, 'roomDisabled': room.is_disabled})
