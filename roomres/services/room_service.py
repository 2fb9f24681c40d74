from datetime import timedelta
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.models import Room
from roomres.services.slot_registry import SlotRegistry
from roomres.errors import NotFound, StorageError, ValidationError

class RoomService:

    @staticmethod
    def get_room(room_id):
        room = db.session.get(Room, room_id)
        if not room:
            raise NotFound('Room not found')
        return room

    @staticmethod
    def create_room(name, category, location, description, today):
        """Create a room and materialize its slots for today and tomorrow."""
        if not name or not category:
            raise ValidationError('Room name and category are required')

        room = Room(
            name=name,
            category=category,
            location=location,
            description=description,
            image_url=current_app.config['DEFAULT_ROOM_IMAGE']
        )
        try:
            db.session.add(room)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to create room') from e

        for on_date in (today, today + timedelta(days=1)):
            SlotRegistry.ensure_slots(room.id, on_date)

        current_app.logger.info(f"Room {room.id} ({room.name}) created")
        return room

    @staticmethod
    def update_room(room_id, data):
        room = RoomService.get_room(room_id)
        if 'name' in data:
            if not data['name']:
                raise ValidationError('Room name cannot be empty')
            room.name = data['name']
        if 'location' in data:
            room.location = data['location']
        if 'description' in data:
            room.description = data['description']
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to update room') from e
        return room
