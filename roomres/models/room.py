from roomres.extensions import db

class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    location = db.Column(db.String(128))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(255), default='assets/images/default_room.jpg')
    # Room-level override, independent of slot state
    is_disabled = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name or f'Room {self.id}',
            'category': self.category,
            'location': self.location or 'Campus Building',
            'description': self.description or f'Available {self.category.lower()} for bookings.',
            'image_url': self.image_url,
            'is_disabled': self.is_disabled
        }
