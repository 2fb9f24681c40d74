from roomres import create_app, db
from roomres.config import Config
from roomres.models import User, Room
from werkzeug.security import generate_password_hash

class SeedConfig(Config):
    RESET_SCHEDULER_ENABLED = False

app = create_app(SeedConfig)

with app.app_context():
    db.create_all()

    # One account per user type
    users_data = [
        {"id": "S0001", "full_name": "Student One", "email": "student@lamduan.mfu.ac.th", "role": "student"},
        {"id": "L0001", "full_name": "Lecturer One", "email": "lecturer@mfu.ac.th", "role": "lecturer"},
        {"id": "T0001", "full_name": "Staff One", "email": "staff@mfu.th", "role": "staff"},
    ]
    for u_data in users_data:
        if not User.query.filter_by(email=u_data['email']).first():
            user = User(password_hash=generate_password_hash('password'), **u_data)
            db.session.add(user)
            print(f"User {user.email} created (password: password)")

    # Create Rooms
    rooms_data = [
        {"name": "Meeting Room 1", "category": "Meeting Room", "location": "E1 Building"},
        {"name": "Meeting Room 2", "category": "Meeting Room", "location": "E1 Building"},
        {"name": "Study Room A", "category": "Study Room", "location": "Library"},
        {"name": "Computer Lab 1", "category": "Computer Lab", "location": "C5 Building"}
    ]

    for r_data in rooms_data:
        if not Room.query.filter_by(name=r_data['name']).first():
            room = Room(image_url=app.config['DEFAULT_ROOM_IMAGE'], **r_data)
            db.session.add(room)
            print(f"Room {room.name} created.")

    db.session.commit()
    print("Database seeded successfully.")
