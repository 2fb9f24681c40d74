import pytest
from contextlib import ExitStack
from datetime import datetime
from unittest.mock import patch
from werkzeug.security import generate_password_hash
from roomres import create_app, db
from roomres.models import User, Room
from roomres.config import TestingConfig

# A Monday morning: the 08:00-10:00 slot is still open
NOW = datetime(2026, 3, 2, 9, 0)

CLOCK_TARGETS = [
    'roomres.api.routes.bookings.local_now',
    'roomres.api.routes.rooms.local_now',
    'roomres.api.routes.dashboard.local_now',
]

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def now():
    return NOW

@pytest.fixture
def frozen_clock():
    """Pin the clock the routes read to NOW."""
    with ExitStack() as stack:
        for target in CLOCK_TARGETS:
            stack.enter_context(patch(target, return_value=NOW))
        yield NOW

def make_user(user_id, name, email, role='student', password='password'):
    return User(id=user_id, full_name=name, email=email,
                password_hash=generate_password_hash(password), role=role)

@pytest.fixture
def init_data(app):
    s1 = make_user('S1', 'Student One', 's1@lamduan.mfu.ac.th')
    s2 = make_user('S2', 'Student Two', 's2@lamduan.mfu.ac.th')
    lecturer = make_user('L1', 'Lecturer One', 'l1@mfu.ac.th', role='lecturer')
    room1 = Room(name='Meeting Room 1', category='Meeting Room', location='E1')
    room2 = Room(name='Study Room A', category='Study Room', location='Library')
    db.session.add_all([s1, s2, lecturer, room1, room2])
    db.session.commit()
    return s1, s2, lecturer, room1, room2
