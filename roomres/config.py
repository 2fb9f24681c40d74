import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///room_reservation.db'
    # Bounds every store round trip; a timeout surfaces as a StorageError
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Business Rules Defaults
    TIME_SLOTS = ['08:00-10:00', '10:00-12:00', '13:00-15:00', '15:00-17:00']
    TIMEZONE = os.environ.get('TIMEZONE', 'Asia/Bangkok')
    USER_TYPE_DOMAINS = [
        ('@mfu.th', 'staff'),
        ('@mfu.ac.th', 'lecturer'),
    ]
    DEFAULT_ROOM_IMAGE = 'assets/images/default_room.jpg'
    HISTORY_DAYS = 30

    # Daily reset of tomorrow's occupied slots
    RESET_SCHEDULER_ENABLED = os.environ.get('RESET_SCHEDULER_ENABLED', '1') == '1'
    RESET_STARTUP_DELAY = 5  # seconds
    RESET_INTERVAL_SECONDS = 24 * 60 * 60

class DevelopmentConfig(Config):
    DEBUG = True

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RESET_SCHEDULER_ENABLED = False

class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_timeout': 10,
    }
