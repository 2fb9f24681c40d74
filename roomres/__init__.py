from datetime import timedelta
import click
from flask import Flask
from roomres.config import DevelopmentConfig
from roomres.extensions import db, migrate

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Make sure every model is registered on the metadata
    from roomres import models  # noqa: F401

    # Register Blueprints
    from roomres.api.routes.main import main_bp
    from roomres.api.routes.auth import auth_bp
    from roomres.api.routes.rooms import rooms_bp
    from roomres.api.routes.bookings import bookings_bp
    from roomres.api.routes.dashboard import dashboard_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(rooms_bp, url_prefix='/api/rooms')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')

    register_commands(app)

    if app.config['RESET_SCHEDULER_ENABLED']:
        from roomres.services.reset_service import DailyResetScheduler
        scheduler = DailyResetScheduler(app)
        scheduler.start()
        app.extensions['reset_scheduler'] = scheduler

    return app

def register_commands(app):

    @app.cli.command('reset-slots')
    @click.option('--date', 'on_date', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
                  help='Date to reset (defaults to tomorrow).')
    def reset_slots(on_date):
        """Free every pending/reserved slot of a date."""
        from roomres.services.reset_service import reset_room_statuses
        from roomres.utils.clock import local_now

        target = on_date.date() if on_date else local_now().date() + timedelta(days=1)
        affected = reset_room_statuses(target)
        click.echo(f"Reset {affected} slots for {target}")
