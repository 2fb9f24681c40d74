import traceback
from functools import wraps
from flask import request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db
from roomres.errors import ReservationError, StorageError

def json_body_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'error': 'Request body is required', 'kind': 'validation_error'}), 400
        return f(data, *args, **kwargs)

    return decorated

def reservation_errors(f):
    """Turn service errors into {'error', 'kind'} responses with their HTTP status."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ReservationError as e:
            return jsonify(e.to_dict()), e.status_code
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Database error in {f.__name__}: {e}\n{traceback.format_exc()}")
            error = StorageError('Server error')
            return jsonify(error.to_dict()), error.status_code
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error in {f.__name__}: {e}\n{traceback.format_exc()}")
            return jsonify({'error': 'Server error', 'kind': 'internal_error'}), 500

    return decorated
