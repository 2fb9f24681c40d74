from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from roomres.extensions import db

main_bp = Blueprint('main', __name__)

@main_bp.route('/api/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Health check database error: {e}")
        return jsonify({'status': 'Server is running', 'database': 'Disconnected', 'error': str(e)}), 500
    return jsonify({'status': 'Server is running', 'database': 'Connected'})
