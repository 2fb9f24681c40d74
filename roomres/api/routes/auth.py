from flask import Blueprint, jsonify
from roomres.services.auth_service import AuthService, user_type_for_email
from roomres.utils.decorators import json_body_required, reservation_errors

auth_bp = Blueprint('auth', __name__)



@auth_bp.route('/login', methods=['POST'])
@reservation_errors
@json_body_required
def login(data):
    email = data.get('email')
    password = data.get('password')
    if not email or not password:
        return jsonify({'error': 'Email and password are required', 'kind': 'validation_error'}), 400
    if not isinstance(email, str) or not isinstance(password, str):
        return jsonify({'error': 'Invalid input format', 'kind': 'validation_error'}), 400

    user = AuthService.verify_credentials(email, password)
    if not user:
        return jsonify({'error': 'Invalid login credentials', 'kind': 'invalid_credentials'}), 401

    return jsonify({
        'uid': user['id'],
        'fullName': user['fullName'],
        'email': email,
        'role': user['role'],
        'userType': user_type_for_email(email)
    })

@auth_bp.route('/register', methods=['POST'])
@reservation_errors
@json_body_required
def register(data):
    AuthService.register_user(
        full_name=data.get('fullName'),
        id_number=data.get('idNumber'),
        email=data.get('email'),
        password=data.get('password')
    )
    return jsonify({'success': True, 'message': 'Registration successful'}), 201
