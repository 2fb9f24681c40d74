from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash
from roomres.extensions import db
from roomres.models import User
from roomres.errors import Conflict, ValidationError


def user_type_for_email(email, domains=None):
    """Coarse user type from the email suffix: staff, lecturer or student."""
    if domains is None:
        domains = current_app.config['USER_TYPE_DOMAINS']
    for suffix, user_type in domains:
        if email.endswith(suffix):
            return user_type
    return 'student'


class AuthService:

    @staticmethod
    def verify_credentials(email, password):
        """Return {id, fullName, role} for valid credentials, None otherwise."""
        user = User.query.filter_by(email=email).first()
        if not user or not check_password_hash(user.password_hash, password):
            return None
        return {'id': user.id, 'fullName': user.full_name, 'role': user.role}

    @staticmethod
    def register_user(full_name, id_number, email, password):
        if not all([full_name, id_number, email, password]):
            raise ValidationError('Missing required fields')

        existing = User.query.filter(or_(User.id == id_number, User.email == email)).first()
        if existing:
            raise Conflict('User with this ID or email already exists')

        user = User(
            id=id_number,
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role='student'
        )
        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise Conflict('User with this ID or email already exists') from e
        return user
