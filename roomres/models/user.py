from roomres.extensions import db

class User(db.Model):
    __tablename__ = 'users'

    # Student / staff ID number
    id = db.Column(db.String(32), primary_key=True)
    full_name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), default='student')

    def to_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'email': self.email,
            'role': self.role
        }
