"""
User Model
"""

from flask_login import UserMixin

from weather_api.extensions import db
from weather_api.models.ids import new_object_id
from weather_api.utils.dates import utcnow, format_datetime

ROLES = ('Teacher', 'User', 'Sensor')


class User(UserMixin, db.Model):
    """Login-capable account with a coarse access role"""
    __tablename__ = 'users'
    
    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    # Opaque UUID issued on login, cleared on logout
    authentication_key = db.Column(db.String(36), unique=True, nullable=True, index=True)
    last_login = db.Column(db.DateTime, default=utcnow, index=True)
    
    def to_dict(self):
        """Public representation; the password hash is never exposed."""
        return {
            '_id': self.id,
            'email': self.email,
            'role': self.role,
            'createdAt': format_datetime(self.created_at),
            'authenticationKey': self.authentication_key,
            'lastLogin': format_datetime(self.last_login or self.created_at),
        }
    
    def __repr__(self):
        return f'<User {self.email} ({self.role})>'
