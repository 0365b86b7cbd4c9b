"""
User Model
Handles user authentication and role assignment
"""

from datetime import datetime
from flask_login import UserMixin
from flask_bcrypt import generate_password_hash, check_password_hash
from .permission import UserRole, role_has_permission
from . import db


class User(UserMixin, db.Model):
    """
    User model with password hashing, lockout tracking and a single role
    """
    __tablename__ = 'users'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Authentication
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile
    full_name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)

    # Access
    role = db.Column(db.String(20), default=UserRole.CONTRIBUTOR.value, nullable=False)
    is_active = db.Column(db.Boolean, default=True, index=True)

    # Password Management
    failed_login_attempts = db.Column(db.Integer, default=0)
    locked_until = db.Column(db.DateTime)
    last_login = db.Column(db.DateTime)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Foreign Keys
    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), index=True)

    def __repr__(self):
        return f'<User {self.username}>'

    # Password Management
    @staticmethod
    def hash_password(password):
        """Hash a plain-text password"""
        return generate_password_hash(password).decode('utf-8')

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = User.hash_password(password)
        self.failed_login_attempts = 0
        self.locked_until = None

    def check_password(self, password):
        """Verify password"""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def is_locked(self, now=None):
        """Check if account is locked"""
        if not self.locked_until:
            return False
        return (now or datetime.utcnow()) < self.locked_until

    # Permissions
    def has_permission(self, permission_code):
        """Check if user has specific permission"""
        return role_has_permission(self.role, permission_code)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value

    # Serialization
    def to_dict(self, include_sensitive=False):
        """Convert user to dictionary (never includes the password hash)"""
        data = {
            'id': self.id,
            'username': self.username,
            'full_name': self.full_name,
            'email': self.email,
            'role': self.role,
            'organization_id': self.organization_id,
            'is_active': self.is_active,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

        if include_sensitive:
            data.update({
                'is_locked': self.is_locked(),
                'failed_login_attempts': self.failed_login_attempts
            })

        return data
