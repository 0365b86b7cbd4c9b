"""
Supporting Models: Audit Logs, Notifications
"""

from datetime import datetime
import enum
from . import db


# ============================================================================
# AUDIT LOG MODEL
# ============================================================================

class AuditAction(enum.Enum):
    """Audit log action types"""
    # Authentication
    LOGIN = 'login'
    LOGOUT = 'logout'
    LOGIN_FAILED = 'login_failed'
    REGISTER = 'register'
    PASSWORD_RESET = 'password_reset'

    # CRUD Operations
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'

    # Data Operations
    CALCULATE = 'calculate'
    DATA_EXPORT = 'data_export'


class AuditLog(db.Model):
    """
    Audit log for tracking user activity
    """
    __tablename__ = 'audit_logs'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Action Details
    action = db.Column(db.String(30), nullable=False, index=True)
    entity_type = db.Column(db.String(50), index=True)  # project, indicator, report, etc.
    entity_id = db.Column(db.Integer)
    details = db.Column(db.JSON)

    # Timestamp
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Foreign Keys
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)

    def __repr__(self):
        return f'<AuditLog {self.action}: {self.entity_type}#{self.entity_id}>'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'details': self.details,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }


# ============================================================================
# NOTIFICATION MODEL
# ============================================================================

class NotificationType(enum.Enum):
    """Notification types"""
    REMINDER = 'reminder'
    ALERT = 'alert'
    INFO = 'info'


class Notification(db.Model):
    """
    User notifications
    In-app notification system
    """
    __tablename__ = 'notifications'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Content
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), default=NotificationType.INFO.value, nullable=False)

    # Status
    read = db.Column(db.Boolean, default=False, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Foreign Keys
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    def __repr__(self):
        return f'<Notification {self.title}>'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'message': self.message,
            'type': self.type,
            'read': self.read,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
