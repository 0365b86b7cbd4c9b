"""
Audit Service
Records who changed what through the API
"""

from flask import current_app

from models import AuditAction
from storage import get_storage


class AuditService:
    """Write-side helper around the audit log storage"""

    @staticmethod
    def log(action, user=None, entity_type=None, entity_id=None, details=None):
        """
        Create audit log entry

        Args:
            action: AuditAction or its string value
            user: acting User (None for anonymous actions)
            entity_type: e.g. 'project', 'indicator'
            entity_id: id of the affected record
            details: JSON-serializable dict

        Returns:
            AuditLog or None when writing the entry failed
        """
        if isinstance(action, AuditAction):
            action = action.value

        try:
            return get_storage().create_audit_log({
                'user_id': user.id if user else None,
                'action': action,
                'entity_type': entity_type,
                'entity_id': entity_id,
                'details': details or {}
            })
        except Exception as e:
            current_app.logger.error(f'Error writing audit log: {str(e)}')
            return None

    @staticmethod
    def get_logs(user_id=None):
        """Audit entries, newest first, optionally for a single user"""
        storage = get_storage()
        if user_id is not None:
            return storage.get_user_audit_logs(user_id)
        return storage.get_audit_logs()
