"""
Shared route helpers
Permission decorators and JSON response shapes used by every blueprint
"""

from functools import wraps

from flask import current_app, jsonify, request
from flask_login import current_user

from models import db
from services import AuthService


# ============================================================================
# DECORATORS
# ============================================================================

def permission_required(permission_code):
    """Decorator to require specific permission"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({'message': 'Unauthorized'}), 401

            if not AuthService.check_permission(current_user, permission_code):
                current_app.logger.warning(
                    f'Permission denied: {current_user.username} lacks {permission_code}'
                )
                return jsonify({'message': 'Forbidden'}), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """Decorator to require the admin role"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'message': 'Unauthorized'}), 401
        if not current_user.is_admin:
            return jsonify({'message': 'Forbidden'}), 403
        return f(*args, **kwargs)
    return decorated_function


# ============================================================================
# RESPONSES
# ============================================================================

def json_body():
    """Decoded JSON object of the request, or {}"""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def not_found(entity):
    return jsonify({'message': f'{entity} not found'}), 404


def invalid(entity, form):
    """400 response for a failed form"""
    return jsonify({'message': f'Invalid {entity} data', 'errors': form.error_string()}), 400


def server_error(action, error):
    """500 response; logs the error and rolls back any open transaction"""
    current_app.logger.error(f'Failed to {action}: {str(error)}')
    db.session.rollback()
    return jsonify({'message': f'Failed to {action}', 'error': str(error)}), 500


def int_arg(name):
    """Integer query-string argument, None when absent or malformed"""
    return request.args.get(name, type=int)
