"""
Admin Blueprint
Organizations, user management and audit trail
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from forms import OrganizationForm, UserForm, UserEditForm
from models import AuditAction, User
from services import AuthService, AuditService
from storage import get_storage, DuplicateError
from .common import (
    permission_required, json_body, not_found, invalid, server_error, int_arg
)

admin_bp = Blueprint('admin', __name__, url_prefix='/api')


# ============================================================================
# ORGANIZATIONS
# ============================================================================

@admin_bp.route('/organizations')
@login_required
@permission_required('view_organizations')
def list_organizations():
    """List organizations"""
    try:
        return jsonify([o.to_dict() for o in get_storage().get_organizations()])
    except Exception as e:
        return server_error('fetch organizations', e)


@admin_bp.route('/organizations/<int:id>')
@login_required
@permission_required('view_organizations')
def get_organization(id):
    organization = get_storage().get_organization(id)
    if not organization:
        return not_found('Organization')
    return jsonify(organization.to_dict())


@admin_bp.route('/organizations', methods=['POST'])
@login_required
@permission_required('manage_organizations')
def create_organization():
    """Create organization"""
    form = OrganizationForm.from_json(json_body())
    if not form.validate():
        return invalid('organization', form)

    try:
        organization = get_storage().create_organization(form.payload())
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='organization',
            entity_id=organization.id,
            details={'name': organization.name}
        )
        return jsonify(organization.to_dict()), 201
    except Exception as e:
        return server_error('create organization', e)


# ============================================================================
# USERS
# ============================================================================

@admin_bp.route('/users')
@login_required
@permission_required('view_users')
def list_users():
    """List all users"""
    try:
        return jsonify([u.to_dict(include_sensitive=True) for u in get_storage().get_users()])
    except Exception as e:
        return server_error('fetch users', e)


@admin_bp.route('/users', methods=['POST'])
@login_required
@permission_required('manage_users')
def create_user():
    """Create new user with any role"""
    form = UserForm.from_json(json_body())
    if not form.validate():
        return invalid('user', form)

    try:
        user = AuthService.create_user(form.payload(), created_by=current_user)
        return jsonify(user.to_dict()), 201
    except DuplicateError as e:
        return jsonify({'message': 'Invalid user data', 'errors': str(e)}), 400
    except Exception as e:
        return server_error('create user', e)


@admin_bp.route('/users/<int:id>', methods=['PATCH'])
@login_required
def update_user(id):
    """
    Update a user

    Administrators may change anything; other users may edit their own
    profile but not their role, active flag, organization or password
    (passwords go through the change-password route).
    """
    storage = get_storage()
    user = storage.get_user(id)
    if not user:
        return not_found('User')

    is_manager = AuthService.check_permission(current_user, 'manage_users')
    if not is_manager and current_user.id != id:
        return jsonify({'message': 'Forbidden'}), 403

    form = UserEditForm.from_json(json_body(), partial=True, user_id=id)
    if not form.validate():
        return invalid('user', form)

    changes = form.payload()
    if not is_manager and ({'role', 'is_active', 'password', 'organization_id'} & changes.keys()):
        return jsonify({'message': 'Forbidden'}), 403

    if 'email' in changes:
        changes['email'] = changes['email'].lower().strip()
    if 'password' in changes:
        changes['password_hash'] = User.hash_password(changes.pop('password'))
        changes['failed_login_attempts'] = 0
        changes['locked_until'] = None

    try:
        user = storage.update_user(id, changes)
        AuditService.log(
            AuditAction.UPDATE,
            user=current_user,
            entity_type='user',
            entity_id=id,
            details={'fields': sorted(k for k in changes if k != 'password_hash')}
        )
        return jsonify(user.to_dict())
    except DuplicateError as e:
        return jsonify({'message': 'Invalid user data', 'errors': str(e)}), 400
    except Exception as e:
        return server_error('update user', e)


# ============================================================================
# AUDIT LOGS
# ============================================================================

@admin_bp.route('/audit-logs')
@login_required
@permission_required('view_audit_logs')
def audit_logs():
    """Audit trail, newest first, optionally filtered by user_id"""
    try:
        logs = AuditService.get_logs(user_id=int_arg('user_id'))
        return jsonify([log.to_dict() for log in logs])
    except Exception as e:
        return server_error('fetch audit logs', e)
