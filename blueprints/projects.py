"""
Projects Blueprint
Project CRUD
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from forms import ProjectForm
from models import AuditAction
from services import AuditService, NotificationService, cache_service
from storage import get_storage
from .common import (
    permission_required, admin_required, json_body, not_found, invalid,
    server_error, int_arg
)

projects_bp = Blueprint('projects', __name__, url_prefix='/api/projects')


def _serializable(changes):
    return {
        key: value.isoformat() if hasattr(value, 'isoformat') else value
        for key, value in changes.items()
    }


@projects_bp.route('')
@login_required
@permission_required('view_projects')
def list_projects():
    """List projects, filtered by category or organization"""
    category = request.args.get('category')
    organization_id = int_arg('organization_id') or int_arg('organizationId')
    storage = get_storage()

    try:
        if category:
            projects = storage.get_projects_by_category(category)
        elif organization_id:
            projects = storage.get_projects_by_organization(organization_id)
        else:
            projects = storage.get_projects()
        return jsonify([p.to_dict() for p in projects])
    except Exception as e:
        return server_error('fetch projects', e)


@projects_bp.route('/<int:id>')
@login_required
@permission_required('view_projects')
def get_project(id):
    project = get_storage().get_project(id)
    if not project:
        return not_found('Project')
    return jsonify(project.to_dict())


@projects_bp.route('', methods=['POST'])
@login_required
@permission_required('create_project')
def create_project():
    """Create new project owned by the current user"""
    form = ProjectForm.from_json(json_body())
    if not form.validate():
        return invalid('project', form)

    data = form.payload()
    data['created_by_id'] = current_user.id
    if data.get('organization_id') is None:
        data['organization_id'] = current_user.organization_id

    try:
        project = get_storage().create_project(data)

        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='project',
            entity_id=project.id,
            details={'name': project.name, 'category': project.category}
        )
        NotificationService.notify_project_created(project, current_user)
        cache_service.clear_dashboard_cache()

        return jsonify(project.to_dict()), 201
    except Exception as e:
        return server_error('create project', e)


@projects_bp.route('/<int:id>', methods=['PATCH'])
@login_required
@permission_required('edit_project')
def update_project(id):
    """Partial update of a project"""
    storage = get_storage()
    project = storage.get_project(id)
    if not project:
        return not_found('Project')

    form = ProjectForm.from_json(json_body(), partial=True, project=project)
    if not form.validate():
        return invalid('project', form)

    changes = form.payload()

    try:
        project = storage.update_project(id, changes)

        AuditService.log(
            AuditAction.UPDATE,
            user=current_user,
            entity_type='project',
            entity_id=id,
            details={'changes': _serializable(changes)}
        )
        cache_service.clear_dashboard_cache()

        return jsonify(project.to_dict())
    except Exception as e:
        return server_error('update project', e)


@projects_bp.route('/<int:id>', methods=['DELETE'])
@login_required
@admin_required
def delete_project(id):
    """Delete project (administrators only)"""
    storage = get_storage()
    project = storage.get_project(id)
    if not project:
        return not_found('Project')

    try:
        name = project.name
        storage.delete_project(id)

        AuditService.log(
            AuditAction.DELETE,
            user=current_user,
            entity_type='project',
            entity_id=id,
            details={'name': name}
        )
        cache_service.clear_dashboard_cache()

        return '', 204
    except Exception as e:
        return server_error('delete project', e)


@projects_bp.route('/<int:id>/indicator-values')
@login_required
@permission_required('view_indicators')
def project_indicator_values(id):
    """All indicator values recorded for a project"""
    storage = get_storage()
    if not storage.get_project(id):
        return not_found('Project')

    try:
        return jsonify([v.to_dict() for v in storage.get_indicator_values_by_project(id)])
    except Exception as e:
        return server_error('fetch indicator values', e)
