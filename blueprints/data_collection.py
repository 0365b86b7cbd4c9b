"""
Data Collection Blueprint
Custom form templates and submissions
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from forms import FormTemplateForm, FormSubmissionForm
from models import AuditAction
from services import AuditService
from storage import get_storage
from .common import permission_required, json_body, invalid, server_error

data_collection_bp = Blueprint('data_collection', __name__, url_prefix='/api')


@data_collection_bp.route('/form-templates', methods=['POST'])
@login_required
@permission_required('create_form_template')
def create_form_template():
    """Create a data collection form for a project"""
    form = FormTemplateForm.from_json(json_body())
    if not form.validate():
        return invalid('form template', form)

    data = form.payload()
    data['created_by_id'] = current_user.id

    try:
        template = get_storage().create_form_template(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='form_template',
            entity_id=template.id,
            details={'name': template.name, 'project_id': template.project_id}
        )
        return jsonify(template.to_dict()), 201
    except Exception as e:
        return server_error('create form template', e)


@data_collection_bp.route('/form-templates/<int:project_id>')
@login_required
@permission_required('view_forms')
def list_form_templates(project_id):
    """Form templates of a project"""
    try:
        templates = get_storage().get_form_templates_by_project(project_id)
        return jsonify([t.to_dict() for t in templates])
    except Exception as e:
        return server_error('fetch form templates', e)


@data_collection_bp.route('/form-submissions', methods=['POST'])
@login_required
@permission_required('submit_forms')
def create_form_submission():
    """Submit a filled-in form"""
    form = FormSubmissionForm.from_json(json_body())
    if not form.validate():
        return invalid('form submission', form)

    data = form.payload()
    data['submitted_by_id'] = current_user.id

    try:
        submission = get_storage().create_form_submission(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='form_submission',
            entity_id=submission.id,
            details={'form_template_id': submission.form_template_id}
        )
        return jsonify(submission.to_dict()), 201
    except Exception as e:
        return server_error('create form submission', e)


@data_collection_bp.route('/form-submissions/<int:template_id>')
@login_required
@permission_required('view_forms')
def list_form_submissions(template_id):
    """Submissions of a form template"""
    try:
        submissions = get_storage().get_form_submissions(template_id)
        return jsonify([s.to_dict() for s in submissions])
    except Exception as e:
        return server_error('fetch form submissions', e)
