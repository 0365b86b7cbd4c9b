"""
Indicators Blueprint
Indicator definitions, recorded values and value summaries
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from forms import IndicatorForm, IndicatorValueForm
from models import AuditAction
from services import AuditService, EsgService
from storage import get_storage
from .common import (
    permission_required, json_body, not_found, invalid, server_error, int_arg
)

indicators_bp = Blueprint('indicators', __name__, url_prefix='/api')


@indicators_bp.route('/indicators')
@login_required
@permission_required('view_indicators')
def list_indicators():
    """Indicators of a project or of a category"""
    project_id = int_arg('project_id') or int_arg('projectId')
    category = request.args.get('category')
    storage = get_storage()

    if not project_id and not category:
        return jsonify({'message': 'Must provide project_id or category'}), 400

    try:
        if project_id:
            indicators = storage.get_indicators_by_project(project_id)
        else:
            indicators = storage.get_indicators_by_category(category)
        return jsonify([i.to_dict() for i in indicators])
    except Exception as e:
        return server_error('fetch indicators', e)


@indicators_bp.route('/indicators/<int:id>')
@login_required
@permission_required('view_indicators')
def get_indicator(id):
    indicator = get_storage().get_indicator(id)
    if not indicator:
        return not_found('Indicator')
    return jsonify(indicator.to_dict())


@indicators_bp.route('/indicators', methods=['POST'])
@login_required
@permission_required('create_indicator')
def create_indicator():
    """Define a new indicator"""
    form = IndicatorForm.from_json(json_body())
    if not form.validate():
        return invalid('indicator', form)

    data = form.payload()
    data['created_by_id'] = current_user.id

    try:
        indicator = get_storage().create_indicator(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='indicator',
            entity_id=indicator.id,
            details={'name': indicator.name, 'project_id': indicator.project_id}
        )
        return jsonify(indicator.to_dict()), 201
    except Exception as e:
        return server_error('create indicator', e)


@indicators_bp.route('/indicators/<int:id>', methods=['PATCH'])
@login_required
@permission_required('edit_indicator')
def update_indicator(id):
    """Partial update of an indicator; fixed indicators only accept description changes"""
    storage = get_storage()
    indicator = storage.get_indicator(id)
    if not indicator:
        return not_found('Indicator')

    form = IndicatorForm.from_json(json_body(), partial=True)
    if not form.validate():
        return invalid('indicator', form)

    changes = form.payload()
    if not indicator.customizable and not current_user.is_admin and set(changes) - {'description'}:
        return jsonify({'message': 'Indicator is not customizable'}), 403

    try:
        indicator = storage.update_indicator(id, changes)
        AuditService.log(
            AuditAction.UPDATE,
            user=current_user,
            entity_type='indicator',
            entity_id=id,
            details={'changes': changes}
        )
        return jsonify(indicator.to_dict())
    except Exception as e:
        return server_error('update indicator', e)


@indicators_bp.route('/indicators/<int:id>/summary')
@login_required
@permission_required('view_indicators')
def indicator_summary(id):
    """Count, latest value and statistics of an indicator"""
    indicator = get_storage().get_indicator(id)
    if not indicator:
        return not_found('Indicator')

    try:
        return jsonify(EsgService.indicator_summary(indicator))
    except Exception as e:
        return server_error('summarize indicator', e)


# ============================================================================
# INDICATOR VALUES
# ============================================================================

@indicators_bp.route('/indicator-values', methods=['POST'])
@login_required
@permission_required('submit_indicator_values')
def create_indicator_value():
    """Record a value for an indicator"""
    form = IndicatorValueForm.from_json(json_body())
    if not form.validate():
        return invalid('indicator value', form)

    data = form.payload()
    data['submitted_by_id'] = current_user.id

    try:
        value = get_storage().create_indicator_value(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='indicator_value',
            entity_id=value.id,
            details={'indicator_id': value.indicator_id, 'value': value.value}
        )
        return jsonify(value.to_dict()), 201
    except Exception as e:
        return server_error('create indicator value', e)


@indicators_bp.route('/indicator-values/<int:indicator_id>')
@login_required
@permission_required('view_indicators')
def list_indicator_values(indicator_id):
    """Values recorded for an indicator, oldest first"""
    try:
        values = get_storage().get_indicator_values(indicator_id)
        return jsonify([v.to_dict() for v in values])
    except Exception as e:
        return server_error('fetch indicator values', e)
