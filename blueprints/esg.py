"""
ESG Blueprint
ESG scores, SDG goals and alignment, dashboard aggregates
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from forms import EsgScoreForm, EsgCalculationForm, ProjectSdgMappingForm
from models import AuditAction
from services import AuditService, EsgService, cache_service
from storage import get_storage
from .common import (
    permission_required, json_body, not_found, invalid, server_error, int_arg
)

esg_bp = Blueprint('esg', __name__, url_prefix='/api')


# ============================================================================
# ESG SCORES
# ============================================================================

@esg_bp.route('/esg-scores/<int:organization_id>')
@login_required
@permission_required('view_esg_scores')
def esg_scores(organization_id):
    """Score history (oldest first), or only the latest with ?latest=true"""
    storage = get_storage()

    try:
        if request.args.get('latest', '').lower() == 'true':
            score = storage.get_latest_esg_score(organization_id)
            if not score:
                return jsonify({'message': 'No ESG scores found for this organization'}), 404
            return jsonify(score.to_dict())

        history = storage.get_esg_score_history(organization_id)
        return jsonify([s.to_dict() for s in history])
    except Exception as e:
        return server_error('fetch ESG scores', e)


@esg_bp.route('/esg-scores', methods=['POST'])
@login_required
@permission_required('manage_esg_scores')
def create_esg_score():
    """Record an externally assessed ESG score"""
    form = EsgScoreForm.from_json(json_body())
    if not form.validate():
        return invalid('ESG score', form)

    try:
        score = get_storage().create_esg_score(form.payload())
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='esg_score',
            entity_id=score.id,
            details={'organization_id': score.organization_id, 'period': score.period}
        )
        cache_service.clear_dashboard_cache()
        return jsonify(score.to_dict()), 201
    except Exception as e:
        return server_error('create ESG score', e)


@esg_bp.route('/esg-scores/<int:organization_id>/calculate', methods=['POST'])
@login_required
@permission_required('manage_esg_scores')
def calculate_esg_score(organization_id):
    """Derive a new ESG score from project impact scores"""
    organization = get_storage().get_organization(organization_id)
    if not organization:
        return not_found('Organization')

    form = EsgCalculationForm.from_json(json_body())
    if not form.validate():
        return invalid('ESG calculation', form)

    try:
        score = EsgService.calculate_scores(organization, form.period.data, calculated_by=current_user)
        return jsonify(score.to_dict()), 201
    except ValueError as e:
        return jsonify({'message': str(e)}), 400
    except Exception as e:
        return server_error('calculate ESG score', e)


# ============================================================================
# SDG GOALS & MAPPINGS
# ============================================================================

@esg_bp.route('/sdg-goals')
def sdg_goals():
    """The 17 UN SDG goals (public)"""
    cached = cache_service.get_sdg_goals()
    if cached is not None:
        return jsonify(cached)

    try:
        goals = [g.to_dict() for g in get_storage().get_sdg_goals()]
        cache_service.set_sdg_goals(goals)
        return jsonify(goals)
    except Exception as e:
        return server_error('fetch SDG goals', e)


@esg_bp.route('/sdg-goals/<int:id>')
def sdg_goal(id):
    goal = get_storage().get_sdg_goal(id)
    if not goal:
        return not_found('SDG goal')
    return jsonify(goal.to_dict())


@esg_bp.route('/project-sdg-mappings', methods=['POST'])
@login_required
@permission_required('map_sdgs')
def create_sdg_mapping():
    """Map a project to an SDG goal"""
    form = ProjectSdgMappingForm.from_json(json_body())
    if not form.validate():
        return invalid('SDG mapping', form)

    data = form.payload()
    data['created_by_id'] = current_user.id

    try:
        mapping = get_storage().create_project_sdg_mapping(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='project_sdg_mapping',
            entity_id=mapping.id,
            details={'project_id': mapping.project_id, 'sdg_id': mapping.sdg_id}
        )
        cache_service.clear_dashboard_cache()
        return jsonify(mapping.to_dict()), 201
    except Exception as e:
        return server_error('create SDG mapping', e)


@esg_bp.route('/project-sdg-mappings/<int:project_id>')
@login_required
@permission_required('view_sdg_mappings')
def list_sdg_mappings(project_id):
    """SDG mappings of a project"""
    try:
        mappings = get_storage().get_project_sdg_mappings(project_id)
        return jsonify([m.to_dict() for m in mappings])
    except Exception as e:
        return server_error('fetch SDG mappings', e)


# ============================================================================
# DASHBOARD
# ============================================================================

@esg_bp.route('/dashboard')
@login_required
@permission_required('view_projects')
def dashboard():
    """Aggregated project, ESG and SDG figures"""
    organization_id = int_arg('organization_id') or int_arg('organizationId')

    try:
        return jsonify(EsgService.dashboard_summary(organization_id))
    except Exception as e:
        return server_error('build dashboard', e)
