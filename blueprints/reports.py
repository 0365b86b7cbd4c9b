"""
Reports Blueprint
Report definitions, export descriptors and file downloads
"""

from flask import Blueprint, jsonify, request, send_file
from flask_login import login_required, current_user

from forms import ReportForm
from models import AuditAction
from services import AuditService, ReportService
from storage import get_storage
from .common import permission_required, json_body, not_found, invalid, server_error

reports_bp = Blueprint('reports', __name__, url_prefix='/api')


@reports_bp.route('/reports')
@login_required
@permission_required('view_reports')
def list_reports():
    """Reports, optionally filtered by ?type="""
    report_type = request.args.get('type')
    storage = get_storage()

    try:
        reports = storage.get_reports_by_type(report_type) if report_type else storage.get_reports()
        return jsonify([r.to_dict() for r in reports])
    except Exception as e:
        return server_error('fetch reports', e)


@reports_bp.route('/reports/<int:id>')
@login_required
@permission_required('view_reports')
def get_report(id):
    report = get_storage().get_report(id)
    if not report:
        return not_found('Report')
    return jsonify(report.to_dict())


@reports_bp.route('/reports', methods=['POST'])
@login_required
@permission_required('create_report')
def create_report():
    """Save a report definition"""
    form = ReportForm.from_json(json_body())
    if not form.validate():
        return invalid('report', form)

    data = form.payload()
    data['created_by_id'] = current_user.id

    try:
        report = get_storage().create_report(data)
        AuditService.log(
            AuditAction.CREATE,
            user=current_user,
            entity_type='report',
            entity_id=report.id,
            details={'name': report.name, 'type': report.type, 'format': report.format}
        )
        return jsonify(report.to_dict()), 201
    except Exception as e:
        return server_error('create report', e)


@reports_bp.route('/export-report/<int:id>')
@login_required
@permission_required('export_report')
def export_report(id):
    """Descriptor pointing at the download URL of a report"""
    report = get_storage().get_report(id)
    if not report:
        return not_found('Report')

    try:
        metadata = ReportService.export_metadata(report)
        AuditService.log(
            AuditAction.DATA_EXPORT,
            user=current_user,
            entity_type='report',
            entity_id=report.id,
            details={'format': report.format, 'download_url': metadata['download_url']}
        )
        return jsonify(metadata)
    except Exception as e:
        return server_error('export report', e)


@reports_bp.route('/download-report/<int:id>')
@login_required
@permission_required('export_report')
def download_report(id):
    """Generate and send the report file"""
    report = get_storage().get_report(id)
    if not report:
        return not_found('Report')

    try:
        output = ReportService.generate(report)
        AuditService.log(
            AuditAction.DATA_EXPORT,
            user=current_user,
            entity_type='report',
            entity_id=report.id,
            details={'format': report.format}
        )
        return send_file(
            output,
            mimetype=ReportService.mimetype(report),
            as_attachment=True,
            download_name=ReportService.filename(report)
        )
    except Exception as e:
        return server_error('generate report', e)
