from datetime import datetime
from io import BytesIO
import json
from xml.sax.saxutils import escape

import pandas as pd
from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from models import ReportType, ReportFormat
from storage import get_storage

# ============================================================================
# REPORT SERVICE
# ============================================================================

PROJECT_COLUMNS = [
    'id', 'name', 'category', 'status', 'location', 'completion',
    'impact_score', 'start_date', 'end_date', 'organization_id', 'last_updated'
]
IMPACT_COLUMNS = [
    'project_id', 'project_name', 'indicator_id', 'indicator_name',
    'category', 'unit', 'value', 'date'
]
SDG_COLUMNS = [
    'sdg_number', 'sdg_name', 'project_id', 'project_name', 'impact_level', 'notes'
]

MIMETYPES = {
    ReportFormat.PDF.value: 'application/pdf',
    ReportFormat.EXCEL.value: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    ReportFormat.CSV.value: 'text/csv',
    ReportFormat.JSON.value: 'application/json',
}

EXTENSIONS = {
    ReportFormat.PDF.value: 'pdf',
    ReportFormat.EXCEL.value: 'xlsx',
    ReportFormat.CSV.value: 'csv',
    ReportFormat.JSON.value: 'json',
}


class ReportService:
    """Service for generating reports and exports"""

    @staticmethod
    def export_metadata(report):
        """Descriptor returned by the export endpoint"""
        return {
            'report_id': report.id,
            'report_name': report.name,
            'report_type': report.type,
            'format': report.format,
            'download_url': f'/api/download-report/{report.id}',
            'generated_at': datetime.utcnow().isoformat()
        }

    @staticmethod
    def filename(report):
        slug = ''.join(c if c.isalnum() else '-' for c in report.name.lower()).strip('-') or 'report'
        return f'{slug}-{report.id}.{EXTENSIONS.get(report.format, "bin")}'

    @staticmethod
    def mimetype(report):
        return MIMETYPES.get(report.format, 'application/octet-stream')

    @staticmethod
    def _filtered_projects(parameters):
        storage = get_storage()
        projects = storage.get_projects()

        if parameters.get('organization_id') is not None:
            projects = [p for p in projects if p.organization_id == parameters['organization_id']]
        if parameters.get('project_id') is not None:
            projects = [p for p in projects if p.id == parameters['project_id']]
        if parameters.get('category'):
            projects = [p for p in projects if p.category == parameters['category']]
        if parameters.get('status'):
            projects = [p for p in projects if p.status == parameters['status']]

        return projects

    @staticmethod
    def build_frame(report):
        """
        Collect the rows of a report as a DataFrame

        Args:
            report: Report object; `parameters` may filter by organization_id,
                project_id, category or status

        Returns:
            pandas.DataFrame
        """
        storage = get_storage()
        parameters = report.parameters or {}
        projects = ReportService._filtered_projects(parameters)

        if report.type == ReportType.PROJECT.value:
            rows = [p.to_dict() for p in projects]
            return pd.DataFrame(rows, columns=PROJECT_COLUMNS)

        if report.type == ReportType.IMPACT.value:
            rows = []
            for project in projects:
                indicators = {i.id: i for i in storage.get_indicators_by_project(project.id)}
                for value in storage.get_indicator_values_by_project(project.id):
                    indicator = indicators.get(value.indicator_id) or storage.get_indicator(value.indicator_id)
                    rows.append({
                        'project_id': project.id,
                        'project_name': project.name,
                        'indicator_id': value.indicator_id,
                        'indicator_name': indicator.name if indicator else None,
                        'category': indicator.category if indicator else None,
                        'unit': indicator.unit if indicator else None,
                        'value': value.value,
                        'date': value.date.isoformat() if value.date else None
                    })
            return pd.DataFrame(rows, columns=IMPACT_COLUMNS)

        if report.type == ReportType.SDG.value:
            goals = {g.id: g for g in storage.get_sdg_goals()}
            rows = []
            for project in projects:
                for mapping in storage.get_project_sdg_mappings(project.id):
                    goal = goals.get(mapping.sdg_id)
                    rows.append({
                        'sdg_number': goal.number if goal else None,
                        'sdg_name': goal.name if goal else None,
                        'project_id': project.id,
                        'project_name': project.name,
                        'impact_level': mapping.impact_level,
                        'notes': mapping.notes
                    })
            df = pd.DataFrame(rows, columns=SDG_COLUMNS)
            return df.sort_values(['sdg_number', 'project_id']).reset_index(drop=True) if not df.empty else df

        raise ValueError(f'Unsupported report type: {report.type}')

    @staticmethod
    def generate(report):
        """
        Generate the report file in its configured format

        Args:
            report: Report object

        Returns:
            BytesIO: Report file
        """
        try:
            df = ReportService.build_frame(report)

            if report.format == ReportFormat.JSON.value:
                return ReportService._export_json(report, df)
            elif report.format == ReportFormat.CSV.value:
                return ReportService._export_csv(df)
            elif report.format == ReportFormat.EXCEL.value:
                return ReportService._export_excel(report, df)
            elif report.format == ReportFormat.PDF.value:
                return ReportService._export_pdf(report, df)
            else:
                raise ValueError(f'Unsupported format: {report.format}')

        except Exception as e:
            current_app.logger.error(f'Error generating report {report.id}: {str(e)}')
            raise

    @staticmethod
    def _export_json(report, df):
        """Export report rows as JSON"""
        data = {
            'report': report.to_dict(),
            'generated_at': datetime.utcnow().isoformat(),
            'row_count': int(len(df)),
            'rows': json.loads(df.to_json(orient='records'))
        }
        json_str = json.dumps(data, indent=2, default=str)
        return BytesIO(json_str.encode('utf-8'))

    @staticmethod
    def _export_csv(df):
        """Export report rows as CSV"""
        output = BytesIO()
        df.to_csv(output, index=False)
        output.seek(0)
        return output

    @staticmethod
    def _export_excel(report, df):
        """Export report rows as an Excel workbook"""
        output = BytesIO()
        sheet_name = (report.type or 'report').capitalize()[:31]
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        output.seek(0)
        return output

    @staticmethod
    def _export_pdf(report, df):
        """Export report rows as a PDF table"""
        output = BytesIO()
        styles = getSampleStyleSheet()
        doc = SimpleDocTemplate(
            output,
            pagesize=landscape(A4),
            rightMargin=36, leftMargin=36, topMargin=36, bottomMargin=36,
            title=report.name
        )

        story = [
            Paragraph(escape(report.name), styles['Title']),
            Paragraph(f'{report.type.capitalize()} report generated {datetime.utcnow():%Y-%m-%d %H:%M} UTC', styles['Normal']),
        ]
        if report.description:
            story.append(Paragraph(escape(report.description), styles['Normal']))
        story.append(Spacer(1, 12))

        if df.empty:
            story.append(Paragraph('No data available', styles['Italic']))
        else:
            cell_style = styles['BodyText']
            cell_style.fontSize = 8
            cell_style.leading = 10
            header = [str(column) for column in df.columns]
            body = [
                [Paragraph('' if pd.isna(value) else escape(str(value)), cell_style) for value in row]
                for row in df.itertuples(index=False)
            ]
            table = Table([header] + body, repeatRows=1)
            table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1b5e20')),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
                ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f1f8e9')]),
            ]))
            story.append(table)

        doc.build(story)
        output.seek(0)
        return output
