"""
Report Model
Saved report definitions; files are generated on download
"""

from datetime import datetime
import enum
from . import db


class ReportType(enum.Enum):
    PROJECT = 'project'
    IMPACT = 'impact'
    SDG = 'sdg'


class ReportFormat(enum.Enum):
    PDF = 'pdf'
    EXCEL = 'excel'
    CSV = 'csv'
    JSON = 'json'


class Report(db.Model):
    """
    Report definition
    `parameters` holds filters such as organization_id, project_id or category
    """
    __tablename__ = 'reports'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    type = db.Column(db.String(20), nullable=False, index=True)
    format = db.Column(db.String(20), nullable=False)
    parameters = db.Column(db.JSON)

    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Report {self.id}: {self.name} ({self.type}/{self.format})>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'type': self.type,
            'format': self.format,
            'parameters': self.parameters,
            'created_by_id': self.created_by_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
