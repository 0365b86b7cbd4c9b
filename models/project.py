"""
Project Model
ESG initiatives tracked by an organization
"""

from datetime import datetime
import enum
from . import db


class ProjectCategory(enum.Enum):
    """ESG pillar a project belongs to"""
    ENVIRONMENTAL = 'Environmental'
    SOCIAL = 'Social'
    GOVERNANCE = 'Governance'


class ProjectStatus(enum.Enum):
    """Project lifecycle states"""
    PLANNED = 'planned'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    DELAYED = 'delayed'
    AT_RISK = 'at_risk'


class Project(db.Model):
    """
    Project model
    Holds metadata, progress and impact score of a single initiative
    """
    __tablename__ = 'projects'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Basic Information
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    location = db.Column(db.String(200))
    category = db.Column(db.String(20), nullable=False, index=True)
    status = db.Column(db.String(20), default=ProjectStatus.PLANNED.value, nullable=False)

    # Schedule
    start_date = db.Column(db.DateTime)
    end_date = db.Column(db.DateTime)

    # Progress (0-100)
    completion = db.Column(db.Float, default=0)
    impact_score = db.Column(db.Float)

    # Foreign Keys
    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    # Timestamps
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Project {self.id}: {self.name}>'

    def to_dict(self):
        """Convert project to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'location': self.location,
            'category': self.category,
            'status': self.status,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'completion': self.completion,
            'impact_score': self.impact_score,
            'organization_id': self.organization_id,
            'created_by_id': self.created_by_id,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None
        }
