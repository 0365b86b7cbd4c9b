"""
Organization Model
Companies and agencies whose ESG initiatives are tracked
"""

from datetime import datetime
from . import db


class Organization(db.Model):
    """
    Organization model
    Owns projects, users and ESG scores
    """
    __tablename__ = 'organizations'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Basic Information
    name = db.Column(db.String(200), nullable=False, index=True)
    industry = db.Column(db.String(100))

    # Branding
    logo = db.Column(db.String(500))

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Organization {self.id}: {self.name}>'

    def to_dict(self):
        """Convert organization to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'industry': self.industry,
            'logo': self.logo,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
