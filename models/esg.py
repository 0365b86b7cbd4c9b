"""
ESG & SDG Models
Organization ESG scores, UN Sustainable Development Goals and project alignment
"""

from datetime import datetime
import enum
from . import db


class ImpactLevel(enum.Enum):
    """Strength of a project's contribution to an SDG"""
    WEAK = 'weak'
    MEDIUM = 'medium'
    STRONG = 'strong'


class EsgScore(db.Model):
    """
    ESG score snapshot for an organization and reporting period
    Each pillar is scored 0-100
    """
    __tablename__ = 'esg_scores'

    id = db.Column(db.Integer, primary_key=True)

    environmental_score = db.Column(db.Float, nullable=False)
    social_score = db.Column(db.Float, nullable=False)
    governance_score = db.Column(db.Float, nullable=False)
    period = db.Column(db.String(50), nullable=False)  # e.g. "Q3 2023"

    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), nullable=False, index=True)

    calculated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<EsgScore org={self.organization_id} {self.period}>'

    @property
    def overall_score(self):
        """Unweighted mean of the three pillars"""
        return round((self.environmental_score + self.social_score + self.governance_score) / 3, 2)

    def to_dict(self):
        return {
            'id': self.id,
            'organization_id': self.organization_id,
            'environmental_score': self.environmental_score,
            'social_score': self.social_score,
            'governance_score': self.governance_score,
            'overall_score': self.overall_score,
            'period': self.period,
            'calculated_at': self.calculated_at.isoformat() if self.calculated_at else None
        }


class SdgGoal(db.Model):
    """One of the 17 UN Sustainable Development Goals"""
    __tablename__ = 'sdg_goals'

    id = db.Column(db.Integer, primary_key=True)

    number = db.Column(db.Integer, unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(7))  # Hex color

    def __repr__(self):
        return f'<SdgGoal {self.number}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'name': self.name,
            'description': self.description,
            'color': self.color
        }


class ProjectSdgMapping(db.Model):
    """Links a project to an SDG goal with an impact level"""
    __tablename__ = 'project_sdg_mappings'

    id = db.Column(db.Integer, primary_key=True)

    impact_level = db.Column(db.String(10), nullable=False)
    notes = db.Column(db.Text)

    # Foreign Keys
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    sdg_id = db.Column(db.Integer, db.ForeignKey('sdg_goals.id'), nullable=False, index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    def __repr__(self):
        return f'<ProjectSdgMapping project={self.project_id} sdg={self.sdg_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'project_id': self.project_id,
            'sdg_id': self.sdg_id,
            'impact_level': self.impact_level,
            'notes': self.notes,
            'created_by_id': self.created_by_id
        }


# Seed data: (number, name, description, color)
SDG_GOALS = [
    (1, 'No Poverty', 'End poverty in all its forms everywhere', '#E5243B'),
    (2, 'Zero Hunger', 'End hunger, achieve food security and improved nutrition and promote sustainable agriculture', '#DDA63A'),
    (3, 'Good Health and Well-being', 'Ensure healthy lives and promote well-being for all at all ages', '#4C9F38'),
    (4, 'Quality Education', 'Ensure inclusive and equitable quality education and promote lifelong learning opportunities for all', '#C5192D'),
    (5, 'Gender Equality', 'Achieve gender equality and empower all women and girls', '#FF3A21'),
    (6, 'Clean Water and Sanitation', 'Ensure availability and sustainable management of water and sanitation for all', '#26BDE2'),
    (7, 'Affordable and Clean Energy', 'Ensure access to affordable, reliable, sustainable and modern energy for all', '#FCC30B'),
    (8, 'Decent Work and Economic Growth', 'Promote sustained, inclusive and sustainable economic growth, full and productive employment and decent work for all', '#A21942'),
    (9, 'Industry, Innovation and Infrastructure', 'Build resilient infrastructure, promote inclusive and sustainable industrialization and foster innovation', '#FD6925'),
    (10, 'Reduced Inequalities', 'Reduce inequality within and among countries', '#DD1367'),
    (11, 'Sustainable Cities and Communities', 'Make cities and human settlements inclusive, safe, resilient and sustainable', '#FD9D24'),
    (12, 'Responsible Consumption and Production', 'Ensure sustainable consumption and production patterns', '#BF8B2E'),
    (13, 'Climate Action', 'Take urgent action to combat climate change and its impacts', '#3F7E44'),
    (14, 'Life Below Water', 'Conserve and sustainably use the oceans, seas and marine resources for sustainable development', '#0A97D9'),
    (15, 'Life on Land', 'Protect, restore and promote sustainable use of terrestrial ecosystems', '#56C02B'),
    (16, 'Peace, Justice and Strong Institutions', 'Promote peaceful and inclusive societies for sustainable development', '#00689D'),
    (17, 'Partnerships for the Goals', 'Strengthen the means of implementation and revitalize the global partnership for sustainable development', '#19486A'),
]
