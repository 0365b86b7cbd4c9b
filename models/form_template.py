"""
Form Models
Custom data collection forms and their submissions
"""

from datetime import datetime
from . import db


class FormTemplate(db.Model):
    """
    Form template
    `fields` is a JSON list of field definitions rendered by the client
    """
    __tablename__ = 'form_templates'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    fields = db.Column(db.JSON, nullable=False)

    # Foreign Keys
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<FormTemplate {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'fields': self.fields,
            'project_id': self.project_id,
            'created_by_id': self.created_by_id,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class FormSubmission(db.Model):
    """Filled-in form data"""
    __tablename__ = 'form_submissions'

    id = db.Column(db.Integer, primary_key=True)

    data = db.Column(db.JSON, nullable=False)

    # Foreign Keys
    form_template_id = db.Column(db.Integer, db.ForeignKey('form_templates.id', ondelete='CASCADE'), nullable=False, index=True)
    submitted_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<FormSubmission {self.id} for template {self.form_template_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'form_template_id': self.form_template_id,
            'data': self.data,
            'submitted_by_id': self.submitted_by_id,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None
        }
