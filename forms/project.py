"""
Project Forms
"""

from wtforms import StringField, TextAreaField, FloatField, IntegerField
from wtforms.validators import (
    DataRequired, Length, Optional, NumberRange, AnyOf, ValidationError
)
from models import ProjectCategory, ProjectStatus
from storage import get_storage
from .base import ApiForm, ISODateTimeField

CATEGORY_CHOICES = [c.value for c in ProjectCategory]
STATUS_CHOICES = [s.value for s in ProjectStatus]


class ProjectForm(ApiForm):
    """Project create/update form"""

    name = StringField(
        'Project Name',
        validators=[
            DataRequired(message='Project name is required'),
            Length(max=200, message='Project name is too long')
        ]
    )

    description = TextAreaField('Description', validators=[Optional()])

    location = StringField('Location', validators=[Optional(), Length(max=200)])

    category = StringField(
        'Category',
        validators=[
            DataRequired(message='Category is required'),
            AnyOf(CATEGORY_CHOICES, message='Category must be one of: %(values)s')
        ]
    )

    status = StringField(
        'Status',
        validators=[Optional(), AnyOf(STATUS_CHOICES, message='Status must be one of: %(values)s')]
    )

    start_date = ISODateTimeField('Start Date', validators=[Optional()])
    end_date = ISODateTimeField('End Date', validators=[Optional()])

    completion = FloatField(
        'Completion (%)',
        validators=[Optional(), NumberRange(min=0, max=100, message='Completion must be between 0 and 100')]
    )

    impact_score = FloatField(
        'Impact Score',
        validators=[Optional(), NumberRange(min=0, max=100, message='Impact score must be between 0 and 100')]
    )

    organization_id = IntegerField('Organization', validators=[Optional()])

    def __init__(self, project=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.project = project

    def _stored(self, name):
        return getattr(self.project, name, None) if self.project else None

    def validate_start_date(self, field):
        """Start date must not follow the stored end date on updates"""
        if 'end_date' in self._submitted:
            return
        end = self._stored('end_date')
        if field.data and end and end < field.data:
            raise ValidationError('End date must be after start date')

    def validate_end_date(self, field):
        """End date must not precede start date"""
        start = self.start_date.data if 'start_date' in self._submitted else self._stored('start_date')
        if field.data and start and field.data < start:
            raise ValidationError('End date must be after start date')

    def validate_organization_id(self, field):
        if field.data is not None and not get_storage().get_organization(field.data):
            raise ValidationError('Organization not found')
