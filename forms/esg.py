"""
ESG & SDG Forms
"""

from wtforms import StringField, TextAreaField, IntegerField, FloatField
from wtforms.validators import (
    DataRequired, InputRequired, Length, Optional, NumberRange, AnyOf, ValidationError
)
from models import ImpactLevel
from storage import get_storage
from .base import ApiForm, ISODateTimeField

IMPACT_LEVEL_CHOICES = [level.value for level in ImpactLevel]


def _score_field(label):
    return FloatField(
        label,
        validators=[
            InputRequired(message=f'{label} is required'),
            NumberRange(min=0, max=100, message=f'{label} must be between 0 and 100')
        ]
    )


class EsgScoreForm(ApiForm):
    """Manually recorded ESG score"""

    organization_id = IntegerField('Organization', validators=[InputRequired(message='Organization is required')])

    environmental_score = _score_field('Environmental score')
    social_score = _score_field('Social score')
    governance_score = _score_field('Governance score')

    period = StringField(
        'Period',
        validators=[DataRequired(message='Period is required'), Length(max=50)]
    )

    calculated_at = ISODateTimeField('Calculated At', validators=[Optional()])

    def validate_organization_id(self, field):
        if field.data is not None and not get_storage().get_organization(field.data):
            raise ValidationError('Organization not found')


class EsgCalculationForm(ApiForm):
    """Period label for a derived ESG score"""

    period = StringField(
        'Period',
        validators=[DataRequired(message='Period is required'), Length(max=50)]
    )


class ProjectSdgMappingForm(ApiForm):
    """Map a project to an SDG goal"""

    project_id = IntegerField('Project', validators=[InputRequired(message='Project is required')])

    sdg_id = IntegerField('SDG Goal', validators=[InputRequired(message='SDG goal is required')])

    impact_level = StringField(
        'Impact Level',
        validators=[
            DataRequired(message='Impact level is required'),
            AnyOf(IMPACT_LEVEL_CHOICES, message='Impact level must be one of: %(values)s')
        ],
        filters=[lambda value: value.strip().lower() if isinstance(value, str) else value]
    )

    notes = TextAreaField('Notes', validators=[Optional()])

    def validate_project_id(self, field):
        if field.data is not None and not get_storage().get_project(field.data):
            raise ValidationError('Project not found')

    def validate_sdg_id(self, field):
        if field.data is not None and not get_storage().get_sdg_goal(field.data):
            raise ValidationError('SDG goal not found')
