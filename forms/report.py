"""
Report Forms
"""

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, AnyOf, ValidationError
from models import ReportType, ReportFormat
from .base import ApiForm, JSONField

TYPE_CHOICES = [t.value for t in ReportType]
FORMAT_CHOICES = [f.value for f in ReportFormat]


class ReportForm(ApiForm):
    """Report definition form"""

    name = StringField(
        'Report Name',
        validators=[DataRequired(message='Report name is required'), Length(max=200)]
    )

    description = TextAreaField('Description', validators=[Optional()])

    type = StringField(
        'Report Type',
        validators=[
            DataRequired(message='Report type is required'),
            AnyOf(TYPE_CHOICES, message='Type must be one of: %(values)s')
        ]
    )

    format = StringField(
        'Format',
        validators=[
            DataRequired(message='Format is required'),
            AnyOf(FORMAT_CHOICES, message='Format must be one of: %(values)s')
        ]
    )

    parameters = JSONField('Parameters', validators=[Optional()])

    def validate_parameters(self, field):
        if field.data is not None and not isinstance(field.data, dict):
            raise ValidationError('Parameters must be an object')
