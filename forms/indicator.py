"""
Indicator Forms
Indicator definitions and recorded values
"""

from wtforms import StringField, TextAreaField, IntegerField, BooleanField
from wtforms.validators import (
    DataRequired, InputRequired, Length, Optional, AnyOf, ValidationError
)
from models import IndicatorDataType, ProjectCategory
from storage import get_storage
from .base import ApiForm, ISODateTimeField

DATA_TYPE_CHOICES = [t.value for t in IndicatorDataType]
CATEGORY_CHOICES = [c.value for c in ProjectCategory]


class IndicatorForm(ApiForm):
    """Indicator create/update form"""

    name = StringField(
        'Indicator Name',
        validators=[DataRequired(message='Indicator name is required'), Length(max=200)]
    )

    description = TextAreaField('Description', validators=[Optional()])

    category = StringField(
        'Category',
        validators=[
            DataRequired(message='Category is required'),
            AnyOf(CATEGORY_CHOICES, message='Category must be one of: %(values)s')
        ]
    )

    unit = StringField('Unit', validators=[Optional(), Length(max=50)])

    data_type = StringField(
        'Data Type',
        validators=[
            DataRequired(message='Data type is required'),
            AnyOf(DATA_TYPE_CHOICES, message='Data type must be one of: %(values)s')
        ]
    )

    project_id = IntegerField('Project', validators=[Optional()])

    customizable = BooleanField('Customizable')

    def validate_project_id(self, field):
        if field.data is not None and not get_storage().get_project(field.data):
            raise ValidationError('Project not found')


class IndicatorValueForm(ApiForm):
    """Recorded value for an indicator"""

    indicator_id = IntegerField(
        'Indicator',
        validators=[InputRequired(message='Indicator is required')]
    )

    project_id = IntegerField(
        'Project',
        validators=[InputRequired(message='Project is required')]
    )

    value = StringField(
        'Value',
        validators=[InputRequired(message='Value is required')]
    )

    date = ISODateTimeField('Date', validators=[Optional()])

    def validate_indicator_id(self, field):
        if field.data is not None and not get_storage().get_indicator(field.data):
            raise ValidationError('Indicator not found')

    def validate_project_id(self, field):
        if field.data is not None and not get_storage().get_project(field.data):
            raise ValidationError('Project not found')
        indicator = get_storage().get_indicator(self.indicator_id.data) if self.indicator_id.data else None
        if indicator and indicator.project_id is not None and indicator.project_id != field.data:
            raise ValidationError('Indicator belongs to another project')

    def validate_value(self, field):
        """Value must parse as the indicator's data type"""
        indicator = get_storage().get_indicator(self.indicator_id.data) if self.indicator_id.data else None
        if not indicator:
            return
        try:
            indicator.parse_value(field.data)
        except ValueError:
            raise ValidationError(f'Value is not a valid {indicator.data_type}')
