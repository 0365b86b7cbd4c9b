"""
Data Collection Forms
Form templates and their submissions
"""

from wtforms import StringField, TextAreaField, IntegerField
from wtforms.validators import (
    DataRequired, InputRequired, Length, Optional, ValidationError
)
from storage import get_storage
from .base import ApiForm, JSONField

FIELD_KEYS = ('id', 'type', 'label')


class FormTemplateForm(ApiForm):
    """Form template builder"""

    name = StringField(
        'Form Name',
        validators=[DataRequired(message='Name is required'), Length(max=200)]
    )

    description = TextAreaField('Description', validators=[Optional()])

    project_id = IntegerField('Project', validators=[InputRequired(message='Project is required')])

    fields = JSONField('Fields', validators=[InputRequired(message='At least one field is required')])

    def validate_project_id(self, field):
        if field.data is not None and not get_storage().get_project(field.data):
            raise ValidationError('Project not found')

    def validate_fields(self, field):
        """Fields must be a non-empty list of {id, type, label, required?, options?}"""
        if not isinstance(field.data, list) or not field.data:
            raise ValidationError('At least one field is required')

        for index, definition in enumerate(field.data):
            if not isinstance(definition, dict):
                raise ValidationError(f'Field {index + 1} must be an object')
            missing = [key for key in FIELD_KEYS if not definition.get(key)]
            if missing:
                raise ValidationError(f'Field {index + 1} is missing: {", ".join(missing)}')
            if 'options' in definition and not isinstance(definition['options'], list):
                raise ValidationError(f'Field {index + 1} options must be a list')


class FormSubmissionForm(ApiForm):
    """Filled-in form data"""

    aliases = {'data': 'submission_data'}

    form_template_id = IntegerField(
        'Form Template',
        validators=[InputRequired(message='Form template is required')]
    )

    submission_data = JSONField('Data', validators=[InputRequired(message='Data is required')])

    def validate_form_template_id(self, field):
        if field.data is not None and not get_storage().get_form_template(field.data):
            raise ValidationError('Form template not found')

    def validate_submission_data(self, field):
        """Data must be an object holding every required template field"""
        if not isinstance(field.data, dict):
            raise ValidationError('Data must be an object')

        template = get_storage().get_form_template(self.form_template_id.data) if self.form_template_id.data else None
        if not template:
            return

        missing = [
            definition.get('label') or definition.get('id')
            for definition in template.fields or []
            if definition.get('required') and field.data.get(definition.get('id')) in (None, '')
        ]
        if missing:
            raise ValidationError(f'Missing required fields: {", ".join(missing)}')
