"""
Base form for JSON request bodies
WTForms validation fed from a JSON object instead of a browser post
"""

from datetime import datetime

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import Field, DateTimeField

# Accepted by every date field: JS Date.toISOString(), plain ISO datetimes and dates
DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M',
    '%Y-%m-%d',
]


class JSONField(Field):
    """Holds a JSON object or list as-is"""

    def process_formdata(self, valuelist):
        if valuelist:
            self.data = valuelist[0]


class ISODateTimeField(DateTimeField):
    """DateTimeField accepting the common ISO 8601 variants"""

    def __init__(self, label=None, validators=None, format=None, **kwargs):
        super().__init__(label, validators, format=format or DATE_FORMATS, **kwargs)


def _coerce(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class ApiForm(FlaskForm):
    """
    Form validated from a JSON payload

    Only keys present in the payload are reported by `payload()`, so column
    defaults stay with the model. Forms built with partial=True skip the
    validators of fields the client did not send (PATCH semantics).
    """

    class Meta:
        csrf = False

    # JSON key -> field name, for keys that clash with Form attributes (e.g. "data")
    aliases = {}

    @classmethod
    def from_json(cls, payload, partial=False, **kwargs):
        """
        Build a form from a decoded JSON body

        Args:
            payload: dict from request.get_json(), may be None
            partial: validate only the submitted fields
            **kwargs: passed to the form constructor

        Returns:
            ApiForm: unvalidated form instance
        """
        if not isinstance(payload, dict):
            payload = {}

        pairs = [
            (cls.aliases.get(key, key), _coerce(value))
            for key, value in payload.items()
            if value is not None
        ]
        form = cls(formdata=MultiDict(pairs), **kwargs)
        form._submitted = {key for key, _ in pairs if key in form._fields}
        form._partial = partial
        return form

    def validate(self, extra_validators=None):
        valid = super().validate(extra_validators=extra_validators)
        if not getattr(self, '_partial', False):
            return valid

        for name, field in self._fields.items():
            if name not in self._submitted:
                field.errors = []
        return not any(field.errors for field in self._fields.values()) and not self.form_errors

    def _json_key(self, name):
        for key, field_name in self.aliases.items():
            if field_name == name:
                return key
        return name

    def payload(self):
        """Validated data for the submitted fields only, keyed as in the JSON body"""
        return {
            self._json_key(name): field.data
            for name, field in self._fields.items()
            if name in getattr(self, '_submitted', ())
        }

    def error_string(self):
        """Flatten form errors to 'field: message, field: message'"""
        messages = []
        for name, errors in self.errors.items():
            for error in errors:
                messages.append(f'{self._json_key(name) if name else "form"}: {error}')
        return ', '.join(messages)
