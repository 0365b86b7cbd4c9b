"""
Admin Forms
Organization and user management
"""

from wtforms import StringField, PasswordField, IntegerField, BooleanField
from wtforms.validators import (
    DataRequired, Email, Length, Optional, ValidationError, AnyOf, URL
)
from models import UserRole
from storage import get_storage
from .base import ApiForm
from .auth import USERNAME_CHARS

ROLE_CHOICES = [role.value for role in UserRole]


class OrganizationForm(ApiForm):
    """Organization create form"""

    name = StringField(
        'Organization Name',
        validators=[
            DataRequired(message='Organization name is required'),
            Length(min=2, max=200, message='Name must be between 2 and 200 characters')
        ]
    )

    industry = StringField(
        'Industry',
        validators=[Optional(), Length(max=100)]
    )

    logo = StringField(
        'Logo URL',
        validators=[Optional(), URL(message='Invalid logo URL'), Length(max=500)]
    )


class UserForm(ApiForm):
    """Admin user creation form"""

    username = StringField(
        'Username',
        validators=[
            DataRequired(message='Username is required'),
            Length(min=3, max=80, message='Username must be between 3 and 80 characters'),
            USERNAME_CHARS
        ]
    )

    password = PasswordField(
        'Password',
        validators=[
            DataRequired(message='Password is required'),
            Length(min=8, max=128, message='Password must be between 8 and 128 characters')
        ]
    )

    full_name = StringField(
        'Full Name',
        validators=[DataRequired(message='Full name is required'), Length(max=200)]
    )

    email = StringField(
        'Email',
        validators=[
            DataRequired(message='Email is required'),
            Email(message='Invalid email address'),
            Length(max=120)
        ]
    )

    role = StringField(
        'Role',
        validators=[Optional(), AnyOf(ROLE_CHOICES, message='Role must be one of: %(values)s')]
    )

    organization_id = IntegerField('Organization', validators=[Optional()])

    def validate_username(self, field):
        if get_storage().get_user_by_username(field.data.strip()):
            raise ValidationError('Username already exists')

    def validate_email(self, field):
        """Check if email already exists"""
        if get_storage().get_user_by_email(field.data.lower().strip()):
            raise ValidationError('Email already registered')

    def validate_organization_id(self, field):
        if field.data is not None and not get_storage().get_organization(field.data):
            raise ValidationError('Organization not found')


class UserEditForm(ApiForm):
    """User edit form, always used as a partial update"""

    full_name = StringField('Full Name', validators=[DataRequired(), Length(max=200)])

    email = StringField(
        'Email',
        validators=[
            DataRequired(message='Email is required'),
            Email(message='Invalid email address'),
            Length(max=120)
        ]
    )

    role = StringField(
        'Role',
        validators=[DataRequired(), AnyOf(ROLE_CHOICES, message='Role must be one of: %(values)s')]
    )

    organization_id = IntegerField('Organization', validators=[Optional()])

    is_active = BooleanField('Active')

    password = PasswordField(
        'New Password',
        validators=[Length(min=8, max=128, message='Password must be between 8 and 128 characters')]
    )

    def __init__(self, user_id=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id

    def validate_email(self, field):
        """Check if email is used by another account"""
        existing = get_storage().get_user_by_email(field.data.lower().strip())
        if existing and existing.id != self.user_id:
            raise ValidationError('Email already registered')

    def validate_organization_id(self, field):
        if field.data is not None and not get_storage().get_organization(field.data):
            raise ValidationError('Organization not found')
