"""
Authentication Forms
Registration, login and password change
"""

from wtforms import StringField, PasswordField, IntegerField
from wtforms.validators import (
    DataRequired, Email, Length, Optional, ValidationError, Regexp
)
from storage import get_storage
from .base import ApiForm

USERNAME_CHARS = Regexp(
    r'^[A-Za-z0-9_.-]+$',
    message='Username can only contain letters, numbers, dots, hyphens and underscores'
)


class RegisterForm(ApiForm):
    """User registration form"""

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
        validators=[
            DataRequired(message='Full name is required'),
            Length(max=200, message='Full name is too long')
        ]
    )

    email = StringField(
        'Email Address',
        validators=[
            DataRequired(message='Email address is required'),
            Email(message='Please enter a valid email address'),
            Length(max=120, message='Email address is too long')
        ]
    )

    organization_id = IntegerField('Organization', validators=[Optional()])

    def validate_username(self, field):
        """Check if username already exists"""
        if get_storage().get_user_by_username(field.data.strip()):
            raise ValidationError('Username already exists')

    def validate_email(self, field):
        """Check if email already exists"""
        if get_storage().get_user_by_email(field.data.lower().strip()):
            raise ValidationError('Email already registered')

    def validate_organization_id(self, field):
        if field.data is not None and not get_storage().get_organization(field.data):
            raise ValidationError('Organization not found')


class LoginForm(ApiForm):
    """User login form"""
    username = StringField(
        'Username',
        validators=[DataRequired(message='Username is required')]
    )

    password = PasswordField(
        'Password',
        validators=[DataRequired(message='Password is required')]
    )


class ChangePasswordForm(ApiForm):
    """Change password form for logged-in users"""
    current_password = PasswordField(
        'Current Password',
        validators=[DataRequired(message='Current password is required')]
    )

    new_password = PasswordField(
        'New Password',
        validators=[
            DataRequired(message='New password is required'),
            Length(min=8, max=128, message='Password must be at least 8 characters')
        ]
    )

    def validate_new_password(self, field):
        """Ensure new password is different from current"""
        if self.current_password.data and field.data == self.current_password.data:
            raise ValidationError('New password must be different from current password')
