"""
Forms Package
WTForms validation for every JSON payload the API accepts
"""

from .base import ApiForm, JSONField, ISODateTimeField

from .auth import (
    RegisterForm,
    LoginForm,
    ChangePasswordForm
)

from .admin import (
    OrganizationForm,
    UserForm,
    UserEditForm
)

from .project import ProjectForm

from .indicator import (
    IndicatorForm,
    IndicatorValueForm
)

from .form_template import (
    FormTemplateForm,
    FormSubmissionForm
)

from .esg import (
    EsgScoreForm,
    EsgCalculationForm,
    ProjectSdgMappingForm
)

from .report import ReportForm

__all__ = [
    'ApiForm',
    'JSONField',
    'ISODateTimeField',

    # Auth forms
    'RegisterForm',
    'LoginForm',
    'ChangePasswordForm',

    # Admin forms
    'OrganizationForm',
    'UserForm',
    'UserEditForm',

    # Project & indicator forms
    'ProjectForm',
    'IndicatorForm',
    'IndicatorValueForm',

    # Data collection forms
    'FormTemplateForm',
    'FormSubmissionForm',

    # ESG forms
    'EsgScoreForm',
    'EsgCalculationForm',
    'ProjectSdgMappingForm',

    # Report forms
    'ReportForm',
]
