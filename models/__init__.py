"""
Database Models Package
Centralized model definitions
"""

from flask_sqlalchemy import SQLAlchemy
db = SQLAlchemy()

# ---- Core models (NO services, NO app, NO current_app) ----
from .organization import Organization
from .permission import ROLE_PERMISSIONS, PERMISSIONS, UserRole, role_has_permission
from .user import User

from .project import Project, ProjectCategory, ProjectStatus
from .indicator import Indicator, IndicatorValue, IndicatorDataType
from .form_template import FormTemplate, FormSubmission
from .esg import EsgScore, SdgGoal, ProjectSdgMapping, ImpactLevel, SDG_GOALS
from .report import Report, ReportType, ReportFormat

# ---- Logging / audit models (SAFE ONLY) ----
from .support import (
    AuditLog,
    AuditAction,
    Notification,
    NotificationType
)

__all__ = [
    'db',
    'Organization',
    'ROLE_PERMISSIONS',
    'PERMISSIONS',
    'UserRole',
    'role_has_permission',
    'User',
    'Project',
    'ProjectCategory',
    'ProjectStatus',
    'Indicator',
    'IndicatorValue',
    'IndicatorDataType',
    'FormTemplate',
    'FormSubmission',
    'EsgScore',
    'SdgGoal',
    'ProjectSdgMapping',
    'ImpactLevel',
    'SDG_GOALS',
    'Report',
    'ReportType',
    'ReportFormat',
    'AuditLog',
    'AuditAction',
    'Notification',
    'NotificationType',
]
