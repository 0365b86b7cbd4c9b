# blueprints/__init__.py
"""
Blueprints Package
Flask blueprints for modular route organization
"""

from .auth import auth_bp
from .admin import admin_bp
from .projects import projects_bp
from .indicators import indicators_bp
from .data_collection import data_collection_bp
from .esg import esg_bp
from .reports import reports_bp
from .notifications import notifications_bp

ALL_BLUEPRINTS = [
    auth_bp,
    admin_bp,
    projects_bp,
    indicators_bp,
    data_collection_bp,
    esg_bp,
    reports_bp,
    notifications_bp,
]

__all__ = [
    'auth_bp',
    'admin_bp',
    'projects_bp',
    'indicators_bp',
    'data_collection_bp',
    'esg_bp',
    'reports_bp',
    'notifications_bp',
    'ALL_BLUEPRINTS'
]
