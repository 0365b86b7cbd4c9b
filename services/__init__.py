"""
Services Package
Business logic layer for the application
"""

from .audit_service import AuditService
from .auth_service import AuthService
from .notification_service import NotificationService
from .report_service import ReportService
from .esg_service import EsgService
from .cache_service import CacheService, cache_service


__all__ = [
    'AuditService',
    'AuthService',
    'NotificationService',
    'ReportService',
    'EsgService',
    'CacheService',
    'cache_service'
]
