"""
Background Tasks
Celery tasks for periodic ESG maintenance
"""

from .esg_tasks import (
    celery,
    init_celery,
    recalculate_esg_scores_task,
    cleanup_notifications_task
)

__all__ = [
    'celery',
    'init_celery',
    'recalculate_esg_scores_task',
    'cleanup_notifications_task'
]
