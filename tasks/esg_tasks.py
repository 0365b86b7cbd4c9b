"""
Celery Tasks for ESG Maintenance
"""

from contextlib import nullcontext

from celery import Celery
from flask import has_app_context
import logging

logger = logging.getLogger(__name__)

# Initialize Celery immediately with default config
celery = Celery('impact_track')
celery.conf.update(
    broker_url='redis://localhost:6379/0',
    result_backend='redis://localhost:6379/0',
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
)


def init_celery(app):
    """Point Celery at the broker configured for the Flask app"""
    celery.conf.update(
        broker_url=app.config.get('CELERY_BROKER_URL'),
        result_backend=app.config.get('CELERY_RESULT_BACKEND'),
    )
    return celery


def _app_context():
    """Reuse the active app context, or build an app when running in a worker"""
    if has_app_context():
        return nullcontext()

    from app import create_app
    return create_app().app_context()


@celery.task(name='tasks.recalculate_esg_scores')
def recalculate_esg_scores_task(period):
    """
    Background task to recalculate ESG scores of every organization for a period
    Organizations without scored projects are skipped
    """
    from services import EsgService
    from storage import get_storage

    with _app_context():
        organizations = get_storage().get_organizations()
        logger.info(f"Recalculating ESG scores of {len(organizations)} organizations for {period}")

        results = []
        for organization in organizations:
            try:
                score = EsgService.calculate_scores(organization, period)
                results.append({
                    'organization_id': organization.id,
                    'success': True,
                    'score_id': score.id
                })
            except ValueError as e:
                logger.info(f"Skipping organization {organization.id}: {e}")
                results.append({
                    'organization_id': organization.id,
                    'success': False,
                    'error': str(e)
                })

        return {
            'success': True,
            'period': period,
            'calculated': sum(1 for r in results if r['success']),
            'results': results
        }


@celery.task(name='tasks.cleanup_notifications')
def cleanup_notifications_task(retention_days=None):
    """Background task to drop notifications past the retention window"""
    from services import NotificationService

    with _app_context():
        removed = NotificationService.cleanup_expired(retention_days)
        return {'success': True, 'removed': removed}
