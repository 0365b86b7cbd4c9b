from datetime import datetime, timedelta
from flask import current_app

from models import NotificationType, UserRole
from storage import get_storage

# ============================================================================
# NOTIFICATION SERVICE
# ============================================================================

class NotificationService:
    """Service for creating and managing user notifications"""

    @staticmethod
    def create_notification(user, title, message, notification_type=NotificationType.INFO):
        """
        Create a notification for a user

        Args:
            user: User object or user ID
            title: Notification title
            message: Notification message
            notification_type: NotificationType enum or its value

        Returns:
            Notification: Created notification object
        """
        if isinstance(notification_type, NotificationType):
            notification_type = notification_type.value

        try:
            user_id = user if isinstance(user, int) else user.id

            return get_storage().create_notification({
                'user_id': user_id,
                'title': title,
                'message': message,
                'type': notification_type
            })

        except Exception as e:
            current_app.logger.error(f'Error creating notification: {str(e)}')
            return None

    @staticmethod
    def _organization_admins(organization_id):
        return [
            user for user in get_storage().get_users()
            if user.is_active
            and user.role == UserRole.ADMIN.value
            and (organization_id is None or user.organization_id == organization_id)
        ]

    @staticmethod
    def notify_project_created(project, created_by):
        """Notify organization admins about a new project"""
        for admin in NotificationService._organization_admins(project.organization_id):
            if admin.id == created_by.id:
                continue
            NotificationService.create_notification(
                user=admin,
                title=f'New Project: {project.name}',
                message=f'{created_by.full_name} created the {project.category} project "{project.name}"',
                notification_type=NotificationType.INFO
            )

    @staticmethod
    def notify_esg_score_calculated(score, organization):
        """Notify organization admins when a new ESG score is available"""
        for admin in NotificationService._organization_admins(organization.id):
            NotificationService.create_notification(
                user=admin,
                title=f'ESG Score Updated: {score.period}',
                message=(
                    f'{organization.name} scored E {score.environmental_score}, '
                    f'S {score.social_score}, G {score.governance_score} for {score.period}'
                ),
                notification_type=NotificationType.ALERT
            )

    @staticmethod
    def notify_password_reset(user):
        NotificationService.create_notification(
            user=user,
            title='Password Reset',
            message='Your password was reset by an administrator. Please change it after signing in.',
            notification_type=NotificationType.ALERT
        )

    @staticmethod
    def get_user_notifications(user, unread_only=False):
        """Get user notifications, newest first"""
        notifications = get_storage().get_user_notifications(user.id)

        if unread_only:
            notifications = [n for n in notifications if not n.read]

        return notifications

    @staticmethod
    def mark_all_read(user):
        """Mark all notifications as read for a user. Returns the number changed."""
        return get_storage().mark_all_notifications_read(user.id)

    @staticmethod
    def cleanup_expired(retention_days=None):
        """Remove notifications older than the retention window"""
        if retention_days is None:
            retention_days = current_app.config.get('NOTIFICATION_RETENTION_DAYS', 90)

        cutoff = datetime.utcnow() - timedelta(days=retention_days)
        removed = get_storage().delete_notifications_before(cutoff)
        current_app.logger.info(f'Removed {removed} notifications older than {retention_days} days')
        return removed
