"""
Notifications Blueprint
In-app notifications of the current user
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from services import NotificationService
from storage import get_storage
from .common import not_found, server_error

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


@notifications_bp.route('')
@login_required
def list_notifications():
    """Current user's notifications, newest first (?unread=true for unread only)"""
    unread_only = request.args.get('unread', '').lower() == 'true'
    try:
        notifications = NotificationService.get_user_notifications(current_user, unread_only=unread_only)
        return jsonify([n.to_dict() for n in notifications])
    except Exception as e:
        return server_error('fetch notifications', e)


@notifications_bp.route('/<int:id>/read', methods=['POST'])
@login_required
def mark_read(id):
    """Mark one notification as read"""
    storage = get_storage()
    notification = storage.get_notification(id)
    if not notification:
        return not_found('Notification')
    if notification.user_id != current_user.id:
        return jsonify({'message': 'Forbidden'}), 403

    try:
        storage.mark_notification_as_read(id)
        return '', 204
    except Exception as e:
        return server_error('mark notification as read', e)


@notifications_bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_read():
    """Mark every notification of the current user as read"""
    try:
        count = NotificationService.mark_all_read(current_user)
        return jsonify({'updated': count})
    except Exception as e:
        return server_error('mark notifications as read', e)
