"""
Authentication Service
Handles registration, login, lockout and password management
"""
from datetime import datetime, timedelta

from flask import current_app, session
from flask_login import login_user, logout_user

from models import User, UserRole, AuditAction
from storage import get_storage

from .audit_service import AuditService
from .notification_service import NotificationService


class AuthService:
    """
    Authentication service for user login and session management
    """

    @staticmethod
    def register(username, password, full_name, email, organization_id=None):
        """
        Create a contributor account and log it in

        Returns:
            User: the new user
        """
        user = get_storage().create_user({
            'username': username.strip(),
            'password_hash': User.hash_password(password),
            'full_name': full_name.strip(),
            'email': email.lower().strip(),
            'organization_id': organization_id,
            'role': UserRole.CONTRIBUTOR.value
        })

        login_user(user)
        AuditService.log(AuditAction.REGISTER, user=user, entity_type='user', entity_id=user.id)
        current_app.logger.info(f'New user registered: {user.username}')
        return user

    @staticmethod
    def create_user(data, created_by=None):
        """
        Create a user on behalf of an administrator

        Args:
            data: validated UserForm payload (plain-text password under 'password')
            created_by: acting admin

        Returns:
            User: the new user
        """
        data = dict(data)
        password = data.pop('password')
        data['username'] = data['username'].strip()
        data['email'] = data['email'].lower().strip()
        data['password_hash'] = User.hash_password(password)

        user = get_storage().create_user(data)
        AuditService.log(
            AuditAction.CREATE,
            user=created_by,
            entity_type='user',
            entity_id=user.id,
            details={'username': user.username, 'role': user.role}
        )
        return user

    @staticmethod
    def authenticate(username, password):
        """
        Authenticate user with username and password

        Args:
            username: User name
            password: User password

        Returns:
            dict: Authentication result with status and user/message
        """
        storage = get_storage()
        user = storage.get_user_by_username(username.strip())

        if not user:
            current_app.logger.warning(f'Login attempt with unknown username: {username}')
            AuditService.log(
                AuditAction.LOGIN_FAILED,
                entity_type='user',
                details={'username': username, 'reason': 'unknown user'}
            )
            return {'success': False, 'message': 'Invalid username or password'}

        # Check if account is active
        if not user.is_active:
            AuditService.log(
                AuditAction.LOGIN_FAILED,
                user=user,
                entity_type='user',
                entity_id=user.id,
                details={'reason': 'account deactivated'}
            )
            return {'success': False, 'message': 'Your account has been deactivated. Please contact an administrator.'}

        # Check if account is locked
        now = datetime.utcnow()
        if user.is_locked(now):
            minutes_left = max(1, int((user.locked_until - now).total_seconds() // 60))
            AuditService.log(
                AuditAction.LOGIN_FAILED,
                user=user,
                entity_type='user',
                entity_id=user.id,
                details={'reason': 'account locked'}
            )
            return {
                'success': False,
                'message': f'Account locked due to too many failed attempts. Try again in {minutes_left} minutes.'
            }

        # Verify password
        if not user.check_password(password):
            AuthService._record_failed_attempt(user, now)
            AuditService.log(
                AuditAction.LOGIN_FAILED,
                user=user,
                entity_type='user',
                entity_id=user.id,
                details={'reason': 'invalid password'}
            )
            return {'success': False, 'message': 'Invalid username or password'}

        return AuthService._complete_login(user, now)

    @staticmethod
    def _record_failed_attempt(user, now):
        """Count a failed password and lock the account once the limit is reached"""
        attempts = (user.failed_login_attempts or 0) + 1
        update = {'failed_login_attempts': attempts}

        if attempts >= current_app.config.get('LOGIN_MAX_ATTEMPTS', 5):
            minutes = current_app.config.get('LOGIN_LOCKOUT_MINUTES', 30)
            update['locked_until'] = now + timedelta(minutes=minutes)
            update['failed_login_attempts'] = 0
            current_app.logger.warning(f'Account locked after {attempts} failed attempts: {user.username}')

        get_storage().update_user(user.id, update)

    @staticmethod
    def _complete_login(user, now):
        """Complete user login after successful authentication"""
        user = get_storage().update_user(user.id, {
            'last_login': now,
            'failed_login_attempts': 0,
            'locked_until': None
        })

        # Log user in with Flask-Login
        login_user(user)

        AuditService.log(AuditAction.LOGIN, user=user, entity_type='user', entity_id=user.id)

        return {
            'success': True,
            'message': 'Login successful',
            'user': user
        }

    @staticmethod
    def logout(user):
        """
        Logout user

        Args:
            user: User object
        """
        AuditService.log(AuditAction.LOGOUT, user=user, entity_type='user', entity_id=user.id)

        # Logout with Flask-Login
        logout_user()

        # Clear session
        session.clear()

    @staticmethod
    def change_password(user, current_password, new_password):
        """
        Change user password

        Args:
            user: User object
            current_password: Current password
            new_password: New password

        Returns:
            dict: Result
        """
        if not user.check_password(current_password):
            return {'success': False, 'message': 'Current password is incorrect'}

        get_storage().update_user(user.id, {
            'password_hash': User.hash_password(new_password),
            'failed_login_attempts': 0,
            'locked_until': None
        })

        AuditService.log(AuditAction.PASSWORD_RESET, user=user, entity_type='user', entity_id=user.id)

        return {'success': True, 'message': 'Password changed successfully'}

    @staticmethod
    def reset_password(username, new_password):
        """
        Reset a password without knowing the old one (CLI use)

        Returns:
            User or None when the user does not exist
        """
        storage = get_storage()
        user = storage.get_user_by_username(username)
        if not user:
            return None

        user = storage.update_user(user.id, {
            'password_hash': User.hash_password(new_password),
            'failed_login_attempts': 0,
            'locked_until': None,
            'is_active': True
        })

        AuditService.log(AuditAction.PASSWORD_RESET, entity_type='user', entity_id=user.id)
        NotificationService.notify_password_reset(user)
        return user

    @staticmethod
    def check_permission(user, permission_code):
        """
        Check if user has permission

        Args:
            user: User object
            permission_code: Permission code to check

        Returns:
            bool: True if user has permission
        """
        if not user or not user.is_authenticated or not user.is_active:
            return False

        return user.has_permission(permission_code)
