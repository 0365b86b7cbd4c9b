# blueprints/auth.py
"""
Authentication Blueprint
Registration, login, logout, current user and password change
"""

from flask import Blueprint, jsonify, current_app
from flask_login import current_user, login_required

from forms import RegisterForm, LoginForm, ChangePasswordForm
from services import AuthService
from storage import DuplicateError
from .common import json_body, invalid, server_error

auth_bp = Blueprint('auth', __name__, url_prefix='/api')


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a contributor account and start a session"""
    form = RegisterForm.from_json(json_body())
    if not form.validate():
        return invalid('registration', form)

    try:
        user = AuthService.register(
            username=form.username.data,
            password=form.password.data,
            full_name=form.full_name.data,
            email=form.email.data,
            organization_id=form.organization_id.data
        )
        return jsonify(user.to_dict()), 201
    except DuplicateError as e:
        return jsonify({'message': 'Invalid registration data', 'errors': str(e)}), 400
    except Exception as e:
        return server_error('register user', e)


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login"""
    form = LoginForm.from_json(json_body())
    if not form.validate():
        return invalid('login', form)

    try:
        result = AuthService.authenticate(form.username.data, form.password.data)
    except Exception as e:
        return server_error('log in', e)

    if not result['success']:
        return jsonify({'message': result['message']}), 401

    current_app.logger.info(f'User logged in: {result["user"].username}')
    return jsonify(result['user'].to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout"""
    if current_user.is_authenticated:
        AuthService.logout(current_user)
    return jsonify({'message': 'Logged out successfully'})


@auth_bp.route('/user')
@login_required
def user():
    """Currently logged-in user"""
    return jsonify(current_user.to_dict())


@auth_bp.route('/user/password', methods=['POST'])
@login_required
def change_password():
    """Change password for logged-in users"""
    form = ChangePasswordForm.from_json(json_body())
    if not form.validate():
        return invalid('password', form)

    try:
        result = AuthService.change_password(
            current_user,
            form.current_password.data,
            form.new_password.data
        )
    except Exception as e:
        return server_error('change password', e)

    if not result['success']:
        return jsonify({'message': result['message']}), 400
    return jsonify({'message': result['message']})
