"""
CLI Commands
Database setup and administrator account management (flask <command>)
"""

import click

from models import db, UserRole
from services import AuthService
from storage import get_storage, DuplicateError


def register_commands(app):
    """Attach the management commands to the app's CLI"""

    @app.cli.command('init-db')
    def init_db():
        """Create tables and seed the SDG goals."""
        storage = get_storage()
        if storage.name == 'database':
            db.create_all()
        seeded = storage.seed_sdg_goals()
        click.echo(f'Database ready ({seeded} SDG goals seeded)')

    @app.cli.command('create-admin')
    @click.option('--username', default='admin', show_default=True)
    @click.option('--email', required=True)
    @click.option('--full-name', default='Administrator', show_default=True)
    @click.option('--organization-id', type=int, default=None)
    @click.password_option()
    def create_admin(username, email, full_name, organization_id, password):
        """Create an administrator account."""
        if len(password) < 8:
            raise click.ClickException('Password must be at least 8 characters')

        storage = get_storage()
        if storage.get_user_by_username(username):
            raise click.ClickException(f'User "{username}" already exists')
        if storage.get_user_by_email(email.lower().strip()):
            raise click.ClickException(f'Email "{email}" already exists')

        try:
            user = AuthService.create_user({
                'username': username,
                'email': email,
                'full_name': full_name,
                'organization_id': organization_id,
                'role': UserRole.ADMIN.value,
                'password': password
            })
        except DuplicateError as e:
            raise click.ClickException(str(e))

        click.echo(f'Admin user "{user.username}" created (id {user.id})')

    @app.cli.command('reset-admin-password')
    @click.option('--username', default='admin', show_default=True)
    @click.password_option()
    def reset_admin_password(username, password):
        """Reset a user's password, unlock and reactivate the account."""
        if len(password) < 8:
            raise click.ClickException('Password must be at least 8 characters')

        user = AuthService.reset_password(username, password)
        if not user:
            raise click.ClickException(f'User "{username}" not found')

        click.echo(f'Password reset for "{user.username}"')
