from datetime import datetime

from conftest import PASSWORD
from storage import get_storage
from tasks import recalculate_esg_scores_task, cleanup_notifications_task


# ============================================================================
# CLI COMMANDS
# ============================================================================

def test_init_db(app):
    result = app.test_cli_runner().invoke(args=['init-db'])

    assert result.exit_code == 0
    assert 'Database ready (0 SDG goals seeded)' in result.output


def test_create_admin(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['create-admin', '--email', 'root@acme.org', '--password', PASSWORD])

    assert result.exit_code == 0, result.output
    assert 'Admin user "admin" created' in result.output

    client = app.test_client()
    response = client.post('/api/login', json={'username': 'admin', 'password': PASSWORD})
    assert response.status_code == 200
    assert response.get_json()['role'] == 'admin'


def test_create_admin_rejects_duplicates(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['create-admin', '--email', 'root@acme.org', '--password', PASSWORD])

    result = runner.invoke(args=['create-admin', '--email', 'root@acme.org', '--password', PASSWORD])

    assert result.exit_code == 1
    assert 'already exists' in result.output


def test_create_admin_rejects_short_password(app):
    result = app.test_cli_runner().invoke(args=['create-admin', '--email', 'root@acme.org', '--password', 'short'])

    assert result.exit_code == 1
    assert 'at least 8 characters' in result.output


def test_reset_admin_password_unlocks_account(app, make_user):
    user_id = make_user('admin', role='admin', is_active=False, failed_login_attempts=3)

    result = app.test_cli_runner().invoke(args=['reset-admin-password', '--password', 'Rescued123!'])

    assert result.exit_code == 0, result.output
    assert 'Password reset for "admin"' in result.output

    client = app.test_client()
    assert client.post('/api/login', json={'username': 'admin', 'password': 'Rescued123!'}).status_code == 200

    notifications = client.get('/api/notifications').get_json()
    assert [n['title'] for n in notifications] == ['Password Reset']
    assert notifications[0]['user_id'] == user_id


def test_reset_password_for_unknown_user(app):
    result = app.test_cli_runner().invoke(
        args=['reset-admin-password', '--username', 'nobody', '--password', 'Rescued123!']
    )

    assert result.exit_code == 1
    assert 'User "nobody" not found' in result.output


# ============================================================================
# BACKGROUND TASKS
# ============================================================================

def test_recalculate_esg_scores_task(app, organization_id):
    with app.app_context():
        storage = get_storage()
        idle = storage.create_organization({'name': 'Dormant Co'})
        storage.create_project({
            'name': 'Solar Microgrid', 'category': 'Environmental',
            'impact_score': 64, 'organization_id': organization_id
        })

        result = recalculate_esg_scores_task('Q3 2024')

        assert result['success'] is True
        assert result['calculated'] == 1
        outcome = {r['organization_id']: r['success'] for r in result['results']}
        assert outcome == {organization_id: True, idle.id: False}

        latest = storage.get_latest_esg_score(organization_id)
        assert latest.period == 'Q3 2024'
        assert latest.environmental_score == 64.0


def test_cleanup_notifications_task(app, make_user):
    user_id = make_user('olive')

    with app.app_context():
        storage = get_storage()
        storage.create_notification({
            'user_id': user_id, 'title': 'Ancient', 'message': 'm', 'type': 'info',
            'created_at': datetime(2020, 1, 1)
        })
        storage.create_notification({'user_id': user_id, 'title': 'Fresh', 'message': 'm', 'type': 'info'})

        result = cleanup_notifications_task(retention_days=90)

        assert result == {'success': True, 'removed': 1}
        assert [n.title for n in storage.get_user_notifications(user_id)] == ['Fresh']
