from conftest import PASSWORD


# ============================================================================
# ORGANIZATIONS
# ============================================================================

def test_create_organization(admin):
    response = admin.post('/api/organizations', json={
        'name': 'Green Transit Ltd', 'industry': 'Transport', 'logo': 'https://cdn.acme.org/logo.png'
    })

    assert response.status_code == 201
    organization = response.get_json()
    assert organization['name'] == 'Green Transit Ltd'
    assert admin.get(f"/api/organizations/{organization['id']}").get_json() == organization


def test_organization_validation(admin):
    response = admin.post('/api/organizations', json={'name': 'X', 'logo': 'not a url'})

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'name: Name must be between 2 and 200 characters' in errors
    assert 'logo: Invalid logo URL' in errors


def test_only_admins_create_organizations(contributor):
    assert contributor.post('/api/organizations', json={'name': 'Side Project'}).status_code == 403


def test_list_organizations(viewer, organization_id):
    organizations = viewer.get('/api/organizations').get_json()

    assert [o['id'] for o in organizations] == [organization_id]
    assert viewer.get('/api/organizations/999').status_code == 404


# ============================================================================
# USERS
# ============================================================================

def test_admin_creates_user_with_role(app, admin, organization_id):
    response = admin.post('/api/users', json={
        'username': 'rita',
        'password': PASSWORD,
        'full_name': 'Rita Reviewer',
        'email': 'Rita@Acme.org',
        'role': 'reviewer',
        'organization_id': organization_id
    })

    assert response.status_code == 201
    user = response.get_json()
    assert user['role'] == 'reviewer'
    assert user['email'] == 'rita@acme.org'

    client = app.test_client()
    assert client.post('/api/login', json={'username': 'rita', 'password': PASSWORD}).status_code == 200


def test_create_user_rejects_duplicates_and_bad_roles(admin):
    response = admin.post('/api/users', json={
        'username': 'admin',
        'password': PASSWORD,
        'full_name': 'Second Admin',
        'email': 'other@acme.org',
        'role': 'superuser'
    })

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'username: Username already exists' in errors
    assert 'role: Role must be one of' in errors


def test_create_user_applies_username_character_rule(admin):
    response = admin.post('/api/users', json={
        'username': 'rita reviewer!',
        'password': PASSWORD,
        'full_name': 'Rita Reviewer',
        'email': 'rita@acme.org',
        'role': 'reviewer'
    })

    assert response.status_code == 400
    assert 'username: Username can only contain letters' in response.get_json()['errors']


def test_user_listing_permissions(reviewer, contributor):
    assert contributor.get('/api/users').status_code == 403

    users = reviewer.get('/api/users').get_json()
    assert {u['username'] for u in users} == {'reviewer', 'contributor'}
    assert all('password_hash' not in u for u in users)


def test_user_updates_own_profile(contributor, make_user):
    me = contributor.get('/api/user').get_json()

    response = contributor.patch(f"/api/users/{me['id']}", json={'full_name': 'Connie Contributor'})
    assert response.status_code == 200
    assert response.get_json()['full_name'] == 'Connie Contributor'

    assert contributor.patch(f"/api/users/{me['id']}", json={'role': 'admin'}).status_code == 403

    other_id = make_user('olga')
    assert contributor.patch(f'/api/users/{other_id}', json={'full_name': 'Hijacked'}).status_code == 403


def test_user_cannot_change_own_password_or_organization(app, contributor, admin):
    me = contributor.get('/api/user').get_json()
    other_org = admin.post('/api/organizations', json={'name': 'Rival Holdings'}).get_json()

    response = contributor.patch(f"/api/users/{me['id']}", json={'password': 'Hijacked99'})
    assert response.status_code == 403

    response = contributor.patch(f"/api/users/{me['id']}", json={'organization_id': other_org['id']})
    assert response.status_code == 403

    assert contributor.get('/api/user').get_json()['organization_id'] == me['organization_id']
    login = app.test_client().post('/api/login', json={'username': 'contributor', 'password': 'Hijacked99'})
    assert login.status_code == 401


def test_admin_deactivates_user(app, admin, make_user):
    user_id = make_user('eve')

    response = admin.patch(f'/api/users/{user_id}', json={'is_active': False})
    assert response.status_code == 200
    assert response.get_json()['is_active'] is False

    login = app.test_client().post('/api/login', json={'username': 'eve', 'password': PASSWORD})
    assert login.status_code == 401


def test_admin_sets_password(app, admin, make_user):
    user_id = make_user('frank')

    response = admin.patch(f'/api/users/{user_id}', json={'password': 'Replaced789!'})
    assert response.status_code == 200

    login = app.test_client().post('/api/login', json={'username': 'frank', 'password': 'Replaced789!'})
    assert login.status_code == 200


def test_update_user_rejects_taken_email(admin, make_user):
    make_user('gina')
    user_id = make_user('hank')

    response = admin.patch(f'/api/users/{user_id}', json={'email': 'gina@acme.org'})

    assert response.status_code == 400
    assert 'email: Email already registered' in response.get_json()['errors']


def test_update_missing_user(admin):
    assert admin.patch('/api/users/999', json={'full_name': 'Nobody'}).status_code == 404


# ============================================================================
# AUDIT LOGS
# ============================================================================

def test_audit_logs_filtered_by_user(admin, contributor):
    me = contributor.get('/api/user').get_json()

    logs = admin.get(f"/api/audit-logs?user_id={me['id']}").get_json()

    assert logs
    assert all(log['user_id'] == me['id'] for log in logs)
    assert logs[0]['action'] == 'login'


def test_audit_logs_permission(contributor, reviewer):
    assert contributor.get('/api/audit-logs').status_code == 403
    assert reviewer.get('/api/audit-logs').status_code == 200


# ============================================================================
# NOTIFICATIONS
# ============================================================================

def test_notifications_lifecycle(admin, contributor, project_payload):
    contributor.post('/api/projects', json=project_payload)
    contributor.post('/api/projects', json=dict(project_payload, name='Wind Farm'))

    notifications = admin.get('/api/notifications').get_json()
    assert [n['title'] for n in notifications] == ['New Project: Wind Farm', 'New Project: Solar Microgrid']
    assert not any(n['read'] for n in notifications)

    assert admin.post(f"/api/notifications/{notifications[0]['id']}/read").status_code == 204
    unread = admin.get('/api/notifications?unread=true').get_json()
    assert [n['id'] for n in unread] == [notifications[1]['id']]

    response = admin.post('/api/notifications/read-all')
    assert response.get_json() == {'updated': 1}
    assert admin.get('/api/notifications?unread=true').get_json() == []


def test_cannot_read_other_users_notifications(admin, contributor, project_payload):
    contributor.post('/api/projects', json=project_payload)
    notification = admin.get('/api/notifications').get_json()[0]

    assert contributor.post(f"/api/notifications/{notification['id']}/read").status_code == 403
    assert contributor.post('/api/notifications/999/read').status_code == 404


def test_health_check(client, storage_backend):
    body = client.get('/api/health').get_json()

    assert body['status'] == 'healthy'
    assert body['storage'] == storage_backend
    assert body['cache'] is False


def test_unknown_route_returns_json(client):
    response = client.get('/api/does-not-exist')

    assert response.status_code == 404
    assert response.get_json() == {'message': 'Not found'}
