import pytest

from app import create_app
from models import db
from services import AuthService
from storage import get_storage

PASSWORD = 'Secret123!'


@pytest.fixture(params=['memory', 'database'])
def storage_backend(request):
    return request.param


@pytest.fixture
def app(storage_backend):
    app = create_app('testing', test_config={'STORAGE_BACKEND': storage_backend})

    yield app

    with app.app_context():
        db.session.remove()
        if storage_backend == 'database':
            db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def organization_id(app):
    with app.app_context():
        return get_storage().create_organization({'name': 'Acme Renewables', 'industry': 'Energy'}).id


@pytest.fixture
def make_user(app, organization_id):
    """Create a user directly in storage and return its id"""
    def _make_user(username, role='contributor', organization_id=organization_id, **extra):
        with app.app_context():
            data = {
                'username': username,
                'email': f'{username}@acme.org',
                'full_name': username.capitalize(),
                'role': role,
                'organization_id': organization_id,
                'password': PASSWORD
            }
            data.update(extra)
            return AuthService.create_user(data).id
    return _make_user


@pytest.fixture
def login_as(app, make_user):
    """Return a test client logged in as a fresh user with the given role"""
    def _login_as(role, username=None):
        username = username or role
        make_user(username, role=role)
        client = app.test_client()
        response = client.post('/api/login', json={'username': username, 'password': PASSWORD})
        assert response.status_code == 200, response.get_json()
        return client
    return _login_as


@pytest.fixture
def admin(login_as):
    return login_as('admin')


@pytest.fixture
def contributor(login_as):
    return login_as('contributor')


@pytest.fixture
def reviewer(login_as):
    return login_as('reviewer')


@pytest.fixture
def viewer(login_as):
    return login_as('viewer')


@pytest.fixture
def project_payload(organization_id):
    return {
        'name': 'Solar Microgrid',
        'description': 'Rural electrification pilot',
        'location': 'Nakuru',
        'category': 'Environmental',
        'status': 'in_progress',
        'start_date': '2024-01-01',
        'end_date': '2024-12-31',
        'completion': 40,
        'impact_score': 80,
        'organization_id': organization_id
    }


@pytest.fixture
def project(contributor, project_payload):
    response = contributor.post('/api/projects', json=project_payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()
