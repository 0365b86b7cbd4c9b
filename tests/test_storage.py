from datetime import datetime, timedelta

import pytest

from models import User
from storage import get_storage, DuplicateError


@pytest.fixture
def storage(app):
    with app.app_context():
        yield get_storage()


def user_data(username, email=None):
    return {
        'username': username,
        'email': email or f'{username}@acme.org',
        'full_name': username.capitalize(),
        'password_hash': User.hash_password('Secret123!')
    }


def test_backend_matches_configuration(storage, storage_backend):
    assert storage.name == storage_backend


def test_sdg_seed_is_idempotent(storage):
    assert storage.seed_sdg_goals() == 0
    assert len(storage.get_sdg_goals()) == 17


def test_user_defaults(storage):
    user = storage.create_user(user_data('ivy'))

    assert user.id is not None
    assert user.role == 'contributor'
    assert user.is_active is True
    assert user.failed_login_attempts == 0
    assert user.created_at is not None
    assert storage.get_user_by_username('ivy').id == user.id
    assert storage.get_user_by_email('ivy@acme.org').id == user.id


def test_duplicate_username_rejected(storage):
    storage.create_user(user_data('jack'))

    with pytest.raises(DuplicateError):
        storage.create_user(user_data('jack', email='jack2@acme.org'))


def test_duplicate_email_rejected(storage):
    storage.create_user(user_data('kate'))

    with pytest.raises(DuplicateError):
        storage.create_user(user_data('kathy', email='kate@acme.org'))


def test_update_user_to_taken_email_rejected(storage):
    storage.create_user(user_data('liam'))
    mia = storage.create_user(user_data('mia'))

    with pytest.raises(DuplicateError):
        storage.update_user(mia.id, {'email': 'liam@acme.org'})


def test_update_project_refreshes_timestamp(storage):
    project = storage.create_project({'name': 'Wells', 'category': 'Social', 'last_updated': datetime(2020, 1, 1)})
    assert project.last_updated == datetime(2020, 1, 1)

    updated = storage.update_project(project.id, {'completion': 30})

    assert updated.completion == 30
    assert updated.last_updated > datetime(2020, 1, 1)
    assert storage.update_project(999, {'completion': 1}) is None


def test_projects_listed_in_creation_order(storage):
    for name, category in (('A', 'Social'), ('B', 'Governance'), ('C', 'Social')):
        storage.create_project({'name': name, 'category': category})

    assert [p.name for p in storage.get_projects()] == ['A', 'B', 'C']
    assert [p.name for p in storage.get_projects_by_category('Social')] == ['A', 'C']


def test_indicator_values_ordered_by_date_then_id(storage):
    project = storage.create_project({'name': 'Wells', 'category': 'Social'})
    indicator = storage.create_indicator({
        'name': 'Wells drilled', 'category': 'Social', 'data_type': 'number', 'project_id': project.id
    })
    same_day = datetime(2024, 5, 1)
    for value, date in (('3', same_day), ('1', datetime(2024, 1, 1)), ('4', same_day)):
        storage.create_indicator_value({
            'indicator_id': indicator.id, 'project_id': project.id, 'value': value, 'date': date
        })

    assert [v.value for v in storage.get_indicator_values(indicator.id)] == ['1', '3', '4']
    assert [v.value for v in storage.get_indicator_values_by_project(project.id)] == ['1', '3', '4']


def test_latest_esg_score_prefers_newest_then_highest_id(storage):
    organization = storage.create_organization({'name': 'Acme'})
    moment = datetime(2024, 6, 30)
    for period in ('first', 'second'):
        storage.create_esg_score({
            'organization_id': organization.id,
            'environmental_score': 1, 'social_score': 2, 'governance_score': 3,
            'period': period, 'calculated_at': moment
        })
    storage.create_esg_score({
        'organization_id': organization.id,
        'environmental_score': 1, 'social_score': 2, 'governance_score': 3,
        'period': 'older', 'calculated_at': moment - timedelta(days=90)
    })

    assert storage.get_latest_esg_score(organization.id).period == 'second'
    assert [s.period for s in storage.get_esg_score_history(organization.id)] == ['older', 'first', 'second']
    assert storage.get_latest_esg_score(999) is None


def test_delete_project_cascades(storage):
    project = storage.create_project({'name': 'Wells', 'category': 'Social'})
    indicator = storage.create_indicator({
        'name': 'Wells drilled', 'category': 'Social', 'data_type': 'number', 'project_id': project.id
    })
    storage.create_indicator_value({'indicator_id': indicator.id, 'project_id': project.id, 'value': '2'})
    template = storage.create_form_template({
        'name': 'Survey', 'project_id': project.id, 'fields': [{'id': 'a', 'type': 'text', 'label': 'A'}]
    })
    storage.create_form_submission({'form_template_id': template.id, 'data': {'a': 'x'}})
    storage.create_project_sdg_mapping({'project_id': project.id, 'sdg_id': 6, 'impact_level': 'weak'})

    assert storage.delete_project(project.id) is True

    assert storage.get_project(project.id) is None
    assert storage.get_indicator(indicator.id) is None
    assert storage.get_indicator_values(indicator.id) == []
    assert storage.get_form_template(template.id) is None
    assert storage.get_form_submissions(template.id) == []
    assert storage.get_project_sdg_mappings(project.id) == []
    assert storage.delete_project(project.id) is False


def test_notifications_newest_first_and_cleanup(storage):
    user = storage.create_user(user_data('nina'))
    storage.create_notification({
        'user_id': user.id, 'title': 'Old', 'message': 'm', 'type': 'info',
        'created_at': datetime(2020, 1, 1)
    })
    storage.create_notification({'user_id': user.id, 'title': 'New', 'message': 'm', 'type': 'info', 'read': True})

    notifications = storage.get_user_notifications(user.id)
    assert [n.title for n in notifications] == ['New', 'Old']
    assert not any(n.read for n in notifications)

    assert storage.delete_notifications_before(datetime(2021, 1, 1)) == 1
    assert [n.title for n in storage.get_user_notifications(user.id)] == ['New']


def test_audit_logs_newest_first(storage):
    storage.create_audit_log({'action': 'login', 'user_id': 1, 'timestamp': datetime(2024, 1, 1)})
    storage.create_audit_log({'action': 'logout', 'user_id': 1, 'timestamp': datetime(2024, 1, 2)})
    storage.create_audit_log({'action': 'login', 'user_id': 2, 'timestamp': datetime(2024, 1, 3)})

    assert [log.action for log in storage.get_audit_logs()] == ['login', 'logout', 'login']
    assert [log.action for log in storage.get_user_audit_logs(1)] == ['logout', 'login']
