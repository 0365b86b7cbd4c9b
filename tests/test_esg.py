import pytest


@pytest.fixture
def reviewer_in_org(login_as):
    return login_as('reviewer')


def create_project(client, name, category, impact_score=None, status='in_progress', completion=0):
    payload = {'name': name, 'category': category, 'status': status, 'completion': completion}
    if impact_score is not None:
        payload['impact_score'] = impact_score
    response = client.post('/api/projects', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


# ============================================================================
# SDG GOALS & MAPPINGS
# ============================================================================

def test_sdg_goals_are_public_and_seeded(client):
    response = client.get('/api/sdg-goals')

    assert response.status_code == 200
    goals = response.get_json()
    assert len(goals) == 17
    assert [g['number'] for g in goals] == list(range(1, 18))
    assert goals[0]['name'] == 'No Poverty'
    assert goals[12]['name'] == 'Climate Action'


def test_get_sdg_goal(client):
    goal = client.get('/api/sdg-goals/7').get_json()
    assert goal['number'] == 7
    assert goal['name'] == 'Affordable and Clean Energy'

    assert client.get('/api/sdg-goals/99').status_code == 404


def test_map_project_to_sdg(contributor, project):
    response = contributor.post('/api/project-sdg-mappings', json={
        'project_id': project['id'],
        'sdg_id': 7,
        'impact_level': 'Strong',
        'notes': 'Off-grid solar'
    })

    assert response.status_code == 201
    mapping = response.get_json()
    assert mapping['impact_level'] == 'strong'
    assert mapping['sdg_id'] == 7

    mappings = contributor.get(f"/api/project-sdg-mappings/{project['id']}").get_json()
    assert [m['id'] for m in mappings] == [mapping['id']]


def test_mapping_validation(contributor, project):
    response = contributor.post('/api/project-sdg-mappings', json={
        'project_id': project['id'], 'sdg_id': 42, 'impact_level': 'huge'
    })

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'sdg_id: SDG goal not found' in errors
    assert 'impact_level: Impact level must be one of' in errors


def test_viewer_cannot_map_sdgs(viewer, project):
    response = viewer.post('/api/project-sdg-mappings', json={
        'project_id': project['id'], 'sdg_id': 7, 'impact_level': 'weak'
    })

    assert response.status_code == 403


# ============================================================================
# ESG SCORES
# ============================================================================

def test_record_esg_score(admin, organization_id):
    response = admin.post('/api/esg-scores', json={
        'organization_id': organization_id,
        'environmental_score': 70,
        'social_score': 65,
        'governance_score': 81,
        'period': 'Q1 2024'
    })

    assert response.status_code == 201
    score = response.get_json()
    assert score['overall_score'] == 72.0
    assert score['period'] == 'Q1 2024'


def test_esg_score_range_is_enforced(admin, organization_id):
    response = admin.post('/api/esg-scores', json={
        'organization_id': organization_id,
        'environmental_score': 120,
        'social_score': 65,
        'governance_score': 81,
        'period': 'Q1 2024'
    })

    assert response.status_code == 400
    assert 'Environmental score must be between 0 and 100' in response.get_json()['errors']


def test_contributor_cannot_record_esg_scores(contributor, organization_id):
    response = contributor.post('/api/esg-scores', json={
        'organization_id': organization_id,
        'environmental_score': 70, 'social_score': 65, 'governance_score': 81,
        'period': 'Q1 2024'
    })

    assert response.status_code == 403


def test_latest_score_missing(viewer, organization_id):
    response = viewer.get(f'/api/esg-scores/{organization_id}?latest=true')

    assert response.status_code == 404
    assert response.get_json() == {'message': 'No ESG scores found for this organization'}
    assert viewer.get(f'/api/esg-scores/{organization_id}').get_json() == []


def test_score_history_and_latest(admin, organization_id):
    for period, calculated_at, environmental in (
        ('Q1 2024', '2024-03-31T00:00:00', 60),
        ('Q4 2023', '2023-12-31T00:00:00', 50),
    ):
        admin.post('/api/esg-scores', json={
            'organization_id': organization_id,
            'environmental_score': environmental,
            'social_score': 50,
            'governance_score': 50,
            'period': period,
            'calculated_at': calculated_at
        })

    history = admin.get(f'/api/esg-scores/{organization_id}').get_json()
    assert [s['period'] for s in history] == ['Q4 2023', 'Q1 2024']

    latest = admin.get(f'/api/esg-scores/{organization_id}?latest=true').get_json()
    assert latest['period'] == 'Q1 2024'
    assert latest['environmental_score'] == 60


def test_calculate_scores_from_projects(admin, contributor, organization_id):
    create_project(contributor, 'Solar Microgrid', 'Environmental', impact_score=80)
    create_project(contributor, 'Reforestation', 'Environmental', impact_score=60)
    create_project(contributor, 'Girls in STEM', 'Social', impact_score=50)
    create_project(contributor, 'Unscored governance work', 'Governance')

    response = admin.post(f'/api/esg-scores/{organization_id}/calculate', json={'period': 'Q2 2024'})

    assert response.status_code == 201
    score = response.get_json()
    assert score['environmental_score'] == 70.0
    assert score['social_score'] == 50.0
    assert score['governance_score'] == 0.0
    assert score['period'] == 'Q2 2024'


def test_calculation_keeps_previous_pillar_without_projects(admin, contributor, organization_id):
    admin.post('/api/esg-scores', json={
        'organization_id': organization_id,
        'environmental_score': 10, 'social_score': 20, 'governance_score': 45,
        'period': 'Q1 2024', 'calculated_at': '2024-03-31'
    })
    create_project(contributor, 'Solar Microgrid', 'Environmental', impact_score=90)

    score = admin.post(f'/api/esg-scores/{organization_id}/calculate', json={'period': 'Q2 2024'}).get_json()

    assert score['environmental_score'] == 90.0
    assert score['social_score'] == 20.0
    assert score['governance_score'] == 45.0


def test_calculation_needs_scored_projects(admin, contributor, organization_id):
    create_project(contributor, 'Unscored', 'Social')

    response = admin.post(f'/api/esg-scores/{organization_id}/calculate', json={'period': 'Q2 2024'})

    assert response.status_code == 400
    assert response.get_json()['message'] == 'No projects with an impact score for this organization'


def test_calculation_for_unknown_organization(admin):
    response = admin.post('/api/esg-scores/999/calculate', json={'period': 'Q2 2024'})

    assert response.status_code == 404
    assert response.get_json() == {'message': 'Organization not found'}


def test_calculation_requires_period(admin, organization_id):
    response = admin.post(f'/api/esg-scores/{organization_id}/calculate', json={})

    assert response.status_code == 400
    assert 'period: Period is required' in response.get_json()['errors']


def test_calculation_notifies_admins(admin, reviewer_in_org, contributor, organization_id):
    create_project(contributor, 'Solar Microgrid', 'Environmental', impact_score=80)

    assert reviewer_in_org.post(
        f'/api/esg-scores/{organization_id}/calculate', json={'period': 'Q2 2024'}
    ).status_code == 201

    titles = [n['title'] for n in admin.get('/api/notifications').get_json()]
    assert titles[0] == 'ESG Score Updated: Q2 2024'


# ============================================================================
# DASHBOARD
# ============================================================================

def test_dashboard_without_projects(viewer, organization_id):
    summary = viewer.get(f'/api/dashboard?organization_id={organization_id}').get_json()

    assert summary['total_projects'] == 0
    assert summary['projects_by_category'] == {'Environmental': 0, 'Social': 0, 'Governance': 0}
    assert summary['average_completion'] is None
    assert summary['latest_esg_score'] is None
    assert summary['recent_projects'] == []


def test_dashboard_aggregates_projects(contributor, viewer, organization_id):
    solar = create_project(contributor, 'Solar Microgrid', 'Environmental', impact_score=80, completion=40)
    create_project(contributor, 'Girls in STEM', 'Social', impact_score=60, status='completed', completion=100)
    contributor.post('/api/project-sdg-mappings', json={
        'project_id': solar['id'], 'sdg_id': 7, 'impact_level': 'strong'
    })

    summary = viewer.get(f'/api/dashboard?organizationId={organization_id}').get_json()

    assert summary['total_projects'] == 2
    assert summary['projects_by_status']['in_progress'] == 1
    assert summary['projects_by_status']['completed'] == 1
    assert summary['projects_by_status']['planned'] == 0
    assert summary['projects_by_category'] == {'Environmental': 1, 'Social': 1, 'Governance': 0}
    assert summary['average_completion'] == 70.0
    assert summary['average_impact_score'] == 70.0
    assert {row['category'] for row in summary['category_breakdown']} == {'Environmental', 'Social'}
    assert [(c['number'], c['projects']) for c in summary['sdg_coverage']] == [(7, 1)]
    assert len(summary['recent_projects']) == 2
