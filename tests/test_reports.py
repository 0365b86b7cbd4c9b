import json

import pytest


@pytest.fixture
def make_report(contributor):
    def _make_report(report_format='csv', report_type='project', **extra):
        payload = {'name': 'Portfolio Overview', 'type': report_type, 'format': report_format}
        payload.update(extra)
        response = contributor.post('/api/reports', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make_report


def test_create_report(make_report):
    report = make_report(parameters={'category': 'Environmental'})

    assert report['type'] == 'project'
    assert report['format'] == 'csv'
    assert report['parameters'] == {'category': 'Environmental'}
    assert report['created_by_id'] is not None


def test_create_report_validation(contributor):
    response = contributor.post('/api/reports', json={
        'name': 'Bad', 'type': 'project', 'format': 'docx', 'parameters': ['not', 'an', 'object']
    })

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'format: Format must be one of' in errors
    assert 'parameters: Parameters must be an object' in errors


def test_viewer_cannot_create_reports(viewer):
    response = viewer.post('/api/reports', json={'name': 'Mine', 'type': 'project', 'format': 'pdf'})

    assert response.status_code == 403


def test_list_reports_by_type(contributor, make_report):
    make_report(report_type='project')
    make_report(report_type='sdg')

    assert len(contributor.get('/api/reports').get_json()) == 2
    sdg_reports = contributor.get('/api/reports?type=sdg').get_json()
    assert [r['type'] for r in sdg_reports] == ['sdg']


def test_get_report(contributor, make_report):
    report = make_report()

    assert contributor.get(f"/api/reports/{report['id']}").get_json() == report
    assert contributor.get('/api/reports/999').status_code == 404


def test_export_report_descriptor(viewer, make_report):
    report = make_report(report_format='pdf')

    response = viewer.get(f"/api/export-report/{report['id']}")

    assert response.status_code == 200
    body = response.get_json()
    assert body['report_id'] == report['id']
    assert body['format'] == 'pdf'
    assert body['download_url'] == f"/api/download-report/{report['id']}"


def test_export_is_audited(admin, make_report):
    report = make_report()
    admin.get(f"/api/export-report/{report['id']}")

    logs = admin.get('/api/audit-logs').get_json()

    assert logs[0]['action'] == 'data_export'
    assert logs[0]['entity_id'] == report['id']


def test_download_csv(contributor, project, make_report):
    report = make_report(report_format='csv')

    response = contributor.get(f"/api/download-report/{report['id']}")

    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert 'attachment' in response.headers['Content-Disposition']
    assert f"portfolio-overview-{report['id']}.csv" in response.headers['Content-Disposition']
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0].startswith('id,name,category,status')
    assert 'Solar Microgrid' in lines[1]


def test_download_json_applies_parameters(contributor, project, make_report):
    contributor.post('/api/projects', json={'name': 'Girls in STEM', 'category': 'Social'})
    report = make_report(report_format='json', parameters={'category': 'Social'})

    body = json.loads(contributor.get(f"/api/download-report/{report['id']}").get_data())

    assert body['row_count'] == 1
    assert body['rows'][0]['name'] == 'Girls in STEM'
    assert body['report']['id'] == report['id']


def test_download_impact_report(contributor, project, make_report):
    indicator = contributor.post('/api/indicators', json={
        'name': 'Energy generated', 'category': 'Environmental', 'data_type': 'number',
        'unit': 'MWh', 'project_id': project['id']
    }).get_json()
    contributor.post('/api/indicator-values', json={
        'indicator_id': indicator['id'], 'project_id': project['id'], 'value': 42, 'date': '2024-01-15'
    })
    report = make_report(report_format='json', report_type='impact')

    body = json.loads(contributor.get(f"/api/download-report/{report['id']}").get_data())

    assert body['row_count'] == 1
    row = body['rows'][0]
    assert row['indicator_name'] == 'Energy generated'
    assert row['unit'] == 'MWh'
    assert row['value'] == '42'


def test_download_sdg_report(contributor, project, make_report):
    contributor.post('/api/project-sdg-mappings', json={
        'project_id': project['id'], 'sdg_id': 13, 'impact_level': 'medium'
    })
    report = make_report(report_format='json', report_type='sdg')

    body = json.loads(contributor.get(f"/api/download-report/{report['id']}").get_data())

    assert body['rows'] == [{
        'sdg_number': 13,
        'sdg_name': 'Climate Action',
        'project_id': project['id'],
        'project_name': 'Solar Microgrid',
        'impact_level': 'medium',
        'notes': None
    }]


def test_download_excel(contributor, project, make_report):
    report = make_report(report_format='excel')

    response = contributor.get(f"/api/download-report/{report['id']}")

    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert response.get_data()[:2] == b'PK'


def test_download_pdf(contributor, project, make_report):
    report = make_report(report_format='pdf', description='Q1 & Q2 <draft>')

    response = contributor.get(f"/api/download-report/{report['id']}")

    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.get_data()[:4] == b'%PDF'


def test_download_empty_pdf(contributor, make_report):
    report = make_report(report_format='pdf', report_type='sdg')

    response = contributor.get(f"/api/download-report/{report['id']}")

    assert response.status_code == 200
    assert response.get_data()[:4] == b'%PDF'


def test_download_missing_report(contributor):
    assert contributor.get('/api/download-report/999').status_code == 404
