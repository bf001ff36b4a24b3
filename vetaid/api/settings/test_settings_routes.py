# vetaid/api/settings/test_settings_routes.py
import io
import json


def test_theme_defaults_to_light_and_persists(client):
    assert client.get('/api/settings/theme').get_json() == {'theme': 'light'}

    assert client.put('/api/settings/theme', json={'theme': 'dark'}).status_code == 200
    assert client.get('/api/settings/theme').get_json() == {'theme': 'dark'}


def test_invalid_theme_rejected(client):
    response = client.put('/api/settings/theme', json={'theme': 'blue'})
    assert response.status_code == 400
    assert 'theme' in response.get_json()['details']


def test_export_download(client, record_store):
    record_store.save('drugs', {'id': 'd1', 'name': 'Amoxicillin', 'dosages': [], 'routes': []})

    response = client.get('/api/settings/export')

    assert response.status_code == 200
    disposition = response.headers['Content-Disposition']
    assert 'infectious_butterfly_backup_' in disposition and disposition.endswith('.json')
    snapshot = json.loads(response.get_data(as_text=True))
    assert set(snapshot) == {'vaccinations', 'tests', 'drugs', 'prescriptions'}
    assert snapshot['drugs'][0]['id'] == 'd1'


def test_import_raw_json_replaces_collections(client, record_store):
    record_store.save('drugs', {'id': 'old', 'name': 'Old'})
    record_store.save('tests', {'id': 't1', 'name': 'Kept'})

    response = client.post(
        '/api/settings/import',
        data=json.dumps({'drugs': [{'id': 'new', 'name': 'New'}]}),
        content_type='application/json'
    )

    assert response.status_code == 200
    assert [d['id'] for d in record_store.get_all('drugs')] == ['new']
    assert [t['id'] for t in record_store.get_all('tests')] == ['t1']


def test_import_uploaded_file(client, record_store):
    payload = json.dumps({'vaccinations': [], 'prescriptions': [{'id': 'p1'}]}).encode('utf-8')

    response = client.post(
        '/api/settings/import',
        data={'file': (io.BytesIO(payload), 'infectious_butterfly_backup_2025-01-01.json')},
        content_type='multipart/form-data'
    )

    assert response.status_code == 200
    assert record_store.get_all('prescriptions') == [{'id': 'p1'}]


def test_import_failure_changes_nothing(client, record_store):
    record_store.save('drugs', {'id': 'old', 'name': 'Old'})

    response = client.post('/api/settings/import', data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'IMPORT_FAILED'
    assert [d['id'] for d in record_store.get_all('drugs')] == ['old']


def test_import_rejects_records_without_object_shape(client, record_store):
    response = client.post('/api/settings/import', data='{"drugs": [1]}', content_type='application/json')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'IMPORT_FAILED'
    assert record_store.get_all('drugs') == []

    created = client.post('/api/drugs/', json={
        'name': 'Amoxicillin',
        'dosages': [{'species': 'cow', 'dosage': 7}],
        'routes': ['oral'],
    })
    assert created.status_code == 201


def test_imported_partial_records_still_list(client):
    snapshot = {
        'vaccinations': [{'id': 'v1', 'animalId': 'A'}],
        'prescriptions': [{
            'id': 'p1', 'animalId': 'COW-002', 'species': 'cow', 'weight': 100,
            'drugs': [{'drugId': 'd1', 'route': 'nasal', 'calculatedDose': 700}],
        }],
    }
    response = client.post('/api/settings/import', data=json.dumps(snapshot), content_type='application/json')
    assert response.status_code == 200

    vaccinations = client.get('/api/vaccinations/')
    assert vaccinations.status_code == 200
    assert [v['id'] for v in vaccinations.get_json()] == ['v1']

    prescriptions = client.get('/api/prescriptions/')
    assert prescriptions.status_code == 200
    assert prescriptions.get_json()[0]['drugs'] == []
