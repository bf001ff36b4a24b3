# vetaid/api/prescriptions/test_prescription_routes.py
import pytest


@pytest.fixture
def drug(client):
    response = client.post('/api/drugs/', json={
        'name': 'Amoxicillin',
        'dosages': [{'species': 'cow', 'dosage': 7}, {'species': 'dog', 'dosage': 10}],
        'routes': ['im', 'oral'],
    })
    return response.get_json()


@pytest.fixture
def prescription(client, drug):
    response = client.post('/api/prescriptions/', json={
        'animalId': 'COW-001',
        'species': 'cow',
        'weight': 250,
        'drugs': [{'drugId': drug['id']}],
    })
    assert response.status_code == 201
    return response.get_json()


def test_calculate_weight_based_dose(client, drug):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'cow', 'weight': 250, 'drugs': [{'drugId': drug['id']}],
    })

    line = response.get_json()['drugs'][0]
    assert response.status_code == 200
    assert line['calculatedDose'] == 1750
    assert line['dosage'] == 7
    assert line['route'] == 'oral'


def test_calculate_with_chosen_route(client, drug):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'dog', 'weight': 12.5, 'drugs': [{'drugId': drug['id'], 'route': 'im'}],
    })
    line = response.get_json()['drugs'][0]
    assert line['route'] == 'im'
    assert line['calculatedDose'] == 125


def test_route_not_offered_is_lookup_miss(client, drug):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'cow', 'weight': 100, 'drugs': [{'drugId': drug['id'], 'route': 'iv'}],
    })
    assert response.status_code == 422


def test_species_without_dosage_is_lookup_miss(client, drug):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'horse', 'weight': 400, 'drugs': [{'drugId': drug['id']}],
    })
    assert response.status_code == 422
    assert response.get_json()['error_code'] == 'DOSAGE_NOT_AVAILABLE'


def test_same_drug_twice_rejected(client, drug):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'cow', 'weight': 100, 'drugs': [{'drugId': drug['id']}, {'drugId': drug['id']}],
    })
    assert response.status_code == 400
    assert 'drugs' in response.get_json()['details']


def test_unknown_drug_returns_404(client):
    response = client.post('/api/prescriptions/calculate', json={
        'species': 'cow', 'weight': 100, 'drugs': [{'drugId': 'missing'}],
    })
    assert response.status_code == 404


def test_create_requires_animal_weight_and_drugs(client):
    response = client.post('/api/prescriptions/', json={'species': 'cow', 'weight': 0, 'drugs': []})

    details = response.get_json()['details']
    assert response.status_code == 400
    assert {'animalId', 'weight', 'drugs'} <= set(details)


def test_create_freezes_calculated_dose(client, drug, prescription):
    assert prescription['drugs'] == [{'drugId': drug['id'], 'route': 'oral', 'calculatedDose': 1750}]
    assert prescription['date'].endswith('Z')

    client.put(f"/api/drugs/{drug['id']}", json={
        'name': 'Amoxicillin',
        'dosages': [{'species': 'cow', 'dosage': 10}],
        'routes': ['im', 'oral'],
    })

    stored = client.get(f"/api/prescriptions/{prescription['id']}").get_json()
    assert stored['drugs'][0]['calculatedDose'] == 1750


def test_deleting_drug_leaves_prescription(client, drug, prescription):
    assert client.delete(f"/api/drugs/{drug['id']}?confirm=true").status_code == 204

    stored = client.get(f"/api/prescriptions/{prescription['id']}")
    assert stored.status_code == 200
    assert stored.get_json()['drugs'][0]['drugId'] == drug['id']

    printed = client.get(f"/api/prescriptions/{prescription['id']}/print")
    html = printed.get_data(as_text=True)
    assert printed.status_code == 200
    assert 'Unknown drug' in html
    assert '1750.00 mg' in html


def test_print_summary(client, prescription):
    html = client.get(f"/api/prescriptions/{prescription['id']}/print").get_data(as_text=True)
    assert 'COW-001' in html
    assert 'Amoxicillin' in html
    assert '7 mg/kg' in html
    assert 'Oral' in html
    assert '1750.00 mg' in html


def test_print_keeps_rate_after_drug_edit(client, drug, prescription):
    client.put(f"/api/drugs/{drug['id']}", json={
        'name': 'Amoxicillin',
        'dosages': [{'species': 'cow', 'dosage': 10}],
        'routes': ['im', 'oral'],
    })

    html = client.get(f"/api/prescriptions/{prescription['id']}/print").get_data(as_text=True)
    assert '7 mg/kg' in html
    assert '10 mg/kg' not in html
    assert '1750.00 mg' in html


def test_update_rederives_lines_and_keeps_date(client, drug, prescription):
    response = client.put(f"/api/prescriptions/{prescription['id']}", json={
        'animalId': 'COW-001', 'species': 'cow', 'weight': 300,
        'drugs': [{'drugId': drug['id'], 'route': 'im'}],
    })
    body = response.get_json()
    assert response.status_code == 200
    assert body['drugs'] == [{'drugId': drug['id'], 'route': 'im', 'calculatedDose': 2100}]
    assert body['date'] == prescription['date']


def test_update_missing_prescription_returns_404(client, drug):
    response = client.put('/api/prescriptions/nope', json={
        'animalId': 'COW-001', 'species': 'cow', 'weight': 300, 'drugs': [{'drugId': drug['id']}],
    })
    assert response.get_json()['error_code'] == 'NOT_FOUND'


def test_search_and_delete(client, prescription):
    assert len(client.get('/api/prescriptions/', query_string={'q': 'cow-0'}).get_json()) == 1
    assert client.get('/api/prescriptions/', query_string={'q': 'dog'}).get_json() == []

    assert client.delete(f"/api/prescriptions/{prescription['id']}").status_code == 409
    assert client.delete(f"/api/prescriptions/{prescription['id']}?confirm=true").status_code == 204
    assert client.get('/api/prescriptions/').get_json() == []
