# vetaid/api/vaccine_types/test_vaccine_type_routes.py

def test_create_list_and_delete(client):
    response = client.post('/api/vaccine-types/', json={
        'name': 'Rabies', 'totalDoses': 2, 'daysInterval': 21, 'targetAnimals': ['dog', 'cat'],
    })
    created = response.get_json()
    assert response.status_code == 201
    assert created['daysInterval'] == 21

    assert [v['name'] for v in client.get('/api/vaccine-types/').get_json()] == ['Rabies']

    assert client.delete(f"/api/vaccine-types/{created['id']}").status_code == 409
    assert client.delete(f"/api/vaccine-types/{created['id']}?confirm=true").status_code == 204
    assert client.get('/api/vaccine-types/').get_json() == []


def test_single_dose_interval_stored_as_zero(client):
    created = client.post('/api/vaccine-types/', json={
        'name': 'Anthrax', 'totalDoses': 1, 'daysInterval': 30, 'targetAnimals': ['cow'],
    }).get_json()
    assert created['daysInterval'] == 0


def test_multi_dose_without_interval_rejected(client):
    response = client.post('/api/vaccine-types/', json={
        'name': 'FMD', 'totalDoses': 2, 'daysInterval': 0, 'targetAnimals': [],
    })
    details = response.get_json()['details']
    assert response.status_code == 400
    assert {'daysInterval', 'targetAnimals'} <= set(details)


def test_delete_unknown_returns_404(client):
    assert client.delete('/api/vaccine-types/nope?confirm=true').status_code == 404
