# vetaid/api/procedures/test_procedure_routes.py
import pytest


def procedure_form(**overrides):
    form = {
        'name': 'Tuberculosis Test',
        'steps': ['Clean the area with antiseptic', 'Inject intradermally'],
        'targetAnimals': ['cow', 'buffalo'],
        'ageRange': {'min': 1, 'max': 10},
    }
    form.update(overrides)
    return form


@pytest.fixture
def created(client):
    response = client.post('/api/tests/', json=procedure_form())
    assert response.status_code == 201
    return response.get_json()


def test_create_procedure(created):
    assert created['name'] == 'Tuberculosis Test'
    assert created['targetAnimals'] == ['cow', 'buffalo']
    assert created['ageRange'] == {'min': 1, 'max': 10}


def test_steps_from_text_are_trimmed_and_blank_lines_dropped(client):
    response = client.post('/api/tests/', json=procedure_form(steps='  Restrain animal \n\n   \nTake sample\n'))
    assert response.get_json()['steps'] == ['Restrain animal', 'Take sample']


def test_age_range_defaults(client):
    form = procedure_form()
    del form['ageRange']
    assert client.post('/api/tests/', json=form).get_json()['ageRange'] == {'min': 0, 'max': 20}


def test_validation_errors_returned_together(client):
    response = client.post('/api/tests/', json={
        'name': ' ',
        'steps': '\n \n',
        'targetAnimals': [],
        'ageRange': {'min': 5, 'max': 2},
    })

    details = response.get_json()['details']
    assert response.status_code == 400
    assert set(details) == {'name', 'steps', 'targetAnimals', 'ageRange'}


@pytest.mark.parametrize('age_range, field', [
    ({'min': -1, 'max': 5}, 'min'),
    ({'min': 0, 'max': 0}, 'max'),
])
def test_age_range_bounds(client, age_range, field):
    response = client.post('/api/tests/', json=procedure_form(ageRange=age_range))
    assert response.status_code == 400
    assert field in response.get_json()['details']['ageRange']


@pytest.mark.parametrize('term, expected', [
    ('tuberculosis', 1),
    ('BUFFALO', 1),
    ('antiseptic', 1),
    ('horse', 0),
])
def test_search(client, created, term, expected):
    assert len(client.get('/api/tests/', query_string={'q': term}).get_json()) == expected


def test_update_replaces_record(client, created):
    response = client.put(f"/api/tests/{created['id']}", json=procedure_form(name='Brucellosis Test'))
    assert response.status_code == 200
    assert client.get(f"/api/tests/{created['id']}").get_json()['name'] == 'Brucellosis Test'
    assert len(client.get('/api/tests/').get_json()) == 1


def test_delete(client, created):
    assert client.delete(f"/api/tests/{created['id']}").status_code == 409
    assert client.delete(f"/api/tests/{created['id']}?confirm=true").status_code == 204
    assert client.get(f"/api/tests/{created['id']}").status_code == 404
    assert client.delete(f"/api/tests/{created['id']}?confirm=true").status_code == 404
