# vetaid/test_app_factory.py
import pytest

from vetaid import create_app
from vetaid.core.config import TestingConfig


def test_testing_app_uses_memory_store_without_demo_data(app, record_store):
    assert app.config['TESTING'] is True
    assert record_store.get_all('vaccinations') == []


def test_demo_data_seeded_when_enabled(monkeypatch):
    monkeypatch.setattr(TestingConfig, 'SEED_DEMO_DATA', True)
    app = create_app('testing')

    drugs = app.test_client().get('/api/drugs/').get_json()
    assert [d['name'] for d in drugs] == ['Amoxicillin']


def test_file_backend_persists_between_apps(monkeypatch, tmp_path):
    monkeypatch.setattr(TestingConfig, 'STORAGE_BACKEND', 'file')
    monkeypatch.setattr(TestingConfig, 'DATA_FILE_PATH', str(tmp_path / 'store.json'))

    create_app('testing').test_client().put('/api/settings/theme', json={'theme': 'dark'})

    assert create_app('testing').test_client().get('/api/settings/theme').get_json() == {'theme': 'dark'}


def test_unknown_backend_fails_fast(monkeypatch):
    monkeypatch.setattr(TestingConfig, 'STORAGE_BACKEND', 'cloud')
    with pytest.raises(ValueError):
        create_app('testing')


def test_unknown_route_returns_404(client):
    assert client.get('/api/unknown').status_code == 404
