# vetaid/conftest.py
import pytest
from dateutil import tz

from vetaid import create_app
from vetaid.utils import datetime_utils


@pytest.fixture
def app(monkeypatch):
    """메모리 저장소를 쓰는 테스트용 앱. 현지 시간대는 UTC로 고정합니다."""
    monkeypatch.setattr(datetime_utils, 'LOCAL_TZ', tz.UTC)
    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def record_store(app):
    return app.services['records']
