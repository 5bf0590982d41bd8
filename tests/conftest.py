from datetime import datetime

import pytest

from config import TestConfig
from rentalhq import create_app
from rentalhq.data.context import DataContext
from rentalhq.data.seed import demo_data
from rentalhq.data.store import JsonStore

SEED_NOW = datetime(2025, 3, 10, 9, 30, 0)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / 'data.json'
    JsonStore(str(path)).write(demo_data(now=SEED_NOW))
    return str(path)


@pytest.fixture
def store(data_file):
    return JsonStore(data_file)


@pytest.fixture
def context(store):
    return DataContext(store)


@pytest.fixture
def app(data_file):
    class _TestConfig(TestConfig):
        DATA_FILE = data_file

    app = create_app(_TestConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = client.post('/admin/login', data={
        'email': app.config['ADMIN_EMAIL'],
        'password': app.config['ADMIN_PASSWORD'],
    })
    assert response.status_code == 302
    return client
