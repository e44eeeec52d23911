import os
import re
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mercado_jaci import performance_logger
from mercado_jaci.app_container import AppContainer
from mercado_jaci.config import load_settings
from mercado_jaci.main import create_app
from mercado_jaci.models import Product
from mercado_jaci.repositories import MemoryKeyValueStore


SAMPLE_ROWS = [
    {'id': '1', 'name': 'Arroz', 'price': 20.0, 'image_url': 'https://img/arroz.png',
     'description': 'Pacote 5kg', 'category': 'Mercearia', 'tags': 'grãos,5kg'},
    {'id': '2', 'name': 'Cerveja', 'price': 4.5, 'image_url': 'https://img/cerveja.png',
     'description': 'Gelada', 'category': 'Bebidas', 'tags': ['lata', 'alcoólica']},
    {'id': '3', 'name': 'Tomate', 'price': 7.9, 'image_url': 'https://img/tomate.png',
     'description': 'Do centro de distribuição', 'category': 'hortifruti', 'tags': None},
]


class FakeProductRepository:
    """Repositorio en memoria con fallas programables."""

    def __init__(self, rows=None):
        self.rows = [dict(r) for r in (rows if rows is not None else SAMPLE_ROWS)]
        self.fail = set()
        self.calls = []
        self._next_id = 100

    def _error(self, op):
        return {'ok': False, 'error': f'{op} falló'}

    def fetch_all(self):
        self.calls.append('fetch_all')
        if 'fetch_all' in self.fail:
            return self._error('fetch_all')
        return {'ok': True, 'data': sorted(self.rows, key=lambda r: r['name'])}

    def insert(self, row):
        self.calls.append('insert')
        if 'insert' in self.fail:
            return self._error('insert')
        self._next_id += 1
        record = dict(row, id=str(self._next_id))
        self.rows.append(record)
        return {'ok': True, 'data': record}

    def update(self, product_id, row):
        self.calls.append('update')
        if 'update' in self.fail:
            return self._error('update')
        for record in self.rows:
            if record['id'] == product_id:
                record.update(row)
        return {'ok': True, 'data': None}

    def delete(self, product_id):
        self.calls.append('delete')
        if 'delete' in self.fail:
            return self._error('delete')
        self.rows = [r for r in self.rows if r['id'] != product_id]
        return {'ok': True, 'data': None}


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path):
    """Los diagnósticos de cada test van a una carpeta temporal."""
    performance_logger.configure(logs_dir=str(tmp_path / 'logs'), enabled=False)
    yield tmp_path / 'logs'
    performance_logger.reset_stats()


@pytest.fixture
def products():
    return [Product.from_row(r) for r in SAMPLE_ROWS]


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def product_repo():
    return FakeProductRepository()


@pytest.fixture
def app(tmp_path, product_repo):
    overrides = {
        'TESTING': True,
        'DATA_DIR': str(tmp_path / 'data'),
        'LOGS_DIR': str(tmp_path / 'logs'),
        'PROFILING': False,
        'SECRET_KEY': 'test-secret',
    }
    container = AppContainer(
        load_settings(overrides),
        product_repo=product_repo,
        config_store=MemoryKeyValueStore(),
    )
    return create_app(overrides, container=container)


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def get_csrf_token(client, path='/'):
    r = client.get(path)
    assert r.status_code == 200
    m = re.search(r'name="csrf_token" value="([0-9a-f]+)"', r.get_data(as_text=True))
    assert m, 'no csrf token in page'
    return m.group(1)


def login_admin(client, user='admin', password='admin'):
    token = get_csrf_token(client)
    r = client.post('/login', data={'user': user, 'password': password, 'csrf_token': token},
                    follow_redirects=True)
    assert r.status_code == 200
    return token
