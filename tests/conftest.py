"""
Pytest fixtures: a Flask app on in-memory SQLite and a JSON-file store.
"""
import pytest

from config import TestConfig
from supplies import create_app
from supplies.extensions import get_store
from supplies.seed import seed_if_empty
from supplies.storage import LocalBackend
from supplies.store import InventoryStore


@pytest.fixture()
def app():
    return create_app(TestConfig)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def sql_store(app):
    """Store-level tests only; client requests must not share this context."""
    with app.app_context():
        yield get_store()


@pytest.fixture()
def app_store(app):
    """The app's store for view tests. Wrap direct writes in ``app.app_context()``."""
    return app.extensions["inventory_store"]


@pytest.fixture()
def local_backend(tmp_path):
    return LocalBackend(str(tmp_path / "office_supply_db.json"))


@pytest.fixture()
def local_store(local_backend):
    seed_if_empty(local_backend)
    store = InventoryStore(local_backend)
    yield store
    store.close()


@pytest.fixture(params=["local", "sql"])
def store(request):
    """Seeded store on each backend."""
    return request.getfixturevalue(f"{request.param}_store")


def login(client, username="admin", password="123"):
    return client.post(
        "/auth/login",
        data={"username": username, "password": password},
        follow_redirects=True,
    )
