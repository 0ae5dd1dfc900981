import pytest

from library_api import create_app
from library_api.config import Config
from library_api.extensions import db
from library_api.services.auth_service import AuthService

PASSWORD = "s3cret-pass"


@pytest.fixture
def app(tmp_path):
    # one sqlite file per test
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'library_test.db'}"
        JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough-for-hs256"
        API_PREFIX = "/api"
        ANALYTICS_TOP_N = 10
        AUTO_CREATE_TABLES = True

    app = create_app(TestConfig)
    with app.app_context():
        AuthService.register("admin", "admin@library.local", PASSWORD, role="admin")
        AuthService.register("alice", "alice@library.local", PASSWORD)
        AuthService.register("bob", "bob@library.local", PASSWORD)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username):
    resp = client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin")


@pytest.fixture
def alice_headers(client):
    return _login(client, "alice")


@pytest.fixture
def bob_headers(client):
    return _login(client, "bob")


@pytest.fixture
def make_book(client, admin_headers):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "title": f"Book {counter['n']}",
            "author": f"Author {counter['n']}",
            "isbn": f"978000000{counter['n']:04d}",
            "quantity": 1,
            "category": "Fiction",
        }
        payload.update(overrides)
        resp = client.post("/api/books", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make


@pytest.fixture
def lend(client, admin_headers):
    def _lend(book_id, borrower="alice", headers=None):
        return client.post(
            "/api/lending/lend",
            json={"book_id": book_id, "borrower": borrower},
            headers=headers or admin_headers,
        )

    return _lend
