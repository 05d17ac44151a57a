import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from tracker.core.config import Settings
from tracker.core.database import DatabaseManager
from restapi.router import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        JWT_SECRET=TEST_SECRET,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def db_manager(settings):
    engine = create_async_engine(settings.async_db_url, poolclass=NullPool)
    return DatabaseManager(engine=engine, settings=settings)


@pytest.fixture
def app(settings, db_manager):
    return create_app(settings=settings, db_manager=db_manager)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user():
    return {"username": "alice", "password": "correct horse"}


@pytest.fixture
def other_user():
    return {"username": "bob", "password": "battery staple"}


@pytest.fixture
def register_and_login():
    """Register the given credentials and log in, leaving the cookie on the client."""
    def _register_and_login(client, credentials):
        r = client.post("/api/register", json=credentials)
        assert r.status_code == 201, r.text
        r = client.post("/api/login", json=credentials)
        assert r.status_code == 200, r.text
        return r
    return _register_and_login


@pytest.fixture
def auth_client(client, user, register_and_login):
    """Client carrying a session cookie for ``user``."""
    register_and_login(client, user)
    return client


@pytest.fixture
def lenient_client(app, user, register_and_login):
    """Logged-in client that reports server errors as responses instead of raising them."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        register_and_login(test_client, user)
        yield test_client
