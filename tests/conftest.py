# ---------- tests/conftest.py ----------
import os

# Must be set before todoapp.config is imported
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session
from sqlmodel.pool import StaticPool

from todoapp import queries
from todoapp.database import create_db_engine, drop_db, get_session, init_db
from todoapp.main import app
from todoapp.schemas import NewTodo
from todoapp.security import SESSION_COOKIE_NAME, create_session_token


# Use in-memory SQLite for testing
@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    drop_db(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    def get_test_session():
        yield session

    app.dependency_overrides = {}
    app.dependency_overrides[get_session] = get_test_session

    yield TestClient(app)

    app.dependency_overrides = {}


@pytest.fixture(name="test_user")
def test_user_fixture(session):
    """User owning the todos under test."""
    return queries.create_user(session, email="test@example.com", name="Test User", password="password123")


@pytest.fixture(name="other_user")
def other_user_fixture(session):
    """A second user who owns no todos unless a test gives them some."""
    return queries.create_user(session, email="other@example.com", name="Other User", password="password456")


@pytest.fixture(name="test_todos")
def test_todos_fixture(session, test_user):
    """Two todos owned by test_user."""
    return [
        queries.insert_todo(session, NewTodo(title="Todo 1", user_id=test_user.id)),
        queries.insert_todo(session, NewTodo(title="Todo 2", user_id=test_user.id)),
    ]


def _cookie_headers(user_id: str) -> dict:
    return {"Cookie": f"{SESSION_COOKIE_NAME}={create_session_token(user_id)}"}


@pytest.fixture(name="user_cookie_headers")
def user_cookie_headers_fixture(test_user):
    """Session cookie header for test_user."""
    return _cookie_headers(test_user.id)


@pytest.fixture(name="other_cookie_headers")
def other_cookie_headers_fixture(other_user):
    """Session cookie header for other_user."""
    return _cookie_headers(other_user.id)


@pytest.fixture(name="anyio_backend")
def anyio_backend_fixture():
    return "asyncio"


@pytest.fixture(name="async_client")
async def async_client_fixture(session):
    """ASGI client running on the test's own event loop."""
    def get_test_session():
        yield session

    app.dependency_overrides = {}
    app.dependency_overrides[get_session] = get_test_session

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides = {}
