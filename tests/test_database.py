# ---------- tests/test_database.py ----------
import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from todoapp.database import get_db_session
from todoapp.models import Todo


def test_init_db(engine):
    """The engine fixture creates both tables."""
    tables = inspect(engine).get_table_names()

    assert "user" in tables
    assert "todo" in tables


def test_foreign_keys_enforced(engine):
    """SQLite connections refuse todos pointing at no user."""
    with Session(engine) as session:
        assert session.execute(text("PRAGMA foreign_keys")).scalar_one() == 1

        session.add(Todo(title="Orphan", user_id="missing-user"))
        with pytest.raises(IntegrityError):
            session.commit()


def test_get_db_session_context_manager(engine):
    """Test the context manager for database sessions."""
    with get_db_session(engine) as session:
        result = session.execute(text("SELECT 1")).scalar_one()
        assert result == 1

    # The exception propagates after the rollback
    with pytest.raises(ValueError):
        with get_db_session(engine) as session:
            session.execute(text("SELECT 1"))
            raise ValueError("Test exception")
