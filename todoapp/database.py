from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from .config import DATABASE_URL, SQL_ECHO


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """Build an engine for ``url``, enforcing foreign keys on SQLite."""
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    db_engine = create_engine(url, echo=SQL_ECHO, **kwargs)
    if is_sqlite:
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
    return db_engine


engine = create_db_engine()


def init_db(db_engine: Optional[Engine] = None) -> None:
    """Initialize database by creating all tables."""
    # Registers the table models on SQLModel.metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(db_engine or engine)


def drop_db(db_engine: Optional[Engine] = None) -> None:
    """Drop every table known to the application."""
    from . import models  # noqa: F401

    SQLModel.metadata.drop_all(db_engine or engine)


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting a database session."""
    with Session(engine) as session:
        yield session


@contextmanager
def get_db_session(db_engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """Context manager for getting a database session."""
    with Session(db_engine or engine) as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
