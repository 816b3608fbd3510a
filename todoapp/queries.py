"""Database operations used by the route handlers.

Every function receives the ``Session`` it works in. Todo mutations filter on
both the todo id and the owner id inside a single statement, so a caller can
never touch a row it does not own, and "missing" and "owned by someone else"
look the same from outside.
"""
from typing import Any, Dict, List, Mapping, Optional, Union, cast

from pydantic import BaseModel
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.selectable import Select
from sqlmodel import Session, select

from .logger import logger
from .models import Todo, User, utcnow
from .schemas import NewTodo, TodoUpdate

UPDATABLE_FIELDS = {"title", "description", "completed"}

_TODO_COLUMNS = tuple(Todo.__table__.columns)


# User queries
def get_user(session: Session, user_id: str) -> Optional[User]:
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    query = cast(Select, select(User).where(User.email == email))
    return session.exec(query).first()


def create_user(session: Session, email: str, name: str, password: str) -> User:
    """Create a user with a hashed password. Raises ValueError on a duplicate email."""
    from .security import get_password_hash

    db_user = User(email=email, name=name, hashed_password=get_password_hash(password))
    session.add(db_user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ValueError(f"User with email {email} already exists") from e
    session.refresh(db_user)
    return db_user


# Todo queries
def insert_todo(session: Session, new_todo: NewTodo) -> Todo:
    """Persist ``new_todo`` and return it with its generated id and defaults.

    Raises ValueError when ``new_todo.user_id`` references no user.
    """
    db_todo = Todo(**new_todo.model_dump())
    session.add(db_todo)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Rejected todo for unknown user {new_todo.user_id}")
        raise ValueError(f"Error creating todo: user {new_todo.user_id} does not exist") from e
    session.refresh(db_todo)
    return db_todo


def get_todos_by_user_id(session: Session, user_id: str) -> List[Todo]:
    query = cast(Select, select(Todo)
                 .where(Todo.user_id == user_id)
                 .order_by(Todo.created_at))
    result = session.exec(query).all()
    return cast(List[Todo], result)


def update_todo_by_id(
        session: Session,
        todo_id: str,
        user_id: str,
        patch: Union[TodoUpdate, Mapping[str, Any]],
) -> Optional[Todo]:
    """Apply ``patch`` to the todo if ``user_id`` owns it.

    Only title, description and completed are written; anything else in the
    patch is dropped. A mapping is validated like a ``TodoUpdate`` body, so a
    bad value raises ``pydantic.ValidationError`` before anything is written.
    Returns None when no row matched.
    """
    if not isinstance(patch, TodoUpdate):
        raw = patch.model_dump(exclude_unset=True) if isinstance(patch, BaseModel) else dict(patch)
        patch = TodoUpdate.model_validate(
            {key: value for key, value in raw.items() if key in UPDATABLE_FIELDS}
        )
    data: Dict[str, Any] = patch.model_dump(exclude_unset=True)

    values = {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}
    values["updated_at"] = utcnow()

    statement = (update(Todo)
                 .where(Todo.id == todo_id, Todo.user_id == user_id)
                 .values(**values)
                 .returning(*_TODO_COLUMNS))
    try:
        row = session.exec(statement).mappings().first()  # type: ignore[call-overload]
        session.commit()
    except Exception:
        session.rollback()
        raise

    if row is None:
        return None
    return Todo(**row)


def delete_todo_by_id(session: Session, todo_id: str, user_id: str) -> Optional[Todo]:
    """Delete the todo if ``user_id`` owns it and return the removed row, else None."""
    statement = (delete(Todo)
                 .where(Todo.id == todo_id, Todo.user_id == user_id)
                 .returning(*_TODO_COLUMNS))
    try:
        row = session.exec(statement).mappings().first()  # type: ignore[call-overload]
        session.commit()
    except Exception:
        session.rollback()
        raise

    if row is None:
        return None
    return Todo(**row)
