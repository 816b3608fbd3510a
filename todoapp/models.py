import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_column() -> Column:
    return Column(DateTime(timezone=True), nullable=False)


class UserBase(SQLModel):
    """Base model for User with common fields."""
    email: str = Field(index=True, unique=True)
    name: str = Field()


class User(UserBase, table=True):
    """User DB model. Rows are written only by the auth routes."""
    id: str = Field(default_factory=generate_id, primary_key=True)
    hashed_password: str = Field()
    created_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp_column())

    todos: List["Todo"] = Relationship(back_populates="user")

    def verify_password(self, password: str) -> bool:
        """Verify password against the stored hash."""
        # Import here to avoid circular imports
        from .security import verify_password
        return verify_password(password, self.hashed_password)


class TodoBase(SQLModel):
    """Base model for Todo with common fields."""
    title: str = Field(min_length=1)
    description: Optional[str] = Field(default=None)
    completed: bool = Field(default=False)


class Todo(TodoBase, table=True):
    """Todo DB model. ``user_id`` never changes after insert."""
    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=_timestamp_column())

    user: Optional[User] = Relationship(back_populates="todos")
