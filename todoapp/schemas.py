from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, StringConstraints, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import Field as SQLField

from .models import TodoBase

NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]
StrictText = Annotated[str, StringConstraints(strict=True)]


class CamelModel(BaseModel):
    """Response models serialised with camelCase keys."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NewTodo(TodoBase):
    """Validated input for ``queries.insert_todo``."""
    user_id: str = SQLField(min_length=1)


class TodoCreate(BaseModel):
    """Schema for todo creation requests."""
    title: NonEmptyStr
    description: Optional[StrictText] = None


class TodoUpdate(BaseModel):
    """Schema for todo patch requests. Unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[NonEmptyStr] = None
    description: Optional[StrictText] = None
    completed: Optional[StrictBool] = None

    @field_validator("title", "completed")
    @classmethod
    def not_null(cls, v, info):
        # Only reached when the key was sent explicitly
        if v is None:
            raise ValueError(f"{info.field_name} may not be null")
        return v


class TodoRead(CamelModel):
    """Schema for todo responses."""
    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    user_id: str
    created_at: datetime
    updated_at: datetime


class UserRead(CamelModel):
    """Schema for user responses."""
    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime


class SignUpRequest(BaseModel):
    """Schema for email sign-up requests."""
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    name: NonEmptyStr


class SignInRequest(BaseModel):
    """Schema for email sign-in requests."""
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(BaseModel):
    token: str
    user: UserRead


class SessionRead(CamelModel):
    token: str
    user_id: str
    expires_at: datetime


class SessionResponse(BaseModel):
    session: SessionRead
    user: UserRead


class SignOutResponse(BaseModel):
    success: bool
