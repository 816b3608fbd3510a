from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from sqlmodel import Session

from . import queries
from .database import get_session
from .logger import logger
from .models import Todo, User
from .schemas import NewTodo, TodoCreate, TodoRead, TodoUpdate
from .security import get_current_user

router = APIRouter(prefix="/api/todos", tags=["todos"])

TODO_NOT_FOUND = "Todo not found"
TODO_NOT_CREATED = "Could not create todo"


def _todo_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TODO_NOT_FOUND)


@router.get("", response_model=List[TodoRead], summary="List current user todos")
def list_todos(
        current_user: Annotated[User, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)],
) -> List[Todo]:
    return queries.get_todos_by_user_id(session, current_user.id)


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED, summary="Create todo")
def create_todo(
        todo: Annotated[TodoCreate, Body(...)],
        current_user: Annotated[User, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)],
) -> Todo:
    """
    Create a new todo owned by the current user.
    """
    new_todo = NewTodo(**todo.model_dump(), user_id=current_user.id)
    try:
        db_todo = queries.insert_todo(session, new_todo)
    except ValueError as e:
        logger.error(f"Could not create todo for user {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=TODO_NOT_CREATED
        )
    logger.info(f"Created todo {db_todo.id} for user {current_user.id}")
    return db_todo


@router.patch("/{todo_id}", response_model=TodoRead, summary="Update todo")
def update_todo(
        todo_id: Annotated[str, Path(...)],
        todo_update: Annotated[TodoUpdate, Body(...)],
        current_user: Annotated[User, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)],
) -> Todo:
    """
    Apply a partial update to a todo owned by the current user.
    """
    db_todo = queries.update_todo_by_id(session, todo_id, current_user.id, todo_update)
    if db_todo is None:
        logger.info(f"Update of todo {todo_id} by user {current_user.id} matched nothing")
        raise _todo_not_found()
    logger.info(f"Updated todo {todo_id}")
    return db_todo


@router.delete("/{todo_id}", response_model=TodoRead, summary="Delete todo")
def delete_todo(
        todo_id: Annotated[str, Path(...)],
        current_user: Annotated[User, Depends(get_current_user)],
        session: Annotated[Session, Depends(get_session)],
) -> Todo:
    """
    Delete a todo owned by the current user and return it.
    """
    db_todo = queries.delete_todo_by_id(session, todo_id, current_user.id)
    if db_todo is None:
        logger.info(f"Delete of todo {todo_id} by user {current_user.id} matched nothing")
        raise _todo_not_found()
    logger.info(f"Deleted todo {todo_id}")
    return db_todo
