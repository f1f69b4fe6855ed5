from __future__ import annotations

from typing import List, Union

import structlog
from fastapi import APIRouter, Depends, Path, Response, status

from ..exceptions import RepositoryError
from ..repositories import Repository, get_repository
from ..schemas import NewTodo, Todo, UpdatedTodo

log = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/todo",
    tags=["todos"],
)

_STORE_FAILURE = {500: {"description": "Store failure (empty body)"}}

# ids are 32-bit signed integers, matching the serial primary key
_ID_MIN = -(2**31)
_ID_MAX = 2**31 - 1


def _store_failure(exc: RepositoryError) -> Response:
    """
    Log the structured error and answer with an empty 500.
    """
    log.error(
        "todo store operation failed",
        operation=exc.operation,
        kind=exc.kind,
        cause=repr(exc.cause),
    )
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[Todo],
    summary="List Todos",
    description="Return every todo in store order. No filtering or pagination.",
    responses={200: {"description": "List retrieved successfully"}, **_STORE_FAILURE},
)
def list_todos(repo: Repository = Depends(get_repository)) -> Union[List[Todo], Response]:
    """
    List all todos.
    """
    try:
        items = repo.list_all()
    except RepositoryError as exc:
        return _store_failure(exc)
    return [Todo(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    summary="Create Todo",
    description="Create a todo with completed=false. The response body is empty.",
    responses={201: {"description": "Todo created"}, **_STORE_FAILURE},
)
def create_todo(payload: NewTodo, repo: Repository = Depends(get_repository)) -> Response:
    try:
        repo.insert(payload.title)
    except RepositoryError as exc:
        return _store_failure(exc)
    return Response(status_code=status.HTTP_201_CREATED)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace Todo",
    description=(
        "Overwrite title and completed of a todo. Answers 204 whether or not the id exists."
    ),
    responses={204: {"description": "Todo updated"}, **_STORE_FAILURE},
)
def update_todo(
    payload: UpdatedTodo,
    todo_id: int = Path(..., ge=_ID_MIN, le=_ID_MAX, description="Identifier of the todo item"),
    repo: Repository = Depends(get_repository),
) -> Response:
    try:
        repo.update(todo_id, payload.title, payload.completed)
    except RepositoryError as exc:
        return _store_failure(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a todo by ID. Answers 204 whether or not the id exists.",
    responses={204: {"description": "Todo deleted"}, **_STORE_FAILURE},
)
def delete_todo(
    todo_id: int = Path(..., ge=_ID_MIN, le=_ID_MAX, description="Identifier of the todo item"),
    repo: Repository = Depends(get_repository),
) -> Response:
    """
    Delete a Todo. Repeating the call is harmless.
    """
    try:
        repo.delete(todo_id)
    except RepositoryError as exc:
        return _store_failure(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
