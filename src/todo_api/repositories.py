from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DataError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

from .db import get_pool
from .exceptions import RepositoryError
from .models import TodoEntity


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    completed: str = "completed"


_COLS = _Cols()

_SELECT_ALL = text(f"SELECT {_COLS.id}, {_COLS.title}, {_COLS.completed} FROM {_COLS.table}")
_INSERT = text(
    f"INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.completed}) VALUES (:title, :completed)"
)
_UPDATE = text(
    f"UPDATE {_COLS.table} SET {_COLS.title} = :title, {_COLS.completed} = :completed "
    f"WHERE {_COLS.id} = :id"
)
_DELETE = text(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = :id")


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def list_all(self) -> List[TodoEntity]:
        """Return every stored todo in store-defined order."""

    @abstractmethod
    def insert(self, title: str) -> None:
        """Store a new todo with completed=false."""

    @abstractmethod
    def update(self, todo_id: int, title: str, completed: bool) -> None:
        """Overwrite title and completed of a todo. A missing id is not an error."""

    @abstractmethod
    def delete(self, todo_id: int) -> None:
        """Delete a todo. A missing id is not an error."""


def _error_kind(exc: SQLAlchemyError) -> str:
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        return "connection"
    if isinstance(exc, IntegrityError):
        return "integrity"
    if isinstance(exc, DataError):
        return "data"
    return "query"


class SQLRepository(Repository):
    """
    Repository issuing parameterized statements through a SQLAlchemy pool.

    Every call borrows one pooled connection for one statement; writes are
    committed immediately.
    """

    def __init__(self, pool: Engine) -> None:
        self._pool = pool

    def _row_to_entity(self, row: Mapping[str, Any]) -> TodoEntity:
        if row[_COLS.id] is None or row[_COLS.title] is None or row[_COLS.completed] is None:
            raise ValueError(f"incomplete todo row: {dict(row)!r}")
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "completed": bool(row[_COLS.completed]),
        }

    def list_all(self) -> List[TodoEntity]:
        try:
            with self._pool.connect() as conn:
                rows = conn.execute(_SELECT_ALL).mappings().all()
            return [self._row_to_entity(r) for r in rows]
        except SQLAlchemyError as exc:
            raise RepositoryError("list_all", _error_kind(exc), exc) from exc
        except (TypeError, ValueError, OverflowError) as exc:
            raise RepositoryError("list_all", "data", exc) from exc

    def _execute(self, operation: str, statement: Any, params: Mapping[str, Any]) -> None:
        try:
            with self._pool.begin() as conn:
                conn.execute(statement, params)
        except SQLAlchemyError as exc:
            raise RepositoryError(operation, _error_kind(exc), exc) from exc
        # some drivers reject unbindable values before SQLAlchemy can wrap them
        except (TypeError, ValueError, OverflowError) as exc:
            raise RepositoryError(operation, "data", exc) from exc

    def insert(self, title: str) -> None:
        self._execute("insert", _INSERT, {"title": title, "completed": False})

    def update(self, todo_id: int, title: str, completed: bool) -> None:
        self._execute("update", _UPDATE, {"id": todo_id, "title": title, "completed": completed})

    def delete(self, todo_id: int) -> None:
        self._execute("delete", _DELETE, {"id": todo_id})


# PUBLIC_INTERFACE
def get_repository(pool: Engine = Depends(get_pool)) -> Repository:
    """Build a repository over the application's pool for the current request."""
    return SQLRepository(pool)
