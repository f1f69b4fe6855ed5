from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the `todos` table as handed out by the repository.

    Fields:
    - id: Unique integer identifier assigned by the store
    - title: Free text, never validated beyond being a string
    - completed: Completion flag, never null once the row exists
    """

    id: int
    title: str
    completed: bool
