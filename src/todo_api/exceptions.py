from __future__ import annotations

from typing import Optional


class TodoApiError(Exception):
    """Base class for errors raised by the todo service."""


# PUBLIC_INTERFACE
class PoolInitError(TodoApiError):
    """The connection pool could not reach the store at startup."""


# PUBLIC_INTERFACE
class RepositoryError(TodoApiError):
    """
    A store operation failed.

    The handler layer turns this into an empty 500 response; `kind` and `cause`
    are kept for logging only and never sent to the client.

    Kinds:
    - connection: the store could not be reached or the connection dropped
    - integrity: a constraint was violated
    - data: a value or row could not be converted
    - query: any other statement failure
    """

    def __init__(self, operation: str, kind: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{operation} failed ({kind})")
        self.operation = operation
        self.kind = kind
        self.cause = cause
