"""
Structured logging for the todo API.

Every event carries `service`; events emitted while serving a request also
carry `request_id`, `method` and `path`, bound by RequestContextMiddleware.
FastAPI copies the context into its threadpool, so repository failures logged
from sync handlers are tagged with the request that caused them.
"""
from __future__ import annotations

import logging
import sys
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .settings import Settings

SERVICE_NAME = "todo-api"
REQUEST_ID_HEADER = "X-Request-ID"

log = structlog.get_logger(__name__)


def _add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


# PUBLIC_INTERFACE
def setup_logging(settings: Settings) -> None:
    """Configure structlog from settings; stdlib loggers (uvicorn, SQLAlchemy) print plain lines to stdout."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    processors: list = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.app_env == "production":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind request_id/method/path for the duration of a request and echo the id
    back in the X-Request-ID header. A client-supplied id is reused.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.monotonic()
        try:
            response = await call_next(request)
            log.info(
                "request handled",
                status_code=response.status_code,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()
