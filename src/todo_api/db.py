"""
Connection pool provider: a SQLAlchemy Engine checked once at startup.
"""
from __future__ import annotations

from typing import Any, Dict

import structlog
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import PoolInitError
from .settings import Settings

log = structlog.get_logger(__name__)


def _engine_options(settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.db_echo}
    # SQLite uses its own pool classes, which do not take queue sizing options
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )
    return options


# PUBLIC_INTERFACE
def init_pool(settings: Settings) -> Engine:
    """
    Open a connection pool against `settings.database_url`.

    A single `SELECT 1` is issued so an unreachable store fails here rather than
    on the first request. There is no retry.

    Raises:
        PoolInitError: the URL is invalid, the driver is missing, or the store
        could not be reached.
    """
    try:
        engine = create_engine(settings.database_url, **_engine_options(settings))
    except SQLAlchemyError as exc:
        log.error("pool configuration rejected", error=str(exc))
        raise PoolInitError("invalid database configuration") from exc

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        engine.dispose()
        log.error("store unreachable", url=engine.url.render_as_string(hide_password=True), error=str(exc))
        raise PoolInitError("could not connect to the store") from exc

    log.info("connection pool ready", url=engine.url.render_as_string(hide_password=True))
    return engine


# PUBLIC_INTERFACE
def close_pool(engine: Engine) -> None:
    """Release every pooled connection."""
    engine.dispose()
    log.info("connection pool closed")


# PUBLIC_INTERFACE
def get_pool(request: Request) -> Engine:
    """FastAPI dependency returning the pool opened by the application lifespan."""
    return request.app.state.pool
