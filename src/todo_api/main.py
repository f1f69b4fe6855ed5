from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import close_pool, init_pool
from .logging_config import RequestContextMiddleware, setup_logging
from .routers import todos as todos_router
from .settings import Settings, get_settings

log = structlog.get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service liveness endpoint."},
    {"name": "todos", "description": "List, create, replace and delete todo items."},
]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating the process is up. The store is not probed.
    """
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The connection pool is opened by the lifespan handler, so constructing the
    app never touches the store. A PoolInitError raised at startup aborts the
    server.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        log.info("starting todo api", env=settings.app_env)
        application.state.pool = init_pool(settings)
        try:
            yield
        finally:
            close_pool(application.state.pool)

    app = FastAPI(
        title="Todo API",
        description="CRUD API over a single todos table.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_api_route("/", health_check, methods=["GET"], summary="Health Check", tags=["health"])
    app.include_router(todos_router.router)
    return app


app = create_app()
