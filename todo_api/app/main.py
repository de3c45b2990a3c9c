"""
Main entrypoint for the Todo API.

This module assembles the FastAPI application, sets up logging,
registers error handlers and includes the routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn todo_api.app.main:app --reload

The store connection is opened in the application lifespan and closed
on shutdown.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .api.deps import AUTH_HEADER
from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import Database
from .core.exceptions import NotFound, TodoApiError, Unauthenticated
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and close it on shutdown."""
    db: Database = app.state.db
    db.connect()
    logger.info("Starting up %s", app.title)
    try:
        yield
    finally:
        logger.info("Shutting down %s", app.title)
        db.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto HTTP responses."""

    @app.exception_handler(TodoApiError)
    async def todo_api_error_handler(request: Request, exc: TodoApiError) -> Response:
        # 401 and 404 carry no body so they do not reveal why a request
        # was refused.
        if exc.status_code in (Unauthenticated.status_code, NotFound.status_code):
            return Response(status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(sqlite3.Error)
    async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the ones read from the environment
        at import time.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level, app_settings.log_file, access_log=app_settings.debug)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.db = Database(app_settings.database_url)

    cors_origins = app_settings.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=bool(cors_origins),
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[AUTH_HEADER],
    )

    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "service": app_settings.project_name}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it.
app = create_app()
