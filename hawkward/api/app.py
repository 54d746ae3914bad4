"""
FastAPI application for Hawkward

This module creates the application, wires the components into it and
maps storage errors onto HTTP responses. Error bodies carry a message
and the underlying error text, never a stack trace.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from hawkward import __version__
from hawkward.api.routes import router
from hawkward.config import ServerSettings, get_settings
from hawkward.orchestrator import AppComponents, create_app_components, shutdown, startup
from hawkward.services.storage import (
    StorageError,
    UnknownStoreError,
    ValidationFailureError,
)


# Everything else derived from StorageError is a server-side failure
CLIENT_ERRORS = (UnknownStoreError, ValidationFailureError)


def create_app(
    components: Optional[AppComponents] = None,
    server_settings: Optional[ServerSettings] = None,
) -> FastAPI:
    """
    Factory for the FastAPI application.

    Args:
        components: Pre-built components (tests pass their own)
        server_settings: CORS and static file configuration

    Returns:
        app: Configured FastAPI instance
    """
    components = components or create_app_components()
    server_settings = server_settings or get_settings().server

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(components)
        yield
        await shutdown(components)

    app = FastAPI(title="Hawkward", version=__version__, lifespan=lifespan)
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)

    # Must come last: a mount at / shadows every route registered after it
    static_dir = server_settings.static_dir
    if static_dir is not None and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def register_error_handlers(app: FastAPI) -> None:
    """Map the storage error taxonomy onto HTTP status codes."""

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        status_code = 400 if isinstance(exc, CLIENT_ERRORS) else 500
        return JSONResponse(status_code=status_code, content=exc.to_response())
