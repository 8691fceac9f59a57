"""
Main entrypoint for the Greeting Card API.

This module assembles the FastAPI application: it sets up logging,
builds the greeting store, registers the error handlers and includes the
JSON API router under ``/api`` and the page router at the site root.
``create_app`` builds and configures the app, which is then instantiated
at module import time as ``app``, e.g.::

    uvicorn greeting_card_api.app.main:app --reload

Tests and embedding applications call ``create_app`` with their own
``Settings`` and ``GreetingStore``.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.deps import get_greeting_store
from .api.endpoints import pages
from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import get_database_path
from .core.errors import GreetingError, GreetingStoreError
from .core.logging_config import setup_logging
from .services.greeting_service import GreetingService
from .services.greeting_store import GreetingStore, MemoryGreetingStore, SQLiteGreetingStore

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


def build_store(settings: Settings) -> GreetingStore:
    """Return the store selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return MemoryGreetingStore()
    if backend == "sqlite":
        return SQLiteGreetingStore(get_database_path(settings.database_url))
    raise ValueError(f"Unknown storage backend: {settings.storage_backend!r}")


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": code, "message": text}``."""

    @app.exception_handler(GreetingError)
    async def greeting_error_handler(request: Request, exc: GreetingError) -> JSONResponse:
        if isinstance(exc, GreetingStoreError):
            # Details stay in the log; clients get a generic message.
            logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
            return _error_response(exc.status_code, exc.code, GreetingStoreError.default_message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return _error_response(400, "validation_error", message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
        return _error_response(exc.status_code, code, str(exc.detail))


def create_app(settings: Optional[Settings] = None, store: Optional[GreetingStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration; defaults to the values read from the environment.
    store : Optional[GreetingStore]
        Greeting backend; defaults to the one selected by
        ``settings.storage_backend``.

    Returns
    -------
    FastAPI
        A configured application with its store initialised.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that store setup below
    # can log.
    setup_logging(settings.log_level, settings.log_file)

    if store is None:
        store = build_store(settings)
    store.init()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.greeting_store = store
    app.state.greeting_service = GreetingService(
        store,
        id_length=settings.id_length,
        id_max_attempts=settings.id_max_attempts,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    app.include_router(pages.router, tags=["pages"])

    @app.get("/health", tags=["health"])
    async def health(greeting_store: GreetingStore = Depends(get_greeting_store)) -> dict:
        return {"status": "ok", "storage": type(greeting_store).__name__}

    logger.info("%s v%s ready (storage: %s)", settings.project_name, settings.api_version, type(store).__name__)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
