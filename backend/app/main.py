"""
Contacts API - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       wired to one ContactRepository.
Who:   Called by uvicorn to start the server (uvicorn app.main:app), by
       run() / `python -m app`, and by the test-suite with its own repository.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐       │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │       │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘       │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌─────────────┐ ┌──────────┐ │
    │  │ /api/contacts... │ │ /api/health │ │ / static │ │
    │  └──────────────────┘ └─────────────┘ └──────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Conflict→409 │  │
    │  │ Internal→500   │ Unexpected→500              │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ensure the contacts table exists (failure is logged, not fatal)

    Shutdown:
    1. Dispose the repository's engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import create_engine
from app.exceptions import ContactsAPIError, ErrorKind
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.repositories.contact_repository import ContactRepository
from app.routes import contacts, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then the idempotent schema-ensure step.
    Shutdown: close pooled store connections.

    A store that is down at startup must not crash-loop the service: the
    error is logged and /api/health keeps reporting it until the store is
    reachable.
    """
    config: Settings = app.state.settings
    repository: ContactRepository = app.state.repository

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Contacts API %s starting up...", __version__)

    try:
        await repository.ensure_schema()
    except ContactsAPIError as e:
        logger.error("Schema init failed: %s", e.message)
    except Exception:
        logger.exception("Schema init failed")

    logger.info("Server ready at http://%s:%d", config.host, config.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Contacts API shutting down...")
    await repository.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    """Render the common error body for `kind`."""
    return JSONResponse(
        status_code=kind.status_code,
        content={
            "error": kind.value,
            "message": message,
            "request_id": request_id_var.get(""),
        },
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    """'email: String should have at most 150 characters' from FastAPI's error list."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the common error body.

    Handler hierarchy:
        ContactsAPIError        → status of its ErrorKind (400/404/409/500)
        RequestValidationError  → 400 (malformed JSON, wrong types, oversize fields)
        Exception (fallback)    → 500 with the exception text
    """

    @app.exception_handler(ContactsAPIError)
    async def handle_app_error(request: Request, exc: ContactsAPIError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, exc.kind.value, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, exc.kind.value, exc.message)
        return error_response(exc.kind, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return error_response(ErrorKind.VALIDATION, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(ErrorKind.INTERNAL, str(exc) or type(exc).__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def mount_static(app: FastAPI, directory: str) -> None:
    """Serve the front-end from `directory` at "/", if it exists."""
    path = Path(directory)
    if not path.is_dir():
        logger.info("Static directory %s not found; front-end not served", path)
        return
    app.mount("/", StaticFiles(directory=str(path), html=True), name="static")


def create_app(
    repository: Optional[ContactRepository] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: Store access for this app. Defaults to one built from
                    config.sqlalchemy_url; tests pass their own.
        config:     Settings to use. Defaults to the module-level singleton.
    """
    config = config or default_settings
    if repository is None:
        repository = ContactRepository(create_engine(config=config))

    app = FastAPI(
        title="Contacts API",
        description="Contact management: search, paginate, create, update and delete contacts.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.repository = repository

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(contacts.router)

    # Last: the "/" mount would otherwise shadow the API routes
    mount_static(app, config.static_dir)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `app.main:app` to be importable
app = create_app()
