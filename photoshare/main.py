"""
PhotoShare Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn photoshare.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  RateLimit → RequestID → Language → Logging → GZip → CORS│
    │                                                          │
    │  Routes:                                                 │
    │  /api/auth  /api/users  /api/photos  /api/images         │
    │  /api/series  /api/collections  /api/likes               │
    │  /api/.../comments  /api/notifications  /health          │
    │                                                          │
    │  Exception Handlers:                                     │
    │  PhotoShareError → status_code of the subclass           │
    │  Exception       → 500                                   │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, storage directory.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from photoshare import __version__
from photoshare.config import settings
from photoshare.database import dispose_engine
from photoshare.exceptions import PhotoShareError, RateLimitExceededError, ValidationError
from photoshare.i18n import language_var, resolve_language, translate
from photoshare.middleware.language import LanguageMiddleware
from photoshare.middleware.logging import RequestLoggingMiddleware
from photoshare.middleware.rate_limit import RateLimitMiddleware
from photoshare.middleware.request_id import RequestIDMiddleware, request_id_var
from photoshare.routes import (
    auth,
    collections,
    comments,
    health,
    images,
    likes,
    notifications,
    photos,
    series,
    users,
)

logger = logging.getLogger(__name__)

# Leading `loc` entries naming where a field came from, not the field itself
_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Request ids are added by the handlers that log them, not the formatter.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-query and per-request chatter from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("PhotoShare Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Storage directory: %s", storage.resolve())
    logger.info("Default language: %s", settings.default_language)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("PhotoShare Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map domain exceptions to the common error body.

    Handler hierarchy:
        PhotoShareError (and subclasses) → exc.status_code
            4xx: logged as warning, context returned as `details`
            5xx: logged as error, context kept server-side
        RequestValidationError           → 400 `validation_error`, one entry
                                           per failing field in `details`
        Exception (fallback)             → 500, stack trace logged

    Messages are translated into the language LanguageMiddleware resolved
    from the request's Accept-Language header.
    """

    @app.exception_handler(PhotoShareError)
    async def handle_photoshare_error(request: Request, exc: PhotoShareError):
        rid = request_id_var.get("")
        message = exc.localized(language_var.get())
        client_error = exc.status_code < 500

        if client_error:
            logger.warning("[%s] %s %s: %s", rid, exc.status_code, exc.error_code, message)
        else:
            logger.error(
                "[%s] %s: %s | Context: %s", rid, type(exc).__name__, message, exc.context
            )

        headers = {}
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": message,
                "details": (exc.context or None) if client_error else None,
                "request_id": rid,
            },
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        fields = [
            {
                "field": ".".join(
                    str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES
                ),
                "type": err.get("type"),
                "message": err.get("msg"),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] 400 validation_error: %s", rid, fields)
        return JSONResponse(
            status_code=400,
            content={
                "error": ValidationError.error_code,
                "message": translate(ValidationError.default_key, language_var.get()),
                "details": {"fields": fields},
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in ServerErrorMiddleware, outside the request-scoped middleware,
        # so the ContextVars are unset here.
        rid = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID", "")
        lang = resolve_language(request.headers.get("Accept-Language"))
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": translate("GLOBAL.UNEXPECTED", lang),
                "details": None,
                "request_id": rid,
            },
            headers={"X-Request-ID": rid, "Content-Language": lang},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PhotoShare API",
        description=(
            "Photo-sharing social network: uploads, series, collections, "
            "likes, threaded comments, follows and notifications."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition:
    # RateLimit → RequestID → Language → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Language", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(LanguageMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(photos.router)
    app.include_router(images.router)
    app.include_router(series.router)
    app.include_router(collections.router)
    app.include_router(likes.router)
    app.include_router(comments.router)
    app.include_router(notifications.router)
    app.include_router(health.router)

    return app


app = create_app()
