"""
Notes API - FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers, routers and the
       shared note listing cache, and returns a ready FastAPI instance.
Who:   Called by uvicorn (uvicorn app.main:app) and by the test suite, which
       builds a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:      /api/v1/notes...   /health            │
    │               /api/auth-info (dev auth only)        │
    │                                                     │
    │  State:       app.state.note_cache (MemoryCache)    │
    │                                                     │
    │  Exception Handlers (all return the ApiResponse     │
    │  envelope with success=false and the traceId):      │
    │    ValidationError / RequestValidationError → 400   │
    │    UnauthorizedError → 401    NotFoundError → 404   │
    │    ConflictError → 409        DatabaseError → 500   │
    │    anything else → 500 (generic message)            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, ready banner
    Shutdown: clear the note cache, dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    DatabaseError,
    NotesAppError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import auth_info, health, notes
from app.schemas.common import ApiResponse
from app.services.cache import MemoryCache

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-09-08T12:00:00 [INFO] app.services.note_service: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Notes API %s starting up (auth mode: %s)", __version__, settings.auth_mode)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health stays reachable and requests fail with 401
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    app.state.note_cache.clear()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _trace_id(request: Request) -> Optional[str]:
    return request_id_var.get("") or getattr(request.state, "request_id", None)


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[List[str]] = None,
) -> JSONResponse:
    body = ApiResponse[None].fail(message, errors=errors, trace_id=_trace_id(request))
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True)),
    )


def _describe_request_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error['msg']}" if location else error["msg"]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the error envelope.

    Internal details (stack traces, SQL, driver errors) are logged with the
    trace id and never returned to the client.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _trace_id(request), exc.errors)
        return _error_response(request, exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [_describe_request_error(error) for error in exc.errors()]
        logger.warning("[%s] Malformed request: %s", _trace_id(request), errors)
        return _error_response(request, 400, "One or more validation errors occurred.", errors)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        response = _error_response(request, exc.status_code, exc.message)
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s", _trace_id(request), exc.message, exc.context
        )
        return _error_response(request, 500, "An internal server error occurred.")

    @app.exception_handler(NotesAppError)
    async def handle_app_error(request: Request, exc: NotesAppError):
        """Remaining application errors (e.g. ConflictError) carry their own status."""
        logger.warning("[%s] %s: %s", _trace_id(request), type(exc).__name__, exc.message)
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _trace_id(request),
            str(exc),
            exc_info=exc,
        )
        return _error_response(request, 500, "An internal server error occurred.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(cache: Optional[MemoryCache] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        cache: listing cache to share across requests; a fresh MemoryCache
               when omitted. Lives exactly as long as the returned app.
    """
    app = FastAPI(
        title="Notes API",
        description="CRUD notes service with filtered, sorted and paged listing.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.note_cache = cache if cache is not None else MemoryCache()

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)
    if settings.use_dev_authentication:
        app.include_router(auth_info.router)

    return app


app = create_app()
