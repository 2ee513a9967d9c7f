"""
Class Service — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
       Tests call it with an in-memory repository and a mocked validator.
Who:   Called by uvicorn to start the server (uvicorn class_service.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌──────┐ ┌─────────────────┐ ┌──────────────┐ ┌──────┐ │
    │  │ CORS │→│ Request Context │→│ Auth Gateway │→│ GZip │ │
    │  └──────┘ └─────────────────┘ └──────────────┘ └──────┘ │
    │                                                         │
    │  Routes:                                                │
    │  /api/v1/classes  /api/v1/classes/{id}/exams  /health   │
    │                                                         │
    │  Exception Handlers:                                    │
    │  Validation→400 │ NotFound→404 │ Database→500 │ *→500   │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, collection/index bootstrap (failures logged only)
    Shutdown: close the validator HTTP client and the Mongo client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from class_service import __version__
from class_service.config import settings
from class_service.database import (
    build_repository,
    close_client,
    ensure_collections_and_indexes,
)
from class_service.exceptions import (
    ClassServiceError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from class_service.middleware.auth import AuthGatewayMiddleware
from class_service.middleware.request_context import RequestContextMiddleware, request_id_var
from class_service.repositories import ClassRepository
from class_service.routes import classes, exams, health
from class_service.services.token_validator import TokenValidator

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Class Service %s starting up...", __version__)

    client = app.state.mongo_client
    if client is not None:
        try:
            await ensure_collections_and_indexes(
                client[settings.mongodb_database], settings.mongodb_collection
            )
        except PyMongoError as e:
            # The service still starts; /health reports the store as DOWN
            logger.error("Collection bootstrap failed: %s", str(e))

    logger.info("Token validation endpoint: %s", app.state.token_validator.validate_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Class Service shutting down...")
    await app.state.token_validator.aclose()
    close_client(app.state.mongo_client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the JSON error envelope.

        ValidationError          → 400 (details included)
        RequestValidationError   → 400 (pydantic errors as details)
        NotFoundError            → 404
        DatabaseError            → 500 (generic message, context logged)
        ClassServiceError (base) → its own status
        Exception (fallback)     → 500, stack trace logged
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return exc.to_response(rid, include_details=True)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        logger.warning("[%s] Request validation failed: %d error(s)", rid, len(exc.errors()))
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Request payload or parameters are invalid",
                "details": {"errors": jsonable_encoder(exc.errors())},
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return exc.to_response(_request_id(request))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = _request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return exc.to_response(rid)

    @app.exception_handler(ClassServiceError)
    async def handle_service_error(request: Request, exc: ClassServiceError):
        rid = _request_id(request)
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return exc.to_response(rid)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    repository: Optional[ClassRepository] = None,
    token_validator: Optional[TokenValidator] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository:      Use this repository instead of the configured backend
        token_validator: Use this validator instead of one built from settings
    """
    app = FastAPI(
        title="Class Service API",
        description=(
            "CRUD microservice for academic classes and their exams. "
            "Every endpoint except /health requires a token accepted by the OAuth service."
        ),
        version=__version__,
        docs_url="/swagger",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    mongo_client = None
    if repository is None:
        repository, mongo_client = build_repository(settings)
    if token_validator is None:
        token_validator = TokenValidator(settings.oauth_validate_url)

    app.state.class_repository = repository
    app.state.mongo_client = mongo_client
    app.state.token_validator = token_validator

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: CORS → Request Context → Auth Gateway → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AuthGatewayMiddleware, validator=token_validator)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )

    register_exception_handlers(app)

    app.include_router(classes.router)
    app.include_router(exams.router)
    app.include_router(health.router)

    return app


app = create_app()
