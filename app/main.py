"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from app.core.config import Settings, settings
from app.core.errors import DomainError, UpstreamFailure, ValidationError
from app.core.structured_logging import build_log_context, configure_logging
from app.db.session import create_engine_with_settings, create_session_factory
from app.routers import auth_router, complaints_router, intake_router, manage_router
from app.services.blob_storage import BlobStore, LocalBlobStore, build_blob_store

logger = logging.getLogger(__name__)


# ============================================================================
# Error Handlers
# ============================================================================

def _error_response(error: DomainError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = None
    return _error_response(ValidationError(message))


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(
        "Database unavailable: %s",
        exc.orig,
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return _error_response(UpstreamFailure("Database unavailable"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    session = getattr(request.state, "session", None)
    logger.exception(
        "Unhandled error",
        extra=build_log_context(
            user_id=session.id if session else None,
            enterprise_id=session.enterprise_id if session else None,
            route=request.url.path,
            method=request.method,
        ),
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ============================================================================
# FastAPI App
# ============================================================================

def create_app(
    app_settings: Settings = settings,
    *,
    engine: Engine | None = None,
    blob_store: BlobStore | None = None,
) -> FastAPI:
    """
    Build the application.

    The engine (connection pool) and blob store are created here and kept on
    ``app.state``; request dependencies read them from there. The pool is
    disposed when the app shuts down.
    """
    configure_logging(app_settings.LOG_LEVEL)

    engine = engine or create_engine_with_settings(app_settings)
    blob_store = blob_store or build_blob_store(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.engine.dispose()

    app = FastAPI(
        title="Complaint Desk API",
        description="Multi-tenant complaint intake and triage API",
        version=app_settings.VERSION,
        docs_url="/docs" if app_settings.ENV == "dev" else None,
        redoc_url="/redoc" if app_settings.ENV == "dev" else None,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.blob_store = blob_store

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # CORS middleware - must be added before routers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=False,  # Bearer tokens, no cookies
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # ========================================================================
    # Routers
    # ========================================================================

    # Public intake (unauthenticated, tenant from URL)
    app.include_router(intake_router)

    # Login
    app.include_router(auth_router)

    # Enterprise dashboard (session, tenant from token)
    app.include_router(complaints_router)

    # Directory management (superadmin)
    app.include_router(manage_router)

    # Serve locally stored voice recordings in dev
    if isinstance(blob_store, LocalBlobStore) and blob_store.base_url.startswith("/"):
        app.mount(
            blob_store.base_url,
            StaticFiles(directory=blob_store.root, check_dir=False),
            name="uploads",
        )

    # ========================================================================
    # Health Check
    # ========================================================================

    @app.get("/health")
    def health(request: Request):
        """
        Health check endpoint.

        Verifies database connectivity and returns environment info.
        """
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "env": app_settings.ENV, "version": app_settings.VERSION}

    return app


app = create_app()
