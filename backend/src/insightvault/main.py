"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from insightvault import __version__
from insightvault.api.router import api_router
from insightvault.config import get_settings
from insightvault.dependencies import get_local_store
from insightvault.errors import (
    GenerationError,
    StorageIOError,
    StorageUnavailable,
    ValidationError,
)
from insightvault.logging_config import setup_logging
from insightvault.middleware.rate_limit import SESSION_HEADER, limiter
from insightvault.providers.base import LocalStore
from insightvault.services.prompt_template_service import PromptTemplateService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()

    # Setup logging with sensitive data filtering
    setup_logging(settings)

    if settings.debug:
        logger.debug(f"Starting {settings.app_name} in debug mode")

    # Open the local store and seed a default template on first run
    app.state.storage_error = None
    store = get_local_store()
    try:
        await store.initialize()
    except StorageUnavailable as e:
        logger.error(f"Local store unavailable: {e}")
        app.state.storage_error = str(e)
    else:
        try:
            await PromptTemplateService(store).seed_default()
        except StorageIOError as e:
            logger.error(f"Could not seed default prompt template: {e}")

    yield
    # Shutdown
    pass


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Prompt-driven text analysis with a searchable, chat-queryable history",
        lifespan=lifespan,
    )
    app.state.storage_error = None

    # Add rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", SESSION_HEADER],
        expose_headers=["Content-Disposition", SESSION_HEADER],
        max_age=3600,
    )

    # Domain exception handlers
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        """Missing or invalid user input; nothing was changed."""
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        """The model call failed; the user may try again."""
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": "Failed to generate analysis. Please check your connection and API key."
            },
        )

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
        """Persistent storage cannot be provided at all."""
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Local storage is unavailable."},
        )

    @app.exception_handler(StorageIOError)
    async def storage_io_error_handler(request: Request, exc: StorageIOError):
        """A single read or write failed."""
        logger.error(f"Storage operation failed on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc) if settings.debug else "A storage operation failed."},
        )

    # Global exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(
            f"Unhandled exception: {type(exc).__name__}",
            exc_info=exc,
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

        if settings.debug:
            # Development: Return detailed error
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": str(exc),
                    "type": type(exc).__name__,
                },
            )
        else:
            # Production: Return generic error
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": "An internal error occurred.",
                },
            )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions - safe to expose."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.warning(
            f"Validation error: {exc.errors()}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors()},
        )

    # Include routers
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check(
        request: Request,
        store: Annotated[LocalStore, Depends(get_local_store)],
    ):
        """Health check endpoint. A store initialized after a failed startup counts as healthy."""
        if request.app.state.storage_error and not store.initialized:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable", "detail": request.app.state.storage_error},
            )
        return {"status": "healthy"}

    return app


app = create_app()
