"""
Recordings API FastAPI Application

REST API for the recording analysis pipeline.

Features:
- Audio upload with background transcription, summary and report
- Pollable recording snapshots and reanalysis
- Live provider availability per kind
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.exceptions import (
    ConfigurationError,
    JobNotFoundError,
    NoProviderAvailableError,
    PreconditionFailedError,
)
from ..core.logging import configure_logging, get_logger
from .config import APISettings
from .dependencies import get_pipeline_service, get_service_factory, get_settings
from .routers import health_router, providers_router, recordings_router

logger = get_logger(__name__)


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code, "timestamp": datetime.now().isoformat()},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()
    logger.info(f"Starting {settings.service_name}")

    factory = get_service_factory()
    validation = factory.validate_configuration()

    if not validation["valid"]:
        for error in validation["errors"]:
            logger.error(f"Configuration error: {error}")
        raise RuntimeError("Invalid service configuration")
    for warning in validation["warnings"]:
        logger.warning(f"Configuration warning: {warning}")

    logger.info("Service initialized successfully")

    yield

    logger.info(f"Shutting down {settings.service_name}")
    if get_pipeline_service.cache_info().currsize:
        await get_pipeline_service().aclose()


def register_exception_handlers(app: FastAPI) -> None:
    """Map the service error taxonomy onto HTTP responses"""

    @app.exception_handler(JobNotFoundError)
    async def not_found_handler(request: Request, exc: JobNotFoundError):
        return _error(404, str(exc), "NOT_FOUND")

    @app.exception_handler(PreconditionFailedError)
    async def precondition_handler(request: Request, exc: PreconditionFailedError):
        return _error(409, str(exc), "PRECONDITION_FAILED")

    @app.exception_handler(NoProviderAvailableError)
    async def no_provider_handler(request: Request, exc: NoProviderAvailableError):
        return _error(503, str(exc), "NO_PROVIDER_AVAILABLE")

    @app.exception_handler(ConfigurationError)
    async def configuration_handler(request: Request, exc: ConfigurationError):
        return _error(400, str(exc), "BAD_REQUEST")

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(400, str(exc), "BAD_REQUEST")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {str(exc)}", exc_info=exc)
        return _error(500, "Internal server error", "INTERNAL_ERROR")


def create_app(settings: Optional[APISettings] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: API settings, read from the environment if None

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        service_name=settings.service_name,
    )

    app = FastAPI(
        title="Recordings API",
        description=__doc__,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(recordings_router, prefix="/recordings", tags=["recordings"])
    app.include_router(providers_router, prefix="/providers", tags=["providers"])

    register_exception_handlers(app)
    return app


app = create_app()


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn"""
    settings = get_settings()
    uvicorn.run(
        "recording_services.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
