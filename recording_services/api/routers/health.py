"""
Health router for the recordings API
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends

from ... import __version__
from ...config import ServiceFactory
from ...core.models import ProviderKind
from ...pipeline.service import PipelineService
from ..dependencies import get_pipeline_service, get_service_factory
from ..models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def get_health():
    """
    Health check endpoint

    Returns basic liveness of the service
    """
    return HealthStatus(status="healthy", timestamp=datetime.now(), version=__version__)


@router.get("/status")
async def get_status(
    factory: ServiceFactory = Depends(get_service_factory),
    pipeline: PipelineService = Depends(get_pipeline_service),
) -> dict[str, Any]:
    """
    Detailed service status

    Returns configuration validation, live provider availability and the
    number of runs in progress
    """
    validation = factory.validate_configuration()

    return {
        "status": "healthy" if validation["valid"] else "unhealthy",
        "version": __version__,
        "timestamp": datetime.now().isoformat(),
        "configuration": {
            "transcription_provider": factory.settings.transcription_provider,
            "analysis_provider": factory.settings.analysis_provider,
            "storage_provider": factory.settings.storage_provider,
            "environment": factory.settings.environment,
        },
        "validation": validation,
        "providers": {
            kind.value: await pipeline.available_providers(kind) for kind in ProviderKind
        },
        "statistics": {"active_jobs": len(pipeline.active_jobs())},
    }
