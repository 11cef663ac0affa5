"""
Providers router: static metadata and live availability
"""

from fastapi import APIRouter, Depends

from ...core.models import ProviderKind
from ...pipeline.service import PipelineService
from ..dependencies import get_pipeline_service
from ..models import ProviderAvailability, ProviderInfo

router = APIRouter()


@router.get("", response_model=list[ProviderInfo])
async def list_providers(pipeline: PipelineService = Depends(get_pipeline_service)):
    """
    List registered providers of every kind, in fallback order
    """
    return [
        ProviderInfo(**descriptor.to_dict())
        for kind in ProviderKind
        for descriptor in pipeline.registry.descriptors(kind)
    ]


@router.get("/{kind}", response_model=ProviderAvailability)
async def get_provider_availability(
    kind: ProviderKind, pipeline: PipelineService = Depends(get_pipeline_service)
):
    """
    Probe every provider of a kind

    Each call probes afresh; nothing is cached.
    """
    availability = await pipeline.available_providers(kind)
    return ProviderAvailability(providers=availability, default=pipeline.default_provider(kind))
