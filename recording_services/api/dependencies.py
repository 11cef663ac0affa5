"""
Dependency injection for the recordings API
"""

from functools import lru_cache

from ..config import ServiceFactory, Settings
from ..pipeline.service import PipelineService
from .config import APISettings
from .config import get_settings as load_settings


@lru_cache()
def get_settings() -> APISettings:
    """Get API settings"""
    return load_settings()


@lru_cache()
def get_service_factory() -> ServiceFactory:
    """Get service factory instance"""
    api_settings = get_settings()

    service_settings = Settings.from_env()
    service_settings.environment = "development" if api_settings.debug else "production"
    service_settings.log_level = api_settings.log_level

    return ServiceFactory(service_settings)


@lru_cache()
def get_pipeline_service() -> PipelineService:
    """Get the process-wide pipeline service"""
    return get_service_factory().create_pipeline_service()
