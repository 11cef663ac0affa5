"""
API routers
"""

from .health import router as health_router
from .providers import router as providers_router
from .recordings import router as recordings_router

__all__ = ["health_router", "providers_router", "recordings_router"]
