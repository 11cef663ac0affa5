"""
Configuration management for services
"""

from .factory import ServiceFactory
from .settings import ProviderConfig, Settings

__all__ = ["Settings", "ProviderConfig", "ServiceFactory"]
