"""
Storage provider implementations
"""

from .local import LocalStorageProvider
from .memory import InMemoryStorageProvider

__all__ = ["InMemoryStorageProvider", "LocalStorageProvider"]
