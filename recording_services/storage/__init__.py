"""
Recording persistence with pluggable storage providers
"""

from .providers import InMemoryStorageProvider, LocalStorageProvider
from .service import RecordingRepository, recording_from_row

__all__ = [
    "RecordingRepository",
    "recording_from_row",
    "InMemoryStorageProvider",
    "LocalStorageProvider",
]
