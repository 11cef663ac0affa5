"""
Recording services: multi-provider transcription and analysis pipeline
"""

__version__ = "0.1.0"

from .config import ProviderConfig, ServiceFactory, Settings
from .core import (
    AudioArtifact,
    ProviderKind,
    Recording,
    RecordingStatus,
    configure_logging,
    get_logger,
)
from .pipeline import PipelineOrchestrator, PipelineService

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "ProviderConfig",
    "ServiceFactory",
    # Pipeline
    "PipelineService",
    "PipelineOrchestrator",
    # Models
    "AudioArtifact",
    "ProviderKind",
    "Recording",
    "RecordingStatus",
    # Logging
    "configure_logging",
    "get_logger",
]
