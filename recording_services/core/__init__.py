"""
Core interfaces and models for the recording pipeline
"""

from .exceptions import (
    ConfigurationError,
    JobNotFoundError,
    MalformedProviderOutputError,
    NoProviderAvailableError,
    PreconditionFailedError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    RecordNotFoundError,
    ServiceError,
    StorageError,
    UpstreamError,
)
from .interfaces import AnalysisProvider, StorageProvider, TranscriptionProvider
from .logging import configure_logging, get_logger
from .models import (
    AudioArtifact,
    ProviderDescriptor,
    ProviderKind,
    Recording,
    RecordingStatus,
    Report,
    ReportMetrics,
    SentimentAnalysis,
    Summary,
    Transcript,
    TranscriptSegment,
)
from .polling import PollConfig, PollResult, poll_until

__all__ = [
    # Interfaces
    "TranscriptionProvider",
    "AnalysisProvider",
    "StorageProvider",
    # Models
    "AudioArtifact",
    "ProviderDescriptor",
    "ProviderKind",
    "Recording",
    "RecordingStatus",
    "Report",
    "ReportMetrics",
    "SentimentAnalysis",
    "Summary",
    "Transcript",
    "TranscriptSegment",
    # Exceptions
    "ServiceError",
    "ConfigurationError",
    "StorageError",
    "RecordNotFoundError",
    "ProviderError",
    "ProviderUnavailableError",
    "NoProviderAvailableError",
    "UpstreamError",
    "ProviderTimeoutError",
    "MalformedProviderOutputError",
    "PreconditionFailedError",
    "JobNotFoundError",
    # Polling
    "PollConfig",
    "PollResult",
    "poll_until",
    # Logging
    "configure_logging",
    "get_logger",
]
