"""
Transcription service with pluggable providers
"""

from .providers import (
    GladiaTranscriptionProvider,
    HuggingFaceTranscriptionProvider,
    OpenAITranscriptionProvider,
)
from .service import TranscriptionService

__all__ = [
    "TranscriptionService",
    "GladiaTranscriptionProvider",
    "HuggingFaceTranscriptionProvider",
    "OpenAITranscriptionProvider",
]
