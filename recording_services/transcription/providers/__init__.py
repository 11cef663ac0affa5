"""
Transcription provider implementations
"""

from .gladia import GladiaTranscriptionProvider
from .huggingface import HuggingFaceTranscriptionProvider
from .openai import OpenAITranscriptionProvider

__all__ = [
    "GladiaTranscriptionProvider",
    "HuggingFaceTranscriptionProvider",
    "OpenAITranscriptionProvider",
]
