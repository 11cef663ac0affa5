"""
High-level transcription service that resolves a live provider per call
"""

from typing import Optional

from ..core.logging import get_logger
from ..core.models import AudioArtifact, ProviderKind, Transcript
from ..providers.registry import CapabilityRegistry

logger = get_logger(__name__)


class TranscriptionService:
    """
    High-level transcription service that works with any registered provider
    """

    def __init__(self, registry: CapabilityRegistry):
        """
        Initialize transcription service

        Args:
            registry: Capability registry holding the transcription adapters
        """
        self.registry = registry

        logger.info(
            "Initialized TranscriptionService with "
            f"{self.registry.provider_ids(ProviderKind.TRANSCRIPTION)}"
        )

    async def transcribe(
        self, artifact: AudioArtifact, requested_provider: Optional[str] = None
    ) -> tuple[str, Transcript]:
        """
        Transcribe an audio artifact with the requested provider or a fallback

        Args:
            artifact: Audio to transcribe
            requested_provider: Preferred provider id

        Returns:
            Tuple of (provider id used, transcript)
        """
        provider_id, provider = await self.registry.resolve(
            ProviderKind.TRANSCRIPTION, requested_provider
        )

        logger.info(f"Transcribing {artifact.filename} with {provider_id}")
        transcript = await provider.transcribe(artifact)

        logger.info(
            f"Transcription completed with {provider_id}: {transcript.word_count} words, "
            f"confidence {transcript.confidence:.0f}%"
        )
        return provider_id, transcript
