"""
OpenAI Whisper implementation of TranscriptionProvider
"""

import os
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from ...core.exceptions import (
    ProviderTimeoutError,
    ProviderUnavailableError,
    UpstreamError,
)
from ...core.interfaces import TranscriptionProvider
from ...core.logging import get_logger
from ...core.models import (
    AudioArtifact,
    ProviderDescriptor,
    ProviderKind,
    Transcript,
    TranscriptSegment,
)

logger = get_logger(__name__)

# Whisper reports no confidence score
DEFAULT_CONFIDENCE = 95


class OpenAITranscriptionProvider(TranscriptionProvider):
    """
    OpenAI Whisper implementation of transcription provider
    """

    descriptor = ProviderDescriptor(
        id="openai",
        kind=ProviderKind.TRANSCRIPTION,
        name="OpenAI Whisper",
        is_local=False,
        features=("word_timestamps", "language_detection"),
    )

    # OpenAI limits
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25 MB

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "whisper-1",
        timeout_seconds: float = 120.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize OpenAI transcription provider

        Args:
            api_key: OpenAI API key (will read from env if not provided)
            model: Transcription model
            timeout_seconds: Request timeout
            client: Optional preconfigured AsyncOpenAI client
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise ProviderUnavailableError(
                    "OpenAI API key required. Set OPENAI_API_KEY environment variable",
                    provider_id=self.provider_id,
                )
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_seconds)
        return self._client

    @classmethod
    def from_config(cls, config, settings) -> "OpenAITranscriptionProvider":
        return cls(
            api_key=config.get("api_key"),
            model=config.get("model", "whisper-1"),
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def probe(self) -> bool:
        return bool(self.api_key or self._client is not None)

    async def transcribe(self, artifact: AudioArtifact) -> Transcript:
        if artifact.size > self.MAX_FILE_SIZE:
            raise UpstreamError(
                413,
                f"File too large: {artifact.size / (1024 * 1024):.1f}MB > 25MB",
                provider_id=self.provider_id,
            )

        logger.info(
            f"Transcribing {artifact.filename} ({artifact.size / 1024 / 1024:.1f}MB) "
            f"with model {self.model}"
        )

        try:
            response = await self.client.audio.transcriptions.create(
                file=(artifact.filename, artifact.content, artifact.content_type),
                model=self.model,
                response_format="verbose_json",
                timestamp_granularities=["word"],
            )
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                f"OpenAI transcription timed out: {str(e)}", provider_id=self.provider_id
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderUnavailableError(
                f"OpenAI unreachable: {str(e)}", provider_id=self.provider_id
            ) from e
        except openai.APIStatusError as e:
            raise UpstreamError(
                e.status_code, str(e.message), provider_id=self.provider_id
            ) from e

        words = getattr(response, "words", None) or []
        segments = [
            TranscriptSegment(
                start=getattr(word, "start", 0.0),
                end=getattr(word, "end", 0.0),
                text=getattr(word, "word", ""),
            )
            for word in words
        ]

        transcript = Transcript(
            content=response.text,
            confidence=DEFAULT_CONFIDENCE,
            language=getattr(response, "language", None) or "en",
            speaker_count=1,
            segments=segments,
        )

        logger.info(
            f"Transcription completed: {transcript.word_count} words, "
            f"language: {transcript.language}"
        )
        return transcript

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
