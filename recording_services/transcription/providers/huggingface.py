"""
Hugging Face Inference API implementation of TranscriptionProvider
"""

import os
import re
from typing import Optional

import httpx

from ...core.exceptions import MalformedProviderOutputError, ProviderUnavailableError
from ...core.http import HTTPProviderMixin
from ...core.interfaces import TranscriptionProvider
from ...core.logging import get_logger
from ...core.models import AudioArtifact, ProviderDescriptor, ProviderKind, Transcript

logger = get_logger(__name__)

DEFAULT_MODEL = "MohamedRashad/Arabic-Whisper-CodeSwitching-Edition"
DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models"

ARABIC_SCRIPT = re.compile(r"[\u0600-\u06FF]")


class HuggingFaceTranscriptionProvider(HTTPProviderMixin, TranscriptionProvider):
    """
    Code-switching Whisper model served by the Hugging Face Inference API

    The API answers synchronously with plain text: no timestamps, no
    diarization, no confidence.
    """

    descriptor = ProviderDescriptor(
        id="huggingface",
        kind=ProviderKind.TRANSCRIPTION,
        name="Hugging Face Arabic Whisper",
        is_local=False,
        features=("arabic", "code_switching"),
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key or os.environ.get("HUGGINGFACE_API_KEY")
        self.model = model or os.environ.get("HUGGINGFACE_MODEL") or DEFAULT_MODEL
        self.url = f"{base_url.rstrip('/')}/{self.model}"
        self._init_http(http_client, timeout_seconds)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    @classmethod
    def from_config(cls, config, settings) -> "HuggingFaceTranscriptionProvider":
        return cls(
            api_key=config.get("api_key"),
            model=config.get("model"),
            base_url=config.get("base_url", DEFAULT_BASE_URL),
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def probe(self) -> bool:
        if not self.api_key:
            return False
        try:
            response = await self.http.post(
                self.url, headers=self._headers, json={}, timeout=5.0
            )
        except httpx.HTTPError as e:
            logger.warning(f"Hugging Face connection check failed: {str(e)}")
            return False
        # 503 means the model is still loading, which still counts as reachable
        return response.status_code not in (401, 403)

    async def transcribe(self, artifact: AudioArtifact) -> Transcript:
        if not self.api_key:
            raise ProviderUnavailableError(
                "Hugging Face API key required. Set HUGGINGFACE_API_KEY environment variable",
                provider_id=self.provider_id,
            )

        logger.info(f"Transcribing {artifact.filename} with {self.model}")
        response = await self._send(
            self.provider_id,
            "POST",
            self.url,
            headers={**self._headers, "Content-Type": artifact.content_type},
            content=artifact.content,
        )

        try:
            text = response.json().get("text")
        except ValueError as e:
            raise MalformedProviderOutputError(
                "Hugging Face returned non-JSON output", self.provider_id, response.text
            ) from e

        if not text:
            raise MalformedProviderOutputError(
                "No transcription text returned from Hugging Face", self.provider_id, response.text
            )

        has_arabic = bool(ARABIC_SCRIPT.search(text))
        return Transcript(
            content=text.strip(),
            confidence=95 if has_arabic else 85,
            language="ar" if has_arabic else "en",
            speaker_count=1,
        )
