"""
Gladia implementation of TranscriptionProvider

Gladia processes audio out of band: the file is uploaded, a transcription
is submitted against the upload, and the result is polled by id.
"""

import asyncio
import os
from typing import Any, Optional

import httpx

from ...core.exceptions import (
    MalformedProviderOutputError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    UpstreamError,
)
from ...core.http import HTTPProviderMixin
from ...core.interfaces import TranscriptionProvider
from ...core.logging import get_logger
from ...core.models import (
    AudioArtifact,
    ProviderDescriptor,
    ProviderKind,
    Transcript,
    TranscriptSegment,
)
from ...core.polling import PollConfig, SleepFunc, poll_until

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.gladia.io/v2"
DEFAULT_CONFIDENCE = 0.95

PENDING_STATES = {"queued", "processing"}


class GladiaTranscriptionProvider(HTTPProviderMixin, TranscriptionProvider):
    """
    Gladia v2 pre-recorded transcription with diarization
    """

    descriptor = ProviderDescriptor(
        id="gladia",
        kind=ProviderKind.TRANSCRIPTION,
        name="Gladia",
        is_local=False,
        features=("diarization", "language_detection", "utterance_timestamps"),
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval_seconds: float = 5.0,
        max_poll_attempts: int = 60,
        timeout_seconds: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Initialize Gladia transcription provider

        Args:
            api_key: Gladia API key (read from GLADIA_API_KEY if not provided)
            base_url: API root
            poll_interval_seconds: Wait between result polls
            max_poll_attempts: Polls before giving up with ProviderTimeoutError
            timeout_seconds: Per-request HTTP timeout
            http_client: Optional shared client
            sleep: Coroutine used between polls
        """
        self.api_key = api_key or os.environ.get("GLADIA_API_KEY")
        self.base_url = (base_url or os.environ.get("GLADIA_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.poll_config = PollConfig(
            interval_seconds=poll_interval_seconds, max_attempts=max_poll_attempts
        )
        self._sleep = sleep
        self._init_http(http_client, timeout_seconds)

    @property
    def _headers(self) -> dict[str, str]:
        return {"x-gladia-key": self.api_key or ""}

    @classmethod
    def from_config(cls, config, settings) -> "GladiaTranscriptionProvider":
        return cls(
            api_key=config.get("api_key"),
            base_url=config.get("base_url"),
            poll_interval_seconds=settings.lro_poll_interval_seconds,
            max_poll_attempts=settings.lro_max_attempts,
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def probe(self) -> bool:
        if not self.api_key:
            return False
        try:
            response = await self.http.get(
                f"{self.base_url}/transcription", headers=self._headers, timeout=5.0
            )
        except httpx.HTTPError as e:
            logger.warning(f"Gladia connection check failed: {str(e)}")
            return False
        return response.status_code not in (401, 403)

    async def upload(self, artifact: AudioArtifact) -> str:
        """
        Upload audio to Gladia

        Returns:
            The upload handle (audio URL) to reference in a transcription request
        """
        response = await self._send(
            self.provider_id,
            "POST",
            f"{self.base_url}/upload",
            headers=self._headers,
            files={"audio": (artifact.filename, artifact.content, artifact.content_type)},
        )
        audio_url = response.json().get("audio_url")
        if not audio_url:
            raise MalformedProviderOutputError(
                "No audio URL returned from Gladia upload", self.provider_id, response.text
            )
        return audio_url

    async def submit(self, audio_url: str, options: Optional[dict[str, Any]] = None) -> str:
        """
        Start a transcription for an uploaded file

        Returns:
            Operation id to poll
        """
        payload = {
            "audio_url": audio_url,
            "diarization": True,
            "detect_language": True,
            "enable_code_switching": False,
        }
        payload.update(options or {})

        response = await self._send(
            self.provider_id,
            "POST",
            f"{self.base_url}/transcription",
            headers=self._headers,
            json=payload,
        )
        operation_id = response.json().get("id")
        if not operation_id:
            raise MalformedProviderOutputError(
                "No transcription ID returned from Gladia", self.provider_id, response.text
            )
        return operation_id

    async def poll(self, operation_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch an operation once

        Returns:
            The result payload when finished, None while still running

        Raises:
            UpstreamError: non-2xx, or Gladia reported the job as errored
        """
        response = await self._send(
            self.provider_id,
            "GET",
            f"{self.base_url}/transcription/{operation_id}",
            headers=self._headers,
        )
        data = response.json()
        status = data.get("status")

        if status == "error":
            raise UpstreamError(
                response.status_code,
                f"transcription errored ({data.get('error_code')}): {response.text}",
                provider_id=self.provider_id,
            )

        result = data.get("result")
        if isinstance(result, dict) and (
            result.get("transcription") or "full_transcript" in result
        ):
            return result

        if status == "done":
            raise MalformedProviderOutputError(
                "Gladia reported done without a transcription", self.provider_id, response.text
            )

        return None

    async def transcribe(self, artifact: AudioArtifact) -> Transcript:
        if not self.api_key:
            raise ProviderUnavailableError(
                "Gladia API key required. Set GLADIA_API_KEY environment variable",
                provider_id=self.provider_id,
            )

        logger.info(f"Uploading {artifact.filename} ({artifact.size} bytes) to Gladia")
        audio_url = await self.upload(artifact)

        operation_id = await self.submit(audio_url)
        logger.info(f"Gladia transcription {operation_id} started, polling for results")

        outcome = await poll_until(
            lambda: self.poll(operation_id),
            lambda result: result is not None,
            self.poll_config,
            sleep=self._sleep,
            label=f"gladia:{operation_id}",
        )

        if not outcome.done:
            raise ProviderTimeoutError(
                f"Gladia transcription {operation_id} timed out after "
                f"{outcome.attempts} polls",
                provider_id=self.provider_id,
                attempts=outcome.attempts,
            )

        transcript = self._to_transcript(outcome.value)
        logger.info(
            f"Gladia transcription completed: {transcript.word_count} words, "
            f"{transcript.speaker_count} speakers, language: {transcript.language}"
        )
        return transcript

    def _to_transcript(self, result: dict[str, Any]) -> Transcript:
        # compact results carry transcript and metadata at the top level
        transcription = result.get("transcription") or result
        metadata = result.get("metadata") or result

        content = transcription.get("full_transcript")
        if not isinstance(content, str):
            raise MalformedProviderOutputError(
                "Gladia result has no full_transcript", self.provider_id, str(result)[:500]
            )

        utterances = transcription.get("utterances") or []
        segments = [
            TranscriptSegment(
                start=float(u.get("start", 0.0)),
                end=float(u.get("end", 0.0)),
                text=u.get("text", ""),
            )
            for u in utterances
        ]

        speakers = {u.get("speaker") for u in utterances if u.get("speaker") is not None}
        if speakers:
            speaker_count = len(speakers)
        else:
            speaker_count = metadata.get("number_of_distinct_speakers") or metadata.get("speakers")

        confidence = metadata.get("confidence_score", metadata.get("confidence"))
        if confidence is None:
            scores = [u["confidence"] for u in utterances if u.get("confidence") is not None]
            confidence = sum(scores) / len(scores) if scores else DEFAULT_CONFIDENCE

        language = metadata.get("language")
        if not language:
            languages = transcription.get("languages") or []
            language = languages[0] if languages else "en"

        return Transcript(
            content=content,
            confidence=round(float(confidence) * 100),
            language=language,
            speaker_count=speaker_count,
            segments=segments,
        )
