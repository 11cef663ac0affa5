"""
Async HTTP client for the recordings API
"""

from pathlib import Path
from typing import Any, Optional, Union

import httpx

from ..core.exceptions import JobNotFoundError, PreconditionFailedError
from ..core.http import HTTPProviderMixin, ensure_success
from ..core.logging import get_logger

logger = get_logger(__name__)

CLIENT_ID = "recordings-api"


class RecordingsAPIClient(HTTPProviderMixin):
    """
    Thin wrapper over the recordings HTTP API

    Transport failures surface as httpx exceptions, non-2xx answers as
    UpstreamError, except 404 and 409 which map onto JobNotFoundError and
    PreconditionFailedError.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._init_http(http_client, timeout_seconds)

    async def _request(
        self, method: str, path: str, recording_id: Optional[str] = None, **kwargs
    ) -> httpx.Response:
        response = await self.http.request(method, f"{self.base_url}{path}", **kwargs)
        if recording_id is not None:
            if response.status_code == 404:
                raise JobNotFoundError(recording_id)
            if response.status_code == 409:
                raise PreconditionFailedError(_detail(response))
        return ensure_success(response, CLIENT_ID)

    async def create_recording(
        self,
        audio: Union[str, Path, bytes],
        title: str,
        duration: float = 0,
        transcription_provider: Optional[str] = None,
        analysis_provider: Optional[str] = None,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> dict[str, Any]:
        """
        Upload audio and start the pipeline

        Args:
            audio: File path or raw bytes
            title: Recording title
            duration: Length in seconds
            transcription_provider: Preferred transcription provider id
            analysis_provider: Preferred analysis provider id
            filename: Name sent with raw bytes
            content_type: MIME type sent with the audio

        Returns:
            Initial recording snapshot (status processing)
        """
        if isinstance(audio, (str, Path)):
            path = Path(audio)
            content = path.read_bytes()
            filename = path.name
        else:
            content = audio

        data = {"title": title, "duration": str(duration)}
        if transcription_provider:
            data["transcription_provider"] = transcription_provider
        if analysis_provider:
            data["analysis_provider"] = analysis_provider

        response = await self._request(
            "POST",
            "/recordings",
            data=data,
            files={"audio": (filename, content, content_type)},
        )
        recording = response.json()
        logger.info(f"Created recording {recording['id']}")
        return recording

    async def get_recording(self, recording_id: str) -> dict[str, Any]:
        response = await self._request("GET", f"/recordings/{recording_id}", recording_id)
        return response.json()

    async def list_recordings(
        self, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if status:
            params["status"] = status
        response = await self._request("GET", "/recordings", params=params)
        return response.json()["recordings"]

    async def reanalyze(
        self, recording_id: str, analysis_provider: Optional[str] = None
    ) -> dict[str, Any]:
        body = {"analysis_provider": analysis_provider} if analysis_provider else {}
        response = await self._request(
            "POST", f"/recordings/{recording_id}/reanalyze", recording_id, json=body
        )
        return response.json()

    async def delete_recording(self, recording_id: str) -> None:
        await self._request("DELETE", f"/recordings/{recording_id}", recording_id)

    async def providers(self, kind: str) -> dict[str, Any]:
        """
        Get provider availability for a kind

        Returns:
            {"providers": {id: bool}, "default": id}
        """
        response = await self._request("GET", f"/providers/{kind}")
        return response.json()


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)
