"""
Ollama implementation of AnalysisProvider for locally hosted models
"""

import os
from typing import Optional

import httpx

from ...core.exceptions import MalformedProviderOutputError
from ...core.http import HTTPProviderMixin
from ...core.logging import get_logger
from ...core.models import ProviderDescriptor, ProviderKind
from .base import JSONChatAnalysisProvider

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"


class OllamaAnalysisProvider(HTTPProviderMixin, JSONChatAnalysisProvider):
    """
    Summaries and reports from a model served by a local Ollama daemon
    """

    descriptor = ProviderDescriptor(
        id="ollama",
        kind=ProviderKind.ANALYSIS,
        name="Ollama (local)",
        is_local=True,
        features=("json_mode", "offline"),
    )

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (
            base_url or os.environ.get("OLLAMA_BASE_URL") or DEFAULT_BASE_URL
        ).rstrip("/")
        self.model = model or os.environ.get("OLLAMA_MODEL") or DEFAULT_MODEL
        self._init_http(http_client, timeout_seconds)

    @classmethod
    def from_config(cls, config, settings) -> "OllamaAnalysisProvider":
        return cls(
            base_url=config.get("base_url"),
            model=config.get("model"),
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def probe(self) -> bool:
        try:
            response = await self.http.get(f"{self.base_url}/api/tags", timeout=5.0)
        except httpx.HTTPError as e:
            logger.debug(f"Ollama not reachable at {self.base_url}: {str(e)}")
            return False
        return response.is_success

    async def _complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        response = await self._send(
            self.provider_id,
            "POST",
            f"{self.base_url}/api/chat",
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "format": "json",
                "stream": False,
                "options": {"temperature": self.temperature},
            },
        )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedProviderOutputError(
                "Ollama returned non-JSON envelope", self.provider_id, response.text
            ) from e

        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, dict):
            raise MalformedProviderOutputError(
                "Ollama response has no message", self.provider_id, response.text
            )
        return message.get("content")
