"""
OpenAI chat completions implementation of AnalysisProvider
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
from ...core.models import ProviderDescriptor, ProviderKind
from .base import JSONChatAnalysisProvider


class OpenAIAnalysisProvider(JSONChatAnalysisProvider):
    """
    Summaries and reports from an OpenAI chat model in JSON mode
    """

    descriptor = ProviderDescriptor(
        id="openai",
        kind=ProviderKind.ANALYSIS,
        name="OpenAI GPT",
        is_local=False,
        features=("json_mode",),
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: float = 120.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize OpenAI analysis provider

        Args:
            api_key: OpenAI API key (will read from env if not provided)
            model: Chat model (OPENAI_ANALYSIS_MODEL or gpt-4o-mini)
            timeout_seconds: Request timeout
            client: Optional preconfigured AsyncOpenAI client
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or os.environ.get("OPENAI_ANALYSIS_MODEL") or "gpt-4o-mini"
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
    def from_config(cls, config, settings) -> "OpenAIAnalysisProvider":
        return cls(
            api_key=config.get("api_key"),
            model=config.get("model"),
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def probe(self) -> bool:
        return bool(self.api_key or self._client is not None)

    async def _complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                f"OpenAI analysis timed out: {str(e)}", provider_id=self.provider_id
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderUnavailableError(
                f"OpenAI unreachable: {str(e)}", provider_id=self.provider_id
            ) from e
        except openai.APIStatusError as e:
            raise UpstreamError(
                e.status_code, str(e.message), provider_id=self.provider_id
            ) from e

        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
