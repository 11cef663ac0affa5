"""
Shared httpx helpers for provider adapters
"""

from typing import Optional

import httpx

from .exceptions import ProviderUnavailableError, UpstreamError


def ensure_success(response: httpx.Response, provider_id: str) -> httpx.Response:
    """
    Raise UpstreamError for any non-2xx response

    Args:
        response: Response to check
        provider_id: Provider the response came from

    Returns:
        The same response, for chaining
    """
    if not response.is_success:
        raise UpstreamError(response.status_code, response.text, provider_id=provider_id)
    return response


class HTTPProviderMixin:
    """
    Owns an httpx.AsyncClient unless one is injected

    Injected clients (tests, shared pools) are never closed here.
    """

    def _init_http(self, http_client: Optional[httpx.AsyncClient], timeout: float) -> None:
        self._http = http_client
        self._owns_http = http_client is None
        self._timeout = timeout

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def _send(self, provider_id: str, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, translating transport failures into ProviderUnavailableError"""
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise ProviderUnavailableError(
                f"{provider_id} unreachable: {str(e)}", provider_id=provider_id
            ) from e
        return ensure_success(response, provider_id)

    async def aclose(self) -> None:
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None
