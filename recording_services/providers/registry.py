"""
Capability registry: probes providers and resolves which one to use
"""

import asyncio
from typing import Optional, Union

from ..core.exceptions import ConfigurationError, NoProviderAvailableError
from ..core.interfaces import AnalysisProvider, TranscriptionProvider
from ..core.logging import get_logger
from ..core.models import ProviderDescriptor, ProviderKind

logger = get_logger(__name__)

AnyProvider = Union[TranscriptionProvider, AnalysisProvider]


def select_provider(
    kind: ProviderKind,
    requested: Optional[str],
    availability: dict[str, bool],
    priority: list[str],
) -> str:
    """
    Pick the provider to use from an availability snapshot

    The requested provider wins when it is available; otherwise the first
    available entry of the priority order is used. The same snapshot always
    yields the same answer.

    Args:
        kind: Provider kind, used in errors
        requested: Provider id the caller asked for (None for no preference)
        availability: Mapping of provider id to probe result
        priority: Fallback order for this kind

    Returns:
        Selected provider id

    Raises:
        NoProviderAvailableError: nothing in the snapshot is available
    """
    if requested and availability.get(requested):
        return requested

    for provider_id in priority:
        if availability.get(provider_id):
            if requested:
                logger.warning(
                    f"{kind.value} provider '{requested}' not available, "
                    f"falling back to '{provider_id}'"
                )
            return provider_id

    raise NoProviderAvailableError(kind.value, requested)


class CapabilityRegistry:
    """
    Registry of provider instances per kind with fresh probing on every call
    """

    def __init__(
        self,
        transcription_providers: dict[str, TranscriptionProvider],
        analysis_providers: dict[str, AnalysisProvider],
        priorities: Optional[dict[ProviderKind, list[str]]] = None,
        probe_timeout_seconds: float = 5.0,
    ):
        """
        Initialize capability registry

        Args:
            transcription_providers: Transcription adapters keyed by provider id
            analysis_providers: Analysis adapters keyed by provider id
            priorities: Fallback order per kind; registration order if omitted
            probe_timeout_seconds: Upper bound for a single probe
        """
        self._providers: dict[ProviderKind, dict[str, AnyProvider]] = {
            ProviderKind.TRANSCRIPTION: dict(transcription_providers),
            ProviderKind.ANALYSIS: dict(analysis_providers),
        }
        self.probe_timeout_seconds = probe_timeout_seconds
        self._priorities: dict[ProviderKind, list[str]] = {}

        for kind, providers in self._providers.items():
            order = list((priorities or {}).get(kind) or providers.keys())
            unknown = [p for p in order if p not in providers]
            if unknown:
                raise ConfigurationError(
                    f"Unknown {kind.value} providers in priority order: {', '.join(unknown)}"
                )
            self._priorities[kind] = order

        logger.info(
            "Initialized CapabilityRegistry with "
            f"transcription={self._priorities[ProviderKind.TRANSCRIPTION]} "
            f"analysis={self._priorities[ProviderKind.ANALYSIS]}"
        )

    def priority(self, kind: ProviderKind) -> list[str]:
        """Fallback order for a kind"""
        return list(self._priorities[kind])

    def provider_ids(self, kind: ProviderKind) -> list[str]:
        """All registered ids for a kind, priority order first"""
        order = self.priority(kind)
        return order + [p for p in self._providers[kind] if p not in order]

    def get(self, kind: ProviderKind, provider_id: str) -> AnyProvider:
        """Get a registered provider instance"""
        try:
            return self._providers[kind][provider_id]
        except KeyError:
            raise ConfigurationError(f"Unknown {kind.value} provider: {provider_id}")

    def descriptors(self, kind: ProviderKind) -> list[ProviderDescriptor]:
        """Static metadata for every registered provider of a kind"""
        return [self._providers[kind][p].descriptor for p in self.provider_ids(kind)]

    async def _safe_probe(self, provider: AnyProvider) -> bool:
        try:
            return bool(
                await asyncio.wait_for(provider.probe(), timeout=self.probe_timeout_seconds)
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Probe for {provider.provider_id} timed out after {self.probe_timeout_seconds}s"
            )
            return False
        except Exception as e:
            logger.warning(f"Probe for {provider.provider_id} failed: {str(e)}")
            return False

    async def available_providers(self, kind: ProviderKind) -> dict[str, bool]:
        """
        Probe every provider of a kind

        Probes run concurrently and are never cached. A probe that raises or
        times out counts as unavailable.

        Returns:
            Mapping of provider id to availability, priority order first
        """
        ids = self.provider_ids(kind)
        results = await asyncio.gather(
            *(self._safe_probe(self._providers[kind][p]) for p in ids)
        )
        availability = dict(zip(ids, results))
        logger.debug(f"{kind.value} availability: {availability}")
        return availability

    async def resolve(
        self, kind: ProviderKind, requested: Optional[str] = None
    ) -> tuple[str, AnyProvider]:
        """
        Probe, select and return the provider to use

        Args:
            kind: Provider kind
            requested: Preferred provider id

        Returns:
            Tuple of (provider id, provider instance)

        Raises:
            NoProviderAvailableError: nothing is available
        """
        if requested and requested not in self._providers[kind]:
            logger.warning(f"Unknown {kind.value} provider requested: {requested}")

        availability = await self.available_providers(kind)
        provider_id = select_provider(kind, requested, availability, self._priorities[kind])
        logger.info(f"Selected {kind.value} provider: {provider_id}")
        return provider_id, self._providers[kind][provider_id]

    async def aclose(self) -> None:
        """Close every registered provider"""
        for providers in self._providers.values():
            for provider in providers.values():
                try:
                    await provider.aclose()
                except Exception as e:
                    logger.warning(f"Failed to close provider {provider.provider_id}: {str(e)}")
