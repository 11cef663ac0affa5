"""
High-level analysis service for summaries and reports
"""

from typing import Optional

from ..core.logging import get_logger
from ..core.models import ProviderKind, Report, Summary
from ..providers.registry import CapabilityRegistry

logger = get_logger(__name__)


class AnalysisService:
    """
    Runs summary and report stages against whichever analysis provider is live

    The provider is resolved per stage, so a backend that drops out between
    summary and report is replaced by the next one in priority order.
    """

    def __init__(self, registry: CapabilityRegistry):
        self.registry = registry

    async def summarize(
        self, transcript_text: str, requested_provider: Optional[str] = None
    ) -> tuple[str, Summary]:
        """
        Summarize a transcript

        Returns:
            Tuple of (provider id used, summary)
        """
        provider_id, provider = await self.registry.resolve(
            ProviderKind.ANALYSIS, requested_provider
        )
        logger.info(f"Generating summary with {provider_id}")
        return provider_id, await provider.summarize(transcript_text)

    async def report(
        self,
        transcript_text: str,
        summary: Summary,
        requested_provider: Optional[str] = None,
    ) -> tuple[str, Report]:
        """
        Build a report from a transcript and its summary

        Returns:
            Tuple of (provider id used, report)
        """
        provider_id, provider = await self.registry.resolve(
            ProviderKind.ANALYSIS, requested_provider
        )
        logger.info(f"Generating report with {provider_id}")
        return provider_id, await provider.report(transcript_text, summary)
