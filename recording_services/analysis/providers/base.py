"""
Shared flow for chat models that answer in JSON
"""

from abc import abstractmethod
from typing import Optional

from ...core.interfaces import AnalysisProvider
from ...core.logging import get_logger
from ...core.models import Report, Summary
from ..parsing import parse_report, parse_summary
from ..prompts import (
    REPORT_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_report_prompt,
    build_summary_prompt,
)

logger = get_logger(__name__)


class JSONChatAnalysisProvider(AnalysisProvider):
    """
    AnalysisProvider for chat models instructed to reply with a JSON object

    Subclasses implement one chat round trip; prompting and strict parsing
    live here so every backend produces the same Summary and Report shapes.
    """

    temperature: float = 0.3

    @abstractmethod
    async def _complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        """
        Send one system + user exchange and return the raw reply text

        Raises:
            ProviderUnavailableError, UpstreamError, ProviderTimeoutError
        """
        pass

    async def summarize(self, transcript_text: str) -> Summary:
        raw = await self._complete_json(
            SUMMARY_SYSTEM_PROMPT, build_summary_prompt(transcript_text)
        )
        summary = parse_summary(raw, self.provider_id)
        logger.info(
            f"{self.provider_id} summary: {len(summary.key_points)} key points, "
            f"{len(summary.topics)} topics"
        )
        return summary

    async def report(self, transcript_text: str, summary: Summary) -> Report:
        raw = await self._complete_json(
            REPORT_SYSTEM_PROMPT, build_report_prompt(transcript_text, summary)
        )
        report = parse_report(raw, self.provider_id)
        logger.info(
            f"{self.provider_id} report: {len(report.insights)} insights, "
            f"{len(report.action_items)} action items"
        )
        return report
