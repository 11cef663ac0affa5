"""
Strict parsing of structured analysis output

Provider responses are validated against pydantic payload models. Anything
that does not fit raises MalformedProviderOutputError; nothing is coerced
into a partially populated result. Report metrics and sentiment analysis are
optional in the payload: missing pieces stay None and are filled by the
pipeline.
"""

import json
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import MalformedProviderOutputError
from ..core.models import Report, ReportMetrics, SentimentAnalysis, Summary

CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SummaryPayload(_Payload):
    summary: str = Field(min_length=1)
    key_points: list[str] = Field(alias="keyPoints")
    topics: list[str]
    sentiment_score: float = Field(alias="sentimentScore")


class MetricsPayload(_Payload):
    speaking_time: Optional[float] = Field(None, alias="speakingTime")
    pause_frequency: Optional[float] = Field(None, alias="pauseFrequency")
    average_response_time: Optional[float] = Field(None, alias="averageResponseTime")
    sentiment_trend: Optional[str] = Field(None, alias="sentimentTrend")


class SentimentPayload(_Payload):
    overall: Optional[str] = None
    confidence: Optional[float] = None
    emotions: Optional[list[str]] = None


class ReportPayload(_Payload):
    report: str = Field(min_length=1)
    insights: list[str]
    action_items: list[str] = Field(alias="actionItems")
    metrics: Optional[MetricsPayload] = None
    sentiment_analysis: Optional[SentimentPayload] = Field(None, alias="sentimentAnalysis")


def _load_object(raw: Optional[str], provider_id: Optional[str]) -> dict[str, Any]:
    if not raw or not raw.strip():
        raise MalformedProviderOutputError("Empty response", provider_id, raw or "")

    text = raw
    fenced = CODE_FENCE.match(raw)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedProviderOutputError(
            f"Response is not valid JSON: {e.msg}", provider_id, raw
        ) from e

    if not isinstance(data, dict):
        raise MalformedProviderOutputError(
            f"Expected a JSON object, got {type(data).__name__}", provider_id, raw
        )
    return data


def _describe(error: ValidationError) -> str:
    fields = sorted({".".join(str(p) for p in e["loc"]) for e in error.errors()})
    return ", ".join(fields)


def parse_summary(raw: Optional[str], provider_id: Optional[str] = None) -> Summary:
    """
    Parse a summary response

    Raises:
        MalformedProviderOutputError: not JSON, or a Summary field is missing or mistyped
    """
    data = _load_object(raw, provider_id)
    try:
        payload = SummaryPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedProviderOutputError(
            f"Summary output invalid: {_describe(e)}", provider_id, raw or ""
        ) from e

    return Summary(
        content=payload.summary,
        key_points=payload.key_points,
        topics=payload.topics,
        sentiment_score=payload.sentiment_score,
    )


def parse_report(raw: Optional[str], provider_id: Optional[str] = None) -> Report:
    """
    Parse a report response

    Raises:
        MalformedProviderOutputError: not JSON, or a Report field is missing or mistyped
    """
    data = _load_object(raw, provider_id)
    try:
        payload = ReportPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedProviderOutputError(
            f"Report output invalid: {_describe(e)}", provider_id, raw or ""
        ) from e

    metrics = None
    if payload.metrics is not None:
        metrics = ReportMetrics(
            speaking_time=payload.metrics.speaking_time,
            pause_frequency=payload.metrics.pause_frequency,
            average_response_time=payload.metrics.average_response_time,
            sentiment_trend=payload.metrics.sentiment_trend,
        )

    sentiment = None
    if payload.sentiment_analysis is not None:
        sentiment = SentimentAnalysis(
            overall=payload.sentiment_analysis.overall,
            confidence=payload.sentiment_analysis.confidence,
            emotions=payload.sentiment_analysis.emotions,
        )

    return Report(
        content=payload.report,
        insights=payload.insights,
        action_items=payload.action_items,
        metrics=metrics,
        sentiment_analysis=sentiment,
    )
