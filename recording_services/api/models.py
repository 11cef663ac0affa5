"""
Pydantic models for the recordings API
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..core.models import Recording


class HealthStatus(BaseModel):
    """Health status model"""

    status: str = Field(description="Service health status")
    timestamp: datetime = Field(description="Status check timestamp")
    version: str = Field(description="Service version")


class SegmentModel(BaseModel):
    start: float
    end: float
    text: str


class TranscriptModel(BaseModel):
    """Transcript of a recording"""

    content: str
    confidence: float = Field(ge=0, le=100, description="Confidence percentage")
    language: str
    speaker_count: Optional[int] = Field(None, ge=1)
    segments: list[SegmentModel] = Field(default_factory=list)


class SummaryModel(BaseModel):
    """Summary of a transcript"""

    content: str
    key_points: list[str]
    topics: list[str]
    sentiment_score: float = Field(ge=-1, le=1)


class ReportModel(BaseModel):
    """Analytical report"""

    content: str
    insights: list[str]
    metrics: Optional[dict[str, Any]] = None
    action_items: list[str]
    sentiment_analysis: Optional[dict[str, Any]] = None


class RecordingResponse(BaseModel):
    """Recording snapshot; stage fields are null until produced"""

    id: str
    title: str
    audio_url: str
    duration: float
    size: int
    status: str = Field(description="pending, processing, completed or failed")
    transcript: Optional[TranscriptModel] = None
    summary: Optional[SummaryModel] = None
    report: Optional[ReportModel] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_recording(cls, recording: Recording) -> "RecordingResponse":
        return cls.model_validate(recording.to_dict())


class RecordingListResponse(BaseModel):
    recordings: list[RecordingResponse]
    limit: int
    offset: int


class ReanalyzeRequest(BaseModel):
    """Reanalysis options"""

    analysis_provider: Optional[str] = Field(None, description="Preferred analysis provider id")


class ProviderAvailability(BaseModel):
    """Probe results for one provider kind"""

    providers: dict[str, bool] = Field(description="Provider id to availability")
    default: Optional[str] = Field(None, description="Provider used when none is requested")


class ProviderInfo(BaseModel):
    """Static provider metadata"""

    id: str
    kind: str
    name: str
    is_local: bool
    features: list[str]


class ErrorResponse(BaseModel):
    error: str
    code: str
    timestamp: datetime
