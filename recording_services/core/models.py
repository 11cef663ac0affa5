"""
Data models for the recording pipeline
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class RecordingStatus(Enum):
    """Recording (job) lifecycle states"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further automatic mutation happens in this state"""
        return self in (RecordingStatus.COMPLETED, RecordingStatus.FAILED)


class ProviderKind(Enum):
    """Capability a provider implements"""

    TRANSCRIPTION = "transcription"
    ANALYSIS = "analysis"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static metadata about a provider"""

    id: str
    kind: ProviderKind
    name: str
    is_local: bool = False
    features: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "is_local": self.is_local,
            "features": list(self.features),
        }


@dataclass
class AudioArtifact:
    """Uploaded audio handed to a transcription provider"""

    content: bytes
    filename: str = "recording.webm"
    content_type: str = "audio/webm"
    url: Optional[str] = None

    @property
    def size(self) -> int:
        """Size in bytes"""
        return len(self.content)

    @property
    def extension(self) -> str:
        """Get file extension"""
        return Path(self.filename).suffix.lower()


@dataclass
class TranscriptSegment:
    """A timed piece of transcribed text"""

    start: float
    end: float
    text: str

    @property
    def duration(self) -> float:
        """Get segment duration in seconds"""
        return self.end - self.start

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}


def normalize_segments(segments: list[TranscriptSegment]) -> list[TranscriptSegment]:
    """
    Order segments by start time and clamp inverted ranges

    Upstream APIs report words, utterances or nothing at all; whatever they
    return, the stored sequence has start <= end and non-decreasing starts.
    """
    ordered = sorted(segments, key=lambda s: s.start)
    return [
        TranscriptSegment(start=s.start, end=max(s.start, s.end), text=s.text.strip())
        for s in ordered
    ]


@dataclass
class Transcript:
    """Normalized transcription result"""

    content: str
    confidence: float
    language: str
    speaker_count: Optional[int] = None
    segments: list[TranscriptSegment] = field(default_factory=list)

    def __post_init__(self):
        self.confidence = min(100.0, max(0.0, float(self.confidence)))
        if self.speaker_count is not None and self.speaker_count < 1:
            self.speaker_count = 1
        self.segments = normalize_segments(self.segments)

    @property
    def word_count(self) -> int:
        """Get word count of transcription"""
        return len(self.content.split())

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "confidence": self.confidence,
            "language": self.language,
            "speaker_count": self.speaker_count,
            "segments": [s.to_dict() for s in self.segments],
        }


def _unique(values: list[str]) -> list[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


@dataclass
class Summary:
    """Summary of a transcript"""

    content: str
    key_points: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    sentiment_score: float = 0.0

    def __post_init__(self):
        # topics behave as a set but keep first-seen order for display
        self.topics = _unique(self.topics)
        self.sentiment_score = min(1.0, max(-1.0, float(self.sentiment_score)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "key_points": list(self.key_points),
            "topics": list(self.topics),
            "sentiment_score": self.sentiment_score,
        }


@dataclass
class ReportMetrics:
    """Communication metrics; None marks a field the provider left out"""

    speaking_time: Optional[float] = None
    pause_frequency: Optional[float] = None
    average_response_time: Optional[float] = None
    sentiment_trend: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return None not in (
            self.speaking_time,
            self.pause_frequency,
            self.average_response_time,
            self.sentiment_trend,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "speaking_time": self.speaking_time,
            "pause_frequency": self.pause_frequency,
            "average_response_time": self.average_response_time,
            "sentiment_trend": self.sentiment_trend,
        }


@dataclass
class SentimentAnalysis:
    """Overall sentiment; None marks a field the provider left out"""

    overall: Optional[str] = None
    confidence: Optional[float] = None
    emotions: Optional[list[str]] = None

    def __post_init__(self):
        if self.emotions is not None:
            self.emotions = _unique(self.emotions)

    @property
    def is_complete(self) -> bool:
        return None not in (self.overall, self.confidence, self.emotions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "confidence": self.confidence,
            "emotions": list(self.emotions) if self.emotions is not None else None,
        }


@dataclass
class Report:
    """Analytical report built from a transcript and its summary"""

    content: str
    insights: list[str] = field(default_factory=list)
    action_items: list[str] = field(default_factory=list)
    metrics: Optional[ReportMetrics] = None
    sentiment_analysis: Optional[SentimentAnalysis] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "insights": list(self.insights),
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "action_items": list(self.action_items),
            "sentiment_analysis": (
                self.sentiment_analysis.to_dict() if self.sentiment_analysis else None
            ),
        }


@dataclass
class Recording:
    """A persisted job: one audio artifact and whatever stages produced for it"""

    id: str
    title: str
    audio_url: str
    duration: float
    size: int
    status: RecordingStatus
    created_at: datetime
    updated_at: datetime
    transcript: Optional[Transcript] = None
    summary: Optional[Summary] = None
    report: Optional[Report] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "title": self.title,
            "audio_url": self.audio_url,
            "duration": self.duration,
            "size": self.size,
            "status": self.status.value,
            "transcript": self.transcript.to_dict() if self.transcript else None,
            "summary": self.summary.to_dict() if self.summary else None,
            "report": self.report.to_dict() if self.report else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
