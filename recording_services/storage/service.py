"""
Recording repository on top of a StorageProvider

Rows are kept flat, one column per stage field. A stage is present on the
mapped Recording iff its *_content column is non-null.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from ..core.exceptions import JobNotFoundError, RecordNotFoundError
from ..core.interfaces import StorageProvider
from ..core.logging import get_logger
from ..core.models import (
    AudioArtifact,
    Recording,
    RecordingStatus,
    Report,
    ReportMetrics,
    SentimentAnalysis,
    Summary,
    Transcript,
    TranscriptSegment,
)

logger = get_logger(__name__)

TRANSCRIPT_COLUMNS = (
    "transcription_content",
    "transcription_confidence",
    "transcription_language",
    "transcription_speaker_count",
    "transcription_timestamps",
)
SUMMARY_COLUMNS = (
    "summary_content",
    "summary_key_points",
    "summary_topics",
    "summary_sentiment_score",
)
REPORT_COLUMNS = (
    "report_content",
    "report_insights",
    "report_metrics",
    "report_action_items",
    "report_sentiment_analysis",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def transcript_columns(transcript: Transcript) -> dict[str, Any]:
    return {
        "transcription_content": transcript.content,
        "transcription_confidence": transcript.confidence,
        "transcription_language": transcript.language,
        "transcription_speaker_count": transcript.speaker_count,
        "transcription_timestamps": [s.to_dict() for s in transcript.segments],
    }


def summary_columns(summary: Summary) -> dict[str, Any]:
    return {
        "summary_content": summary.content,
        "summary_key_points": list(summary.key_points),
        "summary_topics": list(summary.topics),
        "summary_sentiment_score": summary.sentiment_score,
    }


def report_columns(report: Report) -> dict[str, Any]:
    return {
        "report_content": report.content,
        "report_insights": list(report.insights),
        "report_metrics": report.metrics.to_dict() if report.metrics else None,
        "report_action_items": list(report.action_items),
        "report_sentiment_analysis": (
            report.sentiment_analysis.to_dict() if report.sentiment_analysis else None
        ),
    }


def recording_from_row(row: dict[str, Any]) -> Recording:
    """
    Map a flat storage row onto a Recording

    Args:
        row: Row as returned by the storage collaborator

    Returns:
        Recording with transcript/summary/report populated where stored
    """
    transcript = None
    if row.get("transcription_content") is not None:
        transcript = Transcript(
            content=row["transcription_content"],
            confidence=row.get("transcription_confidence") or 0,
            language=row.get("transcription_language") or "en",
            speaker_count=row.get("transcription_speaker_count"),
            segments=[
                TranscriptSegment(start=s["start"], end=s["end"], text=s["text"])
                for s in row.get("transcription_timestamps") or []
            ],
        )

    summary = None
    if row.get("summary_content") is not None:
        summary = Summary(
            content=row["summary_content"],
            key_points=row.get("summary_key_points") or [],
            topics=row.get("summary_topics") or [],
            sentiment_score=row.get("summary_sentiment_score") or 0.0,
        )

    report = None
    if row.get("report_content") is not None:
        metrics = row.get("report_metrics")
        sentiment = row.get("report_sentiment_analysis")
        report = Report(
            content=row["report_content"],
            insights=row.get("report_insights") or [],
            action_items=row.get("report_action_items") or [],
            metrics=ReportMetrics(**metrics) if metrics else None,
            sentiment_analysis=SentimentAnalysis(**sentiment) if sentiment else None,
        )

    return Recording(
        id=row["id"],
        title=row.get("title") or "",
        audio_url=row.get("audio_url") or "",
        duration=row.get("duration") or 0,
        size=row.get("file_size") or 0,
        status=RecordingStatus(row.get("status", RecordingStatus.PENDING.value)),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        transcript=transcript,
        summary=summary,
        report=report,
    )


class RecordingRepository:
    """
    Persists recordings and their stage results through a storage collaborator

    Every write stamps updated_at. Stage writes are single update_record
    calls, so a reader never sees half of a stage.
    """

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        logger.info(f"Initialized RecordingRepository with {storage.__class__.__name__}")

    async def store_audio(self, artifact: AudioArtifact) -> str:
        """
        Save the uploaded audio and return its URL
        """
        url = await self.storage.put_blob(artifact.content, artifact.content_type)
        artifact.url = url
        return url

    async def create(
        self,
        title: str,
        audio_url: str,
        duration: float,
        size: int,
        status: RecordingStatus = RecordingStatus.PROCESSING,
    ) -> Recording:
        """
        Insert a new recording row

        Returns:
            The created Recording
        """
        now = _now()
        row = {
            "title": title,
            "duration": duration,
            "audio_url": audio_url,
            "file_size": size,
            "status": status.value,
            "created_at": now,
            "updated_at": now,
        }
        row.update({column: None for column in TRANSCRIPT_COLUMNS})
        row.update({column: None for column in SUMMARY_COLUMNS})
        row.update({column: None for column in REPORT_COLUMNS})

        stored = await self.storage.upsert_record(row)
        logger.info(f"Created recording {stored['id']} ({status.value})")
        return recording_from_row(stored)

    async def get(self, recording_id: str) -> Recording:
        """
        Fetch a recording

        Raises:
            JobNotFoundError: unknown id
        """
        try:
            row = await self.storage.get_record(recording_id)
        except RecordNotFoundError as e:
            raise JobNotFoundError(recording_id) from e
        return recording_from_row(row)

    async def list_recordings(
        self,
        status: Optional[RecordingStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Recording]:
        """
        List recordings, newest first

        Args:
            status: Only return recordings in this state
            limit: Maximum number of recordings
            offset: Number of recordings to skip
        """
        rows = await self.storage.list_records()
        if status is not None:
            rows = [r for r in rows if r.get("status") == status.value]
        rows.sort(key=lambda r: r.get("created_at") or "", reverse=True)
        return [recording_from_row(r) for r in rows[offset : offset + limit]]

    async def _update(self, recording_id: str, fields: dict[str, Any]) -> None:
        fields["updated_at"] = _now()
        try:
            await self.storage.update_record(recording_id, fields)
        except RecordNotFoundError as e:
            raise JobNotFoundError(recording_id) from e

    async def mark_processing(self, recording_id: str, clear_analysis: bool = False) -> None:
        """
        Set status to processing

        Args:
            recording_id: Recording to update
            clear_analysis: Also drop any stored summary and report
        """
        fields: dict[str, Any] = {"status": RecordingStatus.PROCESSING.value}
        if clear_analysis:
            fields.update({column: None for column in SUMMARY_COLUMNS})
            fields.update({column: None for column in REPORT_COLUMNS})
        await self._update(recording_id, fields)

    async def save_transcript(self, recording_id: str, transcript: Transcript) -> None:
        await self._update(recording_id, transcript_columns(transcript))

    async def save_summary(self, recording_id: str, summary: Summary) -> None:
        await self._update(recording_id, summary_columns(summary))

    async def save_report_completed(self, recording_id: str, report: Report) -> None:
        """Write the report and flip status to completed in one update"""
        fields = report_columns(report)
        fields["status"] = RecordingStatus.COMPLETED.value
        await self._update(recording_id, fields)

    async def mark_failed(self, recording_id: str) -> None:
        await self._update(recording_id, {"status": RecordingStatus.FAILED.value})

    async def delete(self, recording_id: str) -> None:
        await self.storage.delete_record(recording_id)
        logger.info(f"Deleted recording {recording_id}")
