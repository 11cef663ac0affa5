"""
Pipeline orchestrator: transcribe, summarize and report one recording

Each stage result is persisted before the next stage starts. Any failure is
converted into a single status=failed write; nothing escapes a run.
"""

from dataclasses import dataclass
from typing import Optional

from ..analysis.service import AnalysisService
from ..core.logging import get_logger
from ..core.models import (
    AudioArtifact,
    RecordingStatus,
    Report,
    ReportMetrics,
    SentimentAnalysis,
)
from ..storage.service import RecordingRepository
from ..transcription.service import TranscriptionService

logger = get_logger(__name__)

DEFAULT_METRICS = ReportMetrics(
    speaking_time=80,
    pause_frequency=10,
    average_response_time=2.0,
    sentiment_trend="neutral",
)
DEFAULT_SENTIMENT = SentimentAnalysis(
    overall="neutral",
    confidence=0.5,
    emotions=["neutral"],
)


def apply_report_defaults(report: Report) -> Report:
    """
    Fill metrics and sentiment sub-fields the provider left out

    Args:
        report: Parsed report, possibly with missing sub-fields

    Returns:
        The same report with every metrics and sentiment field set
    """
    metrics = report.metrics or ReportMetrics()
    report.metrics = ReportMetrics(
        speaking_time=(
            metrics.speaking_time
            if metrics.speaking_time is not None
            else DEFAULT_METRICS.speaking_time
        ),
        pause_frequency=(
            metrics.pause_frequency
            if metrics.pause_frequency is not None
            else DEFAULT_METRICS.pause_frequency
        ),
        average_response_time=(
            metrics.average_response_time
            if metrics.average_response_time is not None
            else DEFAULT_METRICS.average_response_time
        ),
        sentiment_trend=metrics.sentiment_trend or DEFAULT_METRICS.sentiment_trend,
    )

    sentiment = report.sentiment_analysis or SentimentAnalysis()
    report.sentiment_analysis = SentimentAnalysis(
        overall=sentiment.overall or DEFAULT_SENTIMENT.overall,
        confidence=(
            sentiment.confidence
            if sentiment.confidence is not None
            else DEFAULT_SENTIMENT.confidence
        ),
        emotions=sentiment.emotions or list(DEFAULT_SENTIMENT.emotions),
    )
    return report


@dataclass
class _RunState:
    """Stage a run is currently in, for failure attribution"""

    stage: str


class PipelineOrchestrator:
    """
    Runs the stages of one recording against the storage collaborator

    A single run is the only writer for its recording id while it lasts.
    Stages are strictly sequential awaits.
    """

    def __init__(
        self,
        repository: RecordingRepository,
        transcription: TranscriptionService,
        analysis: AnalysisService,
    ):
        """
        Initialize pipeline orchestrator

        Args:
            repository: Recording persistence
            transcription: Transcription stage service
            analysis: Summary and report stage service
        """
        self.repository = repository
        self.transcription = transcription
        self.analysis = analysis

    async def run(
        self,
        recording_id: str,
        artifact: AudioArtifact,
        transcription_provider: Optional[str] = None,
        analysis_provider: Optional[str] = None,
    ) -> RecordingStatus:
        """
        Run all three stages for a freshly created recording

        Args:
            recording_id: Recording already persisted as processing
            artifact: Uploaded audio
            transcription_provider: Preferred transcription provider id
            analysis_provider: Preferred analysis provider id

        Returns:
            Terminal status the run ended in
        """
        log = get_logger(__name__, {"recording_id": recording_id})
        state = _RunState(stage="transcription")
        try:
            log.info(f"Starting pipeline for recording {recording_id}")
            provider_id, transcript = await self.transcription.transcribe(
                artifact, transcription_provider
            )
            await self.repository.save_transcript(recording_id, transcript)
            log.info(
                f"Stage transcription done with {provider_id}: "
                f"{transcript.word_count} words"
            )

            await self._analyze(recording_id, transcript.content, analysis_provider, state)
        except Exception as e:
            return await self._fail(recording_id, state.stage, e)

        log.info(f"Pipeline completed for recording {recording_id}")
        return RecordingStatus.COMPLETED

    async def run_analysis(
        self,
        recording_id: str,
        transcript_text: str,
        analysis_provider: Optional[str] = None,
    ) -> RecordingStatus:
        """
        Re-run summary and report against an already stored transcript

        Returns:
            Terminal status the run ended in
        """
        log = get_logger(__name__, {"recording_id": recording_id})
        state = _RunState(stage="summary")
        try:
            log.info(f"Starting reanalysis for recording {recording_id}")
            await self._analyze(recording_id, transcript_text, analysis_provider, state)
        except Exception as e:
            return await self._fail(recording_id, state.stage, e)

        log.info(f"Reanalysis completed for recording {recording_id}")
        return RecordingStatus.COMPLETED

    async def _analyze(
        self,
        recording_id: str,
        transcript_text: str,
        analysis_provider: Optional[str],
        state: _RunState,
    ) -> None:
        state.stage = "summary"
        provider_id, summary = await self.analysis.summarize(transcript_text, analysis_provider)
        await self.repository.save_summary(recording_id, summary)
        logger.info(f"Stage summary done for {recording_id} with {provider_id}")

        state.stage = "report"
        provider_id, report = await self.analysis.report(
            transcript_text, summary, analysis_provider
        )
        report = apply_report_defaults(report)
        await self.repository.save_report_completed(recording_id, report)
        logger.info(f"Stage report done for {recording_id} with {provider_id}")

    async def _fail(self, recording_id: str, stage: str, error: Exception) -> RecordingStatus:
        logger.error(
            f"Pipeline failed for recording {recording_id} at {stage}: "
            f"{error.__class__.__name__}: {str(error)}",
            exc_info=error,
        )
        try:
            await self.repository.mark_failed(recording_id)
        except Exception as e:
            logger.error(f"Could not mark recording {recording_id} as failed: {str(e)}")
        return RecordingStatus.FAILED
