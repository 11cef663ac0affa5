"""
Public pipeline operations and the in-process job table
"""

import asyncio
from typing import Any, Coroutine, Optional

from ..core.exceptions import PreconditionFailedError
from ..core.logging import get_logger
from ..core.models import AudioArtifact, ProviderKind, Recording, RecordingStatus
from ..providers.registry import CapabilityRegistry
from ..storage.service import RecordingRepository
from .orchestrator import PipelineOrchestrator

logger = get_logger(__name__)


class PipelineService:
    """
    Creates, observes and re-runs recording jobs

    Each run is an asyncio task registered under its recording id. Callers
    get control back as soon as the recording is persisted; tests and
    shutdown code can await the task through wait_for_job.
    """

    def __init__(
        self,
        repository: RecordingRepository,
        orchestrator: PipelineOrchestrator,
        registry: CapabilityRegistry,
        default_transcription_provider: Optional[str] = None,
        default_analysis_provider: Optional[str] = None,
    ):
        """
        Initialize pipeline service

        Args:
            repository: Recording persistence
            orchestrator: Stage runner
            registry: Capability registry used for availability queries
            default_transcription_provider: Used when a job names none
            default_analysis_provider: Used when a job names none
        """
        self.repository = repository
        self.orchestrator = orchestrator
        self.registry = registry
        self.default_providers = {
            ProviderKind.TRANSCRIPTION: default_transcription_provider,
            ProviderKind.ANALYSIS: default_analysis_provider,
        }
        self._tasks: dict[str, asyncio.Task] = {}
        # Ids between an accepted reanalyze and its task being registered
        self._claims: set[str] = set()

        logger.info("Initialized PipelineService")

    def _start(self, recording_id: str, coro: Coroutine[Any, Any, RecordingStatus]) -> None:
        task = asyncio.create_task(coro, name=f"recording-{recording_id}")
        self._tasks[recording_id] = task

        def _done(t: asyncio.Task) -> None:
            if self._tasks.get(recording_id) is t:
                del self._tasks[recording_id]
            if t.cancelled():
                logger.warning(f"Pipeline task for {recording_id} was cancelled")
            elif t.exception() is not None:
                logger.error(
                    f"Pipeline task for {recording_id} crashed: {t.exception()}",
                    exc_info=t.exception(),
                )
            else:
                logger.info(f"Pipeline task for {recording_id} finished: {t.result().value}")

        task.add_done_callback(_done)

    def default_provider(self, kind: ProviderKind) -> Optional[str]:
        return self.default_providers[kind]

    async def create_job(
        self,
        artifact: AudioArtifact,
        title: str,
        duration_seconds: float = 0,
        transcription_provider: Optional[str] = None,
        analysis_provider: Optional[str] = None,
    ) -> Recording:
        """
        Store the audio, persist the recording as processing and start the pipeline

        Args:
            artifact: Uploaded audio
            title: Display title
            duration_seconds: Recording length reported by the client
            transcription_provider: Preferred transcription provider id
            analysis_provider: Preferred analysis provider id

        Returns:
            The initial processing snapshot
        """
        if not title or not title.strip():
            raise ValueError("Recording title is required")
        if not artifact.content:
            raise ValueError("Audio file is empty")

        transcription_provider = transcription_provider or self.default_provider(
            ProviderKind.TRANSCRIPTION
        )
        analysis_provider = analysis_provider or self.default_provider(ProviderKind.ANALYSIS)

        audio_url = await self.repository.store_audio(artifact)
        recording = await self.repository.create(
            title=title.strip(),
            audio_url=audio_url,
            duration=duration_seconds,
            size=artifact.size,
            status=RecordingStatus.PROCESSING,
        )

        self._start(
            recording.id,
            self.orchestrator.run(
                recording.id, artifact, transcription_provider, analysis_provider
            ),
        )
        logger.info(
            f"Created job {recording.id} (transcription={transcription_provider}, "
            f"analysis={analysis_provider})"
        )
        return recording

    async def get_job(self, recording_id: str) -> Recording:
        """
        Raises:
            JobNotFoundError: unknown id
        """
        return await self.repository.get(recording_id)

    async def list_jobs(
        self,
        status: Optional[RecordingStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Recording]:
        return await self.repository.list_recordings(status=status, limit=limit, offset=offset)

    async def reanalyze_job(
        self, recording_id: str, analysis_provider: Optional[str] = None
    ) -> Recording:
        """
        Re-run summary and report against the stored transcript

        Args:
            recording_id: Recording to reanalyze
            analysis_provider: Preferred analysis provider id

        Returns:
            The processing snapshot the reanalysis starts from

        Raises:
            JobNotFoundError: unknown id
            PreconditionFailedError: no transcript, or a run is still active
        """
        recording = await self.get_job(recording_id)
        if recording.transcript is None:
            raise PreconditionFailedError(
                f"Recording {recording_id} has no transcript to reanalyze"
            )
        # No await between this check and the claim
        if self.is_active(recording_id):
            raise PreconditionFailedError(f"Recording {recording_id} is still processing")
        self._claims.add(recording_id)

        try:
            analysis_provider = analysis_provider or self.default_provider(ProviderKind.ANALYSIS)
            await self.repository.mark_processing(recording_id, clear_analysis=True)
            self._start(
                recording_id,
                self.orchestrator.run_analysis(
                    recording_id, recording.transcript.content, analysis_provider
                ),
            )
        finally:
            self._claims.discard(recording_id)
        logger.info(f"Reanalysis started for {recording_id} (analysis={analysis_provider})")
        return await self.get_job(recording_id)

    async def delete_job(self, recording_id: str) -> None:
        """
        Delete a recording, stopping its run if one is active

        Raises:
            JobNotFoundError: unknown id
        """
        await self.get_job(recording_id)

        task = self._tasks.pop(recording_id, None)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

        await self.repository.delete(recording_id)

    async def available_providers(self, kind: ProviderKind) -> dict[str, bool]:
        return await self.registry.available_providers(kind)

    def is_active(self, recording_id: str) -> bool:
        if recording_id in self._claims:
            return True
        task = self._tasks.get(recording_id)
        return task is not None and not task.done()

    def active_jobs(self) -> list[str]:
        """Ids of recordings with a run in progress"""
        return [rid for rid, task in self._tasks.items() if not task.done()]

    async def wait_for_job(
        self, recording_id: str, timeout: Optional[float] = None
    ) -> Recording:
        """
        Wait for the active run of a recording, then return its snapshot

        Args:
            recording_id: Recording to wait for
            timeout: Seconds to wait before returning the current snapshot
        """
        task = self._tasks.get(recording_id)
        if task is not None:
            await asyncio.wait({task}, timeout=timeout)
        return await self.get_job(recording_id)

    async def aclose(self) -> None:
        """Cancel active runs and release provider connections"""
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
        self._tasks.clear()
        await self.registry.aclose()
