"""
Recordings router: create, observe, reanalyze and delete jobs
"""

import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status

from ...core.logging import get_logger
from ...core.models import AudioArtifact, RecordingStatus
from ...pipeline.service import PipelineService
from ..config import APISettings
from ..dependencies import get_pipeline_service, get_settings
from ..models import ReanalyzeRequest, RecordingListResponse, RecordingResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=RecordingResponse, status_code=status.HTTP_201_CREATED)
async def create_recording(
    audio: UploadFile = File(...),
    title: str = Form(...),
    duration: float = Form(0, ge=0),
    transcription_provider: Optional[str] = Form(None),
    analysis_provider: Optional[str] = Form(None),
    pipeline: PipelineService = Depends(get_pipeline_service),
    settings: APISettings = Depends(get_settings),
):
    """
    Upload audio and start processing

    Returns the processing snapshot immediately; poll GET /recordings/{id}
    for progress.
    """
    filename = audio.filename or "recording.webm"
    extension = os.path.splitext(filename)[1].lower()
    if extension and extension not in settings.allowed_extensions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file format: {extension}",
        )

    content = await audio.read()
    if len(content) > settings.max_file_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {settings.max_file_size} bytes",
        )

    artifact = AudioArtifact(
        content=content,
        filename=filename,
        content_type=audio.content_type or "audio/webm",
    )
    recording = await pipeline.create_job(
        artifact,
        title=title,
        duration_seconds=duration,
        transcription_provider=transcription_provider,
        analysis_provider=analysis_provider,
    )
    return RecordingResponse.from_recording(recording)


@router.get("", response_model=RecordingListResponse)
async def list_recordings(
    status_filter: Optional[RecordingStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    pipeline: PipelineService = Depends(get_pipeline_service),
):
    """
    List recordings, newest first
    """
    recordings = await pipeline.list_jobs(status=status_filter, limit=limit, offset=offset)
    return RecordingListResponse(
        recordings=[RecordingResponse.from_recording(r) for r in recordings],
        limit=limit,
        offset=offset,
    )


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(
    recording_id: str, pipeline: PipelineService = Depends(get_pipeline_service)
):
    """
    Get the current snapshot of a recording
    """
    recording = await pipeline.get_job(recording_id)
    return RecordingResponse.from_recording(recording)


@router.post(
    "/{recording_id}/reanalyze",
    response_model=RecordingResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def reanalyze_recording(
    recording_id: str,
    request: Optional[ReanalyzeRequest] = None,
    pipeline: PipelineService = Depends(get_pipeline_service),
):
    """
    Re-run summary and report against the stored transcript

    Answers 409 when the recording has no transcript yet.
    """
    analysis_provider = request.analysis_provider if request else None
    recording = await pipeline.reanalyze_job(recording_id, analysis_provider)
    return RecordingResponse.from_recording(recording)


@router.delete("/{recording_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recording(
    recording_id: str, pipeline: PipelineService = Depends(get_pipeline_service)
):
    """
    Delete a recording
    """
    await pipeline.delete_job(recording_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
