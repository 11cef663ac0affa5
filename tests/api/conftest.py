"""
Shared test fixtures for API testing
"""

import time

import pytest
from fastapi.testclient import TestClient

from recording_services.api.config import APISettings
from recording_services.api.dependencies import get_pipeline_service
from recording_services.api.main import create_app
from tests.fakes import FakeAnalysisProvider, FakeTranscriptionProvider, build_pipeline

TERMINAL = ("completed", "failed")


@pytest.fixture
def transcriber():
    """Transcription fake the pipeline resolves first"""
    return FakeTranscriptionProvider("fake")


@pytest.fixture
def analyst():
    """Analysis fake the pipeline resolves first"""
    return FakeAnalysisProvider("fake-llm")


@pytest.fixture
def pipeline(transcriber, analyst):
    """PipelineService over in-memory storage"""
    return build_pipeline([transcriber], [analyst])


@pytest.fixture
def app(pipeline):
    """Recordings API wired to the fake pipeline"""
    app = create_app(APISettings(log_format="text"))
    app.dependency_overrides[get_pipeline_service] = lambda: pipeline
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Test client that keeps one event loop alive for background runs"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def upload(client):
    """Upload a clip and return the created snapshot"""

    def _upload(title="Standup", filename="clip.webm", content=b"fake-audio", **data):
        response = client.post(
            "/recordings",
            files={"audio": (filename, content, "audio/webm")},
            data={"title": title, **data},
        )
        return response

    return _upload


@pytest.fixture
def wait_terminal(client):
    """Re-fetch a recording until its run finishes"""

    def _wait(recording_id, attempts=200):
        for _ in range(attempts):
            body = client.get(f"/recordings/{recording_id}").json()
            if body["status"] in TERMINAL:
                return body
            time.sleep(0.01)
        raise AssertionError(f"Recording {recording_id} never finished")

    return _wait
