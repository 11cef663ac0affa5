"""
Tests for the recordings API
"""

from recording_services.api.config import APISettings
from recording_services.api.dependencies import get_settings
from recording_services.core.exceptions import MalformedProviderOutputError, UpstreamError


class TestHealth:
    """Test health endpoints"""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_status_reports_providers_and_jobs(self, client):
        response = client.get("/status")

        assert response.status_code == 200
        data = response.json()
        assert data["providers"]["transcription"] == {"fake": True}
        assert data["providers"]["analysis"] == {"fake-llm": True}
        assert data["statistics"]["active_jobs"] == 0


class TestCreateRecording:
    """Test POST /recordings"""

    def test_create_returns_processing_snapshot(self, upload, client, wait_terminal):
        response = upload(duration="42")

        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "processing"
        assert created["title"] == "Standup"
        assert created["duration"] == 42
        assert created["size"] == len(b"fake-audio")
        assert created["transcript"] is None

        final = wait_terminal(created["id"])
        assert final["status"] == "completed"
        assert final["transcript"]["content"] == "hello world"
        assert final["summary"]["topics"] == ["greetings"]
        assert final["report"]["metrics"]["sentiment_trend"] == "positive"
        assert final["report"]["sentiment_analysis"]["emotions"] == ["happy"]

    def test_unsupported_extension(self, upload):
        response = upload(filename="notes.txt")

        assert response.status_code == 400
        assert "Unsupported file format" in response.json()["detail"]

    def test_blank_title_rejected(self, upload):
        response = upload(title="   ")

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    def test_missing_audio(self, client):
        response = client.post("/recordings", data={"title": "No audio"})

        assert response.status_code == 422

    def test_file_too_large(self, app, upload):
        app.dependency_overrides[get_settings] = lambda: APISettings(max_file_size=4)

        response = upload()

        assert response.status_code == 413

    def test_failed_transcription_shows_failed(self, transcriber, upload, client, wait_terminal):
        transcriber.error = UpstreamError(500, "boom", "fake")

        created = upload().json()
        final = wait_terminal(created["id"])

        assert final["status"] == "failed"
        assert final["transcript"] is None
        assert final["summary"] is None


class TestReadRecordings:
    """Test GET /recordings and GET /recordings/{id}"""

    def test_get_unknown_recording(self, client):
        response = client.get("/recordings/does-not-exist")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_list_with_status_filter(self, transcriber, upload, client, wait_terminal):
        ok = upload(title="ok").json()
        wait_terminal(ok["id"])
        transcriber.error = UpstreamError(500, "boom", "fake")
        bad = upload(title="bad").json()
        wait_terminal(bad["id"])

        everything = client.get("/recordings").json()
        failed = client.get("/recordings", params={"status": "failed"}).json()

        assert len(everything["recordings"]) == 2
        assert [r["title"] for r in failed["recordings"]] == ["bad"]

    def test_list_rejects_unknown_status(self, client):
        response = client.get("/recordings", params={"status": "exploded"})

        assert response.status_code == 422


class TestReanalyze:
    """Test POST /recordings/{id}/reanalyze"""

    def test_reanalyze_without_transcript_conflicts(self, transcriber, upload, client, wait_terminal):
        transcriber.error = UpstreamError(500, "boom", "fake")
        created = upload().json()
        before = wait_terminal(created["id"])

        response = client.post(f"/recordings/{created['id']}/reanalyze")

        assert response.status_code == 409
        assert response.json()["code"] == "PRECONDITION_FAILED"
        assert client.get(f"/recordings/{created['id']}").json() == before

    def test_reanalyze_restarts_analysis(self, analyst, upload, client, wait_terminal):
        created = upload().json()
        wait_terminal(created["id"])

        response = client.post(
            f"/recordings/{created['id']}/reanalyze", json={"analysis_provider": "fake-llm"}
        )

        assert response.status_code == 202
        assert response.json()["status"] == "processing"
        assert response.json()["transcript"]["content"] == "hello world"
        final = wait_terminal(created["id"])
        assert final["status"] == "completed"
        assert analyst.summarize_calls == 2

    def test_failed_reanalysis(self, analyst, upload, client, wait_terminal):
        created = upload().json()
        wait_terminal(created["id"])
        analyst.report_error = MalformedProviderOutputError("not json")

        client.post(f"/recordings/{created['id']}/reanalyze")
        final = wait_terminal(created["id"])

        assert final["status"] == "failed"
        assert final["summary"] is not None
        assert final["report"] is None

    def test_reanalyze_unknown_recording(self, client):
        response = client.post("/recordings/missing/reanalyze")

        assert response.status_code == 404


class TestDeleteRecording:
    def test_delete(self, upload, client, wait_terminal):
        created = upload().json()
        wait_terminal(created["id"])

        response = client.delete(f"/recordings/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/recordings/{created['id']}").status_code == 404

    def test_delete_unknown(self, client):
        assert client.delete("/recordings/missing").status_code == 404


class TestProviders:
    """Test provider endpoints"""

    def test_availability_per_kind(self, transcriber, client):
        transcriber.available = False

        response = client.get("/providers/transcription")

        assert response.status_code == 200
        assert response.json() == {"providers": {"fake": False}, "default": None}

    def test_unknown_kind(self, client):
        assert client.get("/providers/translation").status_code == 422

    def test_list_descriptors(self, client):
        response = client.get("/providers")

        assert response.status_code == 200
        ids = [(p["kind"], p["id"]) for p in response.json()]
        assert ids == [("transcription", "fake"), ("analysis", "fake-llm")]
