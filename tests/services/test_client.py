"""
Unit tests for the recordings API client and the reconciliation poller
"""

import asyncio
import json
import unittest
from unittest.mock import AsyncMock, Mock

import httpx

from recording_services.client import (
    JobPoller,
    RecordingsAPIClient,
    is_terminal,
    snapshot_status,
)
from recording_services.core.exceptions import (
    JobNotFoundError,
    PreconditionFailedError,
    UpstreamError,
)
from recording_services.core.models import RecordingStatus


def snapshot(status):
    return {"id": "rec-1", "status": status}


class TestSnapshotStatus(unittest.TestCase):
    def test_reads_dicts_and_objects(self):
        self.assertEqual(snapshot_status(snapshot("failed")), RecordingStatus.FAILED)
        self.assertEqual(snapshot_status(Mock(status=RecordingStatus.COMPLETED)), RecordingStatus.COMPLETED)
        self.assertIsNone(snapshot_status(snapshot("exploded")))
        self.assertIsNone(snapshot_status(None))

    def test_is_terminal(self):
        self.assertTrue(is_terminal(snapshot("completed")))
        self.assertFalse(is_terminal(snapshot("processing")))
        self.assertFalse(is_terminal(snapshot("mystery")))


class TestJobPoller(unittest.TestCase):
    """Test JobPoller reconciliation"""

    def setUp(self):
        self.sleep = AsyncMock()

    def test_stops_when_terminal(self):
        fetch = AsyncMock(side_effect=[snapshot("processing"), snapshot("completed")])
        seen = []
        poller = JobPoller(fetch, sleep=self.sleep, on_update=seen.append)

        outcome = asyncio.run(poller.watch("rec-1", initial=snapshot("processing")))

        self.assertTrue(outcome.terminal)
        self.assertEqual(outcome.attempts, 2)
        self.assertEqual(outcome.snapshot["status"], "completed")
        self.assertEqual([s["status"] for s in seen], ["processing", "completed"])
        fetch.assert_awaited_with("rec-1")
        self.sleep.assert_awaited_with(10.0)

    def test_ceiling_keeps_last_snapshot(self):
        fetch = AsyncMock(return_value=snapshot("processing"))
        poller = JobPoller(fetch, sleep=self.sleep)

        outcome = asyncio.run(poller.watch("rec-1"))

        self.assertFalse(outcome.terminal)
        self.assertEqual(outcome.attempts, 30)
        self.assertEqual(fetch.await_count, 30)
        self.assertEqual(outcome.snapshot["status"], "processing")

    def test_network_errors_are_swallowed(self):
        request = httpx.Request("GET", "http://api/recordings/rec-1")
        fetch = AsyncMock(
            side_effect=[
                httpx.ConnectError("refused", request=request),
                UpstreamError(502, "bad gateway"),
                snapshot("failed"),
            ]
        )
        poller = JobPoller(fetch, interval_seconds=1, max_attempts=5, sleep=self.sleep)

        outcome = asyncio.run(poller.watch("rec-1"))

        self.assertTrue(outcome.terminal)
        self.assertEqual(outcome.attempts, 3)
        self.assertEqual(outcome.failures, 2)

    def test_all_attempts_failing_returns_initial(self):
        request = httpx.Request("GET", "http://api/recordings/rec-1")
        fetch = AsyncMock(side_effect=httpx.ReadTimeout("slow", request=request))
        initial = snapshot("processing")
        poller = JobPoller(fetch, max_attempts=4, sleep=self.sleep)

        outcome = asyncio.run(poller.watch("rec-1", initial=initial))

        self.assertIs(outcome.snapshot, initial)
        self.assertEqual(outcome.failures, 4)
        self.assertFalse(outcome.terminal)

    def test_terminal_initial_needs_no_polling(self):
        fetch = AsyncMock()
        poller = JobPoller(fetch, sleep=self.sleep)

        outcome = asyncio.run(poller.watch("rec-1", initial=snapshot("completed")))

        self.assertTrue(outcome.terminal)
        self.assertEqual(outcome.attempts, 0)
        fetch.assert_not_awaited()

    def test_unknown_recording_propagates(self):
        fetch = AsyncMock(side_effect=JobNotFoundError("rec-1"))
        poller = JobPoller(fetch, sleep=self.sleep)

        with self.assertRaises(JobNotFoundError):
            asyncio.run(poller.watch("rec-1"))
        self.assertEqual(fetch.await_count, 1)

    def test_async_on_update(self):
        on_update = AsyncMock()
        poller = JobPoller(
            AsyncMock(return_value=snapshot("completed")), sleep=self.sleep, on_update=on_update
        )

        asyncio.run(poller.watch("rec-1"))

        on_update.assert_awaited_once_with(snapshot("completed"))


class TestRecordingsAPIClient(unittest.TestCase):
    """Test RecordingsAPIClient against a mock transport"""

    def make_client(self, handler):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        return RecordingsAPIClient("http://api.test/", http_client=http_client)

    def test_create_recording_uploads_multipart(self):
        client = self.make_client(
            lambda request: httpx.Response(201, json={"id": "rec-1", "status": "processing"})
        )

        recording = asyncio.run(
            client.create_recording(b"audio-bytes", "Standup", 42, transcription_provider="gladia")
        )

        self.assertEqual(recording["id"], "rec-1")
        request = self.requests[0]
        self.assertEqual(str(request.url), "http://api.test/recordings")
        self.assertTrue(request.headers["content-type"].startswith("multipart/form-data"))
        body = request.read()
        self.assertIn(b"audio-bytes", body)
        self.assertIn(b"Standup", body)
        self.assertIn(b"gladia", body)

    def test_get_and_list(self):
        def handler(request):
            if request.url.path == "/recordings":
                return httpx.Response(
                    200, json={"recordings": [snapshot("completed")], "limit": 5, "offset": 0}
                )
            return httpx.Response(200, json=snapshot("processing"))

        client = self.make_client(handler)

        self.assertEqual(asyncio.run(client.get_recording("rec-1"))["status"], "processing")
        listed = asyncio.run(client.list_recordings(status="completed", limit=5))

        self.assertEqual(len(listed), 1)
        self.assertEqual(self.requests[1].url.params["status"], "completed")
        self.assertEqual(self.requests[1].url.params["limit"], "5")

    def test_404_maps_to_job_not_found(self):
        client = self.make_client(lambda request: httpx.Response(404, json={"error": "missing"}))

        with self.assertRaises(JobNotFoundError):
            asyncio.run(client.get_recording("rec-404"))

    def test_409_maps_to_precondition_failed(self):
        client = self.make_client(
            lambda request: httpx.Response(409, json={"error": "no transcript", "code": "PRECONDITION_FAILED"})
        )

        with self.assertRaises(PreconditionFailedError) as ctx:
            asyncio.run(client.reanalyze("rec-1", analysis_provider="ollama"))

        self.assertIn("no transcript", str(ctx.exception))
        self.assertEqual(json.loads(self.requests[0].content), {"analysis_provider": "ollama"})

    def test_server_error_is_upstream(self):
        client = self.make_client(lambda request: httpx.Response(503, json={"error": "down"}))

        with self.assertRaises(UpstreamError) as ctx:
            asyncio.run(client.providers("transcription"))

        self.assertEqual(ctx.exception.status_code, 503)

    def test_delete(self):
        client = self.make_client(lambda request: httpx.Response(204))

        asyncio.run(client.delete_recording("rec-1"))

        self.assertEqual(self.requests[0].method, "DELETE")
        self.assertEqual(self.requests[0].url.path, "/recordings/rec-1")


if __name__ == "__main__":
    unittest.main()
