"""
Unit tests for the command line
"""

import io
import json
import os
import unittest
from contextlib import redirect_stdout
from unittest.mock import AsyncMock, Mock, patch

import httpx

from recording_services.cli import build_parser, format_recording, main
from recording_services.core.exceptions import JobNotFoundError


def completed_recording():
    return {
        "id": "rec-1",
        "title": "Standup",
        "status": "completed",
        "updated_at": "2026-01-01T00:00:00",
        "transcript": {"content": "hello world", "confidence": 92.0, "language": "en"},
        "summary": {"content": "A greeting", "key_points": ["hello"]},
        "report": {"insights": ["friendly"], "action_items": ["say hi back"]},
    }


class TestFormatting(unittest.TestCase):
    def test_format_recording(self):
        text = format_recording(completed_recording())

        self.assertIn("Recording rec-1: Standup", text)
        self.assertIn("2 words, 92% confidence, language en", text)
        self.assertIn("    - hello", text)
        self.assertIn("    * say hi back", text)

    def test_format_pending_recording(self):
        text = format_recording({"id": "rec-2", "status": "processing"})

        self.assertIn("Status: processing", text)
        self.assertNotIn("Transcript", text)


class TestParser(unittest.TestCase):
    def test_submit_arguments(self):
        args = build_parser().parse_args(
            ["submit", "meeting.webm", "--title", "Sync", "--duration", "90", "--wait"]
        )

        self.assertEqual(args.command, "submit")
        self.assertEqual(args.file, "meeting.webm")
        self.assertEqual(args.duration, 90.0)
        self.assertTrue(args.wait)
        self.assertIsNone(args.transcription_provider)

    def test_list_rejects_unknown_status(self):
        with redirect_stdout(io.StringIO()), patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(["list", "--status", "exploded"])


@patch("recording_services.cli.load_dotenv")
class TestMain(unittest.TestCase):
    """Test main() with the API client mocked out"""

    def setUp(self):
        self.client = Mock()
        self.client.aclose = AsyncMock()
        patcher = patch("recording_services.cli.RecordingsAPIClient", return_value=self.client)
        self.client_class = patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(argv)
        return code, out.getvalue()

    def test_no_command_prints_help(self, _):
        code, output = self.run_main([])

        self.assertEqual(code, 1)
        self.assertIn("usage:", output)

    def test_status(self, _):
        self.client.get_recording = AsyncMock(return_value=completed_recording())

        code, output = self.run_main(["--api-url", "http://api.test", "status", "rec-1"])

        self.assertEqual(code, 0)
        self.assertIn("Status: completed", output)
        self.client_class.assert_called_once_with(base_url="http://api.test")
        self.client.aclose.assert_awaited_once()

    def test_status_json(self, _):
        self.client.get_recording = AsyncMock(return_value=completed_recording())

        code, output = self.run_main(["--json", "status", "rec-1"])

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)["id"], "rec-1")

    def test_unknown_recording_fails(self, _):
        self.client.get_recording = AsyncMock(side_effect=JobNotFoundError("rec-9"))

        code, output = self.run_main(["status", "rec-9"])

        self.assertEqual(code, 1)
        self.assertIn("status failed", output)
        self.client.aclose.assert_awaited_once()

    def test_unreachable_api_fails(self, _):
        request = httpx.Request("GET", "http://localhost:8000/recordings")
        self.client.list_recordings = AsyncMock(
            side_effect=httpx.ConnectError("refused", request=request)
        )

        code, output = self.run_main(["list"])

        self.assertEqual(code, 1)
        self.assertIn("list failed", output)

    @patch.dict(os.environ, {"CLIENT_POLL_INTERVAL": "0", "CLIENT_MAX_ATTEMPTS": "3"})
    def test_submit_and_wait(self, _):
        self.client.create_recording = AsyncMock(
            return_value={"id": "rec-1", "status": "processing"}
        )
        self.client.get_recording = AsyncMock(
            side_effect=[{"id": "rec-1", "status": "processing"}, completed_recording()]
        )

        code, output = self.run_main(["submit", "clip.webm", "--title", "Standup", "--wait"])

        self.assertEqual(code, 0)
        self.assertIn("Recording submitted: rec-1", output)
        self.assertIn("rec-1: processing", output)
        self.assertIn("Status: completed", output)
        self.assertEqual(self.client.get_recording.await_count, 2)
        self.client.create_recording.assert_awaited_once_with(
            "clip.webm",
            title="Standup",
            duration=0,
            transcription_provider=None,
            analysis_provider=None,
        )

    @patch.dict(os.environ, {"CLIENT_POLL_INTERVAL": "0", "CLIENT_MAX_ATTEMPTS": "2"})
    def test_submit_wait_hits_ceiling(self, _):
        pending = {"id": "rec-1", "status": "processing"}
        self.client.create_recording = AsyncMock(return_value=pending)
        self.client.get_recording = AsyncMock(return_value=pending)

        code, output = self.run_main(["submit", "clip.webm", "--title", "Standup", "--wait"])

        self.assertEqual(code, 0)
        self.assertIn("Still processing", output)
        self.assertEqual(self.client.get_recording.await_count, 2)

    def test_submit_failed_recording_exits_nonzero(self, _):
        self.client.create_recording = AsyncMock(return_value={"id": "rec-1", "status": "failed"})

        code, _output = self.run_main(["submit", "clip.webm", "--title", "Standup"])

        self.assertEqual(code, 1)

    def test_reanalyze(self, _):
        self.client.reanalyze = AsyncMock(return_value={"id": "rec-1", "status": "processing"})

        code, output = self.run_main(["reanalyze", "rec-1", "--analysis-provider", "ollama"])

        self.assertEqual(code, 0)
        self.assertIn("Reanalysis started: rec-1", output)
        self.client.reanalyze.assert_awaited_once_with("rec-1", "ollama")

    def test_providers(self, _):
        self.client.providers = AsyncMock(
            return_value={"providers": {"gladia": True, "openai": False}, "default": "gladia"}
        )

        code, output = self.run_main(["providers", "transcription"])

        self.assertEqual(code, 0)
        self.assertIn("✅ gladia (default)", output)
        self.assertIn("❌ openai", output)

    @patch.dict(os.environ, {"STORAGE_PROVIDER": "memory"})
    def test_validate(self, _):
        code, output = self.run_main(["validate"])

        self.assertEqual(code, 0)
        self.assertIn("Configuration is valid", output)
        self.client_class.assert_not_called()

    @patch.dict(os.environ, {"STORAGE_PROVIDER": "memory", "TRANSCRIPTION_PROVIDER": "assemblyai"})
    def test_validate_reports_errors(self, _):
        code, output = self.run_main(["validate"])

        self.assertEqual(code, 1)
        self.assertIn("unknown default provider 'assemblyai'", output)

    def test_validate_missing_config_file(self, _):
        code, output = self.run_main(["validate", "-c", "/nonexistent/config.json"])

        self.assertEqual(code, 1)
        self.assertIn("validate failed", output)


if __name__ == "__main__":
    unittest.main()
