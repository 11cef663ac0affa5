"""
Recording services command line
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any

import httpx
from dotenv import load_dotenv

from .client import JobPoller, RecordingsAPIClient, snapshot_status
from .config import ServiceFactory, Settings
from .core.exceptions import ServiceError

DEFAULT_API_URL = "http://localhost:8000"


def format_recording(recording: dict[str, Any]) -> str:
    """Format a recording snapshot for display"""
    output = [
        f"Recording {recording['id']}: {recording.get('title', '')}",
        f"  Status: {recording['status']}",
        f"  Updated: {recording.get('updated_at')}",
    ]

    transcript = recording.get("transcript")
    if transcript:
        output.append(
            f"  Transcript: {len(transcript['content'].split())} words, "
            f"{transcript['confidence']:.0f}% confidence, language {transcript['language']}"
        )
    summary = recording.get("summary")
    if summary:
        output.append(f"  Summary: {summary['content']}")
        for point in summary.get("key_points", []):
            output.append(f"    - {point}")
    report = recording.get("report")
    if report:
        output.append(f"  Report: {len(report.get('insights', []))} insights")
        for item in report.get("action_items", []):
            output.append(f"    * {item}")

    return "\n".join(output)


def _print(data: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict) and "status" in data and "id" in data:
        print(format_recording(data))
    else:
        print(data)


async def submit_command(args, client: RecordingsAPIClient):
    """Handle submit command"""
    recording = await client.create_recording(
        args.file,
        title=args.title,
        duration=args.duration,
        transcription_provider=args.transcription_provider,
        analysis_provider=args.analysis_provider,
    )
    print(f"✅ Recording submitted: {recording['id']}")

    if args.wait:
        settings = Settings.from_env()

        def on_update(snapshot):
            print(f"⏳ {snapshot['id']}: {snapshot['status']}")

        poller = JobPoller(
            client.get_recording,
            interval_seconds=settings.client_poll_interval_seconds,
            max_attempts=settings.client_max_attempts,
            on_update=on_update,
        )
        outcome = await poller.watch(recording["id"], initial=recording)
        recording = outcome.snapshot
        if not outcome.terminal:
            print("⚠️ Still processing; check again later with the status command")

    _print(recording, args.json)
    status = snapshot_status(recording)
    return 1 if status is not None and status.value == "failed" else 0


async def status_command(args, client: RecordingsAPIClient):
    """Handle status command"""
    _print(await client.get_recording(args.recording_id), args.json)
    return 0


async def list_command(args, client: RecordingsAPIClient):
    """Handle list command"""
    recordings = await client.list_recordings(status=args.status, limit=args.limit)
    if args.json:
        _print(recordings, True)
    else:
        for recording in recordings:
            print(f"{recording['id']}  {recording['status']:<10}  {recording.get('title', '')}")
    return 0


async def reanalyze_command(args, client: RecordingsAPIClient):
    """Handle reanalyze command"""
    recording = await client.reanalyze(args.recording_id, args.analysis_provider)
    print(f"✅ Reanalysis started: {recording['id']}")
    return 0


async def providers_command(args, client: RecordingsAPIClient):
    """Handle providers command"""
    result = await client.providers(args.kind)
    if args.json:
        _print(result, True)
    else:
        for provider_id, available in result["providers"].items():
            marker = " (default)" if provider_id == result.get("default") else ""
            print(f"  {'✅' if available else '❌'} {provider_id}{marker}")
    return 0


def validate_command(args) -> int:
    """Handle validate command"""
    settings = Settings.from_file(args.config_file) if args.config_file else Settings.from_env()
    result = ServiceFactory(settings).validate_configuration()

    if args.json:
        _print(result, True)
    else:
        print("✅ Configuration is valid" if result["valid"] else "❌ Configuration has errors")
        for error in result["errors"]:
            print(f"  🔴 {error}")
        for warning in result["warnings"]:
            print(f"  🟡 {warning}")
    return 0 if result["valid"] else 1


def serve_command(args) -> int:
    """Handle serve command"""
    from .api.main import run

    run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recording-services",
        description="Recording transcription and analysis pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload a recording and wait for the analysis
  recording-services submit meeting.webm --title "Weekly sync" --duration 1800 --wait

  # Check a recording
  recording-services status 3f2a...

  # Re-run summary and report with a local model
  recording-services reanalyze 3f2a... --analysis-provider ollama

  # See which transcription providers are reachable
  recording-services providers transcription
        """,
    )
    parser.add_argument(
        "--api-url",
        default=os.environ.get("RECORDINGS_API_URL", DEFAULT_API_URL),
        help=f"Recordings API base URL (default: {DEFAULT_API_URL})",
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Submit command
    submit_parser = subparsers.add_parser("submit", help="Upload audio and start processing")
    submit_parser.add_argument("file", help="Audio file to upload")
    submit_parser.add_argument("--title", required=True, help="Recording title")
    submit_parser.add_argument("--duration", type=float, default=0, help="Length in seconds")
    submit_parser.add_argument("--transcription-provider", help="Preferred transcription provider")
    submit_parser.add_argument("--analysis-provider", help="Preferred analysis provider")
    submit_parser.add_argument(
        "--wait", action="store_true", help="Poll until the recording is completed or failed"
    )
    submit_parser.set_defaults(func=submit_command)

    # Status command
    status_parser = subparsers.add_parser("status", help="Show a recording")
    status_parser.add_argument("recording_id", help="Recording id")
    status_parser.set_defaults(func=status_command)

    # List command
    list_parser = subparsers.add_parser("list", help="List recordings")
    list_parser.add_argument(
        "--status", choices=["pending", "processing", "completed", "failed"]
    )
    list_parser.add_argument("--limit", type=int, default=20)
    list_parser.set_defaults(func=list_command)

    # Reanalyze command
    reanalyze_parser = subparsers.add_parser("reanalyze", help="Re-run summary and report")
    reanalyze_parser.add_argument("recording_id", help="Recording id")
    reanalyze_parser.add_argument("--analysis-provider", help="Preferred analysis provider")
    reanalyze_parser.set_defaults(func=reanalyze_command)

    # Providers command
    providers_parser = subparsers.add_parser("providers", help="Show provider availability")
    providers_parser.add_argument("kind", choices=["transcription", "analysis"])
    providers_parser.set_defaults(func=providers_command)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate configuration")
    validate_parser.add_argument(
        "--config-file", "-c", help="Configuration file path (uses environment if not specified)"
    )
    validate_parser.set_defaults(func=validate_command)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)
    serve_parser.set_defaults(func=serve_command)

    return parser


async def _run_client_command(args) -> int:
    client = RecordingsAPIClient(base_url=args.api_url)
    try:
        return await args.func(args, client)
    finally:
        await client.aclose()


def main(argv=None) -> int:
    """Main CLI entry point"""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if asyncio.iscoroutinefunction(args.func):
            return asyncio.run(_run_client_command(args))
        return args.func(args)
    except (ServiceError, httpx.HTTPError, FileNotFoundError) as e:
        print(f"❌ {args.command} failed: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
