"""
Client-side reconciliation: re-fetch a recording until it is terminal
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from ..core.exceptions import UpstreamError
from ..core.logging import get_logger
from ..core.models import RecordingStatus
from ..core.polling import PollConfig, SleepFunc, poll_until

logger = get_logger(__name__)

Fetch = Callable[[str], Awaitable[Any]]
OnUpdate = Callable[[Any], Any]

# Transient failures counted as an attempt and otherwise ignored
TRANSIENT_ERRORS = (httpx.HTTPError, UpstreamError)


def snapshot_status(snapshot: Any) -> Optional[RecordingStatus]:
    """
    Read the status of a recording snapshot

    Accepts API dictionaries and Recording objects alike.
    """
    if snapshot is None:
        return None
    value = snapshot.get("status") if isinstance(snapshot, dict) else snapshot.status
    if isinstance(value, RecordingStatus):
        return value
    try:
        return RecordingStatus(value)
    except ValueError:
        logger.warning(f"Unknown recording status: {value}")
        return None


def is_terminal(snapshot: Any) -> bool:
    status = snapshot_status(snapshot)
    return status is not None and status.is_terminal


@dataclass
class PollOutcome:
    """Where a reconciliation loop ended"""

    snapshot: Any
    attempts: int
    terminal: bool
    failures: int = 0


class JobPoller:
    """
    Polls a recording on a fixed interval up to an attempt ceiling

    Network errors are swallowed and still count as attempts.
    Hitting the ceiling keeps the last snapshot as it is; it is never turned
    into a failure.
    """

    def __init__(
        self,
        fetch: Fetch,
        interval_seconds: float = 10.0,
        max_attempts: int = 30,
        sleep: SleepFunc = asyncio.sleep,
        on_update: Optional[OnUpdate] = None,
    ):
        """
        Initialize job poller

        Args:
            fetch: Coroutine function returning the snapshot for an id
            interval_seconds: Wait before each fetch
            max_attempts: Attempt ceiling
            sleep: Coroutine used to wait
            on_update: Called with every successfully fetched snapshot
        """
        self.fetch = fetch
        self.config = PollConfig(interval_seconds=interval_seconds, max_attempts=max_attempts)
        self.sleep = sleep
        self.on_update = on_update

    async def watch(self, recording_id: str, initial: Any = None) -> PollOutcome:
        """
        Poll until the recording is terminal or attempts run out

        Args:
            recording_id: Recording to follow
            initial: Snapshot returned when the recording was created

        Returns:
            PollOutcome holding the last known snapshot
        """
        if initial is not None and is_terminal(initial):
            return PollOutcome(snapshot=initial, attempts=0, terminal=True)

        async def _fetch():
            snapshot = await self.fetch(recording_id)
            if self.on_update is not None:
                result = self.on_update(snapshot)
                if asyncio.iscoroutine(result):
                    await result
            return snapshot

        result = await poll_until(
            _fetch,
            is_terminal,
            self.config,
            sleep=self.sleep,
            tolerate=TRANSIENT_ERRORS,
            label=f"recording {recording_id}",
        )

        snapshot = result.value if result.value is not None else initial
        if result.done:
            logger.info(
                f"Recording {recording_id} reached {snapshot_status(snapshot).value} "
                f"after {result.attempts} polls"
            )
        else:
            logger.warning(
                f"Stopped polling recording {recording_id} after {result.attempts} attempts"
            )
        return PollOutcome(
            snapshot=snapshot,
            attempts=result.attempts,
            terminal=result.done,
            failures=result.failures,
        )
