"""
Bounded polling: fixed interval, hard attempt ceiling, injectable sleep
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass
class PollConfig:
    """Polling configuration"""

    interval_seconds: float = 5.0
    max_attempts: int = 60
    sleep_before_first: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative")

    @property
    def ceiling_seconds(self) -> float:
        return self.interval_seconds * self.max_attempts


@dataclass
class PollResult(Generic[T]):
    """Outcome of a bounded polling loop"""

    value: Optional[T]
    attempts: int
    done: bool
    failures: int = 0


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    config: PollConfig,
    sleep: SleepFunc = asyncio.sleep,
    tolerate: tuple[type[BaseException], ...] = (),
    label: str = "poll",
) -> PollResult[T]:
    """
    Call fetch until is_done accepts its value or the attempt ceiling is hit

    Every call to fetch counts as one attempt, including calls that raise one
    of the tolerated exception types. Exceptions outside ``tolerate`` propagate
    immediately and stop the loop. The ceiling is counted in attempts, never
    in wall-clock time.

    Args:
        fetch: Coroutine function returning the current value
        is_done: Predicate telling whether the value is terminal
        config: Interval and attempt ceiling
        sleep: Coroutine used to wait between attempts
        tolerate: Exception types counted as an attempt and otherwise ignored
        label: Name used in log messages

    Returns:
        PollResult with the last value seen and whether it was terminal
    """
    last_value: Optional[T] = None
    failures = 0

    for attempt in range(1, config.max_attempts + 1):
        if attempt > 1 or config.sleep_before_first:
            await sleep(config.interval_seconds)

        try:
            value = await fetch()
        except tolerate as e:
            failures += 1
            logger.warning(
                f"{label} attempt {attempt}/{config.max_attempts} failed: {str(e)}"
            )
            continue

        last_value = value
        if is_done(value):
            logger.debug(f"{label} finished on attempt {attempt}")
            return PollResult(value=value, attempts=attempt, done=True, failures=failures)

        logger.debug(f"{label} attempt {attempt}/{config.max_attempts}: still running")

    logger.warning(f"{label} reached {config.max_attempts} attempts without finishing")
    return PollResult(
        value=last_value, attempts=config.max_attempts, done=False, failures=failures
    )
