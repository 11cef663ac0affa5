"""
Unit tests for bounded polling
"""

import asyncio
import unittest
from unittest.mock import AsyncMock

from recording_services.core.polling import PollConfig, poll_until


class TestPollUntil(unittest.TestCase):
    """Test the attempt-bounded polling loop"""

    def setUp(self):
        self.sleep = AsyncMock()

    def test_stops_on_first_done_value(self):
        fetch = AsyncMock(side_effect=["running", "running", "done"])

        result = asyncio.run(
            poll_until(fetch, lambda v: v == "done", PollConfig(5, 60), sleep=self.sleep)
        )

        self.assertTrue(result.done)
        self.assertEqual(result.value, "done")
        self.assertEqual(result.attempts, 3)
        self.assertEqual(fetch.await_count, 3)
        self.assertEqual(self.sleep.await_count, 3)
        self.sleep.assert_awaited_with(5)

    def test_ceiling_is_exact(self):
        fetch = AsyncMock(return_value="running")

        result = asyncio.run(
            poll_until(fetch, lambda v: False, PollConfig(5, 60), sleep=self.sleep)
        )

        self.assertFalse(result.done)
        self.assertEqual(result.attempts, 60)
        self.assertEqual(result.value, "running")
        self.assertEqual(fetch.await_count, 60)

    def test_no_initial_sleep(self):
        fetch = AsyncMock(return_value="done")
        config = PollConfig(interval_seconds=1, max_attempts=3, sleep_before_first=False)

        asyncio.run(poll_until(fetch, lambda v: True, config, sleep=self.sleep))

        self.sleep.assert_not_awaited()

    def test_tolerated_errors_count_as_attempts(self):
        fetch = AsyncMock(side_effect=[ConnectionError("down"), "running", ConnectionError("down")])

        result = asyncio.run(
            poll_until(
                fetch,
                lambda v: False,
                PollConfig(10, 3),
                sleep=self.sleep,
                tolerate=(ConnectionError,),
            )
        )

        self.assertFalse(result.done)
        self.assertEqual(result.attempts, 3)
        self.assertEqual(result.failures, 2)
        self.assertEqual(result.value, "running")

    def test_other_errors_propagate(self):
        fetch = AsyncMock(side_effect=["running", KeyError("boom")])

        with self.assertRaises(KeyError):
            asyncio.run(
                poll_until(
                    fetch,
                    lambda v: False,
                    PollConfig(1, 10),
                    sleep=self.sleep,
                    tolerate=(ConnectionError,),
                )
            )
        self.assertEqual(fetch.await_count, 2)

    def test_invalid_config(self):
        with self.assertRaises(ValueError):
            PollConfig(max_attempts=0)
        with self.assertRaises(ValueError):
            PollConfig(interval_seconds=-1)
        self.assertEqual(PollConfig(5, 60).ceiling_seconds, 300)


if __name__ == "__main__":
    unittest.main()
