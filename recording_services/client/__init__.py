"""
Client side of the recordings API
"""

from .api_client import RecordingsAPIClient
from .poller import JobPoller, PollOutcome, is_terminal, snapshot_status

__all__ = ["RecordingsAPIClient", "JobPoller", "PollOutcome", "is_terminal", "snapshot_status"]
