"""
Custom exceptions for the recording pipeline
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service errors"""

    pass


class ConfigurationError(ServiceError):
    """Exception for configuration errors"""

    pass


class StorageError(ServiceError):
    """Exception for storage-related errors"""

    pass


class RecordNotFoundError(StorageError):
    """Raised by storage collaborators when a record id is unknown"""

    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class ProviderError(ServiceError):
    """Base exception for transcription and analysis provider failures"""

    def __init__(self, message: str, provider_id: Optional[str] = None):
        super().__init__(message)
        self.provider_id = provider_id


class ProviderUnavailableError(ProviderError):
    """Provider is not configured or cannot be reached"""

    pass


class NoProviderAvailableError(ProviderUnavailableError):
    """Selection exhausted the requested provider and every fallback"""

    def __init__(self, kind: str, requested: Optional[str] = None):
        message = f"No {kind} provider available"
        if requested:
            message += f" (requested: {requested})"
        super().__init__(message)
        self.kind = kind
        self.requested = requested


class UpstreamError(ProviderError):
    """Provider answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str = "", provider_id: Optional[str] = None):
        label = provider_id or "upstream"
        super().__init__(f"{label} returned {status_code}: {body[:500]}", provider_id)
        self.status_code = status_code
        self.body = body


class ProviderTimeoutError(ProviderError):
    """Long-running operation exceeded its attempt ceiling"""

    def __init__(self, message: str, provider_id: Optional[str] = None, attempts: int = 0):
        super().__init__(message, provider_id)
        self.attempts = attempts


class MalformedProviderOutputError(ProviderError):
    """Structured provider output could not be parsed into the expected shape"""

    def __init__(self, message: str, provider_id: Optional[str] = None, raw: str = ""):
        super().__init__(message, provider_id)
        self.raw = raw


class PreconditionFailedError(ServiceError):
    """Operation rejected because the recording is not in a suitable state"""

    pass


class JobNotFoundError(ServiceError):
    """Unknown recording id"""

    def __init__(self, recording_id: str):
        super().__init__(f"Recording {recording_id} not found")
        self.recording_id = recording_id
