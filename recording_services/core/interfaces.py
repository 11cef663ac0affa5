"""
Abstract interfaces for all service providers
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from .models import AudioArtifact, ProviderDescriptor, Report, Summary, Transcript

if TYPE_CHECKING:
    from ..config.settings import ProviderConfig, Settings


class TranscriptionProvider(ABC):
    """Abstract interface for transcription providers"""

    descriptor: ClassVar[ProviderDescriptor]

    @classmethod
    def from_config(
        cls, config: "ProviderConfig", settings: "Settings"
    ) -> "TranscriptionProvider":
        """
        Build a provider from its configuration block

        Args:
            config: This provider's ProviderConfig
            settings: Global settings (timeouts, polling knobs)
        """
        return cls(**config.config)

    @property
    def provider_id(self) -> str:
        return self.descriptor.id

    @abstractmethod
    async def probe(self) -> bool:
        """
        Cheap check of whether the provider can be used right now

        Returns:
            True if configured and reachable
        """
        pass

    @abstractmethod
    async def transcribe(self, artifact: AudioArtifact) -> Transcript:
        """
        Transcribe an audio artifact

        Args:
            artifact: Audio content and metadata

        Returns:
            Transcript normalized to the common shape

        Raises:
            ProviderUnavailableError, UpstreamError, ProviderTimeoutError
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider"""
        return None


class AnalysisProvider(ABC):
    """Abstract interface for summary and report providers"""

    descriptor: ClassVar[ProviderDescriptor]

    @classmethod
    def from_config(cls, config: "ProviderConfig", settings: "Settings") -> "AnalysisProvider":
        return cls(**config.config)

    @property
    def provider_id(self) -> str:
        return self.descriptor.id

    @abstractmethod
    async def probe(self) -> bool:
        """
        Cheap check of whether the provider can be used right now

        Returns:
            True if configured and reachable
        """
        pass

    @abstractmethod
    async def summarize(self, transcript_text: str) -> Summary:
        """
        Summarize a transcript

        Raises:
            MalformedProviderOutputError: response does not fit the Summary shape
        """
        pass

    @abstractmethod
    async def report(self, transcript_text: str, summary: Summary) -> Report:
        """
        Build an analytical report from a transcript and its summary

        Raises:
            MalformedProviderOutputError: response does not fit the Report shape
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider"""
        return None


class StorageProvider(ABC):
    """Abstract interface for blob and record storage"""

    @classmethod
    def from_config(cls, config: "ProviderConfig", settings: "Settings") -> "StorageProvider":
        return cls(**config.config)

    @abstractmethod
    async def put_blob(
        self, data: bytes, content_type: str, name: Optional[str] = None
    ) -> str:
        """
        Store binary content

        Args:
            data: Raw bytes
            content_type: MIME type of the content
            name: Optional object name

        Returns:
            URL the content can be fetched from
        """
        pass

    @abstractmethod
    async def upsert_record(self, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record, or replace it if fields carries an existing id

        Returns:
            The stored record, including its id
        """
        pass

    @abstractmethod
    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        """
        Merge fields into an existing record in a single write

        Raises:
            RecordNotFoundError: unknown id
        """
        pass

    @abstractmethod
    async def get_record(self, record_id: str) -> dict[str, Any]:
        """
        Fetch a record

        Raises:
            RecordNotFoundError: unknown id
        """
        pass

    @abstractmethod
    async def delete_record(self, record_id: str) -> None:
        """Delete a record; unknown ids are ignored"""
        pass

    @abstractmethod
    async def list_records(self) -> list[dict[str, Any]]:
        """List all records"""
        pass
