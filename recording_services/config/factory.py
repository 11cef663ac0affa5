"""
Service factory for creating configured service instances
"""

from typing import Optional, Type

from ..analysis.providers.ollama import OllamaAnalysisProvider
from ..analysis.providers.openai import OpenAIAnalysisProvider
from ..analysis.service import AnalysisService
from ..core.exceptions import ConfigurationError
from ..core.interfaces import AnalysisProvider, StorageProvider, TranscriptionProvider
from ..core.logging import get_logger
from ..core.models import ProviderKind
from ..pipeline.orchestrator import PipelineOrchestrator
from ..pipeline.service import PipelineService
from ..providers.registry import CapabilityRegistry
from ..storage.providers.local import LocalStorageProvider
from ..storage.providers.memory import InMemoryStorageProvider
from ..storage.service import RecordingRepository
from ..transcription.providers.gladia import GladiaTranscriptionProvider
from ..transcription.providers.huggingface import HuggingFaceTranscriptionProvider
from ..transcription.providers.openai import OpenAITranscriptionProvider
from ..transcription.service import TranscriptionService
from .settings import Settings

logger = get_logger(__name__)


class ServiceFactory:
    """
    Factory for creating configured service instances
    """

    # Registry of available providers
    STORAGE_PROVIDERS: dict[str, Type[StorageProvider]] = {
        "local": LocalStorageProvider,
        "memory": InMemoryStorageProvider,
    }

    TRANSCRIPTION_PROVIDERS: dict[str, Type[TranscriptionProvider]] = {
        "gladia": GladiaTranscriptionProvider,
        "openai": OpenAITranscriptionProvider,
        "huggingface": HuggingFaceTranscriptionProvider,
    }

    ANALYSIS_PROVIDERS: dict[str, Type[AnalysisProvider]] = {
        "openai": OpenAIAnalysisProvider,
        "ollama": OllamaAnalysisProvider,
    }

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize service factory

        Args:
            settings: Configuration settings, uses environment if None
        """
        self.settings = settings or Settings.from_env()
        logger.info(
            f"ServiceFactory initialized with {len(self.TRANSCRIPTION_PROVIDERS)} transcription "
            f"and {len(self.ANALYSIS_PROVIDERS)} analysis providers"
        )

    def create_storage_provider(self, provider_name: Optional[str] = None) -> StorageProvider:
        """
        Create a storage provider instance

        Args:
            provider_name: Provider name, uses default from settings if None

        Returns:
            Configured StorageProvider instance
        """
        provider_name = provider_name or self.settings.storage_provider

        if provider_name not in self.STORAGE_PROVIDERS:
            available = ", ".join(self.STORAGE_PROVIDERS.keys())
            raise ConfigurationError(
                f"Unknown storage provider: {provider_name}. Available: {available}"
            )

        config = self.settings.get_provider_config("storage", provider_name)
        if not config.enabled:
            raise ConfigurationError(f"Storage provider '{provider_name}' is disabled")

        return self.STORAGE_PROVIDERS[provider_name].from_config(config, self.settings)

    def create_transcription_provider(self, provider_name: str) -> TranscriptionProvider:
        """
        Create a transcription provider instance

        Args:
            provider_name: Provider name

        Returns:
            Configured TranscriptionProvider instance
        """
        if provider_name not in self.TRANSCRIPTION_PROVIDERS:
            available = ", ".join(self.TRANSCRIPTION_PROVIDERS.keys())
            raise ConfigurationError(
                f"Unknown transcription provider: {provider_name}. Available: {available}"
            )

        config = self.settings.get_provider_config("transcription", provider_name)
        return self.TRANSCRIPTION_PROVIDERS[provider_name].from_config(config, self.settings)

    def create_analysis_provider(self, provider_name: str) -> AnalysisProvider:
        """
        Create an analysis provider instance

        Args:
            provider_name: Provider name

        Returns:
            Configured AnalysisProvider instance
        """
        if provider_name not in self.ANALYSIS_PROVIDERS:
            available = ", ".join(self.ANALYSIS_PROVIDERS.keys())
            raise ConfigurationError(
                f"Unknown analysis provider: {provider_name}. Available: {available}"
            )

        config = self.settings.get_provider_config("analysis", provider_name)
        return self.ANALYSIS_PROVIDERS[provider_name].from_config(config, self.settings)

    def _enabled(self, provider_type: str, registered: dict) -> list[str]:
        return [
            name
            for name in self.settings.get_enabled_providers(provider_type)
            if name in registered
        ]

    def _priority(self, preferred: list[str], enabled: list[str]) -> list[str]:
        order = [name for name in preferred if name in enabled]
        return order or list(enabled)

    def create_registry(self) -> CapabilityRegistry:
        """
        Build the capability registry from every enabled provider

        Returns:
            CapabilityRegistry with the configured fallback orders
        """
        transcription_ids = self._enabled("transcription", self.TRANSCRIPTION_PROVIDERS)
        analysis_ids = self._enabled("analysis", self.ANALYSIS_PROVIDERS)

        return CapabilityRegistry(
            transcription_providers={
                name: self.create_transcription_provider(name) for name in transcription_ids
            },
            analysis_providers={
                name: self.create_analysis_provider(name) for name in analysis_ids
            },
            priorities={
                ProviderKind.TRANSCRIPTION: self._priority(
                    self.settings.transcription_priority, transcription_ids
                ),
                ProviderKind.ANALYSIS: self._priority(
                    self.settings.analysis_priority, analysis_ids
                ),
            },
            probe_timeout_seconds=self.settings.probe_timeout_seconds,
        )

    def create_repository(self, storage_provider_name: Optional[str] = None) -> RecordingRepository:
        return RecordingRepository(self.create_storage_provider(storage_provider_name))

    def create_pipeline_service(
        self,
        registry: Optional[CapabilityRegistry] = None,
        repository: Optional[RecordingRepository] = None,
    ) -> PipelineService:
        """
        Create the pipeline service with all of its collaborators

        Args:
            registry: Prebuilt registry, built from settings if None
            repository: Prebuilt repository, built from settings if None

        Returns:
            Configured PipelineService instance
        """
        registry = registry or self.create_registry()
        repository = repository or self.create_repository()

        orchestrator = PipelineOrchestrator(
            repository=repository,
            transcription=TranscriptionService(registry),
            analysis=AnalysisService(registry),
        )
        return PipelineService(
            repository=repository,
            orchestrator=orchestrator,
            registry=registry,
            default_transcription_provider=self.settings.transcription_provider,
            default_analysis_provider=self.settings.analysis_provider,
        )

    def get_available_providers(self) -> dict:
        """
        Get information about all registered providers

        Returns:
            Dictionary with provider information
        """
        return {
            "storage": {
                "available": list(self.STORAGE_PROVIDERS.keys()),
                "default": self.settings.storage_provider,
                "enabled": self._enabled("storage", self.STORAGE_PROVIDERS),
            },
            "transcription": {
                "available": list(self.TRANSCRIPTION_PROVIDERS.keys()),
                "default": self.settings.transcription_provider,
                "enabled": self._enabled("transcription", self.TRANSCRIPTION_PROVIDERS),
                "priority": self.settings.transcription_priority,
            },
            "analysis": {
                "available": list(self.ANALYSIS_PROVIDERS.keys()),
                "default": self.settings.analysis_provider,
                "enabled": self._enabled("analysis", self.ANALYSIS_PROVIDERS),
                "priority": self.settings.analysis_priority,
            },
        }

    def validate_configuration(self) -> dict:
        """
        Validate current configuration and return status

        Only static configuration is checked here; reachability is what
        the registry probes report.

        Returns:
            Dictionary with validation results
        """
        results = {"valid": True, "errors": [], "warnings": [], "provider_status": {}}

        groups = {
            "storage": self.STORAGE_PROVIDERS,
            "transcription": self.TRANSCRIPTION_PROVIDERS,
            "analysis": self.ANALYSIS_PROVIDERS,
        }

        for provider_type, registered in groups.items():
            default = getattr(self.settings, f"{provider_type}_provider")
            enabled = self._enabled(provider_type, registered)

            if default not in registered:
                results["valid"] = False
                results["errors"].append(f"{provider_type}: unknown default provider '{default}'")
                status = "error"
            elif default not in enabled:
                results["warnings"].append(
                    f"{provider_type}: default provider '{default}' is disabled"
                )
                status = "disabled"
            else:
                status = "valid"
            results["provider_status"][provider_type] = {"name": default, "status": status}

            if not enabled:
                results["valid"] = False
                results["errors"].append(f"No enabled {provider_type} providers")

        for provider_type, priority in (
            ("transcription", self.settings.transcription_priority),
            ("analysis", self.settings.analysis_priority),
        ):
            unknown = [name for name in priority if name not in groups[provider_type]]
            if unknown:
                results["warnings"].append(
                    f"{provider_type}: ignoring unknown providers in priority: {', '.join(unknown)}"
                )

        return results

    @classmethod
    def register_transcription_provider(
        cls, name: str, provider_class: Type[TranscriptionProvider]
    ):
        """
        Register a new transcription provider

        Args:
            name: Provider name
            provider_class: Provider class
        """
        cls.TRANSCRIPTION_PROVIDERS[name] = provider_class
        logger.info(f"Registered transcription provider: {name}")

    @classmethod
    def register_analysis_provider(cls, name: str, provider_class: Type[AnalysisProvider]):
        """
        Register a new analysis provider

        Args:
            name: Provider name
            provider_class: Provider class
        """
        cls.ANALYSIS_PROVIDERS[name] = provider_class
        logger.info(f"Registered analysis provider: {name}")
