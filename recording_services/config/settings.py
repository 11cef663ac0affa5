"""
Configuration settings for services
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..core.exceptions import ConfigurationError
from ..core.logging import get_logger

logger = get_logger(__name__)

PROVIDER_GROUPS = ("storage", "transcription", "analysis")


@dataclass
class ProviderConfig:
    """Configuration for a service provider"""

    provider_type: str
    enabled: bool = True
    config: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default"""
        value = self.config.get(key)
        return default if value is None else value

    def to_dict(self, include_secrets: bool = False) -> dict[str, Any]:
        config = {
            key: value
            for key, value in self.config.items()
            if include_secrets or not key.endswith("api_key")
        }
        return {"provider_type": self.provider_type, "enabled": self.enabled, "config": config}


def _split(value: Optional[str], default: list[str]) -> list[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """
    Central configuration for all services
    """

    # Storage settings
    storage_provider: str = "local"
    storage_configs: dict[str, ProviderConfig] = field(default_factory=dict)

    # Transcription settings
    transcription_provider: str = "gladia"
    transcription_configs: dict[str, ProviderConfig] = field(default_factory=dict)
    transcription_priority: list[str] = field(
        default_factory=lambda: ["gladia", "openai", "huggingface"]
    )

    # Analysis settings
    analysis_provider: str = "openai"
    analysis_configs: dict[str, ProviderConfig] = field(default_factory=dict)
    analysis_priority: list[str] = field(default_factory=lambda: ["openai", "ollama"])

    # Long-running transcription polling (5 minute ceiling)
    lro_poll_interval_seconds: float = 5.0
    lro_max_attempts: int = 60

    # Client reconciliation polling (5 minute ceiling)
    client_poll_interval_seconds: float = 10.0
    client_max_attempts: int = 30

    probe_timeout_seconds: float = 5.0
    request_timeout_seconds: float = 120.0

    # General settings
    environment: str = "production"
    log_level: str = "INFO"
    log_format: str = "json"
    service_name: str = "recording-services"

    def __post_init__(self):
        """Initialize default configurations"""
        if not self.storage_configs:
            self.storage_configs = self._get_default_storage_configs()

        if not self.transcription_configs:
            self.transcription_configs = self._get_default_transcription_configs()

        if not self.analysis_configs:
            self.analysis_configs = self._get_default_analysis_configs()

    def _get_default_storage_configs(self) -> dict[str, ProviderConfig]:
        """Get default storage provider configurations"""
        return {
            "local": ProviderConfig(
                provider_type="local",
                enabled=True,
                config={"base_path": os.environ.get("LOCAL_STORAGE_PATH", "./local_storage")},
            ),
            "memory": ProviderConfig(provider_type="memory", enabled=True),
        }

    def _get_default_transcription_configs(self) -> dict[str, ProviderConfig]:
        """Get default transcription provider configurations"""
        return {
            "gladia": ProviderConfig(
                provider_type="gladia",
                enabled=True,
                config={
                    "api_key": os.environ.get("GLADIA_API_KEY"),
                    "base_url": os.environ.get("GLADIA_BASE_URL"),
                },
            ),
            "openai": ProviderConfig(
                provider_type="openai",
                enabled=True,
                config={
                    "api_key": os.environ.get("OPENAI_API_KEY"),
                    "model": os.environ.get("OPENAI_TRANSCRIPTION_MODEL", "whisper-1"),
                },
            ),
            "huggingface": ProviderConfig(
                provider_type="huggingface",
                enabled=True,
                config={
                    "api_key": os.environ.get("HUGGINGFACE_API_KEY"),
                    "model": os.environ.get("HUGGINGFACE_MODEL"),
                },
            ),
        }

    def _get_default_analysis_configs(self) -> dict[str, ProviderConfig]:
        """Get default analysis provider configurations"""
        return {
            "openai": ProviderConfig(
                provider_type="openai",
                enabled=True,
                config={
                    "api_key": os.environ.get("OPENAI_API_KEY"),
                    "model": os.environ.get("OPENAI_ANALYSIS_MODEL", "gpt-4o-mini"),
                },
            ),
            "ollama": ProviderConfig(
                provider_type="ollama",
                enabled=True,
                config={
                    "base_url": os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434"),
                    "model": os.environ.get("OLLAMA_MODEL", "llama3.2"),
                },
            ),
        }

    def _configs(self, provider_type: str) -> dict[str, ProviderConfig]:
        if provider_type not in PROVIDER_GROUPS:
            raise ConfigurationError(f"Unknown provider type: {provider_type}")
        return getattr(self, f"{provider_type}_configs")

    def get_provider_config(
        self, provider_type: str, provider: Optional[str] = None
    ) -> ProviderConfig:
        """
        Get a provider configuration

        Args:
            provider_type: storage, transcription or analysis
            provider: Provider name, uses default if None

        Returns:
            ProviderConfig for the provider
        """
        configs = self._configs(provider_type)
        provider_name = provider or getattr(self, f"{provider_type}_provider")
        if provider_name not in configs:
            raise ConfigurationError(f"Unknown {provider_type} provider: {provider_name}")
        return configs[provider_name]

    def is_provider_enabled(self, provider_type: str, provider_name: str) -> bool:
        """
        Check if a provider is enabled

        Args:
            provider_type: Type of provider (storage, transcription, analysis)
            provider_name: Name of the provider

        Returns:
            True if provider is enabled
        """
        if provider_type not in PROVIDER_GROUPS:
            return False
        provider_config = self._configs(provider_type).get(provider_name)
        return provider_config.enabled if provider_config else False

    def get_enabled_providers(self, provider_type: str) -> dict[str, ProviderConfig]:
        """
        Get all enabled providers of a given type

        Args:
            provider_type: Type of provider

        Returns:
            Dictionary of enabled provider configurations
        """
        if provider_type not in PROVIDER_GROUPS:
            return {}
        return {
            name: config for name, config in self._configs(provider_type).items() if config.enabled
        }

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create settings from environment variables

        Returns:
            Settings instance configured from environment
        """
        try:
            return cls(
                # Provider selections
                storage_provider=os.environ.get("STORAGE_PROVIDER", "local"),
                transcription_provider=os.environ.get("TRANSCRIPTION_PROVIDER", "gladia"),
                analysis_provider=os.environ.get("ANALYSIS_PROVIDER", "openai"),
                transcription_priority=_split(
                    os.environ.get("TRANSCRIPTION_PRIORITY"), ["gladia", "openai", "huggingface"]
                ),
                analysis_priority=_split(
                    os.environ.get("ANALYSIS_PRIORITY"), ["openai", "ollama"]
                ),
                # Polling
                lro_poll_interval_seconds=float(os.environ.get("LRO_POLL_INTERVAL", "5")),
                lro_max_attempts=int(os.environ.get("LRO_MAX_ATTEMPTS", "60")),
                client_poll_interval_seconds=float(os.environ.get("CLIENT_POLL_INTERVAL", "10")),
                client_max_attempts=int(os.environ.get("CLIENT_MAX_ATTEMPTS", "30")),
                probe_timeout_seconds=float(os.environ.get("PROBE_TIMEOUT", "5")),
                request_timeout_seconds=float(os.environ.get("REQUEST_TIMEOUT", "120")),
                # General settings
                environment=os.environ.get("ENVIRONMENT", "production"),
                log_level=os.environ.get("LOG_LEVEL", "INFO"),
                log_format=os.environ.get("LOG_FORMAT", "json"),
                service_name=os.environ.get("SERVICE_NAME", "recording-services"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting in environment: {e}")

    @classmethod
    def from_file(cls, config_path: str) -> "Settings":
        """
        Load settings from JSON configuration file

        Args:
            config_path: Path to JSON configuration file

        Returns:
            Settings instance
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, "r") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")

        # Convert provider configs from dict to ProviderConfig objects
        for group in PROVIDER_GROUPS:
            key = f"{group}_configs"
            if key in config_data:
                config_data[key] = {
                    name: ProviderConfig(
                        provider_type=config.get("provider_type", name),
                        enabled=config.get("enabled", True),
                        config=config.get("config", {}),
                    )
                    for name, config in config_data[key].items()
                }

        try:
            return cls(**config_data)
        except TypeError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

    def to_file(self, config_path: str):
        """
        Save settings to JSON configuration file

        API keys are left out; they are read from the environment.

        Args:
            config_path: Path to save configuration file
        """
        config_data = {
            # Provider selections
            "storage_provider": self.storage_provider,
            "transcription_provider": self.transcription_provider,
            "analysis_provider": self.analysis_provider,
            "transcription_priority": self.transcription_priority,
            "analysis_priority": self.analysis_priority,
            # Polling
            "lro_poll_interval_seconds": self.lro_poll_interval_seconds,
            "lro_max_attempts": self.lro_max_attempts,
            "client_poll_interval_seconds": self.client_poll_interval_seconds,
            "client_max_attempts": self.client_max_attempts,
            "probe_timeout_seconds": self.probe_timeout_seconds,
            "request_timeout_seconds": self.request_timeout_seconds,
            # General settings
            "environment": self.environment,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "service_name": self.service_name,
        }
        # Provider configurations
        for group in PROVIDER_GROUPS:
            config_data[f"{group}_configs"] = {
                name: config.to_dict() for name, config in self._configs(group).items()
            }

        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(config_data, f, indent=2)

        logger.info(f"Configuration saved to: {config_path}")
