"""
Unit tests for configuration system
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from recording_services.config.factory import ServiceFactory
from recording_services.config.settings import ProviderConfig, Settings
from recording_services.core.exceptions import ConfigurationError
from recording_services.core.models import ProviderKind
from recording_services.pipeline import PipelineService
from recording_services.storage import InMemoryStorageProvider, LocalStorageProvider
from recording_services.transcription import GladiaTranscriptionProvider
from tests.fakes import FakeTranscriptionProvider


class TestProviderConfig(unittest.TestCase):
    """Test ProviderConfig class"""

    def test_provider_config_get(self):
        """Test reading values with defaults"""
        config = ProviderConfig(provider_type="openai", config={"model": "whisper-1", "api_key": None})

        self.assertTrue(config.enabled)
        self.assertEqual(config.get("model"), "whisper-1")
        self.assertEqual(config.get("api_key", "fallback"), "fallback")
        self.assertEqual(config.get("nonexistent", "default"), "default")

    def test_to_dict_drops_secrets(self):
        config = ProviderConfig(provider_type="gladia", config={"api_key": "secret", "base_url": "u"})

        self.assertEqual(config.to_dict()["config"], {"base_url": "u"})
        self.assertEqual(config.to_dict(include_secrets=True)["config"]["api_key"], "secret")


class TestSettings(unittest.TestCase):
    """Test Settings class"""

    def test_defaults(self):
        """Test polling ceilings and default providers"""
        settings = Settings()

        self.assertEqual(settings.transcription_provider, "gladia")
        self.assertEqual(settings.analysis_provider, "openai")
        self.assertEqual((settings.lro_poll_interval_seconds, settings.lro_max_attempts), (5.0, 60))
        self.assertEqual(
            (settings.client_poll_interval_seconds, settings.client_max_attempts), (10.0, 30)
        )
        self.assertEqual(set(settings.transcription_configs), {"gladia", "openai", "huggingface"})
        self.assertEqual(set(settings.analysis_configs), {"openai", "ollama"})

    @patch.dict(
        os.environ,
        {
            "STORAGE_PROVIDER": "memory",
            "TRANSCRIPTION_PROVIDER": "openai",
            "TRANSCRIPTION_PRIORITY": "openai, gladia",
            "LRO_MAX_ATTEMPTS": "12",
            "CLIENT_POLL_INTERVAL": "2.5",
            "GLADIA_API_KEY": "gladia-secret",
            "LOG_FORMAT": "text",
        },
    )
    def test_settings_from_env(self):
        """Test creating settings from environment"""
        settings = Settings.from_env()

        self.assertEqual(settings.storage_provider, "memory")
        self.assertEqual(settings.transcription_provider, "openai")
        self.assertEqual(settings.transcription_priority, ["openai", "gladia"])
        self.assertEqual(settings.lro_max_attempts, 12)
        self.assertEqual(settings.client_poll_interval_seconds, 2.5)
        self.assertEqual(settings.log_format, "text")
        self.assertEqual(
            settings.get_provider_config("transcription", "gladia").get("api_key"), "gladia-secret"
        )

    @patch.dict(os.environ, {"LRO_MAX_ATTEMPTS": "sixty"})
    def test_invalid_number_in_env(self):
        with self.assertRaises(ConfigurationError):
            Settings.from_env()

    @patch.dict(os.environ, {"OPENAI_API_KEY": "sk-should-not-be-saved"})
    def test_settings_file_operations(self):
        """Test saving and loading settings without credentials"""
        settings = Settings(storage_provider="memory", analysis_priority=["ollama", "openai"])

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"
            settings.to_file(str(path))
            raw = path.read_text()
            loaded = Settings.from_file(str(path))

        self.assertNotIn("sk-should-not-be-saved", raw)
        self.assertNotIn("api_key", json.loads(raw)["analysis_configs"]["openai"]["config"])
        self.assertEqual(loaded.storage_provider, "memory")
        self.assertEqual(loaded.analysis_priority, ["ollama", "openai"])
        self.assertIsInstance(loaded.analysis_configs["ollama"], ProviderConfig)

    def test_settings_file_errors(self):
        with self.assertRaises(FileNotFoundError):
            Settings.from_file("/nonexistent/config.json")

        with tempfile.TemporaryDirectory() as tmp:
            bad_json = Path(tmp) / "bad.json"
            bad_json.write_text("{nope")
            unknown_key = Path(tmp) / "unknown.json"
            unknown_key.write_text(json.dumps({"colour": "blue"}))

            with self.assertRaises(ConfigurationError):
                Settings.from_file(str(bad_json))
            with self.assertRaises(ConfigurationError):
                Settings.from_file(str(unknown_key))

    def test_provider_lookup(self):
        settings = Settings()
        settings.analysis_configs["ollama"].enabled = False

        self.assertEqual(settings.get_provider_config("analysis").provider_type, "openai")
        self.assertFalse(settings.is_provider_enabled("analysis", "ollama"))
        self.assertFalse(settings.is_provider_enabled("nonsense", "ollama"))
        self.assertEqual(list(settings.get_enabled_providers("analysis")), ["openai"])
        with self.assertRaises(ConfigurationError):
            settings.get_provider_config("nonsense")
        with self.assertRaises(ConfigurationError):
            settings.get_provider_config("analysis", "gemini")


class TestServiceFactory(unittest.TestCase):
    """Test ServiceFactory class"""

    def setUp(self):
        self.settings = Settings(storage_provider="memory")
        self.factory = ServiceFactory(self.settings)

    def test_create_storage_provider(self):
        self.assertIsInstance(self.factory.create_storage_provider(), InMemoryStorageProvider)

        with tempfile.TemporaryDirectory() as tmp:
            self.settings.storage_configs["local"].config["base_path"] = tmp
            local = self.factory.create_storage_provider("local")
            self.assertIsInstance(local, LocalStorageProvider)
            self.assertEqual(local.base_path, Path(tmp))

        with self.assertRaises(ConfigurationError):
            self.factory.create_storage_provider("dropbox")

    def test_gladia_gets_polling_settings(self):
        self.settings.lro_poll_interval_seconds = 1.0
        self.settings.lro_max_attempts = 7
        self.settings.transcription_configs["gladia"].config["api_key"] = "k"

        provider = self.factory.create_transcription_provider("gladia")

        self.assertIsInstance(provider, GladiaTranscriptionProvider)
        self.assertEqual(provider.api_key, "k")
        self.assertEqual(provider.poll_config.interval_seconds, 1.0)
        self.assertEqual(provider.poll_config.max_attempts, 7)

    def test_adapters_built_from_their_config(self):
        self.settings.analysis_configs["ollama"].config.update(
            {"base_url": "http://gpu-box:11434/", "model": "mistral"}
        )
        self.settings.transcription_configs["huggingface"].config["model"] = "org/whisper-ar"
        self.settings.transcription_configs["openai"].config["model"] = None

        ollama = self.factory.create_analysis_provider("ollama")
        huggingface = self.factory.create_transcription_provider("huggingface")
        whisper = self.factory.create_transcription_provider("openai")

        self.assertEqual((ollama.base_url, ollama.model), ("http://gpu-box:11434", "mistral"))
        self.assertTrue(huggingface.url.endswith("/org/whisper-ar"))
        self.assertEqual(whisper.model, "whisper-1")

    def test_registered_provider_uses_its_own_from_config(self):
        class TimedFake(FakeTranscriptionProvider):
            @classmethod
            def from_config(cls, config, settings):
                provider = cls(provider_id=config.get("label"))
                provider.timeout = settings.request_timeout_seconds
                return provider

        self.settings.request_timeout_seconds = 9.0
        self.settings.transcription_configs["timed"] = ProviderConfig(
            provider_type="timed", config={"label": "timed"}
        )
        self.settings.transcription_configs["plain"] = ProviderConfig(
            provider_type="plain", config={"provider_id": "plain", "available": False}
        )

        with patch.dict(ServiceFactory.TRANSCRIPTION_PROVIDERS):
            ServiceFactory.register_transcription_provider("timed", TimedFake)
            ServiceFactory.register_transcription_provider("plain", FakeTranscriptionProvider)
            timed = self.factory.create_transcription_provider("timed")
            plain = self.factory.create_transcription_provider("plain")

        self.assertEqual((timed.provider_id, timed.timeout), ("timed", 9.0))
        self.assertEqual(plain.provider_id, "plain")
        self.assertFalse(plain.available)

    def test_unknown_providers(self):
        with self.assertRaises(ConfigurationError):
            self.factory.create_transcription_provider("assemblyai")
        with self.assertRaises(ConfigurationError):
            self.factory.create_analysis_provider("gemini")

    def test_registry_follows_priority_and_enabled_flags(self):
        self.settings.transcription_priority = ["huggingface", "bogus", "gladia"]
        self.settings.transcription_configs["openai"].enabled = False

        registry = self.factory.create_registry()

        self.assertEqual(
            registry.provider_ids(ProviderKind.TRANSCRIPTION), ["huggingface", "gladia"]
        )
        self.assertEqual(registry.priority(ProviderKind.ANALYSIS), ["openai", "ollama"])

    def test_create_pipeline_service(self):
        service = self.factory.create_pipeline_service()

        self.assertIsInstance(service, PipelineService)
        self.assertEqual(service.default_provider(ProviderKind.TRANSCRIPTION), "gladia")
        self.assertEqual(service.default_provider(ProviderKind.ANALYSIS), "openai")

    def test_get_available_providers(self):
        info = self.factory.get_available_providers()

        self.assertEqual(info["storage"]["default"], "memory")
        self.assertIn("gladia", info["transcription"]["available"])
        self.assertEqual(info["analysis"]["priority"], ["openai", "ollama"])

    def test_validate_configuration(self):
        results = self.factory.validate_configuration()

        self.assertTrue(results["valid"])
        self.assertEqual(results["errors"], [])
        self.assertEqual(results["provider_status"]["transcription"]["status"], "valid")

    def test_configuration_validation_errors(self):
        self.settings.analysis_provider = "gemini"
        self.settings.transcription_configs["gladia"].enabled = False
        self.settings.analysis_priority = ["openai", "claude"]

        results = self.factory.validate_configuration()

        self.assertFalse(results["valid"])
        self.assertIn("analysis: unknown default provider 'gemini'", results["errors"])
        self.assertEqual(results["provider_status"]["transcription"]["status"], "disabled")
        self.assertTrue(any("claude" in w for w in results["warnings"]))

    def test_no_enabled_providers_is_invalid(self):
        for config in self.settings.analysis_configs.values():
            config.enabled = False

        results = self.factory.validate_configuration()

        self.assertFalse(results["valid"])
        self.assertIn("No enabled analysis providers", results["errors"])

    def test_register_custom_provider(self):
        with patch.dict(ServiceFactory.TRANSCRIPTION_PROVIDERS):
            ServiceFactory.register_transcription_provider("fake", FakeTranscriptionProvider)
            self.assertIn("fake", self.factory.get_available_providers()["transcription"]["available"])

        self.assertNotIn("fake", ServiceFactory.TRANSCRIPTION_PROVIDERS)


if __name__ == "__main__":
    unittest.main()
