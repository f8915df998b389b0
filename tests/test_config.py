"""
Unit tests for config module
"""
import pytest
from config import (
    SearchConfig,
    EventConfig,
    LoggingConfig,
    ApiConfig,
    Config,
    SEARCH_BACKENDS
)
from environment_config_loader import EnvironmentConfigLoader


class TestSearchConfig:
    """Tests for SearchConfig"""

    def test_default_values(self):
        """Test default configuration values"""
        config = SearchConfig()
        assert config.backend == "sqlite"
        assert config.index_path == ":memory:"
        assert config.result_limit == 100
        assert config.snippet_tokens == 16
        assert config.check_same_thread is False

    def test_custom_values(self):
        """Test custom configuration"""
        config = SearchConfig(backend="memory", result_limit=5)
        assert config.backend == "memory"
        assert config.result_limit == 5

    def test_known_backends(self):
        """Both shipped backends are selectable"""
        assert set(SEARCH_BACKENDS) == {"sqlite", "memory"}


class TestEventConfig:
    """Tests for EventConfig"""

    def test_default_values(self):
        """Single worker keeps events ordered"""
        config = EventConfig()
        assert config.workers == 1
        assert config.shutdown_timeout == 5.0


class TestConfigDefaults:
    """Tests for Config container"""

    def test_defaults_ignore_environment(self, monkeypatch):
        """Config.defaults() does not read env vars"""
        monkeypatch.setenv("SEARCH_BACKEND", "memory")
        config = Config.defaults()
        assert config.search.backend == "sqlite"
        assert isinstance(config.events, EventConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.api, ApiConfig)


class TestEnvironmentConfigLoader:
    """Tests for loading config from environment"""

    def test_load_defaults(self, monkeypatch):
        """Missing env vars fall back to dataclass defaults"""
        for key in ("SEARCH_BACKEND", "SEARCH_INDEX_PATH", "SEARCH_RESULT_LIMIT",
                    "SEARCH_SNIPPET_TOKENS", "EVENT_WORKERS", "EVENT_SHUTDOWN_TIMEOUT",
                    "LOG_LEVEL", "API_HOST", "API_PORT"):
            monkeypatch.delenv(key, raising=False)

        config = EnvironmentConfigLoader().load()

        assert config.search == SearchConfig()
        assert config.events == EventConfig()
        assert config.logging.level == "INFO"
        assert config.api.port == 8000

    def test_load_from_environment(self, monkeypatch):
        """Env vars override defaults"""
        monkeypatch.setenv("SEARCH_BACKEND", "Memory")
        monkeypatch.setenv("SEARCH_INDEX_PATH", "/tmp/notes.db")
        monkeypatch.setenv("SEARCH_RESULT_LIMIT", "25")
        monkeypatch.setenv("SEARCH_SNIPPET_TOKENS", "8")
        monkeypatch.setenv("EVENT_WORKERS", "3")
        monkeypatch.setenv("EVENT_SHUTDOWN_TIMEOUT", "1.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = Config.from_env()

        assert config.search.backend == "memory"
        assert config.search.index_path == "/tmp/notes.db"
        assert config.search.result_limit == 25
        assert config.search.snippet_tokens == 8
        assert config.events.workers == 3
        assert config.events.shutdown_timeout == 1.5
        assert config.logging.level == "DEBUG"

    def test_invalid_integer_raises(self, monkeypatch):
        """Non-numeric values are rejected"""
        monkeypatch.setenv("EVENT_WORKERS", "many")
        with pytest.raises(ValueError):
            EnvironmentConfigLoader().load()
