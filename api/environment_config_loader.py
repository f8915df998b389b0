"""
Environment configuration loader.

Logic for reading environment variables lives with the data source
(environment) rather than in the Config dataclasses.
"""
import os
from config import Config, SearchConfig, EventConfig, LoggingConfig, ApiConfig

class EnvironmentConfigLoader:
    """Loads configuration from environment variables.

    Single Responsibility: Environment access logic.
    """

    def load(self) -> Config:
        """Create Config from environment variables"""
        return Config(
            search=self._load_search_config(),
            events=self._load_event_config(),
            logging=self._load_logging_config(),
            api=self._load_api_config()
        )

    def _load_search_config(self) -> SearchConfig:
        """Load search index configuration from environment"""
        return SearchConfig(
            backend=self._get_optional("SEARCH_BACKEND", SearchConfig.backend).lower(),
            index_path=self._get_optional("SEARCH_INDEX_PATH", SearchConfig.index_path),
            result_limit=self._get_int("SEARCH_RESULT_LIMIT", SearchConfig.result_limit),
            snippet_tokens=self._get_int("SEARCH_SNIPPET_TOKENS", SearchConfig.snippet_tokens)
        )

    def _load_event_config(self) -> EventConfig:
        """Load event dispatch configuration from environment"""
        return EventConfig(
            workers=self._get_int("EVENT_WORKERS", EventConfig.workers),
            shutdown_timeout=self._get_float("EVENT_SHUTDOWN_TIMEOUT", EventConfig.shutdown_timeout)
        )

    def _load_logging_config(self) -> LoggingConfig:
        """Load logging configuration from environment"""
        return LoggingConfig(
            level=self._get_optional("LOG_LEVEL", LoggingConfig.level).upper()
        )

    def _load_api_config(self) -> ApiConfig:
        """Load HTTP API configuration from environment"""
        return ApiConfig(
            host=self._get_optional("API_HOST", ApiConfig.host),
            port=self._get_int("API_PORT", ApiConfig.port)
        )

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable"""
        value = os.getenv(key, str(default))
        return int(value)

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable"""
        value = os.getenv(key, str(default))
        return float(value)
