"""
Configuration constants for the notes search service
"""
from dataclasses import dataclass

# Backends selectable via SEARCH_BACKEND
SEARCH_BACKENDS = ("sqlite", "memory")

@dataclass
class SearchConfig:
    """Search index configuration

    index_path is a SQLite database file, or ":memory:" for a private
    in-process database. Ignored by the memory backend.
    """
    backend: str = "sqlite"
    index_path: str = ":memory:"
    result_limit: int = 100
    snippet_tokens: int = 16
    check_same_thread: bool = False  # Connection is shared by dispatcher and API threads

@dataclass
class EventConfig:
    """Event dispatch configuration"""
    workers: int = 1  # One worker keeps events in publication order
    shutdown_timeout: float = 5.0

@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"

@dataclass
class ApiConfig:
    """HTTP API configuration"""
    host: str = "0.0.0.0"
    port: int = 8000

@dataclass
class Config:
    """Main configuration container"""
    search: SearchConfig
    events: EventConfig
    logging: LoggingConfig
    api: ApiConfig

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment - delegates to EnvironmentConfigLoader"""
        from environment_config_loader import EnvironmentConfigLoader
        return EnvironmentConfigLoader().load()

    @classmethod
    def defaults(cls) -> 'Config':
        """Create config with built-in defaults (ignores environment)"""
        return cls(
            search=SearchConfig(),
            events=EventConfig(),
            logging=LoggingConfig(),
            api=ApiConfig()
        )

# Default instance
default_config = Config.from_env()
