"""
Configuration validator for startup checks.

Validates configuration settings early to provide clear error messages
before the application attempts to open an index with invalid settings.
"""
import logging
from pathlib import Path
from typing import List

from config import SEARCH_BACKENDS

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Configuration validation failed"""
    pass


class ConfigValidator:
    """Validates configuration settings on startup"""

    def __init__(self, config):
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> None:
        """Validate all configuration settings

        Raises:
            ConfigValidationError: If validation fails
        """
        self._validate_backend()
        self._validate_index_path()
        self._validate_limits()
        self._validate_event_settings()

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
            raise ConfigValidationError(error_msg)

    def _validate_backend(self) -> None:
        """Validate search backend name"""
        backend = self.config.search.backend
        if backend not in SEARCH_BACKENDS:
            self.errors.append(
                f"Unknown search backend: {backend!r}\n"
                f"    Set SEARCH_BACKEND to one of: {', '.join(SEARCH_BACKENDS)}"
            )

    def _validate_index_path(self) -> None:
        """Validate SQLite index location"""
        if self.config.search.backend != "sqlite":
            return
        index_path = self.config.search.index_path
        if index_path == ":memory:":
            return

        parent = Path(index_path).parent
        if not parent.exists():
            self.errors.append(
                f"Index directory does not exist: {parent}\n"
                f"    Create it with: mkdir -p {parent}"
            )
        elif not parent.is_dir():
            self.errors.append(f"Index directory is not a directory: {parent}")

    def _validate_limits(self) -> None:
        """Validate query limits"""
        if self.config.search.result_limit <= 0:
            self.errors.append(
                f"SEARCH_RESULT_LIMIT must be positive, got {self.config.search.result_limit}"
            )
        if self.config.search.snippet_tokens <= 0:
            self.errors.append(
                f"SEARCH_SNIPPET_TOKENS must be positive, got {self.config.search.snippet_tokens}"
            )

    def _validate_event_settings(self) -> None:
        """Validate event dispatcher settings"""
        if self.config.events.workers <= 0:
            self.errors.append(
                f"EVENT_WORKERS must be positive, got {self.config.events.workers}"
            )
        if self.config.events.shutdown_timeout < 0:
            self.errors.append(
                f"EVENT_SHUTDOWN_TIMEOUT must not be negative, got {self.config.events.shutdown_timeout}"
            )
        if self.config.events.workers > 1:
            logger.warning(
                "EVENT_WORKERS > 1: events for the same note may be applied out of order"
            )
