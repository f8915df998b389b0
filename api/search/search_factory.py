"""
Search service factory for runtime backend selection.

Selects the SQLite FTS5 or in-memory BM25 implementation based on
SEARCH_BACKEND.

Usage:
    from search.search_factory import SearchServiceFactory

    # Selects based on config.backend
    index = SearchServiceFactory.create(config.search)

    # Or explicitly select backend
    index = SearchServiceFactory.create(config.search, backend='memory')
"""
import logging
from typing import Optional, Literal, TYPE_CHECKING

from search.interfaces import SearchService

if TYPE_CHECKING:
    from config import SearchConfig

logger = logging.getLogger(__name__)

BackendType = Literal['sqlite', 'memory']


class SearchServiceFactory:
    """Factory for creating search service implementations."""

    @staticmethod
    def create(config: 'SearchConfig', backend: Optional[BackendType] = None) -> SearchService:
        """Create search service for configured (or explicit) backend

        Raises:
            ValueError: If backend name is unknown.
        """
        backend = (backend or config.backend).lower()
        logger.info(f"Creating search service: backend={backend}")

        if backend == 'sqlite':
            from search.sqlite_search import SQLiteSearchService
            return SQLiteSearchService(config)
        if backend == 'memory':
            from search.memory_search import InMemorySearchService
            return InMemorySearchService(config)
        raise ValueError(f"Unknown search backend: {backend!r}")
