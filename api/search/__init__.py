"""Search index contract and backends."""

from .errors import SearchIndexError, IndexIOError, QuerySyntaxError, IndexClosedError
from .interfaces import SearchService
from .search_factory import SearchServiceFactory

__all__ = [
    'SearchService', 'SearchServiceFactory',
    'SearchIndexError', 'IndexIOError', 'QuerySyntaxError', 'IndexClosedError'
]
