"""Search index error taxonomy.

All backend failures surface as SearchIndexError subclasses so callers
can handle them without knowing which backend is configured.
"""


class SearchIndexError(Exception):
    """Base class for search index failures"""
    pass


class IndexIOError(SearchIndexError):
    """Backend could not complete a read or write"""
    pass


class QuerySyntaxError(SearchIndexError):
    """Query string is not valid for the backend's query language"""

    def __init__(self, query: str, reason: str = ""):
        self.query = query
        self.reason = reason
        message = f"Invalid query {query!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class IndexClosedError(SearchIndexError):
    """Operation attempted after the index was closed"""
    pass
