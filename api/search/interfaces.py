"""
Search index interfaces.

SearchService is the contract every index backend must follow. This enables:
- Switching between SQLite FTS5, in-memory BM25, or other backends
- Runtime backend selection via factory pattern
- Backend-agnostic testing of the event reconciler

Usage:
    from search.search_factory import SearchServiceFactory

    index = SearchServiceFactory.create(config.search)
    index.add_index_docs(notes)
    results = index.query("hello")
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from domain_models import Note, Paragraph, QueryResult

logger = logging.getLogger(__name__)


class SearchService(ABC):
    """Full-text search (both indexing and query) over notes.

    Each note is indexed as one aggregate: its name plus every non-empty
    paragraph, keyed by note id. Re-indexing a note is a full replace.

    Error channels are deliberately asymmetric:
    - add_index_doc / add_index_docs never raise; failures are logged so
      bulk indexing is not interrupted by one bad note.
    - update_index_doc raises IndexIOError so the caller decides on retry.

    Implementations must be safe for concurrent use from multiple threads
    and must never expose a partially replaced note to a query.
    """

    @abstractmethod
    def query(self, query_str: str, limit: int = None) -> List[QueryResult]:
        """Full-text search in all the notes.

        Args:
            query_str: Query text. Blank queries return no results.
            limit: Maximum number of results, backend default if None.

        Returns:
            Matching paragraphs and note names in backend rank order.
            The order is stable for a given index state.

        Raises:
            QuerySyntaxError: If the query cannot be parsed by the backend.
            IndexClosedError: If the index has been closed.
        """
        pass

    @abstractmethod
    def update_index_doc(self, note: Note) -> None:
        """Replace everything indexed for the note: name and all paragraphs.

        Args:
            note: Note snapshot to index.

        Raises:
            ValueError: If the note has no id or holds non-Paragraph entries.
            IndexIOError: If the backend cannot complete the write.
            IndexClosedError: If the index has been closed.
        """
        pass

    @abstractmethod
    def delete_index_docs(self, note_id: str) -> None:
        """Delete all docs of the given note. No-op for unknown ids."""
        pass

    @abstractmethod
    def delete_index_doc(self, note_id: str, paragraph: Paragraph) -> None:
        """Delete the doc of a single paragraph, keeping the rest of the note."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of notes currently indexed"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Free the resources used by the index. Safe to call twice."""
        pass

    @abstractmethod
    def is_closed(self) -> bool:
        """Check if close() has been called"""
        pass

    @property
    def name(self) -> str:
        """Backend name for health reporting"""
        return type(self).__name__

    def add_index_doc(self, note: Note) -> bool:
        """Index the given note, replacing any previous version.

        Best-effort: failures are logged, never raised.

        Returns:
            True if the note was indexed, False if indexing failed.
        """
        try:
            self.update_index_doc(note)
        except Exception as e:
            logger.error(f"Failed to index note {getattr(note, 'id', None)!r}: {e}")
            return False
        return True

    def add_index_docs(self, notes: Iterable[Note]) -> int:
        """Index a full collection of notes: all paragraphs and note names.

        One failing note does not abort the batch.

        Returns:
            Number of notes indexed successfully.
        """
        indexed = 0
        failed = 0
        for note in notes:
            try:
                self.update_index_doc(note)
                indexed += 1
            except Exception as e:
                failed += 1
                logger.error(f"Failed to index note {getattr(note, 'id', None)!r}: {e}")
        logger.info(f"Indexed {indexed} note(s), {failed} failed")
        return indexed
