"""
SQLite FTS5 search backend.

Stores one row per note name and per paragraph in an FTS5 table, plus a
notes table tracking which notes are indexed. Every mutation of a note
runs in a single transaction under one lock, so a concurrent query sees
either the previous or the new version of a note, never a mix.
"""
import sqlite3
import logging
import threading
from typing import List

from domain_models import Note, Paragraph, QueryResult
from search.documents import NoteDocumentBuilder
from search.errors import IndexClosedError, IndexIOError, QuerySyntaxError
from search.fts_query import FTSQueryBuilder
from search.interfaces import SearchService
from search.note_repository import NoteRepository, FTSParagraphRepository
from search.sqlite_connection import SQLiteConnection, IndexSchemaManager

logger = logging.getLogger(__name__)

# FTS5 caps snippet length at 64 tokens
MAX_SNIPPET_TOKENS = 64

# OperationalError messages caused by the query text rather than the database
_QUERY_ERROR_MARKERS = ("fts5", "syntax error", "no such column", "unterminated string")


class SQLiteSearchService(SearchService):
    """Search service backed by SQLite FTS5

    Thread-safe: one RLock serializes access to the shared connection.
    """

    def __init__(self, config):
        self.config = config
        self._lock = threading.RLock()
        self._closed = False
        self.connection = SQLiteConnection(config)
        self.conn = self.connection.connect()
        IndexSchemaManager(self.conn).create_schema()
        self.notes = NoteRepository(self.conn)
        self.fts = FTSParagraphRepository(self.conn)
        logger.info(f"SQLite search index opened at {config.index_path}")

    def query(self, query_str: str, limit: int = None) -> List[QueryResult]:
        """Run FTS5 MATCH query, best rank first"""
        if query_str is None or not query_str.strip():
            return []
        match_expr = FTSQueryBuilder.build(query_str)
        if match_expr is None:
            return []
        limit = limit or self.config.result_limit
        with self._lock:
            self._ensure_open()
            try:
                rows = self.fts.search(match_expr, limit, self._snippet_tokens())
            except sqlite3.OperationalError as e:
                if self._is_query_error(e):
                    raise QuerySyntaxError(query_str, str(e)) from e
                raise IndexIOError(f"Query failed: {e}") from e
            except sqlite3.Error as e:
                raise IndexIOError(f"Query failed: {e}") from e
        return [self._to_result(row) for row in rows]

    def update_index_doc(self, note: Note) -> None:
        """Replace all rows of the note in one transaction"""
        rows = NoteDocumentBuilder.build(note)
        with self._lock:
            self._ensure_open()
            try:
                with self.conn:
                    self.fts.delete_by_note(note.id)
                    self.fts.add_batch(rows)
                    self.notes.upsert(note.id, note.name or "")
            except sqlite3.Error as e:
                raise IndexIOError(f"Failed to update index for note {note.id}: {e}") from e
        logger.debug(f"Indexed note {note.id} ({len(rows) - 1} paragraph(s))")

    def delete_index_docs(self, note_id: str) -> None:
        """Delete note record and all its rows"""
        with self._lock:
            self._ensure_open()
            try:
                with self.conn:
                    deleted = self.fts.delete_by_note(note_id)
                    self.notes.delete(note_id)
            except sqlite3.Error as e:
                raise IndexIOError(f"Failed to delete note {note_id}: {e}") from e
        logger.debug(f"Deleted note {note_id} from index ({deleted} row(s))")

    def delete_index_doc(self, note_id: str, paragraph: Paragraph) -> None:
        """Delete the row of one paragraph"""
        doc_id = NoteDocumentBuilder.paragraph_doc_id(note_id, paragraph.id)
        with self._lock:
            self._ensure_open()
            try:
                with self.conn:
                    self.fts.delete_by_doc(doc_id)
            except sqlite3.Error as e:
                raise IndexIOError(f"Failed to delete paragraph {doc_id}: {e}") from e

    def count(self) -> int:
        with self._lock:
            self._ensure_open()
            return self.notes.count()

    def close(self) -> None:
        """Close connection; later calls are no-ops"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.connection.close()
        logger.info("SQLite search index closed")

    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    def _ensure_open(self):
        if self._closed:
            raise IndexClosedError("Search index is closed")

    def _snippet_tokens(self) -> int:
        return max(1, min(self.config.snippet_tokens, MAX_SNIPPET_TOKENS))

    @staticmethod
    def _is_query_error(error: sqlite3.OperationalError) -> bool:
        message = str(error).lower()
        return any(marker in message for marker in _QUERY_ERROR_MARKERS)

    @staticmethod
    def _to_result(row) -> QueryResult:
        """Convert DB row to QueryResult"""
        doc_id, name, header, text, snippet = row
        return QueryResult(
            id=doc_id,
            text=text,
            snippet=snippet,
            name=name,
            header=header
        )
