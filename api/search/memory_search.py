"""
In-memory search backend using rank_bm25.

Keeps each note's rows as an immutable tuple in a dict keyed by note id.
Replacing a note is one dict assignment under the lock, so queries never
observe a partially updated note.

Query language: whitespace separated terms, double quotes for phrases.
All terms must occur in a row for it to match; BM25Okapi scores are used
for ordering only.
"""
import re
import logging
import threading
from typing import Dict, List, Optional, Tuple

import numpy as np
from rank_bm25 import BM25Okapi

from domain_models import Note, Paragraph, QueryResult
from search.documents import IndexRow, NoteDocumentBuilder
from search.errors import IndexClosedError, QuerySyntaxError
from search.highlighter import SnippetHighlighter, tokenize
from search.interfaces import SearchService

logger = logging.getLogger(__name__)

_TERM = re.compile(r'"([^"]*)"|(\S+)')


class QueryParser:
    """Parses query strings into token sequences"""

    @staticmethod
    def parse(query_str: str) -> List[Tuple[str, ...]]:
        """One token tuple per term; a tuple longer than one is a phrase

        Raises:
            QuerySyntaxError: On unbalanced double quotes.
        """
        if query_str.count('"') % 2:
            raise QuerySyntaxError(query_str, "unbalanced double quote")
        terms = []
        for phrase, word in _TERM.findall(query_str):
            tokens = tuple(tokenize(phrase or word))
            if tokens:
                terms.append(tokens)
        return terms


class _BM25Snapshot:
    """BM25 index over all rows at one index version"""

    def __init__(self, version: int, rows: List[IndexRow]):
        self.version = version
        self.rows: List[IndexRow] = []
        self.tokens: List[List[str]] = []
        for row in rows:
            row_tokens = tokenize(f"{row.header} {row.text}")
            if row_tokens:
                self.rows.append(row)
                self.tokens.append(row_tokens)
        # Empty corpus would divide by zero in BM25Okapi
        self.bm25: Optional[BM25Okapi] = BM25Okapi(self.tokens) if self.tokens else None


class InMemorySearchService(SearchService):
    """Search service holding the whole index in process memory"""

    def __init__(self, config):
        self.config = config
        self._lock = threading.RLock()
        self._closed = False
        self._documents: Dict[str, Tuple[IndexRow, ...]] = {}
        self._version = 0
        self._snapshot: Optional[_BM25Snapshot] = None
        self.highlighter = SnippetHighlighter(max_tokens=config.snippet_tokens)

    def query(self, query_str: str, limit: int = None) -> List[QueryResult]:
        """Rank matching rows with BM25, best first"""
        if query_str is None or not query_str.strip():
            return []
        terms = QueryParser.parse(query_str)
        if not terms:
            return []
        limit = limit or self.config.result_limit

        with self._lock:
            self._ensure_open()
            snapshot = self._current_snapshot()
        if snapshot.bm25 is None:
            return []

        query_tokens = [token for term in terms for token in term]
        scores = snapshot.bm25.get_scores(query_tokens)
        # Stable sort keeps insertion order among equal scores
        ranked = np.argsort(-np.asarray(scores), kind="stable")
        matched = [
            int(idx) for idx in ranked
            if all(self._contains(snapshot.tokens[idx], term) for term in terms)
        ]

        highlight_terms = set(query_tokens)
        return [self._to_result(snapshot.rows[idx], highlight_terms) for idx in matched[:limit]]

    def update_index_doc(self, note: Note) -> None:
        """Swap in the note's new rows"""
        rows = tuple(NoteDocumentBuilder.build(note))
        with self._lock:
            self._ensure_open()
            self._documents.pop(note.id, None)
            self._documents[note.id] = rows
            self._version += 1
        logger.debug(f"Indexed note {note.id} ({len(rows) - 1} paragraph(s))")

    def delete_index_docs(self, note_id: str) -> None:
        with self._lock:
            self._ensure_open()
            if self._documents.pop(note_id, None) is not None:
                self._version += 1

    def delete_index_doc(self, note_id: str, paragraph: Paragraph) -> None:
        doc_id = NoteDocumentBuilder.paragraph_doc_id(note_id, paragraph.id)
        with self._lock:
            self._ensure_open()
            rows = self._documents.get(note_id)
            if rows is None:
                return
            remaining = tuple(row for row in rows if row.doc_id != doc_id)
            if len(remaining) != len(rows):
                self._documents[note_id] = remaining
                self._version += 1

    def count(self) -> int:
        with self._lock:
            self._ensure_open()
            return len(self._documents)

    def close(self) -> None:
        """Drop all in-memory structures; later calls are no-ops"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._documents.clear()
            self._snapshot = None
        logger.info("In-memory search index closed")

    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    def _current_snapshot(self) -> _BM25Snapshot:
        """Rebuild BM25 index lazily after mutations (caller holds lock)"""
        if self._snapshot is None or self._snapshot.version != self._version:
            rows = [row for note_rows in self._documents.values() for row in note_rows]
            self._snapshot = _BM25Snapshot(self._version, rows)
        return self._snapshot

    def _ensure_open(self):
        if self._closed:
            raise IndexClosedError("Search index is closed")

    @staticmethod
    def _contains(row_tokens: List[str], term: Tuple[str, ...]) -> bool:
        """Check if term tokens occur contiguously in row"""
        size = len(term)
        if size == 1:
            return term[0] in row_tokens
        return any(
            tuple(row_tokens[i:i + size]) == term
            for i in range(len(row_tokens) - size + 1)
        )

    def _to_result(self, row: IndexRow, terms) -> QueryResult:
        source = row.text if any(t in tokenize(row.text) for t in terms) else row.header
        return QueryResult(
            id=row.doc_id,
            text=row.text,
            snippet=self.highlighter.highlight(source, terms),
            name=row.name,
            header=row.header
        )
