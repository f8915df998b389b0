import sqlite3
from typing import List, Tuple

from search.documents import IndexRow


class NoteRepository:
    """CRUD operations for notes table.

    Single Responsibility: Track which notes are indexed.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert(self, note_id: str, name: str):
        """Insert or refresh a note record"""
        self.conn.execute(
            """INSERT INTO notes (note_id, name) VALUES (?, ?)
               ON CONFLICT(note_id) DO UPDATE SET
                   name = excluded.name,
                   indexed_at = CURRENT_TIMESTAMP""",
            (note_id, name)
        )

    def delete(self, note_id: str) -> int:
        """Delete note record and return count deleted"""
        cursor = self.conn.execute("DELETE FROM notes WHERE note_id = ?", (note_id,))
        return cursor.rowcount

    def count(self) -> int:
        """Count indexed notes"""
        cursor = self.conn.execute("SELECT COUNT(*) FROM notes")
        return cursor.fetchone()[0]


class FTSParagraphRepository:
    """CRUD operations for full-text search rows.

    Single Responsibility: Manage FTS5 rows for note names and paragraphs.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def add_batch(self, rows: List[IndexRow]):
        """Insert index rows"""
        self.conn.executemany(
            """INSERT INTO fts_paragraphs (doc_id, note_id, name, header, text)
               VALUES (?, ?, ?, ?, ?)""",
            [(r.doc_id, r.note_id, r.name, r.header, r.text) for r in rows]
        )

    def delete_by_note(self, note_id: str) -> int:
        """Delete all rows of a note and return count deleted"""
        cursor = self.conn.execute(
            "DELETE FROM fts_paragraphs WHERE note_id = ?",
            (note_id,)
        )
        return cursor.rowcount

    def delete_by_doc(self, doc_id: str) -> int:
        """Delete a single row by document id"""
        cursor = self.conn.execute(
            "DELETE FROM fts_paragraphs WHERE doc_id = ?",
            (doc_id,)
        )
        return cursor.rowcount

    def count_by_note(self, note_id: str) -> int:
        """Count rows for a note"""
        cursor = self.conn.execute(
            "SELECT COUNT(*) FROM fts_paragraphs WHERE note_id = ?",
            (note_id,)
        )
        return cursor.fetchone()[0]

    def search(self, query: str, limit: int, snippet_tokens: int) -> List[Tuple]:
        """Execute FTS5 match, best rank first

        Returns:
            List of (doc_id, name, header, text, snippet) tuples.
        """
        cursor = self.conn.execute("""
            SELECT doc_id, name, header, text,
                   snippet(fts_paragraphs, -1, '<B>', '</B>', '...', ?) AS snippet
            FROM fts_paragraphs
            WHERE fts_paragraphs MATCH ?
            ORDER BY rank, rowid
            LIMIT ?
        """, (snippet_tokens, query, limit))
        return cursor.fetchall()
