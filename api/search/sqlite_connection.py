import sqlite3
import logging

logger = logging.getLogger(__name__)


class SQLiteConnection:
    """Manages SQLite connection for the search index"""

    def __init__(self, config):
        self.config = config
        self.conn = None

    def connect(self) -> sqlite3.Connection:
        """Establish database connection"""
        self.conn = self._create_connection()
        # WAL allows concurrent reads during writes for file-backed indexes
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA busy_timeout=5000")  # Wait up to 5s for locks
        self._check_fts5()
        return self.conn

    def _create_connection(self) -> sqlite3.Connection:
        """Create SQLite connection"""
        return sqlite3.connect(
            self.config.index_path,
            check_same_thread=self.config.check_same_thread
        )

    def _check_fts5(self):
        """Fail early if this sqlite3 build lacks FTS5"""
        try:
            self.conn.execute("CREATE VIRTUAL TABLE IF NOT EXISTS temp.fts5_probe USING fts5(x)")
            self.conn.execute("DROP TABLE temp.fts5_probe")
        except sqlite3.OperationalError as e:
            raise RuntimeError(f"SQLite FTS5 not available: {e}")

    def close(self):
        """Close connection"""
        if self.conn:
            self.conn.close()
            self.conn = None


class IndexSchemaManager:
    """Manages search index schema"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_schema(self):
        """Create all required tables"""
        self._create_notes_table()
        self._create_fts_table()
        self.conn.commit()

    def _create_notes_table(self):
        """Create notes table (one row per indexed note)"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS notes (
                note_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                indexed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def _create_fts_table(self):
        """Create FTS5 table holding note name and paragraph rows"""
        self.conn.execute("""
            CREATE VIRTUAL TABLE IF NOT EXISTS fts_paragraphs
            USING fts5(
                doc_id UNINDEXED,
                note_id UNINDEXED,
                name UNINDEXED,
                header,
                text,
                tokenize = 'unicode61'
            )
        """)
