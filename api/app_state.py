"""
Application state: wires the search index, event dispatcher and reconciler.

Teardown is two steps in a fixed order: stop receiving events (the
dispatcher drains and stops its workers), then release the index. No
event is handled after the index has been closed.
"""
import logging
import threading
from typing import Iterable, List, Optional

from config import Config
from domain_models import Note, QueryResult
from events.event_dispatcher import NoteEventDispatcher
from events.event_reconciler import SearchIndexReconciler
from events.note_events import NoteEvent
from search.interfaces import SearchService
from search.search_factory import SearchServiceFactory

logger = logging.getLogger(__name__)


class AppState:
    """Application state container

    Holds the three collaborators and hides their wiring from routes:
    - search_service: the index backend (selected by config)
    - dispatcher: asynchronous event transport
    - reconciler: event handler applying events to the index
    """

    def __init__(self, search_service: SearchService, dispatcher: NoteEventDispatcher):
        self.search_service = search_service
        self.dispatcher = dispatcher
        self.reconciler = SearchIndexReconciler(search_service)
        self._lock = threading.Lock()
        self._started = False
        self._closed = False

    @classmethod
    def from_config(cls, config: Config) -> 'AppState':
        """Build backend and dispatcher from config"""
        search_service = SearchServiceFactory.create(config.search)
        dispatcher = NoteEventDispatcher(
            workers=config.events.workers,
            shutdown_timeout=config.events.shutdown_timeout
        )
        return cls(search_service, dispatcher)

    # === Lifecycle ===

    def start(self, initial_notes: Iterable[Note] = ()) -> int:
        """Index the initial corpus, then start receiving events

        Returns:
            Number of notes indexed from initial_notes.
        """
        with self._lock:
            if self._started:
                return 0
            self._started = True

        indexed = self.search_service.add_index_docs(initial_notes)
        self.dispatcher.subscribe(self.reconciler)
        self.dispatcher.start()
        logger.info(f"Search service started ({self.search_service.name}, {indexed} note(s))")
        return indexed

    def close(self):
        """Stop receiving events, then release index resources"""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self.dispatcher.close()
        self.dispatcher.unsubscribe(self.reconciler)
        self.search_service.close()
        logger.info("Search service stopped")

    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    # === Delegation ===

    def publish(self, event: NoteEvent):
        """Queue a note lifecycle event for indexing"""
        self.dispatcher.publish(event)

    def query(self, query_str: str, limit: Optional[int] = None) -> List[QueryResult]:
        """Search the index directly, bypassing the event path"""
        return self.search_service.query(query_str, limit=limit)

    def drain_events(self, timeout: Optional[float] = None) -> bool:
        """Wait for queued events to be applied"""
        return self.dispatcher.drain_events(timeout=timeout)

    def get_search_service(self) -> SearchService:
        return self.search_service

    def get_stats(self) -> dict:
        """Index and event statistics for health reporting"""
        indexed = 0 if self.search_service.is_closed() else self.search_service.count()
        stats = self.reconciler.stats.to_dict()
        return {
            'backend': self.search_service.name,
            'indexed_notes': indexed,
            'pending_events': self.dispatcher.pending(),
            'events_applied': stats['applied'],
            'events_failed': stats['failed'],
        }
