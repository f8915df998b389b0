"""Keeps the search index in sync with note lifecycle events.

Event -> index mapping:
- NoteCreate       -> add_index_doc(note)
- NoteRemove       -> delete_index_docs(note.id)
- NoteUpdate       -> update_index_doc(note)
- ParagraphCreate  -> update_index_doc(owning note)
- ParagraphRemove  -> delete_index_doc(note.id, paragraph)
- ParagraphUpdate  -> update_index_doc(owning note)

Paragraph create/update re-index the whole note because backends only
guarantee whole-document replace.

No handler propagates an exception: a failure is logged and the note
stays stale until its next successful event. There is no retry.
"""
import logging
import threading
from typing import Optional

from events.event_handler import NoteEventHandler
from events.note_events import (
    NoteEvent, NoteCreateEvent, NoteRemoveEvent, NoteUpdateEvent,
    ParagraphCreateEvent, ParagraphRemoveEvent, ParagraphUpdateEvent
)
from search.errors import SearchIndexError
from search.interfaces import SearchService

logger = logging.getLogger(__name__)


class ReconcilerStats:
    """Thread-safe counters of applied and failed events"""

    def __init__(self):
        self._lock = threading.Lock()
        self.applied = 0
        self.failed = 0

    def record_applied(self):
        with self._lock:
            self.applied += 1

    def record_failed(self):
        with self._lock:
            self.failed += 1

    def to_dict(self) -> dict:
        with self._lock:
            return {'applied': self.applied, 'failed': self.failed}


class SearchIndexReconciler(NoteEventHandler):
    """Maps each note lifecycle event to one SearchService call

    Stateless between events: no ordering buffer, no deduplication.
    """

    def __init__(self, search_service: SearchService, log: Optional[logging.Logger] = None):
        self.search_service = search_service
        self.log = log or logger
        self.stats = ReconcilerStats()

    def handle_note_create_event(self, event: NoteCreateEvent) -> None:
        def add():
            # add_index_doc logs the cause itself and only reports success
            if not self.search_service.add_index_doc(event.note):
                raise SearchIndexError(f"Note {event.note_id!r} was not indexed")
        self._apply(event, add)

    def handle_note_remove_event(self, event: NoteRemoveEvent) -> None:
        self._apply(event, lambda: self.search_service.delete_index_docs(event.note.id))

    def handle_note_update_event(self, event: NoteUpdateEvent) -> None:
        self._apply(event, lambda: self.search_service.update_index_doc(event.note))

    def handle_paragraph_create_event(self, event: ParagraphCreateEvent) -> None:
        self._reindex_owning_note(event)

    def handle_paragraph_remove_event(self, event: ParagraphRemoveEvent) -> None:
        self._apply(
            event,
            lambda: self.search_service.delete_index_doc(self._require_note_id(event), event.paragraph)
        )

    def handle_paragraph_update_event(self, event: ParagraphUpdateEvent) -> None:
        self._reindex_owning_note(event)

    def _reindex_owning_note(self, event) -> None:
        def reindex():
            note = event.resolve_note()
            if note is None:
                raise ValueError(f"Paragraph {event.paragraph.id} has no owning note")
            self.search_service.update_index_doc(note)
        self._apply(event, reindex)

    @staticmethod
    def _require_note_id(event) -> str:
        note_id = event.note_id
        if not note_id:
            raise ValueError(f"Paragraph {event.paragraph.id} has no owning note id")
        return note_id

    def _apply(self, event: NoteEvent, action) -> None:
        """Run index call; log and count failures instead of raising"""
        try:
            action()
        except Exception as e:
            self.stats.record_failed()
            self._log_failure(event, e)
            return
        self.stats.record_applied()

    def _log_failure(self, event: NoteEvent, error: Exception) -> None:
        note_id = self._safe_note_id(event)
        self.log.error(
            f"Failed to apply {event.kind} for note {note_id}: {error}",
            exc_info=error,
            extra={
                'event_type': event.kind,
                'note_id': note_id,
                'error_type': type(error).__name__,
            }
        )

    @staticmethod
    def _safe_note_id(event: NoteEvent) -> Optional[str]:
        try:
            return event.note_id
        except AttributeError:
            return None
