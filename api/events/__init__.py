"""Note lifecycle events, their dispatcher, and the search index reconciler."""

from .note_events import (
    NoteEvent, NoteCreateEvent, NoteRemoveEvent, NoteUpdateEvent,
    ParagraphCreateEvent, ParagraphRemoveEvent, ParagraphUpdateEvent
)
from .event_handler import NoteEventHandler
from .event_dispatcher import NoteEventDispatcher, EventDispatcherClosedError
from .event_reconciler import SearchIndexReconciler

__all__ = [
    'NoteEvent', 'NoteCreateEvent', 'NoteRemoveEvent', 'NoteUpdateEvent',
    'ParagraphCreateEvent', 'ParagraphRemoveEvent', 'ParagraphUpdateEvent',
    'NoteEventHandler', 'NoteEventDispatcher', 'EventDispatcherClosedError',
    'SearchIndexReconciler'
]
