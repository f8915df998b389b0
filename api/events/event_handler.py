"""Event handler interface registered with NoteEventDispatcher."""
from abc import ABC, abstractmethod

from events.note_events import (
    NoteEvent, NoteCreateEvent, NoteRemoveEvent, NoteUpdateEvent,
    ParagraphCreateEvent, ParagraphRemoveEvent, ParagraphUpdateEvent
)


class NoteEventHandler(ABC):
    """Receives note lifecycle events, one call per delivered event

    handle() routes each event to the method for its kind.
    """

    def handle(self, event: NoteEvent) -> None:
        """Route event to its kind-specific handler

        Raises:
            TypeError: For objects that are not note events.
        """
        routes = {
            NoteCreateEvent: self.handle_note_create_event,
            NoteRemoveEvent: self.handle_note_remove_event,
            NoteUpdateEvent: self.handle_note_update_event,
            ParagraphCreateEvent: self.handle_paragraph_create_event,
            ParagraphRemoveEvent: self.handle_paragraph_remove_event,
            ParagraphUpdateEvent: self.handle_paragraph_update_event,
        }
        handler = routes.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {event!r}")
        handler(event)

    @abstractmethod
    def handle_note_create_event(self, event: NoteCreateEvent) -> None:
        pass

    @abstractmethod
    def handle_note_remove_event(self, event: NoteRemoveEvent) -> None:
        pass

    @abstractmethod
    def handle_note_update_event(self, event: NoteUpdateEvent) -> None:
        pass

    @abstractmethod
    def handle_paragraph_create_event(self, event: ParagraphCreateEvent) -> None:
        pass

    @abstractmethod
    def handle_paragraph_remove_event(self, event: ParagraphRemoveEvent) -> None:
        pass

    @abstractmethod
    def handle_paragraph_update_event(self, event: ParagraphUpdateEvent) -> None:
        pass
