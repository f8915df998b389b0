"""Note lifecycle events.

Events are frozen. The dispatcher's on_* helpers deep-copy the note or
paragraph at publish time; events built directly wrap the given objects.
Handlers must not assume the note still exists or is unchanged by the
time they run.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from domain_models import Note, Paragraph


@dataclass(frozen=True)
class NoteEvent(ABC):
    """Base class for all note lifecycle events"""

    @property
    @abstractmethod
    def note_id(self) -> Optional[str]:
        pass

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class _NoteScopedEvent(NoteEvent):
    note: Note

    @property
    def note_id(self) -> Optional[str]:
        return self.note.id if self.note is not None else None


@dataclass(frozen=True)
class NoteCreateEvent(_NoteScopedEvent):
    pass


@dataclass(frozen=True)
class NoteRemoveEvent(_NoteScopedEvent):
    pass


@dataclass(frozen=True)
class NoteUpdateEvent(_NoteScopedEvent):
    pass


@dataclass(frozen=True)
class _ParagraphScopedEvent(NoteEvent):
    paragraph: Paragraph
    note: Optional[Note] = None

    @property
    def note_id(self) -> Optional[str]:
        if self.note is not None:
            return self.note.id
        return self.paragraph.note_id

    def resolve_note(self) -> Optional[Note]:
        """Owning note snapshot: the event's own, else the paragraph's back-reference"""
        return self.note if self.note is not None else self.paragraph.note


@dataclass(frozen=True)
class ParagraphCreateEvent(_ParagraphScopedEvent):
    pass


@dataclass(frozen=True)
class ParagraphRemoveEvent(_ParagraphScopedEvent):
    pass


@dataclass(frozen=True)
class ParagraphUpdateEvent(_ParagraphScopedEvent):
    pass
