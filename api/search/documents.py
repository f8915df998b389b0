"""Index document rows derived from Note snapshots.

A note is indexed as one row for its name plus one row per paragraph
that has text. All rows of a note share its note_id.
"""
from dataclasses import dataclass
from typing import List

from domain_models import Note, Paragraph


@dataclass(frozen=True)
class IndexRow:
    """One searchable unit of a note's aggregate document"""
    doc_id: str
    note_id: str
    name: str
    header: str
    text: str


class NoteDocumentBuilder:
    """Builds index rows for a note snapshot

    Reads the snapshot once so later mutations of the Note object
    do not leak into a half-built document.
    """

    @staticmethod
    def build(note: Note) -> List[IndexRow]:
        """Rows for the note name and every indexable paragraph

        Raises:
            ValueError: If the note has no id.
        """
        NoteDocumentBuilder.validate(note)
        name = note.name or ""
        rows = [IndexRow(doc_id=note.id, note_id=note.id, name=name, header="", text=name)]
        for paragraph in list(note.paragraphs):
            if not paragraph.is_indexable():
                continue
            rows.append(NoteDocumentBuilder.paragraph_row(note.id, name, paragraph))
        return rows

    @staticmethod
    def paragraph_row(note_id: str, name: str, paragraph: Paragraph) -> IndexRow:
        """Row for a single paragraph"""
        return IndexRow(
            doc_id=NoteDocumentBuilder.paragraph_doc_id(note_id, paragraph.id),
            note_id=note_id,
            name=name,
            header=paragraph.title or "",
            text=paragraph.text or ""
        )

    @staticmethod
    def paragraph_doc_id(note_id: str, paragraph_id: str) -> str:
        return f"{note_id}/paragraph/{paragraph_id}"

    @staticmethod
    def validate(note: Note) -> None:
        if note is None:
            raise ValueError("Cannot index None note")
        if not isinstance(note.id, str) or not note.id:
            raise ValueError(f"Note id must be a non-empty string, got {note.id!r}")
        for paragraph in note.paragraphs:
            if not isinstance(paragraph, Paragraph):
                raise ValueError(f"Note {note.id} has invalid paragraph {paragraph!r}")
