"""Test package for the notes search service

Shared test helpers.
"""

BACKENDS = ["sqlite", "memory"]


def make_note(note_id: str, name: str, *texts: str):
    """Note with paragraphs p1..pN holding the given texts"""
    from domain_models import Note, Paragraph
    paragraphs = [Paragraph(id=f"p{i}", text=text) for i, text in enumerate(texts, 1)]
    return Note(id=note_id, name=name, paragraphs=paragraphs)
