"""Domain models for note indexing"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

@dataclass
class Paragraph:
    """Smallest indexed unit of text within a Note

    Keeps a back-reference to its owning note so deletion can derive
    the note id from the paragraph alone.
    """
    id: str
    text: Optional[str] = None
    title: Optional[str] = None
    note_id: Optional[str] = None
    note: Optional['Note'] = field(default=None, compare=False, repr=False)

    def is_indexable(self) -> bool:
        """Check if paragraph has text worth indexing"""
        return bool(self.text and self.text.strip())

    @classmethod
    def from_dict(cls, data: Dict) -> 'Paragraph':
        """Create Paragraph from dictionary"""
        return cls(
            id=data['id'],
            text=data.get('text'),
            title=data.get('title'),
            note_id=data.get('note_id')
        )

@dataclass
class Note:
    """A named document composed of ordered paragraphs

    Paragraphs are bound to the note on construction.
    """
    id: str
    name: str = ""
    paragraphs: List[Paragraph] = field(default_factory=list)

    def __post_init__(self):
        for paragraph in self.paragraphs:
            self._bind(paragraph)

    def add_paragraph(self, paragraph: Paragraph) -> Paragraph:
        """Append paragraph and bind it to this note"""
        self.paragraphs.append(self._bind(paragraph))
        return paragraph

    def get_paragraph(self, paragraph_id: str) -> Optional[Paragraph]:
        """Find paragraph by id"""
        for paragraph in self.paragraphs:
            if paragraph.id == paragraph_id:
                return paragraph
        return None

    def _bind(self, paragraph: Paragraph) -> Paragraph:
        paragraph.note = self
        paragraph.note_id = self.id
        return paragraph

    @classmethod
    def from_dict(cls, data: Dict) -> 'Note':
        """Create Note (and its paragraphs) from dictionary"""
        paragraphs = [Paragraph.from_dict(p) for p in data.get('paragraphs', [])]
        return cls(id=data['id'], name=data.get('name', ''), paragraphs=paragraphs)

@dataclass(frozen=True)
class QueryResult:
    """Single search hit: a paragraph or a note name

    id is "<noteId>/paragraph/<paragraphId>" for paragraphs and
    "<noteId>" for note names.
    """
    id: str
    text: str
    snippet: str
    name: str = ""
    header: str = ""

    @property
    def note_id(self) -> str:
        return self.id.split('/paragraph/', 1)[0]

    @property
    def paragraph_id(self) -> Optional[str]:
        if '/paragraph/' not in self.id:
            return None
        return self.id.split('/paragraph/', 1)[1]

    def to_dict(self) -> Dict[str, str]:
        """Convert to plain string mapping for API responses"""
        return {
            'id': self.id,
            'name': self.name,
            'header': self.header,
            'text': self.text,
            'snippet': self.snippet
        }
