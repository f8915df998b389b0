"""
Snippet highlighting for backends without native snippet support.

Produces the same shape as FTS5 snippet(): a window of tokens around the
first match, matched tokens wrapped in <B></B>, "..." where text was cut.
"""
import re
from typing import List, Set

_WORD = re.compile(r'\w+')


def tokenize(text: str) -> List[str]:
    """Lowercased word tokens, split on non-word characters"""
    tokens = re.split(r'\W+', text.lower())
    return [t for t in tokens if t]


class SnippetHighlighter:
    """Builds highlighted excerpts around query term matches"""

    def __init__(self, max_tokens: int = 16, open_tag: str = "<B>",
                 close_tag: str = "</B>", ellipsis: str = "..."):
        self.max_tokens = max_tokens
        self.open_tag = open_tag
        self.close_tag = close_tag
        self.ellipsis = ellipsis

    def highlight(self, text: str, terms: Set[str]) -> str:
        """Excerpt of text with every occurrence of terms highlighted"""
        words = list(_WORD.finditer(text))
        if not words:
            return text

        start, end = self._window(words, terms)
        pieces = []
        if start > 0:
            pieces.append(self.ellipsis)

        cursor = words[start].start() if start > 0 else 0
        for match in words[start:end]:
            pieces.append(text[cursor:match.start()])
            if match.group().lower() in terms:
                pieces.append(f"{self.open_tag}{match.group()}{self.close_tag}")
            else:
                pieces.append(match.group())
            cursor = match.end()

        if end < len(words):
            pieces.append(self.ellipsis)
        else:
            pieces.append(text[cursor:])
        return "".join(pieces)

    def _window(self, words, terms: Set[str]):
        """Token range [start, end) centred near the first match"""
        first = 0
        for idx, match in enumerate(words):
            if match.group().lower() in terms:
                first = idx
                break
        start = max(0, first - self.max_tokens // 4)
        end = min(len(words), start + self.max_tokens)
        start = max(0, end - self.max_tokens)
        return start, end
