"""
FTS5 MATCH expression building.

User text is not valid FTS5 syntax in general: "hello world." or
"state-of-the-art" fail to parse. Every bareword is turned into a quoted
string so FTS5 tokenizes it the same way it tokenized the indexed text.

Kept as query syntax:
- AND, OR, NOT (uppercase)
- "quoted phrases"
- trailing * for prefix search
- parentheses, when balanced
"""
import re
from typing import List, Optional

from search.errors import QuerySyntaxError

OPERATORS = ("AND", "OR", "NOT")

_TOKEN = re.compile(r'"[^"]*"\*?|[()]|[^\s()"]+')
# unicode61 treats underscore as a separator, so require a letter or digit
_SEARCHABLE = re.compile(r'[^\W_]')


class FTSQueryBuilder:
    """Converts free-text queries into FTS5 MATCH expressions"""

    @staticmethod
    def build(query_str: str) -> Optional[str]:
        """MATCH expression for the query, None if nothing is searchable

        Raises:
            QuerySyntaxError: On unbalanced double quotes.
        """
        if query_str.count('"') % 2:
            raise QuerySyntaxError(query_str, "unbalanced double quote")
        keep_parens = FTSQueryBuilder._parens_balanced(query_str)

        parts: List[str] = []
        for token in _TOKEN.findall(query_str):
            if token in ("(", ")"):
                if keep_parens:
                    parts.append(token)
            elif token.startswith('"') or token in OPERATORS:
                parts.append(token)
            else:
                quoted = FTSQueryBuilder._quote(token)
                if quoted:
                    parts.append(quoted)

        if not any(p not in OPERATORS and p not in ("(", ")") for p in parts):
            return None
        return " ".join(parts)

    @staticmethod
    def _quote(word: str) -> Optional[str]:
        """Quoted bareword, keeping a trailing * as prefix operator"""
        prefix = word.endswith("*")
        core = word.rstrip("*")
        if not _SEARCHABLE.search(core):
            return None
        quoted = '"' + core.replace('"', '""') + '"'
        return quoted + "*" if prefix else quoted

    @staticmethod
    def _parens_balanced(query_str: str) -> bool:
        depth = 0
        for char in query_str:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    return False
        return depth == 0
