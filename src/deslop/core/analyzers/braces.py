"""Bounded brace matcher for C-family source.

Not a parser: a small lexer that is just aware enough of strings, comments
and template interpolation to find the ``}`` closing a given ``{``. The
scan is capped at ``limit`` characters so adversarial or malformed input
can never make it run away.

``scan_brace`` reports *why* no match was found: the text ended while
braces were still open (``UNMATCHED``) or the lookahead cap was hit first
(``LIMIT_EXCEEDED``). ``find_matching_brace`` collapses both to
``NOT_FOUND`` for callers that only need an index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5000
NOT_FOUND = -1

_QUOTES = frozenset("\"'`")


class BraceStatus(Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    LIMIT_EXCEEDED = "limit_exceeded"


@dataclass(frozen=True)
class BraceMatch:
    """Outcome of a brace scan.

    Attributes:
        status: Whether the closing brace was found, definitively absent,
            or beyond the lookahead cap.
        index: Index of the closing brace, or ``NOT_FOUND``.
    """

    status: BraceStatus
    index: int = NOT_FOUND

    @property
    def found(self) -> bool:
        return self.status is BraceStatus.MATCHED


def scan_brace(content: str, open_index: int, limit: int = DEFAULT_LIMIT) -> BraceMatch:
    """Find the brace closing the one at ``open_index``.

    Braces are ignored inside ``'``, ``"`` and backtick strings (a quote
    preceded by a backslash does not toggle string state), inside ``//``
    and ``/* */`` comments, and inside ``${ ... }`` interpolations of
    backtick strings, which keep their own depth counter.
    """
    end = min(len(content), open_index + limit)
    depth = 1
    string_char = ""
    template_depth = 0
    i = open_index + 1

    while i < end:
        char = content[i]
        nxt = content[i + 1] if i + 1 < len(content) else ""

        if not string_char and char == "/" and nxt == "/":
            eol = content.find("\n", i)
            i = end if eol == -1 else eol + 1
            continue
        if not string_char and char == "/" and nxt == "*":
            close = content.find("*/", i + 2)
            i = end if close == -1 else close + 2
            continue

        if template_depth:
            if char == "{":
                template_depth += 1
            elif char == "}":
                template_depth -= 1
            i += 1
            continue

        if string_char == "`" and char == "$" and nxt == "{":
            template_depth = 1
            i += 2
            continue

        if char in _QUOTES and content[i - 1] != "\\":
            if not string_char:
                string_char = char
            elif char == string_char:
                string_char = ""
            i += 1
            continue

        if not string_char:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return BraceMatch(BraceStatus.MATCHED, i)
        i += 1

    if end < len(content):
        logger.debug("Brace at %d not closed within %d characters", open_index, limit)
        return BraceMatch(BraceStatus.LIMIT_EXCEEDED)
    return BraceMatch(BraceStatus.UNMATCHED)


def find_matching_brace(content: str, open_index: int, limit: int = DEFAULT_LIMIT) -> int:
    """Index of the brace closing ``content[open_index]``, or ``NOT_FOUND``."""
    return scan_brace(content, open_index, limit).index
