"""Character-level scanning of single Dragonstone lines.

Tracks the nesting depth of ``#[ ... ]#`` block comments across lines and runs
one shared quote automaton (double, single and backtick quotes) over a line so
that a quote character of another kind inside an open literal stays inert.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .tables import BLOCK_COMMENT_CLOSE, BLOCK_COMMENT_OPEN, LINE_COMMENT

_OPEN_RE = re.compile(re.escape(BLOCK_COMMENT_OPEN))
_CLOSE_RE = re.compile(re.escape(BLOCK_COMMENT_CLOSE))

QUOTES = ('"', "'", "`")

_QUOTE_NAMES = {
    '"': 'double quote (")',
    "'": "single quote (')",
    "`": "backtick (`)",
}

# Character roles produced by the quote automaton.
CODE = 0
QUOTE = 1
LITERAL = 2
COMMENT = 3


@dataclass
class ScanState:
    """State carried from line to line during one validation pass."""

    block_comment_depth: int = 0
    in_enum_block: bool = False


@dataclass(frozen=True)
class LineScan:
    depth: int
    in_comment: bool
    over_closed: int = 0


def scan_line(line: str, depth: int) -> LineScan:
    """Update the block-comment depth for one line.

    The depth is clamped at zero; closing markers absorbed by the clamp are
    reported through ``over_closed``. A line that ends inside a block comment,
    or that closes one, counts as comment and gets no further analysis.
    """
    opens = line.count(BLOCK_COMMENT_OPEN)
    closes = line.count(BLOCK_COMMENT_CLOSE)
    new_depth = depth + opens - closes
    over_closed = 0
    if new_depth < 0:
        over_closed = -new_depth
        new_depth = 0
    return LineScan(new_depth, new_depth > 0 or closes > 0, over_closed)


def unmatched_closes(line: str, depth: int) -> List[int]:
    """Columns of the closing markers absorbed by the zero clamp.

    Markers are walked left to right with a running depth, so a close that
    matches an earlier open on the same line is not reported.
    """
    markers = sorted(
        [(m.start(), 1) for m in _OPEN_RE.finditer(line)]
        + [(m.start(), -1) for m in _CLOSE_RE.finditer(line)]
    )
    columns = []
    for col, step in markers:
        if step < 0 and depth == 0:
            columns.append(col)
        else:
            depth += step
    return columns


def char_roles(line: str) -> Tuple[List[int], Optional[str]]:
    """Classify every character of ``line`` and return the quote left open.

    A backslash escapes the next character, inside or outside a literal. An
    unquoted ``#`` starts a line comment that runs to the end of the line.
    """
    roles: List[int] = []
    quote: Optional[str] = None
    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
            roles.append(LITERAL if quote else CODE)
            continue
        if ch == "\\":
            escaped = True
            roles.append(LITERAL if quote else CODE)
            continue
        if quote is None and ch == LINE_COMMENT:
            roles.extend([COMMENT] * (len(line) - i))
            break
        if ch in QUOTES:
            if quote is None:
                quote = ch
                roles.append(QUOTE)
                continue
            if ch == quote:
                quote = None
                roles.append(QUOTE)
                continue
        roles.append(LITERAL if quote else CODE)
    return roles, quote


def find_unclosed_quote(line: str) -> Optional[str]:
    """Return the quote character still open at end of line, if any."""
    return char_roles(line)[1]


def mask_line(line: str) -> str:
    """Blank literal bodies and trailing comments, keeping every column."""
    roles, _ = char_roles(line)
    return "".join(
        ch if role in (CODE, QUOTE) else " " for ch, role in zip(line, roles)
    )


def quote_name(quote: str) -> str:
    return _QUOTE_NAMES.get(quote, quote)


__all__ = [
    "ScanState",
    "LineScan",
    "scan_line",
    "unmatched_closes",
    "char_roles",
    "find_unclosed_quote",
    "mask_line",
    "quote_name",
]
