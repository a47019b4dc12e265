"""Document-wide bracket balance check.

String and comment content is removed first so that delimiters inside them do
not count. Documents using a lambda arrow (``->``) or the bracketed invocation
idiom (``as [...]``) are skipped: both are known to produce an apparent
imbalance that is not a real error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .model import Diagnostic, Range, Severity
from .scanner import QUOTES
from .tables import BLOCK_COMMENT_CLOSE, BLOCK_COMMENT_OPEN, LINE_COMMENT

logger = logging.getLogger(__name__)

LAMBDA_ARROW = "->"
INVOKE_AS_RE = re.compile(r"\bas\s*\[", re.ASCII)

PAIRS = (("(", ")"), ("[", "]"), ("{", "}"))


@dataclass
class _StripState:
    comment_depth: int = 0
    quote: Optional[str] = None
    in_line_comment: bool = False


def _step(text: str, i: int, state: _StripState) -> Tuple[Optional[str], int]:
    """Consume input starting at ``i``.

    Returns the character to emit (``None`` when the input is dropped) and the
    index where the next step starts.
    """
    ch = text[i]
    pair = text[i : i + 2]
    if state.in_line_comment:
        if ch == "\n":
            state.in_line_comment = False
            return ch, i + 1
        return None, i + 1
    if state.quote is not None:
        if ch == "\\":
            return None, i + 2
        if ch == state.quote:
            state.quote = None
            return ch, i + 1
        return None, i + 1
    if pair == BLOCK_COMMENT_OPEN:
        state.comment_depth += 1
        return None, i + 2
    if pair == BLOCK_COMMENT_CLOSE:
        # a stray close is dropped; the depth stays clamped at zero
        state.comment_depth = max(0, state.comment_depth - 1)
        return None, i + 2
    if state.comment_depth > 0:
        return None, i + 1
    if ch == LINE_COMMENT:
        state.in_line_comment = True
        return None, i + 1
    if ch in QUOTES:
        state.quote = ch
    return ch, i + 1


def strip_literals_and_comments(text: str) -> str:
    """Drop comment text and reduce every literal to an empty pair of quotes."""
    state = _StripState()
    out: List[str] = []
    i = 0
    while i < len(text):
        ch, i = _step(text, i, state)
        if ch is not None:
            out.append(ch)
    return "".join(out)


def has_benign_imbalance_idiom(stripped: str) -> bool:
    return LAMBDA_ARROW in stripped or INVOKE_AS_RE.search(stripped) is not None


def bracket_deltas(stripped: str) -> Tuple[int, int, int]:
    paren, bracket, brace = (
        stripped.count(open_) - stripped.count(close) for open_, close in PAIRS
    )
    return paren, bracket, brace


def check_balance(
    text: str, lines: List[str], source: str = "dragonstone"
) -> Optional[Diagnostic]:
    """Return one warning summarizing unbalanced delimiters, or ``None``.

    The warning is anchored to the first line of the document.
    """
    stripped = strip_literals_and_comments(text)
    if has_benign_imbalance_idiom(stripped):
        logger.debug("bracket check skipped: lambda arrow or invoke idiom present")
        return None
    paren, bracket, brace = bracket_deltas(stripped)
    if paren == 0 and bracket == 0 and brace == 0:
        return None
    first = lines[0] if lines else ""
    return Diagnostic(
        Severity.WARNING,
        Range.of_line(0, len(first)),
        f"Document has mismatched brackets: {paren} unclosed (), "
        f"{bracket} unclosed [], {brace} unclosed {{}}",
        source,
    )


__all__ = [
    "strip_literals_and_comments",
    "has_benign_imbalance_idiom",
    "bracket_deltas",
    "check_balance",
]
