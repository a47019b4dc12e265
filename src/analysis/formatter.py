"""Indentation formatter.

Recomputes the leading whitespace of every code line from its own nesting
counter and emits an edit only where the current indentation differs. Only
leading whitespace is ever replaced.

The counter is independent of the block validator's stack: on malformed input
(an orphaned ``end`` for instance) the two can disagree.
"""

from __future__ import annotations

import logging
import re
from typing import List

from .classifier import block_opener, closes_inline, continuation, is_terminator
from .model import Range, TextEdit
from .scanner import mask_line, scan_line
from .symbols import split_lines
from .tables import LINE_COMMENT

logger = logging.getLogger(__name__)

_LEADING_WS = re.compile(r"^\s*")
_SEPARATOR = re.compile(r"(\r?\n)")


def format_document(text: str, indent_width: int = 4) -> List[TextEdit]:
    unit = " " * indent_width
    edits: List[TextEdit] = []
    level = 0
    comment_depth = 0

    for line_no, line in enumerate(split_lines(text)):
        was_in_comment = comment_depth > 0
        scan = scan_line(line, comment_depth)
        comment_depth = scan.depth
        if was_in_comment:
            # block comment interiors keep their own layout
            continue

        stripped = line.strip()
        if not stripped or stripped.startswith(LINE_COMMENT):
            continue

        masked = mask_line(line)
        branch = continuation(masked)
        if branch or is_terminator(masked):
            level = max(0, level - 1)

        expected = unit * level
        current = _LEADING_WS.match(line).group(0)
        if current != expected:
            edits.append(
                TextEdit(Range.create(line_no, 0, line_no, len(current)), expected)
            )

        if branch:
            if not closes_inline(masked):
                level += 1
        elif block_opener(masked):
            level += 1

    logger.debug("format produced %d edits", len(edits))
    return edits


def apply_edits(text: str, edits: List[TextEdit]) -> str:
    """Apply single-line edits to ``text``, keeping its line separators."""
    parts = _SEPARATOR.split(text)
    lines = parts[0::2]
    separators = parts[1::2]
    for edit in sorted(
        edits, key=lambda e: (e.range.start.line, e.range.start.character), reverse=True
    ):
        line_no = edit.range.start.line
        if line_no >= len(lines):
            continue
        line = lines[line_no]
        lines[line_no] = (
            line[: edit.range.start.character]
            + edit.replacement
            + line[edit.range.end.character :]
        )
    out: List[str] = []
    for i, line in enumerate(lines):
        out.append(line)
        if i < len(separators):
            out.append(separators[i])
    return "".join(out)


__all__ = ["format_document", "apply_edits"]
