"""Structural validation of Dragonstone documents.

One pass over the lines checks for unterminated literals, naming conventions
and block structure, then runs the document-wide checks (unclosed blocks,
block comment nesting, bracket balance). Every diagnostic is advisory and the
whole set is recomputed from scratch on each call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from . import naming
from .balance import check_balance
from .classifier import block_opener, closes_inline, continuation, is_terminator
from .config import AnalyzerConfig
from .model import Diagnostic, Range, Severity
from .scanner import (
    ScanState,
    find_unclosed_quote,
    mask_line,
    quote_name,
    scan_line,
    unmatched_closes,
)
from .symbols import split_lines
from .tables import BLOCK_COMMENT_CLOSE, ENUM_KEYWORD, LINE_COMMENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockFrame:
    keyword: str
    open_line: int


class BlockTracker:
    """Stack machine over block openers, continuations and terminators."""

    def __init__(self, source: str):
        self.source = source
        self.stack: List[BlockFrame] = []
        self.diagnostics: List[Diagnostic] = []

    @property
    def in_enum_block(self) -> bool:
        return any(frame.keyword == ENUM_KEYWORD for frame in self.stack)

    def feed(self, masked: str, line_no: int, line_len: int) -> None:
        branch = continuation(masked)
        if branch:
            # closes the previous branch and opens the next one
            closed = self._pop(branch, line_no, line_len)
            if closed is not None and not closes_inline(masked):
                self.stack.append(BlockFrame(branch, line_no))
            return
        keyword = block_opener(masked)
        if keyword:
            self.stack.append(BlockFrame(keyword, line_no))
        elif is_terminator(masked):
            self._pop("end", line_no, line_len)

    def _pop(self, keyword: str, line_no: int, line_len: int) -> Optional[BlockFrame]:
        if not self.stack:
            self.diagnostics.append(
                Diagnostic(
                    Severity.ERROR,
                    Range.of_line(line_no, line_len),
                    f'Unexpected "{keyword}" without matching block start',
                    self.source,
                )
            )
            return None
        return self.stack.pop()

    def unclosed(self, lines: List[str]) -> List[Diagnostic]:
        return [
            Diagnostic(
                Severity.ERROR,
                Range.of_line(frame.open_line, len(lines[frame.open_line])),
                f'Unclosed "{frame.keyword}" block',
                self.source,
            )
            for frame in self.stack
        ]


def _unclosed_literal(line: str, line_no: int, source: str) -> Optional[Diagnostic]:
    quote = find_unclosed_quote(line)
    if quote is None:
        return None
    return Diagnostic(
        Severity.ERROR,
        Range.of_line(line_no, len(line)),
        f"Unclosed string literal ({quote_name(quote)})",
        source,
    )


def validate(text: str, config: Optional[AnalyzerConfig] = None) -> List[Diagnostic]:
    config = config or AnalyzerConfig()
    source = config.source
    lines = split_lines(text)
    state = ScanState()
    tracker = BlockTracker(source)
    line_diags: List[Diagnostic] = []
    comment_diags: List[Diagnostic] = []
    comment_start: Optional[int] = None

    for line_no, line in enumerate(lines):
        incoming = state.block_comment_depth
        was_open = incoming > 0
        scan = scan_line(line, incoming)
        state.block_comment_depth = scan.depth
        if not was_open and scan.depth > 0:
            comment_start = line_no
        if scan.over_closed and config.report_comment_nesting:
            strays = unmatched_closes(line, incoming)
            col = strays[0] if strays else line.find(BLOCK_COMMENT_CLOSE)
            comment_diags.append(
                Diagnostic(
                    Severity.WARNING,
                    Range.create(line_no, col, line_no, col + len(BLOCK_COMMENT_CLOSE)),
                    f'Unmatched block comment close "{BLOCK_COMMENT_CLOSE}"',
                    source,
                )
            )
        if scan.in_comment:
            continue

        stripped = line.strip()
        if not stripped or stripped.startswith(LINE_COMMENT):
            continue

        literal = _unclosed_literal(line, line_no, source)
        if literal:
            line_diags.append(literal)

        masked = mask_line(line)
        if config.check_naming:
            state.in_enum_block = tracker.in_enum_block
            line_diags.extend(
                naming.check_line(masked, line_no, source, state.in_enum_block)
            )
        before = len(tracker.diagnostics)
        tracker.feed(masked, line_no, len(line))
        line_diags.extend(tracker.diagnostics[before:])

    diagnostics = line_diags + tracker.unclosed(lines)

    if state.block_comment_depth > 0 and config.report_comment_nesting:
        start = comment_start or 0
        comment_diags.append(
            Diagnostic(
                Severity.WARNING,
                Range.of_line(start, len(lines[start])),
                "Unclosed block comment",
                source,
            )
        )
    diagnostics.extend(comment_diags)

    if config.check_brackets:
        balance = check_balance(text, lines, source)
        if balance:
            diagnostics.append(balance)

    logger.debug(
        "validated %d lines: %d diagnostics, %d open blocks",
        len(lines),
        len(diagnostics),
        len(tracker.stack),
    )
    return diagnostics


__all__ = ["BlockFrame", "BlockTracker", "validate"]
