"""Session service tying the analysis passes to a document source and a sink.

A ``LanguageService`` is built once per running session around a
``DocumentSource`` (full text keyed by uri) and a ``ResultSink`` (receives
diagnostics). Open and change events trigger a full validation pass whose
result replaces the previous set; every on-demand request re-scans the text.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from .completion import complete
from .config import AnalyzerConfig
from .formatter import format_document
from .model import (
    CompletionItem,
    Diagnostic,
    Hover,
    Location,
    Position,
    Range,
    SymbolRecord,
    TextEdit,
)
from .resolver import definition_at, hover_at
from .symbols import build_symbols
from .validator import validate

logger = logging.getLogger(__name__)


class DocumentSource(Protocol):
    def get_text(self, uri: str) -> Optional[str]: ...


class ResultSink(Protocol):
    def publish_diagnostics(self, uri: str, diagnostics: List[Diagnostic]) -> None: ...


class DocumentStore:
    """In-memory document source with full and incremental updates."""

    def __init__(self):
        self._docs: Dict[str, str] = {}

    def open(self, uri: str, text: str) -> None:
        self._docs[uri] = text

    def update(self, uri: str, text: str) -> None:
        self._docs[uri] = text

    def apply_change(self, uri: str, rng: Range, text: str) -> str:
        """Replace ``rng`` of the stored document with ``text``."""
        current = self._docs.get(uri, "")
        start = _offset(current, rng.start)
        end = _offset(current, rng.end)
        updated = current[:start] + text + current[max(start, end) :]
        self._docs[uri] = updated
        return updated

    def close(self, uri: str) -> None:
        self._docs.pop(uri, None)

    def get_text(self, uri: str) -> Optional[str]:
        return self._docs.get(uri)

    def __contains__(self, uri: str) -> bool:
        return uri in self._docs


def position_at(text: str, offset: int) -> Position:
    """Zero-based position of a character offset, clamped to the text."""
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(text.count("\n", 0, offset), offset - line_start)


def _offset(text: str, pos: Position) -> int:
    """Character offset of a zero-based position, clamped to the text."""
    offset = 0
    line = 0
    while line < pos.line:
        nl = text.find("\n", offset)
        if nl < 0:
            return len(text)
        offset = nl + 1
        line += 1
    line_end = text.find("\n", offset)
    if line_end < 0:
        line_end = len(text)
    elif line_end > offset and text[line_end - 1] == "\r":
        line_end -= 1
    return min(offset + pos.character, line_end)


class CollectingSink:
    """Result sink remembering the last diagnostic set per document."""

    def __init__(self):
        self.published: Dict[str, List[Diagnostic]] = {}

    def publish_diagnostics(self, uri: str, diagnostics: List[Diagnostic]) -> None:
        self.published[uri] = list(diagnostics)


class LanguageService:
    def __init__(
        self,
        source: DocumentSource,
        sink: ResultSink,
        config: Optional[AnalyzerConfig] = None,
    ):
        self.source = source
        self.sink = sink
        self.config = config or AnalyzerConfig()

    def update_config(self, config: AnalyzerConfig) -> None:
        self.config = config

    def _text(self, uri: str) -> Optional[str]:
        text = self.source.get_text(uri)
        if text is None:
            logger.debug("no text for %s", uri)
        return text

    # --- events ---
    def validate(self, uri: str) -> List[Diagnostic]:
        text = self._text(uri)
        diagnostics = [] if text is None else validate(text, self.config)
        self.sink.publish_diagnostics(uri, diagnostics)
        logger.debug("published %d diagnostics for %s", len(diagnostics), uri)
        return diagnostics

    def did_open(self, uri: str) -> List[Diagnostic]:
        return self.validate(uri)

    def did_change(self, uri: str) -> List[Diagnostic]:
        return self.validate(uri)

    def did_close(self, uri: str) -> None:
        self.sink.publish_diagnostics(uri, [])

    # --- requests ---
    def document_symbols(self, uri: str) -> List[SymbolRecord]:
        text = self._text(uri)
        return [] if text is None else build_symbols(text)

    def hover(self, uri: str, position: Position) -> Optional[Hover]:
        text = self._text(uri)
        return None if text is None else hover_at(text, position)

    def definition(self, uri: str, position: Position) -> Optional[Location]:
        text = self._text(uri)
        return None if text is None else definition_at(uri, text, position)

    def format(self, uri: str) -> List[TextEdit]:
        text = self._text(uri)
        return [] if text is None else format_document(text, self.config.indent_width)

    def complete(self, uri: str, position: Position) -> List[CompletionItem]:
        text = self._text(uri)
        return [] if text is None else complete(text, position)


__all__ = [
    "DocumentSource",
    "ResultSink",
    "DocumentStore",
    "position_at",
    "CollectingSink",
    "LanguageService",
]
