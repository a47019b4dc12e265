"""Data model shared by the Dragonstone analysis passes.

Positions are zero-based (line, character) pairs and ranges are half-open,
matching the editor protocol convention. Every record here is created fresh
by a scan and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def create(
        cls, start_line: int, start_col: int, end_line: int, end_col: int
    ) -> "Range":
        return cls(Position(start_line, start_col), Position(end_line, end_col))

    @classmethod
    def of_line(cls, line: int, length: int) -> "Range":
        """Range spanning a whole line of the given length."""
        return cls.create(line, 0, line, length)

    def contains(self, pos: Position) -> bool:
        after_start = (pos.line, pos.character) >= (
            self.start.line,
            self.start.character,
        )
        before_end = (pos.line, pos.character) < (self.end.line, self.end.character)
        return after_start and before_end


class Severity(Enum):
    # values follow the editor protocol
    ERROR = 1
    WARNING = 2


class SymbolKind(Enum):
    TYPE = "type"
    ENUM = "enum"
    MODULE = "module"
    METHOD = "method"
    FUNCTION = "function"
    CONSTANT = "constant"
    VARIABLE = "variable"


@dataclass(frozen=True)
class SymbolRecord:
    name: str
    kind: SymbolKind
    line: int
    range: Range
    detail: Optional[str] = None


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    range: Range
    message: str
    source: str = "dragonstone"


@dataclass(frozen=True)
class TextEdit:
    range: Range
    replacement: str


@dataclass(frozen=True)
class Hover:
    contents: str  # markdown
    range: Optional[Range] = None


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range


class CompletionKind(Enum):
    KEYWORD = "keyword"
    CLASS = "class"
    FUNCTION = "function"
    CONSTANT = "constant"
    METHOD = "method"
    MODULE = "module"
    VARIABLE = "variable"
    TEXT = "text"


@dataclass(frozen=True)
class CompletionItem:
    label: str
    kind: CompletionKind
    detail: Optional[str] = None
    insert_text: Optional[str] = None
    snippet: bool = False


__all__ = [
    "Position",
    "Range",
    "Severity",
    "SymbolKind",
    "SymbolRecord",
    "Diagnostic",
    "TextEdit",
    "Hover",
    "Location",
    "CompletionKind",
    "CompletionItem",
]
