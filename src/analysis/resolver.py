"""Resolve the identifier under a position against the symbol table."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .model import Hover, Location, Position, Range, SymbolRecord
from .symbols import build_symbols, split_lines

WORD_RE = re.compile(r"[a-zA-Z_]\w*[?!=]?", re.ASCII)
SUFFIXES = ("?", "!", "=")


def word_at(line: str, character: int) -> Optional[Tuple[int, int]]:
    """Return the (start, end) span of the identifier touching ``character``."""
    for m in WORD_RE.finditer(line):
        if m.start() <= character <= m.end():
            return m.start(), m.end()
    return None


def matches(symbol: SymbolRecord, word: str) -> bool:
    name = symbol.name
    return (
        name == word
        or name.endswith(f".{word}")
        or any(name == word + suffix for suffix in SUFFIXES)
    )


def lookup(symbols: List[SymbolRecord], word: str) -> Optional[SymbolRecord]:
    return next((s for s in symbols if matches(s, word)), None)


def find_symbol(
    text: str, position: Position
) -> Tuple[Optional[SymbolRecord], Optional[Range]]:
    """Return the first symbol matching the word at ``position`` and the word range."""
    lines = split_lines(text)
    if not 0 <= position.line < len(lines):
        return None, None
    line = lines[position.line]
    span = word_at(line, position.character)
    if span is None:
        return None, None
    start, end = span
    word_range = Range.create(position.line, start, position.line, end)
    return lookup(build_symbols(text), line[start:end]), word_range


def hover_text(symbol: SymbolRecord) -> str:
    return "\n".join(
        [
            "```dragonstone",
            symbol.detail or symbol.name,
            "```",
            f"Defined at line {symbol.line + 1}",
        ]
    )


def hover_at(text: str, position: Position) -> Optional[Hover]:
    symbol, word_range = find_symbol(text, position)
    if symbol is None:
        return None
    return Hover(hover_text(symbol), word_range)


def definition_at(uri: str, text: str, position: Position) -> Optional[Location]:
    symbol, _ = find_symbol(text, position)
    if symbol is None:
        return None
    return Location(uri, symbol.range)


__all__ = [
    "word_at",
    "matches",
    "lookup",
    "find_symbol",
    "hover_text",
    "hover_at",
    "definition_at",
]
