"""Completion candidates: static tables merged with the document's symbols."""

from __future__ import annotations

import re
from typing import List

from .model import CompletionItem, CompletionKind, Position, SymbolKind
from .symbols import build_symbols, split_lines
from .tables import BUILTINS, CONSTANTS, KEYWORDS, SPECIAL_METHODS, TYPES

TYPE_CONTEXT_RE = re.compile(r"(?::|->)\s*\w*$")

SYMBOL_COMPLETION_KINDS = {
    SymbolKind.TYPE: CompletionKind.CLASS,
    SymbolKind.ENUM: CompletionKind.CLASS,
    SymbolKind.METHOD: CompletionKind.METHOD,
    SymbolKind.FUNCTION: CompletionKind.FUNCTION,
    SymbolKind.CONSTANT: CompletionKind.CONSTANT,
    SymbolKind.VARIABLE: CompletionKind.VARIABLE,
    SymbolKind.MODULE: CompletionKind.MODULE,
}


def line_prefix(text: str, position: Position) -> str:
    lines = split_lines(text)
    if not 0 <= position.line < len(lines):
        return ""
    return lines[position.line][: position.character]


def wants_types(prefix: str) -> bool:
    """True right after a ``:`` annotation or a ``->`` return arrow."""
    return TYPE_CONTEXT_RE.search(prefix) is not None


def complete(text: str, position: Position) -> List[CompletionItem]:
    """Unordered, unfiltered candidates for ``position``."""
    items: List[CompletionItem] = [*KEYWORDS, *BUILTINS, *CONSTANTS, *SPECIAL_METHODS]
    if wants_types(line_prefix(text, position)):
        items.extend(TYPES)
    for symbol in build_symbols(text):
        items.append(
            CompletionItem(
                symbol.name,
                SYMBOL_COMPLETION_KINDS.get(symbol.kind, CompletionKind.TEXT),
                symbol.detail,
            )
        )
    return items


__all__ = ["complete", "wants_types", "line_prefix", "SYMBOL_COMPLETION_KINDS"]
