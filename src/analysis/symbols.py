"""Symbol table construction.

Drives the line classifier over a whole document and produces symbol records
in source order. Callers re-run the builder for every request instead of
sharing a cached table.
"""

from __future__ import annotations

import logging
import re
from typing import List

from .classifier import (
    ConstDef,
    Construct,
    FunctionDef,
    MethodDef,
    ModuleDef,
    TypeDef,
    VarDef,
    classify,
)
from .model import Range, SymbolKind, SymbolRecord
from .scanner import scan_line
from .tables import ENUM_KEYWORD

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text)


def _with_params(head: str, params: str | None) -> str:
    # an empty "()" reads the same as no parameter list
    return f"{head}({params})" if params else head


def to_record(construct: Construct, line_no: int, line: str) -> SymbolRecord:
    """Turn a classified construct into a symbol record for its line."""
    rng = Range.of_line(line_no, len(line))
    if isinstance(construct, TypeDef):
        kind = SymbolKind.ENUM if construct.keyword == ENUM_KEYWORD else SymbolKind.TYPE
        detail = f"{construct.keyword} {construct.name}"
        return SymbolRecord(construct.name, kind, line_no, rng, detail)
    if isinstance(construct, ModuleDef):
        return SymbolRecord(
            construct.name,
            SymbolKind.MODULE,
            line_no,
            rng,
            f"module {construct.name}",
        )
    if isinstance(construct, MethodDef):
        label = "singleton method" if construct.receiver else "method"
        full_name = construct.full_name
        return SymbolRecord(
            full_name,
            SymbolKind.METHOD,
            line_no,
            rng,
            _with_params(f"{label} {full_name}", construct.params),
        )
    if isinstance(construct, FunctionDef):
        return SymbolRecord(
            construct.name,
            SymbolKind.FUNCTION,
            line_no,
            rng,
            _with_params(f"fun {construct.name}", construct.params),
        )
    if isinstance(construct, ConstDef):
        return SymbolRecord(
            construct.name,
            SymbolKind.CONSTANT,
            line_no,
            rng,
            f"constant {construct.name}",
        )
    if isinstance(construct, VarDef):
        annotation = f": {construct.type_name}" if construct.type_name else ""
        return SymbolRecord(
            construct.name,
            SymbolKind.VARIABLE,
            line_no,
            rng,
            f"{construct.keyword} {construct.name}{annotation}",
        )
    raise TypeError(f"unknown construct {construct!r}")


def build_symbols(text: str) -> List[SymbolRecord]:
    """Return every recognized definition of ``text`` in source order.

    Lines inside ``#[ ... ]#`` block comments define nothing.
    """
    symbols: List[SymbolRecord] = []
    depth = 0
    for line_no, line in enumerate(split_lines(text)):
        scan = scan_line(line, depth)
        depth = scan.depth
        if scan.in_comment:
            continue
        construct = classify(line)
        if construct is not None:
            symbols.append(to_record(construct, line_no, line))
    logger.debug("built %d symbols", len(symbols))
    return symbols


__all__ = ["split_lines", "to_record", "build_symbols"]
