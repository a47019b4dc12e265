"""Naming-convention checks run during the validation pass."""

from __future__ import annotations

import re
from typing import List

from .model import Diagnostic, Range, Severity
from .tables import (
    ABSTRACT_MODIFIERS,
    FUNCTION_KEYWORDS,
    METHOD_KEYWORDS,
    MODULE_KEYWORDS,
    TYPE_KEYWORDS,
    VARIABLE_KEYWORDS,
    VISIBILITY_MODIFIERS,
)

_TYPE_LIKE = "|".join(TYPE_KEYWORDS + MODULE_KEYWORDS)
_CALLABLE = "|".join(METHOD_KEYWORDS + FUNCTION_KEYWORDS)
_ABSTRACT = "|".join(rf"{w}\s+" for w in ABSTRACT_MODIFIERS)
_ANY_MODIFIER = "|".join(rf"{w}\s+" for w in ABSTRACT_MODIFIERS + VISIBILITY_MODIFIERS)

LOWERCASE_TYPE_RE = re.compile(
    rf"^\s*(?:{_ABSTRACT})?({_TYPE_LIKE})\s+([a-z]\w*)", re.ASCII
)
# Modifier-prefixed definitions are exempt. A capitalized word followed by a
# dot is a receiver (``def Point.create``), not the method name.
CAPITALIZED_CALLABLE_RE = re.compile(
    rf"^\s*(?!{_ANY_MODIFIER})({_CALLABLE})\s+([A-Z]\w*)(?![\w.])", re.ASCII
)
BARE_CONSTANT_RE = re.compile(r"^\s*([A-Z][a-z]\w*)\s*=?", re.ASCII)
DECLARATION_RE = re.compile(rf"^\s*(?:{'|'.join(VARIABLE_KEYWORDS)})\b", re.ASCII)
SCREAMING_SNAKE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$", re.ASCII)
ASSIGNMENT_RE = re.compile(r"(?<![=!<>])=(?![=>~])")


def _span(line_no: int, start: int, name: str) -> Range:
    return Range.create(line_no, start, line_no, start + len(name))


def check_type_name(line: str, line_no: int, source: str) -> List[Diagnostic]:
    m = LOWERCASE_TYPE_RE.match(line)
    if not m:
        return []
    keyword, name = m.group(1), m.group(2)
    return [
        Diagnostic(
            Severity.ERROR,
            _span(line_no, m.start(2), name),
            f"{keyword} name must start with a capital letter",
            source,
        )
    ]


def check_callable_name(line: str, line_no: int, source: str) -> List[Diagnostic]:
    m = CAPITALIZED_CALLABLE_RE.match(line)
    if not m:
        return []
    keyword, name = m.group(1), m.group(2)
    return [
        Diagnostic(
            Severity.ERROR,
            _span(line_no, m.start(2), name),
            f"{keyword} name must start with a lowercase letter",
            source,
        )
    ]


def check_constant_name(
    line: str, line_no: int, source: str, in_enum_block: bool
) -> List[Diagnostic]:
    """Bare assignments to Capitalized names should be SCREAMING_SNAKE_CASE.

    Declared names (``con``/``let``/``var``/``fix``) and enum members are
    exempt.
    """
    if in_enum_block or DECLARATION_RE.match(line):
        return []
    m = BARE_CONSTANT_RE.match(line)
    if not m:
        return []
    name = m.group(1)
    if SCREAMING_SNAKE_RE.match(name) or not ASSIGNMENT_RE.search(line):
        return []
    return [
        Diagnostic(
            Severity.WARNING,
            _span(line_no, m.start(1), name),
            "Constants without keyword should be in SCREAMING_SNAKE_CASE",
            source,
        )
    ]


def check_line(
    line: str, line_no: int, source: str, in_enum_block: bool
) -> List[Diagnostic]:
    return (
        check_type_name(line, line_no, source)
        + check_callable_name(line, line_no, source)
        + check_constant_name(line, line_no, source, in_enum_block)
    )


__all__ = [
    "check_type_name",
    "check_callable_name",
    "check_constant_name",
    "check_line",
]
