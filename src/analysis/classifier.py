"""Line classification for Dragonstone source.

``classify`` maps one line to at most one definition construct. The patterns
are tried in a fixed priority order and the first match wins:

    type definition -> module -> method -> function -> constant -> variable

The order is part of the contract: ``def`` lines never reach the function
pattern, and an all-caps assignment is a constant even when it would also
look like something later in the cascade.

The block recognizers at the bottom are shared by the block validator and the
indentation formatter. They expect a line already passed through
``scanner.mask_line`` so that words inside literals and comments are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from .tables import (
    ABSTRACT_MODIFIERS,
    BLOCK_KEYWORDS,
    CONTINUATION_KEYWORDS,
    FUNCTION_KEYWORDS,
    METHOD_KEYWORDS,
    MODULE_KEYWORDS,
    TERMINATOR,
    TYPE_KEYWORDS,
    VARIABLE_KEYWORDS,
    VARIABLE_TYPES,
    VISIBILITY_MODIFIERS,
)


def _alt(words: Tuple[str, ...]) -> str:
    return "|".join(words)


_ABSTRACT = "".join(rf"{w}\s+|" for w in ABSTRACT_MODIFIERS).rstrip("|")
_MODIFIERS = _alt(VISIBILITY_MODIFIERS + ABSTRACT_MODIFIERS)

TYPE_DEF_RE = re.compile(
    rf"^\s*(?:{_ABSTRACT})?({_alt(TYPE_KEYWORDS)})\s+([A-Z]\w*)", re.ASCII
)
MODULE_DEF_RE = re.compile(rf"^\s*({_alt(MODULE_KEYWORDS)})\s+([A-Z]\w*)", re.ASCII)
METHOD_DEF_RE = re.compile(
    rf"^\s*({_alt(METHOD_KEYWORDS)})\s+(?:(self|[a-zA-Z_]\w*)\.)?"
    r"([a-zA-Z_]\w*[?!=]?)\s*(?:\(([^)]*)\))?",
    re.ASCII,
)
FUNCTION_DEF_RE = re.compile(
    rf"^\s*({_alt(FUNCTION_KEYWORDS)})\s+([a-z_]\w*[?!=]?)\s*(?:\(([^)]*)\))?",
    re.ASCII,
)
CONSTANT_DEF_RE = re.compile(r"^\s*([A-Z][A-Z_0-9]*)\s*=", re.ASCII)
VARIABLE_DEF_RE = re.compile(
    rf"^\s*({_alt(VARIABLE_KEYWORDS)})\s+([a-z_]\w*)\s*"
    rf"(?::\s*([A-Z]\w*|{_alt(VARIABLE_TYPES)}))?",
    re.ASCII,
)


@dataclass(frozen=True)
class TypeDef:
    keyword: str
    name: str


@dataclass(frozen=True)
class ModuleDef:
    keyword: str
    name: str


@dataclass(frozen=True)
class MethodDef:
    keyword: str
    receiver: Optional[str]
    name: str
    params: Optional[str]

    @property
    def full_name(self) -> str:
        return f"{self.receiver}.{self.name}" if self.receiver else self.name


@dataclass(frozen=True)
class FunctionDef:
    keyword: str
    name: str
    params: Optional[str]


@dataclass(frozen=True)
class ConstDef:
    name: str


@dataclass(frozen=True)
class VarDef:
    keyword: str
    name: str
    type_name: Optional[str]


Construct = Union[TypeDef, ModuleDef, MethodDef, FunctionDef, ConstDef, VarDef]


def _type_def(line: str) -> Optional[Construct]:
    m = TYPE_DEF_RE.match(line)
    return TypeDef(m.group(1), m.group(2)) if m else None


def _module_def(line: str) -> Optional[Construct]:
    m = MODULE_DEF_RE.match(line)
    return ModuleDef(m.group(1), m.group(2)) if m else None


def _method_def(line: str) -> Optional[Construct]:
    m = METHOD_DEF_RE.match(line)
    if not m:
        return None
    return MethodDef(m.group(1), m.group(2), m.group(3), m.group(4))


def _function_def(line: str) -> Optional[Construct]:
    m = FUNCTION_DEF_RE.match(line)
    return FunctionDef(m.group(1), m.group(2), m.group(3)) if m else None


def _const_def(line: str) -> Optional[Construct]:
    m = CONSTANT_DEF_RE.match(line)
    return ConstDef(m.group(1)) if m else None


def _var_def(line: str) -> Optional[Construct]:
    m = VARIABLE_DEF_RE.match(line)
    return VarDef(m.group(1), m.group(2), m.group(3)) if m else None


# Priority order; see module docstring.
_CASCADE: Tuple[Callable[[str], Optional[Construct]], ...] = (
    _type_def,
    _module_def,
    _method_def,
    _function_def,
    _const_def,
    _var_def,
)


def classify(line: str) -> Optional[Construct]:
    for matcher in _CASCADE:
        construct = matcher(line)
        if construct is not None:
            return construct
    return None


# --- block recognizers ---

BLOCK_OPENER_RE = re.compile(
    rf"^\s*(?:(?:{_MODIFIERS})\s+)*({_alt(BLOCK_KEYWORDS)})\b", re.ASCII
)
ANON_FUNCTION_RE = re.compile(rf"\b({_alt(FUNCTION_KEYWORDS)})\s*\(", re.ASCII)
DO_RE = re.compile(r"\bdo\b", re.ASCII)
CLOSES_INLINE_RE = re.compile(rf"\b{TERMINATOR}\s*$", re.ASCII)
TERMINATOR_RE = re.compile(rf"^\s*{TERMINATOR}\b", re.ASCII)
CONTINUATION_RE = re.compile(rf"^\s*({_alt(CONTINUATION_KEYWORDS)})\b", re.ASCII)


def closes_inline(line: str) -> bool:
    return CLOSES_INLINE_RE.search(line) is not None


def block_opener(line: str) -> Optional[str]:
    """Return the keyword that opens a block on this line, if any.

    Covers definitions, conditionals, loops, ``begin``/``with``, anonymous
    ``fun(...)`` lambdas and ``do`` blocks. A line that also ends with
    ``end`` opens nothing.
    """
    if closes_inline(line):
        return None
    m = BLOCK_OPENER_RE.match(line)
    if m:
        return m.group(1)
    m = ANON_FUNCTION_RE.search(line)
    if m:
        return m.group(1)
    if DO_RE.search(line):
        return "do"
    return None


def is_terminator(line: str) -> bool:
    return TERMINATOR_RE.match(line) is not None


def continuation(line: str) -> Optional[str]:
    m = CONTINUATION_RE.match(line)
    return m.group(1) if m else None


__all__ = [
    "TypeDef",
    "ModuleDef",
    "MethodDef",
    "FunctionDef",
    "ConstDef",
    "VarDef",
    "Construct",
    "classify",
    "block_opener",
    "closes_inline",
    "is_terminator",
    "continuation",
]
