import sys
from pathlib import Path

import pytest

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from analysis.completion import complete, line_prefix, wants_types  # noqa: E402
from analysis.model import CompletionKind, Position  # noqa: E402
from analysis.tables import (  # noqa: E402
    BUILTINS,
    CONSTANTS,
    KEYWORDS,
    KeywordDatabase,
    SPECIAL_METHODS,
    TYPES,
)


def labels(text: str, position: Position):
    return [item.label for item in complete(text, position)]


def test_static_tables_sizes():
    assert len(KEYWORDS) == 43
    assert len(BUILTINS) == 18
    assert len(CONSTANTS) == 9
    assert len(SPECIAL_METHODS) == 5
    assert {"int8", "float128", "para"} <= {t.label for t in TYPES}


def test_plain_context_offers_tables_without_types():
    items = labels("", Position(0, 0))
    assert {"def", "echo", "true", "getter"} <= set(items)
    assert "int8" not in items
    assert len(items) == len(KEYWORDS) + len(BUILTINS) + len(CONSTANTS) + len(
        SPECIAL_METHODS
    )


@pytest.mark.parametrize(
    "text",
    ["let x: ", "let x:in", "fun f() -> ", "fun f()->fl"],
)
def test_type_context_adds_types(text):
    items = labels(text, Position(0, len(text)))
    assert "int8" in items
    assert "float128" in items


def test_snippets_are_flagged():
    by_label = {item.label: item for item in KEYWORDS}
    assert by_label["if"].snippet
    assert by_label["if"].insert_text == "if ${1:condition}\n    $0\nend"
    assert not by_label["end"].snippet


def test_document_symbols_are_offered():
    text = "enum Color\nend\nclass Shape\nend\nfun area()\nend\nMAX = 1\nlet width = 2\n"
    items = {item.label: item for item in complete(text, Position(8, 0))}
    assert items["Color"].kind == CompletionKind.CLASS
    assert items["Shape"].kind == CompletionKind.CLASS
    assert items["Shape"].detail == "class Shape"
    assert items["area"].kind == CompletionKind.FUNCTION
    assert items["MAX"].kind == CompletionKind.CONSTANT
    assert items["width"].kind == CompletionKind.VARIABLE


def test_wants_types():
    assert wants_types("let x: in")
    assert wants_types("-> ")
    assert not wants_types("x = 1")
    assert not wants_types("echo a: b c")


def test_line_prefix():
    assert line_prefix("abc\ndef", Position(1, 2)) == "de"
    assert line_prefix("abc", Position(5, 0)) == ""


def test_keyword_database_help():
    assert KeywordDatabase.get_help("while") == "While loop"
    assert KeywordDatabase.get_help("e!") == "Print to stdout (short)"
    assert KeywordDatabase.get_help("int64") == "64-bit integer"
    assert KeywordDatabase.get_help("nothing") == ""
    keywords = KeywordDatabase.get_all_keywords()
    assert keywords == sorted(keywords)
    assert "elsif" in keywords
