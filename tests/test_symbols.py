import sys
from pathlib import Path

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from analysis.model import Range, SymbolKind  # noqa: E402
from analysis.symbols import build_symbols, split_lines  # noqa: E402

SOURCE = """module Shapes
  enum Color
    Red = 1
  end

  class Point
    con origin: Point
    MAX_X = 100

    def self.foo(a, b)
    end

    def area()
    end
  end

  fun distance(p, q) -> float
  end
end
"""


def names(text: str):
    return [(s.name, s.kind) for s in build_symbols(text)]


def test_outline_in_source_order():
    assert names(SOURCE) == [
        ("Shapes", SymbolKind.MODULE),
        ("Color", SymbolKind.ENUM),
        ("Point", SymbolKind.TYPE),
        ("origin", SymbolKind.VARIABLE),
        ("MAX_X", SymbolKind.CONSTANT),
        ("self.foo", SymbolKind.METHOD),
        ("area", SymbolKind.METHOD),
        ("distance", SymbolKind.FUNCTION),
    ]


def test_details():
    details = {s.name: s.detail for s in build_symbols(SOURCE)}
    assert details["Shapes"] == "module Shapes"
    assert details["Color"] == "enum Color"
    assert details["Point"] == "class Point"
    assert details["origin"] == "con origin: Point"
    assert details["MAX_X"] == "constant MAX_X"
    assert details["self.foo"] == "singleton method self.foo(a, b)"
    # an empty parameter list reads as no list
    assert details["area"] == "method area"
    assert details["distance"] == "fun distance(p, q)"


def test_singleton_method_example():
    (sym,) = build_symbols("def self.foo(a, b)")
    assert sym.name == "self.foo"
    assert sym.kind == SymbolKind.METHOD
    assert sym.detail == "singleton method self.foo(a, b)"
    assert sym.line == 0
    assert sym.range == Range.of_line(0, len("def self.foo(a, b)"))


def test_symbol_range_covers_line():
    symbols = build_symbols("x = 1\n  class Box\n")
    assert len(symbols) == 1
    assert symbols[0].line == 1
    assert symbols[0].range == Range.create(1, 0, 1, len("  class Box"))


def test_block_comment_lines_define_nothing():
    text = "#[\nclass Hidden\n]#\nclass Shown"
    assert names(text) == [("Shown", SymbolKind.TYPE)]


def test_split_lines_handles_crlf():
    assert split_lines("a\r\nb\nc") == ["a", "b", "c"]
    assert split_lines("") == [""]


def test_no_symbols_in_empty_document():
    assert build_symbols("") == []
