import sys
from pathlib import Path

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from analysis.config import AnalyzerConfig  # noqa: E402
from analysis.model import Position, Range, Severity, SymbolKind  # noqa: E402
from analysis.service import (  # noqa: E402
    CollectingSink,
    DocumentStore,
    LanguageService,
    position_at,
)

URI = "file:///tmp/main.ds"


def make_service(text=None, config=None):
    store = DocumentStore()
    if text is not None:
        store.open(URI, text)
    sink = CollectingSink()
    return LanguageService(store, sink, config), store, sink


# --- document store ---


def test_store_open_update_close():
    store = DocumentStore()
    store.open(URI, "a")
    assert URI in store
    store.update(URI, "b")
    assert store.get_text(URI) == "b"
    store.close(URI)
    assert store.get_text(URI) is None
    # closing twice is harmless
    store.close(URI)


def test_apply_change_inside_line():
    store = DocumentStore()
    store.open(URI, "let x = 1\necho x\n")
    out = store.apply_change(URI, Range.create(0, 8, 0, 9), "42")
    assert out == "let x = 42\necho x\n"
    assert store.get_text(URI) == out


def test_apply_change_across_lines():
    store = DocumentStore()
    store.open(URI, "one\ntwo\nthree")
    out = store.apply_change(URI, Range.create(0, 1, 2, 2), "")
    assert out == "oree"


def test_apply_change_keeps_crlf():
    store = DocumentStore()
    store.open(URI, "a\r\nbc")
    # a column past the end of a line lands before its "\r"
    assert store.apply_change(URI, Range.create(0, 9, 0, 9), "X") == "aX\r\nbc"
    assert store.apply_change(URI, Range.create(1, 1, 1, 1), "Y") == "aX\r\nbYc"


def test_apply_change_past_end_appends():
    store = DocumentStore()
    store.open(URI, "a")
    assert store.apply_change(URI, Range.create(7, 0, 7, 0), "\nb") == "a\nb"


def test_apply_change_to_unknown_document_starts_empty():
    store = DocumentStore()
    assert store.apply_change(URI, Range.create(0, 0, 0, 0), "x") == "x"


def test_position_at():
    text = "ab\ncde\n"
    assert position_at(text, 0) == Position(0, 0)
    assert position_at(text, 4) == Position(1, 1)
    assert position_at(text, 7) == Position(2, 0)
    assert position_at(text, 99) == Position(2, 0)
    assert position_at(text, -1) == Position(0, 0)


# --- service ---


def test_open_publishes_diagnostics():
    service, _, sink = make_service("if true\n")
    diagnostics = service.did_open(URI)
    assert sink.published[URI] == diagnostics
    assert [d.message for d in diagnostics] == ['Unclosed "if" block']
    assert diagnostics[0].severity == Severity.ERROR


def test_change_replaces_previous_set():
    service, store, sink = make_service("if true\n")
    service.did_open(URI)
    store.update(URI, "if true\nend\n")
    service.did_change(URI)
    assert sink.published[URI] == []


def test_close_clears_diagnostics():
    service, _, sink = make_service("if true\n")
    service.did_open(URI)
    service.did_close(URI)
    assert sink.published[URI] == []


def test_unknown_document_yields_empty_results():
    service, _, sink = make_service()
    assert service.validate(URI) == []
    assert sink.published[URI] == []
    assert service.document_symbols(URI) == []
    assert service.hover(URI, Position(0, 0)) is None
    assert service.definition(URI, Position(0, 0)) is None
    assert service.format(URI) == []
    assert service.complete(URI, Position(0, 0)) == []


def test_requests_use_current_text():
    text = "class Shape\ndef area\nend\nend\ns = Shape\n"
    service, _, _ = make_service(text)
    symbols = service.document_symbols(URI)
    assert [(s.name, s.kind) for s in symbols] == [
        ("Shape", SymbolKind.TYPE),
        ("area", SymbolKind.METHOD),
    ]
    hover = service.hover(URI, Position(4, 5))
    assert "class Shape" in hover.contents
    loc = service.definition(URI, Position(4, 5))
    assert loc.uri == URI
    assert loc.range.start.line == 0
    labels = {item.label for item in service.complete(URI, Position(4, 0))}
    assert {"Shape", "area", "def"} <= labels
    assert [e.range.start.line for e in service.format(URI)] == [1, 2]


def test_update_config_changes_later_passes():
    service, _, _ = make_service("if a\nb\nend")
    assert service.format(URI)[0].replacement == "    "
    service.update_config(AnalyzerConfig(indent_width=2))
    assert service.format(URI)[0].replacement == "  "


def test_source_label_comes_from_config():
    service, _, _ = make_service("end\n", AnalyzerConfig(source="ds"))
    assert [d.source for d in service.did_open(URI)] == ["ds"]
