"""GUI tests for the Dragonstone editor: theme, completions, diagnostics, editor."""

import os
import sys
from pathlib import Path

import pytest

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")
from PySide6 import QtCore, QtGui  # noqa: E402

from analysis.config import AnalyzerConfig  # noqa: E402
from analysis.model import (  # noqa: E402
    CompletionItem,
    CompletionKind,
    Diagnostic,
    Range,
    Severity,
)
from analysis.service import CollectingSink, DocumentStore, LanguageService  # noqa: E402
from gui.completions import (  # noqa: E402
    CompletionModel,
    current_prefix,
    expand_snippet,
    filter_completions,
)
from gui.diagnostics import (  # noqa: E402
    DiagnosticsPanel,
    DiagnosticsSink,
    describe,
    filter_diagnostics,
)
from gui.editor_widget import EditorWidget  # noqa: E402
from gui.main_window import MainWindow, load_config, save_config  # noqa: E402
from gui.theme import ThemeManager, ThemeMode  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path):
    return QtCore.QSettings(str(tmp_path / "editor.ini"), QtCore.QSettings.IniFormat)


def make_editor(text: str) -> EditorWidget:
    store = DocumentStore()
    service = LanguageService(store, CollectingSink())
    editor = EditorWidget(service, store, "untitled:Untitled-1")
    editor.setPlainText(text)
    return editor


ERR = Diagnostic(Severity.ERROR, Range.create(2, 4, 2, 9), "bad name")
WARN = Diagnostic(Severity.WARNING, Range.of_line(0, 3), "brackets")


# --- completions ---


@pytest.mark.parametrize(
    "before, expected",
    [("let x = fo", "fo"), ("empty?", "empty?"), ("x.", ""), ("", ""), ("a + 1", "")],
)
def test_current_prefix(before, expected):
    assert current_prefix(before) == expected


def test_expand_snippet_places_cursor_at_final_stop():
    plain, cursor = expand_snippet("def ${1:method_name}($2)\n    $0\nend")
    assert plain == "def method_name()\n    \nend"
    assert cursor == len("def method_name()\n    ")


def test_expand_snippet_without_final_stop():
    plain, cursor = expand_snippet("bag(${1})")
    assert plain == "bag()"
    assert cursor == len(plain)


def test_filter_completions():
    items = [
        CompletionItem("while", CompletionKind.KEYWORD),
        CompletionItem("Widget", CompletionKind.CLASS),
        CompletionItem("with", CompletionKind.KEYWORD),
        CompletionItem("with", CompletionKind.VARIABLE),
        CompletionItem("echo", CompletionKind.FUNCTION),
    ]
    out = filter_completions(items, "w")
    assert [i.label for i in out] == ["while", "with"]
    # the first duplicate wins
    assert out[1].kind == CompletionKind.KEYWORD
    assert len(filter_completions(items, "")) == 4


def test_completion_model_roles(qapp):
    item = CompletionItem("echo", CompletionKind.FUNCTION, "Print to stdout")
    model = CompletionModel([item])
    index = model.index(0, 0)
    assert model.rowCount() == 1
    assert model.data(index, QtCore.Qt.DisplayRole) == "echo"
    assert model.data(index, QtCore.Qt.ToolTipRole) == "Print to stdout"
    assert model.data(index, QtCore.Qt.UserRole) is item


# --- diagnostics ---


def test_describe_is_one_based():
    assert describe(ERR) == "L3:5 error: bad name"
    assert describe(WARN) == "L1:1 warning: brackets"


def test_filter_diagnostics():
    assert filter_diagnostics([ERR, WARN], None) == [ERR, WARN]
    assert filter_diagnostics([ERR, WARN], Severity.WARNING) == [WARN]


def test_sink_emits_signal(qapp):
    sink = DiagnosticsSink()
    received = []
    sink.published.connect(lambda uri, diags: received.append((uri, diags)))
    sink.publish_diagnostics("untitled:1", [ERR])
    assert [uri for uri, _ in received] == ["untitled:1"]
    assert [d.message for d in received[0][1]] == ["bad name"]


def test_panel_sorts_and_filters(qapp):
    panel = DiagnosticsPanel()
    panel.set_diagnostics([ERR, WARN])
    assert panel.diagnostics == [WARN, ERR]
    assert panel.list_widget.count() == 2
    assert panel.summary_label.text() == "1 errors, 1 warnings"
    panel.filter_combo.setCurrentText("Errors")
    assert panel.list_widget.count() == 1
    assert panel.list_widget.item(0).text() == "L3:5 error: bad name"


# --- editor ---


def test_editor_hover_prefers_symbols_then_keyword_help(qapp):
    editor = make_editor("class Point\nend\np = Point")
    assert editor.hover_text_at(2, 5) == "class Point\nDefined at line 1"
    assert editor.hover_text_at(1, 1) == "End block"
    assert editor.hover_text_at(2, 2) == ""


def test_editor_edits_reach_store_incrementally(qapp):
    editor = make_editor("if a\nend")
    assert editor.store.get_text(editor.uri) == "if a\nend"
    editor.move_to(0, 4)
    editor.textCursor().insertText("\n  run")
    cursor = editor.textCursor()
    cursor.setPosition(0)
    cursor.setPosition(2, QtGui.QTextCursor.KeepAnchor)
    cursor.insertText("unless")
    assert editor.toPlainText() == "unless a\n  run\nend"
    assert editor.store.get_text(editor.uri) == editor.toPlainText()


def test_editor_format_is_single_edit(qapp):
    editor = make_editor("if a\nb\nend")
    assert editor.format_document() == 1
    assert editor.toPlainText() == "if a\n    b\nend"
    assert editor.format_document() == 0
    editor.undo()
    assert editor.toPlainText() == "if a\nb\nend"


def test_editor_go_to_definition(qapp):
    editor = make_editor("fun area()\nend\narea")
    editor.move_to(2, 1)
    assert editor.go_to_definition()
    assert editor.cursor_position().line == 0


def test_editor_completions_filter_by_prefix(qapp):
    editor = make_editor("let width = 1\nwi")
    editor.move_to(1, 2)
    labels = [item.label for item in editor.completions()]
    assert labels == ["width", "with"]


# --- settings ---


def test_config_roundtrip(settings):
    save_config(settings, AnalyzerConfig(indent_width=2, check_naming=False))
    settings.sync()
    config = load_config(settings)
    assert config.indent_width == 2
    assert config.check_naming is False
    assert config.check_brackets is True


def test_missing_settings_give_defaults(settings):
    assert load_config(settings) == AnalyzerConfig()


def test_bad_stored_settings_fall_back(settings):
    settings.setValue("analyzer/indentWidth", 0)
    assert load_config(settings) == AnalyzerConfig()


def test_theme_mode_persists(qapp, settings):
    mgr = ThemeManager(settings)
    mgr.save_theme_mode(ThemeMode.DARK)
    assert ThemeManager(settings).current_mode == ThemeMode.DARK
    assert set(mgr.get_diagnostic_colors()) == {"error", "warning"}
    assert "keyword" in mgr.get_syntax_colors()


def test_main_window_publishes_to_panel_and_outline(qapp, settings):
    window = MainWindow(settings)
    editor = window.open_text("class Shape\nif ready\n")
    assert window.current_editor() is editor
    messages = [d.message for d in window.diagnostics_panel.diagnostics]
    assert messages == ['Unclosed "class" block', 'Unclosed "if" block']
    assert window.outline.topLevelItemCount() == 1
    assert window.outline.topLevelItem(0).text(0) == "Shape"


def test_main_window_apply_config_persists(qapp, settings):
    window = MainWindow(settings)
    window.open_text("if a\nb\nend")
    window.apply_config(AnalyzerConfig(indent_width=2))
    assert window.service.config.indent_width == 2
    assert load_config(settings).indent_width == 2
    window.format_current()
    assert window.current_editor().toPlainText() == "if a\n  b\nend"
