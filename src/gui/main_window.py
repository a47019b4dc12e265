"""Main window for the Dragonstone editor."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path

from PySide6 import QtCore, QtGui, QtWidgets

from analysis.config import AnalyzerConfig, ConfigError
from analysis.model import Diagnostic, SymbolRecord
from analysis.service import DocumentStore, LanguageService
from analysis.tables import KeywordDatabase

from .actions import ActionManager
from .diagnostics import DiagnosticsPanel, DiagnosticsSink, diagnostic_selections
from .editor_widget import EditorWidget
from .theme import ThemeManager, ThemeMode, editor_settings

logger = logging.getLogger(__name__)

FILE_FILTER = "Dragonstone Files (*.ds);;All files (*)"
LINT_DELAY_MS = 250
SETTINGS_PREFIX = "analyzer/"


def load_config(settings: QtCore.QSettings) -> AnalyzerConfig:
    """Read analyzer options stored under ``analyzer/``; bad values fall back."""
    defaults = AnalyzerConfig()
    options = {}
    for option, field in AnalyzerConfig.OPTION_NAMES.items():
        key = SETTINGS_PREFIX + option
        if not settings.contains(key):
            continue
        default = getattr(defaults, field)
        options[option] = settings.value(key, default, type=type(default))
    try:
        return AnalyzerConfig.from_options(options)
    except ConfigError as e:
        logger.warning("ignoring stored analyzer settings: %s", e)
        return defaults


def save_config(settings: QtCore.QSettings, config: AnalyzerConfig) -> None:
    for option, field in AnalyzerConfig.OPTION_NAMES.items():
        settings.setValue(SETTINGS_PREFIX + option, getattr(config, field))


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: QtCore.QSettings | None = None):
        super().__init__()
        self.setWindowTitle("Dragonstone Editor")
        self.settings = settings or editor_settings()
        self.last_opened = self.settings.value("last_opened", None)
        self._editor_base_font_size = None
        self._untitled = itertools.count(1)
        self._tab_paths: dict[QtWidgets.QWidget, Path | None] = {}
        self._tab_dirty: dict[QtWidgets.QWidget, bool] = {}
        self._diagnostics: dict[str, list[Diagnostic]] = {}
        self._jump_selection: dict[QtWidgets.QWidget, QtWidgets.QTextEdit.ExtraSelection | None] = {}

        self.store = DocumentStore()
        self.sink = DiagnosticsSink(self)
        self.sink.published.connect(self._on_diagnostics_published)
        self.service = LanguageService(self.store, self.sink, load_config(self.settings))

        self._lint_timer = QtCore.QTimer(self)
        self._lint_timer.setSingleShot(True)
        self._lint_timer.timeout.connect(self._run_lint_pass)

        self.theme_manager = ThemeManager(self.settings)
        self.theme_manager.apply_theme(QtWidgets.QApplication.instance())
        self.action_manager = ActionManager(self)

        self._build_ui()
        self._setup_menu()

    def _build_ui(self):
        mono_font = QtGui.QFont("Consolas", 14)
        self._editor_base_font_size = mono_font.pointSize()

        self.editor_tabs = QtWidgets.QTabWidget()
        self.editor_tabs.setTabsClosable(True)
        self.editor_tabs.tabCloseRequested.connect(self._close_tab)
        self.editor_tabs.currentChanged.connect(self._on_tab_changed)
        self.editor_tabs.setMinimumHeight(320)

        self.outline = QtWidgets.QTreeWidget()
        self.outline.setHeaderLabels(["Symbol", "Kind", "Line"])
        self.outline.setRootIsDecorated(False)
        self.outline.setMinimumWidth(220)
        self.outline.itemActivated.connect(self._jump_to_symbol)
        self.outline.itemClicked.connect(self._jump_to_symbol)

        self.output_tabs = QtWidgets.QTabWidget()
        self.output_tabs.setTabPosition(QtWidgets.QTabWidget.South)

        self.diagnostics_panel = DiagnosticsPanel()
        self.diagnostics_panel.location_activated.connect(self._jump_to_location)
        self.output_tabs.addTab(self.diagnostics_panel, "Problems")

        self.log_view = QtWidgets.QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setPlaceholderText("Logs…")
        self.log_view.setFont(mono_font)
        self.output_tabs.addTab(self.log_view, "Logs")

        clear_btn = QtWidgets.QPushButton("Clear Logs")
        clear_btn.setFixedHeight(22)
        clear_btn.clicked.connect(self.log_view.clear)
        clear_bar = QtWidgets.QHBoxLayout()
        clear_bar.setContentsMargins(0, 0, 0, 0)
        clear_bar.addStretch(1)
        clear_bar.addWidget(clear_btn)

        tabs_container = QtWidgets.QWidget()
        tabs_layout = QtWidgets.QVBoxLayout(tabs_container)
        tabs_layout.setContentsMargins(0, 0, 0, 0)
        tabs_layout.setSpacing(4)
        tabs_layout.addLayout(clear_bar)
        tabs_layout.addWidget(self.output_tabs)
        tabs_container.setMinimumHeight(140)

        open_btn = QtWidgets.QPushButton("Open…")
        open_btn.clicked.connect(self.open_file)
        save_btn = QtWidgets.QPushButton("Save")
        save_btn.clicked.connect(self.save_file)
        format_btn = QtWidgets.QPushButton("Format")
        format_btn.clicked.connect(self.format_current)
        validate_btn = QtWidgets.QPushButton("Validate")
        validate_btn.clicked.connect(self.validate_current)

        buttons = QtWidgets.QHBoxLayout()
        for b in (open_btn, save_btn, format_btn, validate_btn):
            buttons.addWidget(b)
        buttons.addStretch(1)

        self._main_vertical_splitter = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        self._main_vertical_splitter.addWidget(self.editor_tabs)
        self._main_vertical_splitter.addWidget(tabs_container)
        self._main_vertical_splitter.setStretchFactor(0, 5)
        self._main_vertical_splitter.setStretchFactor(1, 1)
        self._main_vertical_splitter.setCollapsible(0, False)

        self._main_horizontal_splitter = QtWidgets.QSplitter(QtCore.Qt.Horizontal)
        self._main_horizontal_splitter.addWidget(self._main_vertical_splitter)
        self._main_horizontal_splitter.addWidget(self.outline)
        self._main_horizontal_splitter.setSizes([4, 1])
        self._main_horizontal_splitter.setCollapsible(0, False)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.addLayout(buttons)
        layout.addWidget(self._main_horizontal_splitter)
        self.setCentralWidget(central)

    def _setup_menu(self):
        self.action_manager.setup_file_menu(
            on_new=self.new_file,
            on_open=self.open_file,
            on_save=self.save_file,
            on_save_as=self.save_file_as,
        )
        self.action_manager.setup_code_menu(
            on_format=self.format_current,
            on_definition=self.go_to_definition,
            on_complete=self.trigger_completion,
            on_validate=self.validate_current,
        )
        self.action_manager.setup_view_menu(
            on_inc_font=lambda: self._adjust_editor_font(1),
            on_dec_font=lambda: self._adjust_editor_font(-1),
            on_reset_font=self._reset_editor_font,
            on_toggle_outline=self._toggle_outline,
            on_theme=self._show_theme_dialog,
        )
        self.action_manager.setup_tools_menu(
            on_settings=self._show_settings_dialog,
            on_keyword_help=self._show_keyword_help_dialog,
        )
        self.action_manager.setup_help_menu()

    # --- editor tab helpers ---
    def _uri_for(self, path: Path | None) -> str:
        if path is None:
            return f"untitled:Untitled-{next(self._untitled)}"
        return path.resolve().as_uri()

    def _create_editor(self, text: str, path: Path | None) -> EditorWidget:
        editor = EditorWidget(
            self.service,
            self.store,
            self._uri_for(path),
            colors=self.theme_manager.get_syntax_colors(),
        )
        editor.setPlainText(text)
        editor.document().setModified(False)
        editor.sync()
        editor.textChanged.connect(lambda e=editor: self._on_editor_changed(e))
        self._tab_paths[editor] = path
        self._tab_dirty[editor] = False
        self._jump_selection[editor] = None
        return editor

    def open_text(self, text: str, path: Path | None = None) -> EditorWidget:
        editor = self._create_editor(text, path)
        idx = self.editor_tabs.addTab(editor, path.name if path else "Untitled")
        self.editor_tabs.setCurrentIndex(idx)
        if path:
            self.editor_tabs.setTabToolTip(idx, str(path))
        self.service.did_open(editor.uri)
        self._refresh_outline(editor)
        return editor

    def current_editor(self) -> EditorWidget | None:
        widget = self.editor_tabs.currentWidget()
        return widget if isinstance(widget, EditorWidget) else None

    def _close_tab(self, index: int):
        widget = self.editor_tabs.widget(index)
        if not widget:
            return
        if not self._confirm_close_editor(widget):
            return
        if isinstance(widget, EditorWidget):
            self.service.did_close(widget.uri)
            self.store.close(widget.uri)
        self._tab_paths.pop(widget, None)
        self._tab_dirty.pop(widget, None)
        self._jump_selection.pop(widget, None)
        self.editor_tabs.removeTab(index)
        widget.deleteLater()

    def _on_tab_changed(self, _index: int):
        editor = self.current_editor()
        if editor is None:
            self.diagnostics_panel.set_diagnostics([])
            self.outline.clear()
            return
        self.diagnostics_panel.set_diagnostics(self._diagnostics.get(editor.uri, []))
        self._refresh_outline(editor)

    # --- file ops ---
    def new_file(self):
        self.open_text("", None)
        self._log("Created new file")

    def open_file(self):
        start_dir = Path(self.last_opened).parent if self.last_opened else Path.home()
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Open Dragonstone file", str(start_dir), FILE_FILTER
        )
        if path:
            self.open_path(Path(path))

    def open_path(self, path: Path) -> EditorWidget | None:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            self._log(f"Cannot open {path}: {e}", logging.ERROR)
            return None
        editor = self.open_text(text, path)
        self._log(f"Opened {path.name}")
        self._store_last_file(path)
        return editor

    def save_file(self):
        editor = self.current_editor()
        if not editor:
            self._log("No document to save", logging.WARNING)
            return
        self._save_editor(editor, force_dialog=False)

    def save_file_as(self):
        editor = self.current_editor()
        if not editor:
            self._log("No document to save", logging.WARNING)
            return
        self._save_editor(editor, force_dialog=True)

    # --- language features ---
    def validate_current(self):
        editor = self.current_editor()
        if editor:
            editor.sync()
            self.service.validate(editor.uri)
            self._refresh_outline(editor)

    def format_current(self):
        editor = self.current_editor()
        if not editor:
            return
        count = editor.format_document()
        self._log(f"Formatted {count} line(s)" if count else "Already formatted")

    def go_to_definition(self):
        editor = self.current_editor()
        if editor and not editor.go_to_definition():
            self.statusBar().showMessage("No definition found", 3000)

    def trigger_completion(self):
        editor = self.current_editor()
        if editor:
            editor.show_completions()

    def _on_editor_changed(self, editor: EditorWidget):
        self._mark_dirty(editor, True)
        self._jump_selection[editor] = None
        self._lint_timer.stop()
        self._lint_timer.setProperty("uri", editor.uri)
        self._lint_timer.start(LINT_DELAY_MS)

    def _run_lint_pass(self):
        editor = self.current_editor()
        if editor is None or editor.uri != self._lint_timer.property("uri"):
            return
        self.service.did_change(editor.uri)
        self._refresh_outline(editor)

    def _on_diagnostics_published(self, uri: str, diagnostics: list):
        self._diagnostics[uri] = diagnostics
        editor = self.current_editor()
        if editor is not None and editor.uri == uri:
            self.diagnostics_panel.set_diagnostics(diagnostics)
            self._apply_all_selections(editor)

    def _apply_all_selections(self, editor: EditorWidget):
        selections = diagnostic_selections(
            editor,
            self._diagnostics.get(editor.uri, []),
            self.theme_manager.get_diagnostic_colors(),
        )
        jump = self._jump_selection.get(editor)
        if jump:
            selections.append(jump)
        editor.setExtraSelections(selections)

    def _refresh_outline(self, editor: EditorWidget):
        self.outline.clear()
        for symbol in self.service.document_symbols(editor.uri):
            item = QtWidgets.QTreeWidgetItem(
                [symbol.name, symbol.kind.value, str(symbol.line + 1)]
            )
            item.setToolTip(0, symbol.detail or symbol.name)
            item.setData(0, QtCore.Qt.UserRole, symbol)
            self.outline.addTopLevelItem(item)

    def _jump_to_symbol(self, item: QtWidgets.QTreeWidgetItem, _column: int = 0):
        symbol: SymbolRecord | None = item.data(0, QtCore.Qt.UserRole)
        if symbol:
            start = symbol.range.start
            self._jump_to_location(start.line, start.character)

    def _jump_to_location(self, line: int, character: int):
        editor = self.current_editor()
        if not editor:
            return
        editor.move_to(line, character)
        cursor = editor.textCursor()
        cursor.select(QtGui.QTextCursor.LineUnderCursor)
        selection = QtWidgets.QTextEdit.ExtraSelection()
        fmt = QtGui.QTextCharFormat()
        fmt.setBackground(QtGui.QColor(255, 235, 238, 90))
        selection.format = fmt
        selection.cursor = cursor
        self._jump_selection[editor] = selection
        self._apply_all_selections(editor)
        editor.setFocus()

    # --- logging ---
    def _log(self, msg: str, level: int = logging.INFO):
        logger.log(level, msg)
        prefix = "" if level <= logging.INFO else f"[{logging.getLevelName(level)}] "
        self.log_view.appendPlainText(prefix + msg)
        if level > logging.INFO:
            self.output_tabs.setCurrentWidget(self.log_view)

    # --- view helpers ---
    def _adjust_editor_font(self, delta: int):
        editor = self.current_editor()
        if not editor:
            return
        font = editor.font()
        size = font.pointSize() or self._editor_base_font_size or 10
        font.setPointSize(max(6, size + delta))
        editor.setFont(font)

    def _reset_editor_font(self):
        editor = self.current_editor()
        if not editor or not self._editor_base_font_size:
            return
        font = editor.font()
        font.setPointSize(self._editor_base_font_size)
        editor.setFont(font)

    def _toggle_outline(self):
        self.outline.setVisible(not self.outline.isVisible())

    def _show_theme_dialog(self):
        dialog = QtWidgets.QDialog(self)
        dialog.setWindowTitle("Theme Settings")
        dialog.setMinimumWidth(300)

        layout = QtWidgets.QVBoxLayout(dialog)
        group = QtWidgets.QGroupBox("Theme Mode")
        group_layout = QtWidgets.QVBoxLayout(group)

        radios = {}
        for mode in ThemeMode:
            radio = QtWidgets.QRadioButton(mode.value.capitalize())
            radio.setChecked(self.theme_manager.current_mode == mode)
            group_layout.addWidget(radio)
            radios[mode] = radio
        layout.addWidget(group)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(dialog.accept)
        buttons.rejected.connect(dialog.reject)
        layout.addWidget(buttons)

        if dialog.exec() == QtWidgets.QDialog.Accepted:
            mode = next(m for m, r in radios.items() if r.isChecked())
            self.apply_theme_mode(mode)

    def apply_theme_mode(self, mode: ThemeMode):
        self.theme_manager.save_theme_mode(mode)
        self.theme_manager.apply_theme(QtWidgets.QApplication.instance())
        colors = self.theme_manager.get_syntax_colors()
        for idx in range(self.editor_tabs.count()):
            editor = self.editor_tabs.widget(idx)
            if isinstance(editor, EditorWidget):
                editor.highlighter.set_colors(colors)
                self._apply_all_selections(editor)
        self._log(f"Theme changed to {mode.value}")

    def _show_settings_dialog(self):
        config = self.service.config
        dialog = QtWidgets.QDialog(self)
        dialog.setWindowTitle("Analyzer Settings")
        form = QtWidgets.QFormLayout(dialog)

        indent = QtWidgets.QSpinBox()
        indent.setRange(1, 16)
        indent.setValue(config.indent_width)
        naming = QtWidgets.QCheckBox("Report naming convention errors")
        naming.setChecked(config.check_naming)
        brackets = QtWidgets.QCheckBox("Report mismatched brackets")
        brackets.setChecked(config.check_brackets)
        nesting = QtWidgets.QCheckBox("Report unbalanced block comments")
        nesting.setChecked(config.report_comment_nesting)

        form.addRow("Indent width:", indent)
        form.addRow(naming)
        form.addRow(brackets)
        form.addRow(nesting)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(dialog.accept)
        buttons.rejected.connect(dialog.reject)
        form.addRow(buttons)

        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        self.apply_config(
            config.merged(
                {
                    "indentWidth": indent.value(),
                    "checkNaming": naming.isChecked(),
                    "checkBrackets": brackets.isChecked(),
                    "reportCommentNesting": nesting.isChecked(),
                }
            )
        )

    def apply_config(self, config: AnalyzerConfig):
        """Switch analyzer options, persist them and revalidate every tab."""
        self.service.update_config(config)
        save_config(self.settings, config)
        for idx in range(self.editor_tabs.count()):
            editor = self.editor_tabs.widget(idx)
            if isinstance(editor, EditorWidget):
                editor.sync()
                self.service.validate(editor.uri)
        self._log(f"Analyzer settings: {config}")

    def _show_keyword_help_dialog(self):
        dialog = QtWidgets.QDialog(self)
        dialog.setWindowTitle("Keyword Help")
        dialog.setMinimumWidth(500)
        dialog.setMinimumHeight(400)

        layout = QtWidgets.QVBoxLayout(dialog)
        search_layout = QtWidgets.QHBoxLayout()
        search_input = QtWidgets.QLineEdit()
        search_input.setPlaceholderText("Type keyword to search…")
        search_layout.addWidget(QtWidgets.QLabel("Search:"))
        search_layout.addWidget(search_input)

        table = QtWidgets.QTableWidget()
        table.setColumnCount(2)
        table.setHorizontalHeaderLabels(["Keyword", "Description"])
        table.horizontalHeader().setStretchLastSection(True)

        keywords = KeywordDatabase.get_all_keywords()

        def _populate_table(filter_text: str = ""):
            table.setRowCount(0)
            for keyword in keywords:
                if filter_text.lower() not in keyword.lower():
                    continue
                row = table.rowCount()
                table.insertRow(row)
                table.setItem(row, 0, QtWidgets.QTableWidgetItem(keyword))
                table.setItem(
                    row, 1, QtWidgets.QTableWidgetItem(KeywordDatabase.get_help(keyword))
                )

        _populate_table()
        search_input.textChanged.connect(_populate_table)

        layout.addLayout(search_layout)
        layout.addWidget(table)

        close_btn = QtWidgets.QPushButton("Close")
        close_btn.clicked.connect(dialog.close)
        layout.addWidget(close_btn)

        dialog.exec()

    # --- settings helpers ---
    def _store_last_file(self, path: Path):
        self.last_opened = str(path)
        self.settings.setValue("last_opened", str(path))

    def closeEvent(self, event: QtGui.QCloseEvent):
        if not self._confirm_close_all_tabs():
            event.ignore()
            return
        super().closeEvent(event)

    # --- dirty-tracking and save helpers ---
    def _mark_dirty(self, editor: QtWidgets.QWidget, dirty: bool):
        self._tab_dirty[editor] = dirty
        self._update_tab_label(editor)

    def _update_tab_label(self, editor: QtWidgets.QWidget):
        idx = self.editor_tabs.indexOf(editor)
        if idx < 0:
            return
        path = self._tab_paths.get(editor)
        base = path.name if path else "Untitled"
        label = f"*{base}" if self._tab_dirty.get(editor, False) else base
        self.editor_tabs.setTabText(idx, label)

    def _save_editor(self, editor: EditorWidget, *, force_dialog: bool = False) -> bool:
        current_path = self._tab_paths.get(editor)
        path = current_path
        if force_dialog or not current_path:
            initial_dir = current_path.parent if current_path else Path.home()
            selected, _ = QtWidgets.QFileDialog.getSaveFileName(
                self, "Save Dragonstone file", str(initial_dir), FILE_FILTER
            )
            if not selected:
                return False
            path = Path(selected)
        try:
            path.write_text(editor.toPlainText(), encoding="utf-8")
        except OSError as e:
            self._log(f"Cannot save {path}: {e}", logging.ERROR)
            return False
        if path != current_path:
            self._rename_document(editor, path)
        self._mark_dirty(editor, False)
        self._store_last_file(path)
        self._log(f"Saved {path.name}")
        return True

    def _rename_document(self, editor: EditorWidget, path: Path):
        old_uri = editor.uri
        self.service.did_close(old_uri)
        self.store.close(old_uri)
        self._diagnostics.pop(old_uri, None)
        editor.uri = self._uri_for(path)
        editor.sync()
        self._tab_paths[editor] = path
        idx = self.editor_tabs.indexOf(editor)
        if idx >= 0:
            self.editor_tabs.setTabToolTip(idx, str(path))
        self.service.did_open(editor.uri)

    def _confirm_close_editor(self, editor: QtWidgets.QWidget) -> bool:
        if not self._tab_dirty.get(editor):
            return True
        msg = QtWidgets.QMessageBox(self)
        msg.setWindowTitle("Unsaved changes")
        msg.setText("Save changes before closing?")
        msg.setStandardButtons(
            QtWidgets.QMessageBox.Save
            | QtWidgets.QMessageBox.Discard
            | QtWidgets.QMessageBox.Cancel
        )
        msg.setDefaultButton(QtWidgets.QMessageBox.Save)
        choice = msg.exec()
        if choice == QtWidgets.QMessageBox.Cancel:
            return False
        if choice == QtWidgets.QMessageBox.Save:
            return self._save_editor(editor)
        return True

    def _confirm_close_all_tabs(self) -> bool:
        for idx in reversed(range(self.editor_tabs.count())):
            editor = self.editor_tabs.widget(idx)
            if isinstance(editor, EditorWidget) and not self._confirm_close_editor(editor):
                return False
        return True
