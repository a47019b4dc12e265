"""Diagnostics panel and editor underlines for the Dragonstone editor."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from analysis.model import Diagnostic, Severity

FILTERS = {
    "All": None,
    "Errors": Severity.ERROR,
    "Warnings": Severity.WARNING,
}


def describe(diag: Diagnostic) -> str:
    """One-line, 1-based rendering used by the panel."""
    label = "error" if diag.severity == Severity.ERROR else "warning"
    start = diag.range.start
    return f"L{start.line + 1}:{start.character + 1} {label}: {diag.message}"


def filter_diagnostics(
    diagnostics: list[Diagnostic], severity: Severity | None
) -> list[Diagnostic]:
    if severity is None:
        return list(diagnostics)
    return [d for d in diagnostics if d.severity == severity]


def diagnostic_selections(
    editor: QtWidgets.QPlainTextEdit,
    diagnostics: list[Diagnostic],
    colors: dict[str, str],
) -> list[QtWidgets.QTextEdit.ExtraSelection]:
    """Wave underlines covering each diagnostic range.

    Empty or line-wide ranges fall back to underlining the whole line.
    """
    doc = editor.document()
    selections = []
    for diag in diagnostics:
        start = diag.range.start
        end = diag.range.end
        start_block = doc.findBlockByNumber(start.line)
        if not start_block.isValid():
            continue
        cursor = QtGui.QTextCursor(start_block)
        if (start.line, start.character) == (end.line, end.character):
            cursor.select(QtGui.QTextCursor.LineUnderCursor)
        else:
            end_block = doc.findBlockByNumber(end.line)
            if not end_block.isValid():
                end_block = doc.lastBlock()
            cursor.setPosition(
                start_block.position() + min(start.character, start_block.length() - 1)
            )
            cursor.setPosition(
                end_block.position() + min(end.character, end_block.length() - 1),
                QtGui.QTextCursor.KeepAnchor,
            )
        color = colors["error" if diag.severity == Severity.ERROR else "warning"]
        fmt = QtGui.QTextCharFormat()
        fmt.setUnderlineStyle(QtGui.QTextCharFormat.WaveUnderline)
        fmt.setUnderlineColor(QtGui.QColor(color))
        fmt.setToolTip(diag.message)
        selection = QtWidgets.QTextEdit.ExtraSelection()
        selection.format = fmt
        selection.cursor = cursor
        selections.append(selection)
    return selections


class DiagnosticsSink(QtCore.QObject):
    """Result sink that re-emits published diagnostics as a Qt signal."""

    published = QtCore.Signal(str, list)

    def publish_diagnostics(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        self.published.emit(uri, list(diagnostics))


class DiagnosticsPanel(QtWidgets.QWidget):
    """Panel for displaying diagnostics with filtering."""

    location_activated = QtCore.Signal(int, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.filter_combo = QtWidgets.QComboBox()
        self.filter_combo.addItems(list(FILTERS))
        self.filter_combo.currentTextChanged.connect(self._on_filter_changed)

        self.summary_label = QtWidgets.QLabel()

        self.list_widget = QtWidgets.QListWidget()
        self.list_widget.setAlternatingRowColors(True)
        self.list_widget.itemActivated.connect(self._on_item_activated)
        self.list_widget.itemClicked.connect(self._on_item_activated)

        filter_layout = QtWidgets.QHBoxLayout()
        filter_layout.addWidget(QtWidgets.QLabel("Filter:"))
        filter_layout.addWidget(self.filter_combo)
        filter_layout.addStretch()
        filter_layout.addWidget(self.summary_label)

        layout.addLayout(filter_layout)
        layout.addWidget(self.list_widget)

        self._diagnostics: list[Diagnostic] = []
        self._update_list()

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def set_diagnostics(self, diagnostics: list[Diagnostic]) -> None:
        self._diagnostics = sorted(
            diagnostics, key=lambda d: (d.range.start.line, d.range.start.character)
        )
        self._update_list()

    def _update_list(self) -> None:
        self.list_widget.clear()
        severity = FILTERS.get(self.filter_combo.currentText())
        for diag in filter_diagnostics(self._diagnostics, severity):
            item = QtWidgets.QListWidgetItem(describe(diag))
            start = diag.range.start
            item.setData(QtCore.Qt.UserRole, (start.line, start.character))
            self.list_widget.addItem(item)
        errors = len(filter_diagnostics(self._diagnostics, Severity.ERROR))
        warnings = len(self._diagnostics) - errors
        self.summary_label.setText(f"{errors} errors, {warnings} warnings")

    def _on_filter_changed(self) -> None:
        self._update_list()

    def _on_item_activated(self, item: QtWidgets.QListWidgetItem) -> None:
        data = item.data(QtCore.Qt.UserRole)
        if data:
            self.location_activated.emit(*data)

    def get_selected_location(self) -> tuple[int, int] | None:
        item = self.list_widget.currentItem()
        if item:
            return item.data(QtCore.Qt.UserRole)
        return None
