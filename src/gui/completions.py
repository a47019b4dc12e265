"""Completion popup for the Dragonstone editor."""

from __future__ import annotations

import re

from PySide6 import QtCore, QtWidgets

from analysis.model import CompletionItem

SNIPPET_PLACEHOLDER_RE = re.compile(r"\$\{\d+:([^}]*)\}|\$\{\d+\}|\$\d+")
PREFIX_RE = re.compile(r"[A-Za-z_]\w*[!?]?$")


def current_prefix(text_before_cursor: str) -> str:
    m = PREFIX_RE.search(text_before_cursor)
    return m.group(0) if m else ""


def expand_snippet(text: str) -> tuple[str, int]:
    """Strip tab stops from a snippet body.

    Returns the plain text and the cursor offset of the final ``$0`` stop, or
    of the end of the text when there is none.
    """
    cursor = -1
    out = []
    last = 0
    for m in SNIPPET_PLACEHOLDER_RE.finditer(text):
        out.append(text[last : m.start()])
        if m.group(0) == "$0":
            cursor = sum(len(part) for part in out)
        out.append(m.group(1) or "")
        last = m.end()
    out.append(text[last:])
    plain = "".join(out)
    return plain, cursor if cursor >= 0 else len(plain)


def filter_completions(items: list[CompletionItem], prefix: str) -> list[CompletionItem]:
    """Prefix-filter candidates, dropping duplicate labels, sorted by label."""
    seen: dict[str, CompletionItem] = {}
    for item in items:
        if item.label.startswith(prefix) and item.label not in seen:
            seen[item.label] = item
    return sorted(seen.values(), key=lambda item: (item.label.lower(), item.label))


class CompletionModel(QtCore.QAbstractListModel):
    def __init__(self, items: list[CompletionItem] | None = None, parent=None):
        super().__init__(parent)
        self.items = items or []

    def rowCount(self, parent=None) -> int:
        return len(self.items)

    def data(self, index: QtCore.QModelIndex, role=QtCore.Qt.DisplayRole):
        if not index.isValid() or index.row() >= len(self.items):
            return None
        item = self.items[index.row()]
        if role == QtCore.Qt.DisplayRole:
            return item.label
        if role == QtCore.Qt.ToolTipRole:
            return item.detail
        if role == QtCore.Qt.UserRole:
            return item
        return None

    def set_items(self, items: list[CompletionItem]) -> None:
        self.beginResetModel()
        self.items = items
        self.endResetModel()


class CompletionPopup(QtWidgets.QListView):
    """Popup completion list view."""

    completion_selected = QtCore.Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.model = CompletionModel()
        self.setModel(self.model)
        # Tooltip-style window so it never steals focus from the editor.
        self.setWindowFlags(QtCore.Qt.ToolTip | QtCore.Qt.FramelessWindowHint)
        self.setAttribute(QtCore.Qt.WA_ShowWithoutActivating)
        self.setFocusPolicy(QtCore.Qt.NoFocus)
        self.setFocusProxy(parent)
        self.setMaximumHeight(220)
        self.setMaximumWidth(340)
        self.setUniformItemSizes(True)
        self.setHorizontalScrollBarPolicy(QtCore.Qt.ScrollBarAlwaysOff)
        self.setStyleSheet(
            """
            QListView {
                background: #1e1e1e;
                color: #e5e5e5;
                border: 1px solid #3a3a3a;
                padding: 4px;
                outline: none;
            }
            QListView::item { padding: 4px 6px; }
            QListView::item:selected { background: #264f78; color: #ffffff; }
            """
        )
        self.clicked.connect(self._on_item_clicked)

    def _on_item_clicked(self, index: QtCore.QModelIndex) -> None:
        if index.isValid():
            item = self.model.data(index, QtCore.Qt.UserRole)
            if item:
                self.completion_selected.emit(item)
                self.hide()

    def show_at_cursor(self, pos: QtCore.QPoint, items: list[CompletionItem]) -> None:
        if not items:
            self.hide()
            return
        self.model.set_items(items)
        self.move(pos)
        self.show()
        if self.model.rowCount() > 0:
            self.setCurrentIndex(self.model.index(0, 0))

    def select_next(self) -> None:
        idx = self.currentIndex()
        if idx.isValid() and idx.row() < self.model.rowCount() - 1:
            self.setCurrentIndex(self.model.index(idx.row() + 1, 0))

    def select_previous(self) -> None:
        idx = self.currentIndex()
        if idx.isValid() and idx.row() > 0:
            self.setCurrentIndex(self.model.index(idx.row() - 1, 0))

    def get_selected(self) -> CompletionItem | None:
        idx = self.currentIndex()
        if idx.isValid():
            return self.model.data(idx, QtCore.Qt.UserRole)
        return None
