"""Editor widget wired to the language service: completions, hover, definitions."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from analysis.formatter import apply_edits
from analysis.model import CompletionItem, Hover, Position, Range
from analysis.resolver import word_at
from analysis.service import DocumentStore, LanguageService, position_at
from analysis.tables import KeywordDatabase, TRIGGER_CHARACTERS

from .completions import CompletionPopup, current_prefix, expand_snippet, filter_completions
from .highlighter import DragonstoneHighlighter


def hover_plain_text(hover: Hover) -> str:
    """Drop the markdown code fences so the tooltip shows plain lines."""
    lines = [ln for ln in hover.contents.splitlines() if not ln.startswith("```")]
    return "\n".join(lines)


class EditorWidget(QtWidgets.QPlainTextEdit):
    """Plain text editor backed by a ``LanguageService`` document uri."""

    definition_requested = QtCore.Signal(int, int)

    def __init__(
        self,
        service: LanguageService,
        store: DocumentStore,
        uri: str,
        parent=None,
        colors: dict[str, str] | None = None,
    ):
        super().__init__(parent)
        self.service = service
        self.store = store
        self.uri = uri
        self.store.open(uri, "")
        self.document().contentsChange.connect(self._on_contents_change)
        self.setPlaceholderText("Write Dragonstone code here…")
        self.setFont(QtGui.QFont("Consolas", 14))
        self.setTabStopDistance(
            self.fontMetrics().horizontalAdvance(" ") * service.config.indent_width
        )

        self.highlighter = DragonstoneHighlighter(self.document(), colors)

        self.completion_popup = CompletionPopup(self)
        self.completion_popup.completion_selected.connect(self._on_completion_selected)

        self.setMouseTracking(True)
        self._last_hovered_word = ""

        self.cursorPositionChanged.connect(self._on_cursor_moved)

    def _on_contents_change(self, position: int, removed: int, added: int) -> None:
        old = self.store.get_text(self.uri) or ""
        new = self.toPlainText()
        if position + removed > len(old) or position + added > len(new):
            # whole-document replace; Qt counts the final block separator
            self.store.update(self.uri, new)
            return
        rng = Range(position_at(old, position), position_at(old, position + removed))
        self.store.apply_change(self.uri, rng, new[position : position + added])

    def sync(self) -> None:
        """Replace the stored text with the whole buffer."""
        self.store.update(self.uri, self.toPlainText())

    def cursor_position(self) -> Position:
        cursor = self.textCursor()
        return Position(cursor.blockNumber(), cursor.positionInBlock())

    def move_to(self, line: int, character: int) -> None:
        block = self.document().findBlockByNumber(line)
        if not block.isValid():
            return
        cursor = self.textCursor()
        cursor.setPosition(block.position() + min(character, block.length() - 1))
        self.setTextCursor(cursor)
        self.centerCursor()

    # --- completions ---
    def _on_cursor_moved(self):
        if not self.hasFocus():
            return
        cursor = self.textCursor()
        before = cursor.block().text()[: cursor.positionInBlock()]
        word = current_prefix(before)
        if len(word) > 1 or (before and before[-1] in TRIGGER_CHARACTERS):
            self.show_completions()
        else:
            self.completion_popup.hide()

    def completions(self) -> list[CompletionItem]:
        cursor = self.textCursor()
        before = cursor.block().text()[: cursor.positionInBlock()]
        self.sync()
        items = self.service.complete(self.uri, self.cursor_position())
        return filter_completions(items, current_prefix(before))

    def show_completions(self) -> None:
        items = self.completions()
        if not items:
            self.completion_popup.hide()
            return
        cursor_rect = self.cursorRect(self.textCursor())
        global_pos = self.mapToGlobal(cursor_rect.bottomLeft())
        self.completion_popup.show_at_cursor(global_pos, items)

    def _on_completion_selected(self, item: CompletionItem) -> None:
        cursor = self.textCursor()
        before = cursor.block().text()[: cursor.positionInBlock()]
        word = current_prefix(before)
        text = item.insert_text or item.label
        offset = len(text)
        if item.snippet:
            text, offset = expand_snippet(text)
        cursor.movePosition(
            QtGui.QTextCursor.Left, QtGui.QTextCursor.KeepAnchor, len(word)
        )
        start = cursor.selectionStart()
        cursor.insertText(text)
        cursor.setPosition(start + offset)
        self.setTextCursor(cursor)
        self.completion_popup.hide()

    # --- hover and definitions ---
    def hover_text_at(self, line: int, character: int) -> str:
        """Symbol hover for the word at a position, else keyword help."""
        self.sync()
        hover = self.service.hover(self.uri, Position(line, character))
        if hover is not None:
            return hover_plain_text(hover)
        block = self.document().findBlockByNumber(line)
        span = word_at(block.text(), character) if block.isValid() else None
        if span is None:
            return ""
        return KeywordDatabase.get_help(block.text()[span[0] : span[1]])

    def mouseMoveEvent(self, event: QtGui.QMouseEvent):
        super().mouseMoveEvent(event)
        cursor = self.cursorForPosition(event.position().toPoint())
        block_text = cursor.block().text()
        span = word_at(block_text, cursor.positionInBlock())
        word = block_text[span[0] : span[1]] if span else ""
        if word == self._last_hovered_word:
            return
        self._last_hovered_word = word
        text = self.hover_text_at(cursor.blockNumber(), cursor.positionInBlock()) if word else ""
        if text:
            QtWidgets.QToolTip.showText(event.globalPosition().toPoint(), text, self)
        else:
            QtWidgets.QToolTip.hideText()

    def go_to_definition(self) -> bool:
        self.sync()
        location = self.service.definition(self.uri, self.cursor_position())
        if location is None:
            return False
        start = location.range.start
        self.move_to(start.line, start.character)
        self.definition_requested.emit(start.line, start.character)
        return True

    def format_document(self) -> int:
        """Reindent the buffer as one undo step; returns the number of edits."""
        self.sync()
        edits = self.service.format(self.uri)
        if not edits:
            return 0
        pos = self.cursor_position()
        new_text = apply_edits(self.toPlainText(), edits)
        cursor = QtGui.QTextCursor(self.document())
        cursor.beginEditBlock()
        cursor.select(QtGui.QTextCursor.Document)
        cursor.insertText(new_text)
        cursor.endEditBlock()
        self.move_to(pos.line, pos.character)
        return len(edits)

    def keyPressEvent(self, event: QtGui.QKeyEvent):
        if self.completion_popup.isVisible():
            if event.key() == QtCore.Qt.Key_Up:
                self.completion_popup.select_previous()
                return
            elif event.key() == QtCore.Qt.Key_Down:
                self.completion_popup.select_next()
                return
            elif event.key() in (QtCore.Qt.Key_Return, QtCore.Qt.Key_Tab):
                selected = self.completion_popup.get_selected()
                if selected:
                    self._on_completion_selected(selected)
                    return
            elif event.key() == QtCore.Qt.Key_Escape:
                self.completion_popup.hide()
                return

        if (
            event.key() == QtCore.Qt.Key_Space
            and event.modifiers() & QtCore.Qt.ControlModifier
        ):
            self.show_completions()
            return

        if event.key() == QtCore.Qt.Key_F12:
            self.go_to_definition()
            return

        if event.key() == QtCore.Qt.Key_Tab:
            self.textCursor().insertText(self.service.config.indent_unit)
            return

        super().keyPressEvent(event)

    def focusOutEvent(self, event: QtGui.QFocusEvent):
        self.completion_popup.hide()
        super().focusOutEvent(event)
