"""Syntax highlighting for Dragonstone sources.

Word rules come from the static language tables. Literals and line comments
are coloured from the analysis scanner's character roles, and the block
state of each text block carries the ``#[ ]#`` comment depth to the next one.
"""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from analysis.scanner import COMMENT, LITERAL, QUOTE, char_roles, scan_line
from analysis.tables import BUILTINS, CONSTANTS, KEYWORDS, TYPES

NUMBER_PATTERN = r"\b\d+(\.\d+)?\b"


def _word_pattern(words) -> QtCore.QRegularExpression:
    # builtins such as ``e!`` end in a non-word character
    alternatives = "|".join(
        QtCore.QRegularExpression.escape(w)
        for w in sorted(set(words), key=len, reverse=True)
    )
    return QtCore.QRegularExpression(rf"(?<!\w)(?:{alternatives})(?![\w!?])")


def _char_format(color: str, bold: bool = False, italic: bool = False):
    fmt = QtGui.QTextCharFormat()
    fmt.setForeground(QtGui.QColor(color))
    if bold:
        fmt.setFontWeight(QtGui.QFont.Bold)
    if italic:
        fmt.setFontItalic(True)
    return fmt


class DragonstoneHighlighter(QtGui.QSyntaxHighlighter):
    def __init__(self, parent=None, colors: dict[str, str] | None = None):
        super().__init__(parent)
        self.set_colors(colors or {})

    def set_colors(self, colors: dict[str, str]) -> None:
        self.formats = {
            "keyword": _char_format(colors.get("keyword", "#0057b7"), bold=True),
            "type": _char_format(colors.get("type", "#00838f")),
            "builtin": _char_format(colors.get("builtin", "#6a1b9a")),
            "constant": _char_format(colors.get("constant", "#b71c1c")),
            "number": _char_format(colors.get("number", "#b71c1c")),
            "string": _char_format(colors.get("string", "#2e7d32")),
            "comment": _char_format(colors.get("comment", "#9e9e9e"), italic=True),
        }
        self.rules = [
            (_word_pattern(item.label for item in KEYWORDS), self.formats["keyword"]),
            (_word_pattern(item.label for item in TYPES), self.formats["type"]),
            (_word_pattern(item.label for item in BUILTINS), self.formats["builtin"]),
            (_word_pattern(item.label for item in CONSTANTS), self.formats["constant"]),
            (QtCore.QRegularExpression(NUMBER_PATTERN), self.formats["number"]),
        ]
        self.rehighlight()

    def highlightBlock(self, text: str):
        depth = max(self.previousBlockState(), 0)
        scan = scan_line(text, depth)
        self.setCurrentBlockState(scan.depth)
        if depth > 0 or scan.in_comment:
            self.setFormat(0, len(text), self.formats["comment"])
            return

        for pattern, fmt in self.rules:
            it = pattern.globalMatch(text)
            while it.hasNext():
                match = it.next()
                self.setFormat(match.capturedStart(), match.capturedLength(), fmt)

        roles, _ = char_roles(text)
        for i, role in enumerate(roles):
            if role in (QUOTE, LITERAL):
                self.setFormat(i, 1, self.formats["string"])
            elif role == COMMENT:
                self.setFormat(i, len(text) - i, self.formats["comment"])
                break
