"""Theme management for the Dragonstone editor with light/dark/system modes."""

from __future__ import annotations

from enum import Enum

from PySide6 import QtCore, QtGui, QtWidgets

SETTINGS_ORG = "DragonstoneEditor"
SETTINGS_APP = "Dragonstone"


class ThemeMode(Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


SYNTAX_COLORS = {
    ThemeMode.LIGHT: {
        "keyword": "#0057b7",
        "type": "#00838f",
        "builtin": "#6a1b9a",
        "constant": "#b71c1c",
        "number": "#b71c1c",
        "string": "#2e7d32",
        "comment": "#9e9e9e",
    },
    ThemeMode.DARK: {
        "keyword": "#569cd6",
        "type": "#4ec9b0",
        "builtin": "#c586c0",
        "constant": "#d7ba7d",
        "number": "#b5cea8",
        "string": "#ce9178",
        "comment": "#6a9955",
    },
}

DIAGNOSTIC_COLORS = {
    ThemeMode.LIGHT: {"error": "#d32f2f", "warning": "#c77d00"},
    ThemeMode.DARK: {"error": "#f48771", "warning": "#cca700"},
}


def editor_settings() -> QtCore.QSettings:
    return QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)


class ThemeManager:
    """Manages application theme with persistence."""

    BG_LIGHT = "#ffffff"
    BG_DARK = "#1e1e1e"
    FG_LIGHT = "#000000"
    FG_DARK = "#e0e0e0"
    EDITOR_BG_LIGHT = "#ffffff"
    EDITOR_BG_DARK = "#252526"
    EDITOR_FG_LIGHT = "#000000"
    EDITOR_FG_DARK = "#d4d4d4"

    def __init__(self, settings: QtCore.QSettings | None = None):
        self.settings = settings or editor_settings()
        self.current_mode = self._load_theme_mode()
        self._palettes = {
            ThemeMode.LIGHT: self._create_light_palette(),
            ThemeMode.DARK: self._create_dark_palette(),
        }

    def _load_theme_mode(self) -> ThemeMode:
        saved = self.settings.value("theme_mode", "system")
        try:
            return ThemeMode(saved)
        except ValueError:
            return ThemeMode.SYSTEM

    def save_theme_mode(self, mode: ThemeMode) -> None:
        self.current_mode = mode
        self.settings.setValue("theme_mode", mode.value)

    def get_active_mode(self) -> ThemeMode:
        """Resolve SYSTEM to LIGHT or DARK from the running palette."""
        if self.current_mode == ThemeMode.SYSTEM:
            app = QtWidgets.QApplication.instance()
            if app:
                return (
                    ThemeMode.DARK
                    if self._is_dark_palette(app.palette())
                    else ThemeMode.LIGHT
                )
            return ThemeMode.LIGHT
        return self.current_mode

    def get_palette(self) -> QtGui.QPalette:
        return self._palettes[self.get_active_mode()]

    def apply_theme(self, app: QtWidgets.QApplication) -> None:
        app.setPalette(self.get_palette())

    def _create_light_palette(self) -> QtGui.QPalette:
        palette = QtGui.QPalette()
        palette.setColor(QtGui.QPalette.Window, QtGui.QColor(self.BG_LIGHT))
        palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(self.FG_LIGHT))
        palette.setColor(QtGui.QPalette.Base, QtGui.QColor(self.EDITOR_BG_LIGHT))
        palette.setColor(QtGui.QPalette.AlternateBase, QtGui.QColor("#f5f5f5"))
        palette.setColor(QtGui.QPalette.Text, QtGui.QColor(self.EDITOR_FG_LIGHT))
        palette.setColor(QtGui.QPalette.Button, QtGui.QColor("#f0f0f0"))
        palette.setColor(QtGui.QPalette.ButtonText, QtGui.QColor(self.FG_LIGHT))
        palette.setColor(QtGui.QPalette.Highlight, QtGui.QColor("#0078d4"))
        palette.setColor(QtGui.QPalette.HighlightedText, QtGui.QColor(self.BG_LIGHT))
        return palette

    def _create_dark_palette(self) -> QtGui.QPalette:
        palette = QtGui.QPalette()
        palette.setColor(QtGui.QPalette.Window, QtGui.QColor(self.BG_DARK))
        palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(self.FG_DARK))
        palette.setColor(QtGui.QPalette.Base, QtGui.QColor(self.EDITOR_BG_DARK))
        palette.setColor(QtGui.QPalette.AlternateBase, QtGui.QColor("#3e3e42"))
        palette.setColor(QtGui.QPalette.Text, QtGui.QColor(self.EDITOR_FG_DARK))
        palette.setColor(QtGui.QPalette.Button, QtGui.QColor("#3e3e42"))
        palette.setColor(QtGui.QPalette.ButtonText, QtGui.QColor(self.FG_DARK))
        palette.setColor(QtGui.QPalette.Highlight, QtGui.QColor("#005a9e"))
        palette.setColor(QtGui.QPalette.HighlightedText, QtGui.QColor(self.FG_DARK))
        return palette

    @staticmethod
    def _is_dark_palette(palette: QtGui.QPalette) -> bool:
        bg = palette.color(QtGui.QPalette.Window)
        return bg.lightness() < 128

    def get_syntax_colors(self) -> dict[str, str]:
        return dict(SYNTAX_COLORS[self.get_active_mode()])

    def get_diagnostic_colors(self) -> dict[str, str]:
        return dict(DIAGNOSTIC_COLORS[self.get_active_mode()])
