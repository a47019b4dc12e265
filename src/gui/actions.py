"""Menu and action system for the Dragonstone editor."""

from __future__ import annotations

from typing import Callable

from PySide6 import QtGui, QtWidgets


class ActionManager:
    """Manages menus and shortcuts for the application."""

    def __init__(self, parent: QtWidgets.QMainWindow):
        self.parent = parent
        self.actions: dict[str, QtGui.QAction] = {}

    def _add(
        self,
        menu: QtWidgets.QMenu,
        key: str,
        label: str,
        handler: Callable,
        shortcut: QtGui.QKeySequence | str | None = None,
    ) -> QtGui.QAction:
        action = QtGui.QAction(label, self.parent)
        if shortcut is not None:
            action.setShortcut(QtGui.QKeySequence(shortcut))
        action.triggered.connect(handler)
        menu.addAction(action)
        self.actions[key] = action
        return action

    def setup_file_menu(
        self,
        on_new: Callable,
        on_open: Callable,
        on_save: Callable,
        on_save_as: Callable,
    ) -> QtWidgets.QMenu:
        menu = self.parent.menuBar().addMenu("File")
        self._add(menu, "new", "New File", on_new, QtGui.QKeySequence.New)
        self._add(menu, "open", "Open File", on_open, QtGui.QKeySequence.Open)
        menu.addSeparator()
        self._add(menu, "save", "Save", on_save, QtGui.QKeySequence.Save)
        self._add(menu, "save_as", "Save As…", on_save_as, "Ctrl+Shift+S")
        return menu

    def setup_code_menu(
        self,
        on_format: Callable,
        on_definition: Callable,
        on_complete: Callable,
        on_validate: Callable,
    ) -> QtWidgets.QMenu:
        menu = self.parent.menuBar().addMenu("Code")
        self._add(menu, "format", "Format Document", on_format, "Ctrl+Shift+I")
        self._add(menu, "definition", "Go to Definition", on_definition, "F12")
        self._add(menu, "complete", "Trigger Completion", on_complete, "Ctrl+Space")
        menu.addSeparator()
        self._add(menu, "validate", "Validate Now", on_validate, "F7")
        return menu

    def setup_view_menu(
        self,
        on_inc_font: Callable,
        on_dec_font: Callable,
        on_reset_font: Callable,
        on_toggle_outline: Callable,
        on_theme: Callable,
    ) -> QtWidgets.QMenu:
        menu = self.parent.menuBar().addMenu("View")
        self._add(menu, "inc_font", "Increase Editor Font", on_inc_font, "Ctrl+=")
        self._add(menu, "dec_font", "Decrease Editor Font", on_dec_font, "Ctrl+-")
        self._add(menu, "reset_font", "Reset Editor Font", on_reset_font, "Ctrl+0")
        menu.addSeparator()
        self._add(menu, "outline", "Show/Hide Outline", on_toggle_outline)
        menu.addSeparator()
        self._add(menu, "theme", "Theme Settings", on_theme)
        return menu

    def setup_tools_menu(
        self, on_settings: Callable, on_keyword_help: Callable
    ) -> QtWidgets.QMenu:
        menu = self.parent.menuBar().addMenu("Tools")
        self._add(menu, "settings", "Analyzer Settings…", on_settings)
        menu.addSeparator()
        self._add(menu, "keyword_help", "Keyword Help", on_keyword_help, "F1")
        return menu

    def setup_help_menu(self) -> QtWidgets.QMenu:
        menu = self.parent.menuBar().addMenu("Help")
        self._add(menu, "about", "About Dragonstone Editor", self._show_about)
        return menu

    def _show_about(self) -> None:
        QtWidgets.QMessageBox.about(
            self.parent,
            "About Dragonstone Editor",
            "Dragonstone Editor - an editor for the Dragonstone language\n\n"
            "Features:\n"
            "• Syntax highlighting\n"
            "• Code completion\n"
            "• Block and naming diagnostics\n"
            "• Document outline and go to definition\n"
            "• Indentation formatting\n",
        )
