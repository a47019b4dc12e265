"""PySide6 editor for Dragonstone sources."""
