"""PySide6 editor for the Dragonstone language."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6 import QtWidgets

from .main_window import MainWindow

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dragonstone-editor", description="Dragonstone editor"
    )
    ap.add_argument("files", nargs="*", type=Path, help="Files to open")
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return ap


def main(argv: list[str] | None = None):
    args, qt_args = build_arg_parser().parse_known_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    app = QtWidgets.QApplication([sys.argv[0], *qt_args])
    window = MainWindow()
    window.resize(1100, 760)
    for path in args.files:
        window.open_path(path)
    if window.editor_tabs.count() == 0:
        window.new_file()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
