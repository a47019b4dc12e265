"""dscheck: report diagnostics for Dragonstone files and optionally reformat them."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from .config import AnalyzerConfig, ConfigError
from .formatter import apply_edits, format_document
from .model import Diagnostic, Severity
from .symbols import build_symbols
from .validator import validate

logger = logging.getLogger("dscheck")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dscheck", description="Check Dragonstone source files"
    )
    ap.add_argument("inputs", type=Path, nargs="+", help="Input .ds files")
    ap.add_argument(
        "--format",
        action="store_true",
        help="Print each file re-indented instead of its diagnostics",
    )
    ap.add_argument(
        "--write",
        action="store_true",
        help="Rewrite files in place with corrected indentation",
    )
    ap.add_argument(
        "--symbols", action="store_true", help="Print the symbol outline of each file"
    )
    ap.add_argument(
        "--indent-width", type=int, default=4, help="Spaces per indent level (default: 4)"
    )
    ap.add_argument(
        "--no-naming", action="store_true", help="Skip naming-convention checks"
    )
    ap.add_argument(
        "--no-brackets", action="store_true", help="Skip the bracket balance check"
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return ap


def format_diagnostic(path: Path, diag: Diagnostic) -> str:
    start = diag.range.start
    severity = "error" if diag.severity is Severity.ERROR else "warning"
    return f"{path}:{start.line + 1}:{start.character + 1}: {severity}: {diag.message}"


def check_file(path: Path, config: AnalyzerConfig, args: argparse.Namespace) -> int:
    """Process one file and return the number of errors found."""
    try:
        # bytes in and out so CRLF separators survive a rewrite
        src = path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        log_error(f"file not found: {path}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        log_error(f"cannot read {path}: {e}")
        return 1

    logger.info("checking %s", path)
    if args.symbols:
        for sym in build_symbols(src):
            print(f"{path}:{sym.line + 1}: {sym.kind.value} {sym.detail or sym.name}")

    if args.format or args.write:
        edits = format_document(src, config.indent_width)
        formatted = apply_edits(src, edits)
        if args.write:
            if edits:
                path.write_bytes(formatted.encode("utf-8"))
                print(f"reformatted {path} ({len(edits)} lines)")
        else:
            print(formatted, end="" if formatted.endswith("\n") else "\n")
        return 0

    diagnostics = validate(src, config)
    for diag in diagnostics:
        print(format_diagnostic(path, diag))
    return sum(1 for d in diagnostics if d.severity is Severity.ERROR)


def main(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        config = AnalyzerConfig(
            indent_width=args.indent_width,
            check_naming=not args.no_naming,
            check_brackets=not args.no_brackets,
        )
    except ConfigError as e:
        log_error(str(e))
        return 2

    errors = 0
    for path in args.inputs:
        errors += check_file(path, config, args)
    return 1 if errors else 0


def log_error(msg: str) -> None:
    print(f"[dscheck:error] {msg}", file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
