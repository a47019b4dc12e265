"""Command-line entry point for the Dragonstone language server.

Usage:
  dragonstone-ls --stdio
  dragonstone-ls --tcp --host 127.0.0.1 --port 2087
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from analysis.config import AnalyzerConfig, ConfigError

from .server import create_server

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dragonstone-ls", description="Dragonstone language server"
    )
    transport = ap.add_mutually_exclusive_group()
    transport.add_argument(
        "--stdio", action="store_true", help="Use stdio transport (default)"
    )
    transport.add_argument("--tcp", action="store_true", help="Use TCP transport")
    ap.add_argument("--host", default="127.0.0.1", help="TCP host (default: 127.0.0.1)")
    ap.add_argument("--port", type=int, default=2087, help="TCP port (default: 2087)")
    ap.add_argument(
        "--indent-width", type=int, default=4, help="Spaces per indent level (default: 4)"
    )
    ap.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    ap.add_argument(
        "--log-file", type=Path, default=None, help="Write logs to this file"
    )
    return ap


def setup_logging(level: str, log_file: Path | None) -> None:
    # stdout carries the protocol; logs go to stderr or a file
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)


def main(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    log = logging.getLogger("dragonstone-ls")

    try:
        config = AnalyzerConfig(indent_width=args.indent_width)
    except ConfigError as e:
        log.error("invalid configuration: %s", e)
        return 2

    server = create_server(config)
    if args.tcp:
        log.info("listening on %s:%d", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        log.info("serving on stdio")
        server.start_io()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
