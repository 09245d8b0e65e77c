"""Command line entry point for the scriptls language server."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from scriptls import __version__
from scriptls.formatting import ENGINES
from scriptls.observability.logging import configure_logging, get_logger

logger = get_logger("scriptls.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptls",
        description="Language server providing document and range formatting for scripts.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Serve over TCP instead of stdio",
    )
    parser.add_argument("--host", default="127.0.0.1", help="TCP host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=2087, help="TCP port (default: 2087)")
    parser.add_argument(
        "--engine",
        choices=sorted(ENGINES),
        default=None,
        help="Formatting engine; defaults to the workspace setting or 'builtin'",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument("--log-file", default=None, help="Write logs to this file instead of stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        from scriptls.lsp.server import create_server
    except ImportError as exc:
        print(f"Language server dependencies are missing: {exc}", file=sys.stderr)
        sys.exit(1)

    server = create_server(engine_name=args.engine)
    if args.tcp:
        logger.info("Starting scriptls on %s:%s (pid=%s)", args.host, args.port, os.getpid())
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting scriptls over stdio (pid=%s)", os.getpid())
        server.start_io()


__all__ = ["build_parser", "main"]
