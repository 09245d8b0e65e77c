"""Centralised logging helpers for the scriptls language server."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

from scriptls.errors import ScriptLSError

_LOGGER_CACHE: Dict[str, logging.Logger] = {}

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str = "scriptls") -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""

    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Handler:
    """Attach a single handler to the ``scriptls`` logger tree.

    stdout carries the protocol stream, so records go to stderr unless a
    log file is given.
    """

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = get_logger("scriptls")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
    return handler


def log_formatting_failure(
    *,
    uri: Optional[str],
    kind: str,
    error: ScriptLSError,
    logger: Optional[logging.Logger] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> None:
    """Emit a structured log entry for a failed formatting request."""

    payload: Dict[str, Any] = {
        "uri": uri or "unknown",
        "kind": kind,
        "code": error.code or "unknown",
    }
    cause = error.__cause__
    if cause is not None:
        payload["cause"] = f"{type(cause).__name__}: {cause}"
    if extras:
        payload.update(extras)
    target_logger = logger or get_logger("scriptls.lsp.formatting")
    target_logger.error(
        "Formatting request failed: %s",
        error.format(),
        exc_info=cause is not None,
        extra={"scriptls_event": "formatting_failed", "scriptls_data": payload},
    )
