"""Lightweight observability helpers for logging and metrics instrumentation."""

from __future__ import annotations

from .logging import configure_logging, get_logger, log_formatting_failure
from .metrics import (
    FORMATTING_DURATION,
    FORMATTING_NO_RESULT,
    emit_metric,
    formatting_labels,
    measure_formatting,
    record_metric,
    register_metric_listener,
    unregister_metric_listener,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_formatting_failure",
    "FORMATTING_DURATION",
    "FORMATTING_NO_RESULT",
    "emit_metric",
    "formatting_labels",
    "measure_formatting",
    "record_metric",
    "register_metric_listener",
    "unregister_metric_listener",
]
