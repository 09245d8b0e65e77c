"""Metric emission for formatting requests.

Listeners receive ``(name, values, labels)``; nothing is recorded unless a
listener is registered.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from threading import RLock
from typing import Callable, Dict, Iterator, Optional

from .logging import get_logger

MetricListener = Callable[[str, Dict[str, float], Dict[str, str]], None]

FORMATTING_DURATION = "formatting.duration_ms"
FORMATTING_NO_RESULT = "formatting.no_result"

_LISTENERS: list[MetricListener] = []
_LOCK = RLock()

logger = get_logger("scriptls.observability.metrics")


def register_metric_listener(callback: MetricListener) -> None:
    with _LOCK:
        if callback not in _LISTENERS:
            _LISTENERS.append(callback)


def unregister_metric_listener(callback: MetricListener) -> None:
    with _LOCK:
        if callback in _LISTENERS:
            _LISTENERS.remove(callback)


def formatting_labels(kind: str, engine: str) -> Dict[str, str]:
    """Labels attached to every formatting metric."""

    return {"kind": kind, "engine": engine}


def emit_metric(name: str, values: Optional[Dict[str, float]] = None, labels: Optional[Dict[str, str]] = None) -> None:
    payload = dict(values or {})
    tags = {str(key): str(value) for key, value in (labels or {}).items()}
    with _LOCK:
        listeners = list(_LISTENERS)
    for callback in listeners:
        try:
            callback(name, payload, tags)
        except Exception:
            # A broken listener must not fail the request being measured.
            logger.debug("Metric listener %r failed for %s", callback, name, exc_info=True)


def record_metric(name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
    emit_metric(name, values={"value": value}, labels=tags)


@contextmanager
def measure_formatting(kind: str, engine: str) -> Iterator[Dict[str, str]]:
    """Record :data:`FORMATTING_DURATION` for the enclosed engine call.

    Nothing is recorded when the block raises, cancellation included.
    """

    labels = formatting_labels(kind, engine)
    started = time.perf_counter()
    yield labels
    record_metric(FORMATTING_DURATION, (time.perf_counter() - started) * 1000.0, labels)
