"""
Internal diagnostics for non-fatal errors on the shipping path.

Diagnostics are structured payloads handed to a writer. The default writer
emits one JSON line on stderr; it deliberately bypasses stdlib ``logging``
so a ``CloudWatchLogsHandler`` attached to the root logger cannot feed
diagnostics back into its own queue.

Emission is gated by ``internal_logging_enabled`` (env
``LOGSHIP_INTERNAL_LOGGING_ENABLED``), read once and cached.
"""

from __future__ import annotations

import json
import sys
import threading
import time
from typing import Any, Callable

DiagnosticWriter = Callable[[dict[str, Any]], None]

# Minimum seconds between two payloads sharing a _rate_limit_key
RATE_LIMIT_WINDOW_SECONDS = 10.0

_internal_logging_enabled: bool | None = None
_last_emitted: dict[str, float] = {}
_rate_lock = threading.Lock()


def _default_writer(payload: dict[str, Any]) -> None:
    try:
        sys.stderr.write(json.dumps(payload, default=str) + "\n")
        sys.stderr.flush()
    except Exception:
        # stderr closed during interpreter shutdown
        pass


_writer: DiagnosticWriter = _default_writer


def is_enabled() -> bool:
    global _internal_logging_enabled
    if _internal_logging_enabled is None:
        try:
            from .settings import DiagnosticsSettings

            _internal_logging_enabled = bool(
                DiagnosticsSettings().internal_logging_enabled
            )
        except Exception:
            _internal_logging_enabled = True
    return _internal_logging_enabled


def configure(*, enabled: bool) -> None:
    """Override the cached enablement flag (used by transport settings)."""
    global _internal_logging_enabled
    _internal_logging_enabled = bool(enabled)


def _allowed(key: str | None) -> bool:
    if key is None:
        return True
    now = time.monotonic()
    with _rate_lock:
        last = _last_emitted.get(key)
        if last is not None and now - last < RATE_LIMIT_WINDOW_SECONDS:
            return False
        _last_emitted[key] = now
    return True


def _emit(level: str, component: str, message: str, fields: dict[str, Any]) -> None:
    if not is_enabled():
        return
    if not _allowed(fields.pop("_rate_limit_key", None)):
        return
    payload: dict[str, Any] = {
        "ts": time.time(),
        "level": level,
        "component": component,
        "message": message,
    }
    payload.update(fields)
    try:
        _writer(payload)
    except Exception:
        # Diagnostics must never break the caller
        pass


def warn(component: str, message: str, **fields: Any) -> None:
    _emit("WARN", component, message, fields)


def debug(component: str, message: str, **fields: Any) -> None:
    _emit("DEBUG", component, message, fields)


def set_writer_for_tests(writer: DiagnosticWriter) -> None:
    global _writer
    _writer = writer


def _reset_for_tests() -> None:
    global _internal_logging_enabled, _writer
    _internal_logging_enabled = None
    _writer = _default_writer
    with _rate_lock:
        _last_emitted.clear()


__all__ = [
    "DiagnosticWriter",
    "configure",
    "debug",
    "is_enabled",
    "set_writer_for_tests",
    "warn",
]
