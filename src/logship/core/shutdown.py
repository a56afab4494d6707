"""Exit-time draining of live transports.

Transports register themselves on creation and unregister on ``close()``.
At interpreter exit any transport still registered gets one bounded
attempt to flush its queue and release its client. Draining is best-effort
and never raises.
"""

from __future__ import annotations

import asyncio
import atexit
import weakref
from typing import Any

# Module-level state
_shutdown_in_progress: bool = False
_registered: weakref.WeakSet[Any] = weakref.WeakSet()


def register_transport(transport: Any) -> None:
    """Register a transport for drain at exit.

    Uses WeakSet so registration never keeps a transport alive.
    """
    _registered.add(transport)


def unregister_transport(transport: Any) -> None:
    _registered.discard(transport)


def registered_count() -> int:
    return len(_registered)


def _drain_single_transport(transport: Any) -> None:
    if not getattr(transport, "atexit_drain_enabled", True):
        return
    timeout = float(getattr(transport, "atexit_drain_timeout_seconds", 5.0))
    try:
        asyncio.run(asyncio.wait_for(transport.close(), timeout=timeout))
    except asyncio.TimeoutError:
        pass  # Best effort - proceed with exit
    except Exception:
        pass  # Best effort - don't crash on exit


def _atexit_handler() -> None:
    """Drain every registered transport; called by atexit."""
    global _shutdown_in_progress

    if _shutdown_in_progress:
        return
    _shutdown_in_progress = True

    # Snapshot first; WeakSet iteration can fail if GC runs
    try:
        transports = list(_registered)
    except Exception:  # pragma: no cover - rare GC race
        return

    for transport in transports:
        _drain_single_transport(transport)


atexit.register(_atexit_handler)

__all__ = ["register_transport", "registered_count", "unregister_transport"]
