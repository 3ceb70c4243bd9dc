# addonmanager/core/logging/context.py
from __future__ import annotations
import contextvars

# Per-task log context (world name, pack root, ...). Copied into worker threads by asyncio.to_thread.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("addonmanager.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (world, packRoot, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()
