# athena/core/logging/context.py
from __future__ import annotations
import contextvars
from collections.abc import Iterator
from contextlib import contextmanager

# All log context lives here. Parse/render entry points enrich it.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("athena.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values (documentName, etc.)."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    """Clear context after a document is fully handled."""
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()

@contextmanager
def logContext(**kvs) -> Iterator[None]:
    """Scoped setLogContext(); the previous context is restored on exit."""
    token = _logContextVar.set(_logContextVar.get())
    try:
        setLogContext(**kvs)
        yield
    finally:
        _logContextVar.reset(token)
