"""Per-task logging context backed by ``contextvars``.

Bound fields (request ids, error identity) are appended to every record
emitted through handlers carrying ``ContextFilter``. Values are stored as
strings so the structured shape never depends on caller types.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

from . import fields

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("rpc_errors_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a copy of the bound fields."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind values into the current context, skipping ``None``."""
    updates = {str(key): str(value) for key, value in values.items() if value is not None}
    if updates:
        _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **updates})


def clear_context(*keys: str) -> None:
    """Drop the given keys, or everything when called without keys."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set({key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of a block, then restore the previous context."""
    token = _LOG_CONTEXT.set(dict(_LOG_CONTEXT.get()))
    try:
        bind_context(**dict(values))
        yield
    finally:
        _LOG_CONTEXT.reset(token)


@contextmanager
def error_context(*, code: int, reason: str) -> Iterator[None]:
    """Bind one error identity while handling it."""
    with log_context({fields.ERROR_CODE: code, fields.ERROR_REASON: reason}):
        yield
