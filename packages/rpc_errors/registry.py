"""Registry of well-known errors keyed by ``(code, reason)``.

Subsystems register their sentinel errors during process startup, before
request traffic begins. Lookups happen afterwards while converting incoming
statuses back into registered errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock

from .errors import AppError

_LOGGER = logging.getLogger(__name__)

RegistryKey = tuple[int, str]


@dataclass(slots=True)
class ErrorRegistry:
    """Lock-guarded mapping from ``(code, reason)`` to canonical errors."""

    _errors: dict[RegistryKey, AppError] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def register(self, err: AppError) -> None:
        """Store ``err`` as the canonical error for its key; last write wins."""
        key = (err.code, err.reason)
        with self._lock:
            if key in self._errors:
                _LOGGER.debug("overwriting registered error", extra=err.log_fields())
            self._errors[key] = err

    def lookup(self, code: int, reason: str) -> AppError | None:
        """Return the registered error for ``(code, reason)``, if any."""
        with self._lock:
            return self._errors.get((code, reason))

    def registered(self) -> tuple[AppError, ...]:
        """Return all registered errors ordered by code then reason."""
        with self._lock:
            return tuple(self._errors[key] for key in sorted(self._errors))

    def clear(self) -> None:
        """Drop every registration."""
        with self._lock:
            self._errors.clear()

    def __contains__(self, err: object) -> bool:
        if not isinstance(err, AppError):
            return False
        with self._lock:
            return (err.code, err.reason) in self._errors

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)


_DEFAULT_REGISTRY = ErrorRegistry()


def default_registry() -> ErrorRegistry:
    """Return the process-wide registry used by module-level helpers."""
    return _DEFAULT_REGISTRY


def register(err: AppError) -> None:
    """Register one error in the process-wide registry."""
    _DEFAULT_REGISTRY.register(err)
