"""Structured application error carrying a stable code/reason identity.

``AppError`` is an ordinary exception so it can be raised, chained and caught,
but its identity is data: two errors are the same kind when their ``code`` and
``reason`` match. ``message`` and ``metadata`` are context only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterator, Mapping

from packages.rpc_shared.logging import fields

from .codes import status_name

if TYPE_CHECKING:
    import grpc


@dataclass(eq=False)
class AppError(Exception):
    """Application error identified by ``(code, reason)``.

    ``code`` is a gRPC status code integer. ``metadata`` is ``None`` when
    absent, which is distinct from an empty mapping. Instances are treated as
    values: ``with_message``/``with_metadata`` return copies and only
    ``reset`` mutates in place. Each instance owns its metadata dict.
    """

    code: int = 0
    reason: str = ""
    message: str = ""
    metadata: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.metadata is not None:
            self.metadata = dict(self.metadata)

    def __str__(self) -> str:
        return (
            f"error: code = {self.code} reason = {self.reason} "
            f"message = {self.message} metadata = {_render_map(self.metadata)}"
        )

    @property
    def is_zero(self) -> bool:
        """Return True when every field holds its zero value."""
        return (
            self.code == 0
            and self.reason == ""
            and self.message == ""
            and not self.metadata
        )

    def summary(self) -> str:
        """Return a compact rendering of non-zero fields.

        A zero-valued error renders as an empty string.
        """
        parts: list[str] = []
        if self.code != 0:
            parts.append(f"code:{self.code}")
        if self.reason:
            parts.append(f"reason:{json.dumps(self.reason)}")
        if self.message:
            parts.append(f"message:{json.dumps(self.message)}")
        if self.metadata:
            rendered = json.dumps(self.metadata, sort_keys=True, separators=(",", ":"))
            parts.append(f"metadata:{rendered}")
        return " ".join(parts)

    def with_message(self, message: str) -> AppError:
        """Return a copy with ``message`` replaced."""
        return replace(self, message=message)

    def with_metadata(self, metadata: Mapping[str, str] | None) -> AppError:
        """Return a copy with ``metadata`` replaced by a private copy of the mapping."""
        return replace(self, metadata=None if metadata is None else dict(metadata))

    def is_(self, target: object) -> bool:
        """Return True when ``target`` is an ``AppError`` with the same code and reason."""
        if not isinstance(target, AppError):
            return False
        return self.code == target.code and self.reason == target.reason

    def log_fields(self) -> dict[str, object]:
        """Return identity fields for ``extra=`` on log calls."""
        return {
            fields.ERROR_CODE: self.code,
            fields.ERROR_STATUS: status_name(self.code),
            fields.ERROR_REASON: self.reason,
        }

    def reset(self) -> None:
        """Zero all fields in place."""
        self.code = 0
        self.reason = ""
        self.message = ""
        self.metadata = None

    def grpc_status(self) -> grpc.Status:
        """Return this error as a rich ``grpc.Status`` via the default bridge."""
        from .status import to_grpc_status

        return to_grpc_status(self)

    def to_http_status_code(self) -> int:
        """Return the conventional HTTP status for this error's code."""
        from .status import to_http_status_code

        return to_http_status_code(self)


def new(code: int, reason: str, message: str) -> AppError:
    """Create one error without metadata."""
    return AppError(code=code, reason=reason, message=message)


def get_code(err: AppError | None) -> int:
    return 0 if err is None else err.code


def get_reason(err: AppError | None) -> str:
    return "" if err is None else err.reason


def get_message(err: AppError | None) -> str:
    return "" if err is None else err.message


def get_metadata(err: AppError | None) -> dict[str, str] | None:
    return None if err is None else err.metadata


def error_is(err: BaseException | None, target: AppError | None) -> bool:
    """Report whether ``err`` or any exception in its cause chain matches ``target``.

    Absent errors only match absent targets. Exceptions that are not
    ``AppError`` never match, even when their text is identical.
    """
    if err is None or target is None:
        return err is None and target is None
    return any(
        isinstance(candidate, AppError) and candidate.is_(target)
        for candidate in iter_causes(err)
    )


def find_app_error(err: BaseException) -> AppError | None:
    """Return the first ``AppError`` in the explicit cause chain of ``err``."""
    for candidate in iter_causes(err):
        if isinstance(candidate, AppError):
            return candidate
    return None


def iter_causes(err: BaseException) -> Iterator[BaseException]:
    """Yield ``err`` followed by its ``__cause__`` chain, stopping on cycles."""
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _render_map(metadata: Mapping[str, str] | None) -> str:
    """Render metadata as ``map[k:v ...]`` with sorted keys."""
    if not metadata:
        return "map[]"
    body = " ".join(f"{key}:{metadata[key]}" for key in sorted(metadata))
    return f"map[{body}]"
