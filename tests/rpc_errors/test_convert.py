"""Unit tests for normalizing exceptions with ``from_error``."""

from __future__ import annotations

from typing import Any

import grpc
import pytest
from google.rpc import status_pb2

from packages.rpc_errors import (
    UNKNOWN_CODE,
    UNKNOWN_REASON,
    AppError,
    ErrorRegistry,
    error_is,
    from_error,
    new,
    register,
    to_grpc_status,
)

_NOT_NIL_APP_ERROR = new(1, "__REASON__", "__MESSAGE__")


class _FakeRpcError(grpc.RpcError, grpc.Call):
    """Failed call exposing a status code, details and trailing metadata."""

    def __init__(
        self,
        *,
        code: grpc.StatusCode,
        details: str,
        trailing_metadata: tuple[tuple[str, Any], ...] | None = None,
    ) -> None:
        self._code = code
        self._details = details
        self._trailing_metadata = trailing_metadata

    def code(self) -> grpc.StatusCode:
        return self._code

    def details(self) -> str:
        return self._details

    def trailing_metadata(self) -> tuple[tuple[str, Any], ...] | None:
        return self._trailing_metadata

    def initial_metadata(self) -> tuple[tuple[str, Any], ...]:
        return ()

    def is_active(self) -> bool:
        return False

    def time_remaining(self) -> float | None:
        return None

    def cancel(self) -> bool:
        return False

    def add_callback(self, callback: Any) -> bool:
        return False

    def __str__(self) -> str:
        return f"rpc failed ({self._code.name}): {self._details}"


def _failed_call(err: AppError) -> _FakeRpcError:
    """Build a failed call carrying ``err`` the way a server would send it."""
    status = to_grpc_status(err)
    return _FakeRpcError(
        code=status.code,
        details=status.details,
        trailing_metadata=tuple(status.trailing_metadata),
    )


def test_from_error_returns_none_for_none() -> None:
    """No error in should mean no error out."""
    assert from_error(None) is None


@pytest.mark.parametrize(
    ("err", "code", "reason", "message", "metadata"),
    [
        (new(0, "", ""), 0, "", "", None),
        (_NOT_NIL_APP_ERROR, 1, "__REASON__", "__MESSAGE__", None),
        (RuntimeError("some error"), UNKNOWN_CODE, UNKNOWN_REASON, "some error", None),
    ],
    ids=["empty-app-error", "some-app-error", "plain-error"],
)
def test_from_error_fields(
    err: BaseException,
    code: int,
    reason: str,
    message: str,
    metadata: dict[str, str] | None,
) -> None:
    """from_error should keep AppErrors verbatim and normalize foreign errors."""
    result = from_error(err)

    assert result is not None
    assert result.code == code
    assert result.reason == reason
    assert result.message == message
    assert result.metadata == metadata



class _UnprintableError(Exception):
    """Foreign exception whose text cannot be rendered."""

    def __str__(self) -> str:
        raise RuntimeError("boom")


def test_from_error_tolerates_exception_with_failing_str() -> None:
    """A broken ``__str__`` should fall back to the exception type name."""
    result = from_error(_UnprintableError())

    assert result is not None
    assert result.code == UNKNOWN_CODE
    assert result.reason == UNKNOWN_REASON
    assert result.message == "_UnprintableError"
    assert result.metadata is None

def test_from_error_returns_the_same_instance() -> None:
    """An AppError input should come back as the identical object."""
    err = new(5, "user_not_found", "x").with_metadata({"user": "alice"})

    assert from_error(err) is err


def test_from_error_unwraps_explicit_cause() -> None:
    """An AppError wrapped with ``raise ... from`` should be returned directly."""
    inner = new(5, "user_not_found", "no such user")
    outer = LookupError("lookup failed")
    outer.__cause__ = inner

    assert from_error(outer) is inner


def test_from_error_result_matches_unknown_sentinel() -> None:
    """Foreign errors should be comparable against the unknown sentinel after conversion."""
    unknown = new(UNKNOWN_CODE, UNKNOWN_REASON, "unknown")

    assert error_is(from_error(ValueError("bad")), unknown)
    assert not error_is(ValueError("bad"), unknown)


def test_from_error_parses_rich_status_from_failed_call() -> None:
    """A failed call carrying ErrorInfo should become a structured error."""
    sent = new(5, "user_not_found", "no such user")

    result = from_error(_failed_call(sent))

    assert result is not None
    assert result.code == 5
    assert result.reason == "user_not_found"
    assert result.message == "no such user"
    assert result.metadata is None


def test_from_error_prefers_registered_error_for_wire_reason() -> None:
    """A registered error should be reused with the wire message."""
    registered = new(5, "user_not_found", "no such user").with_metadata({"kind": "user"})
    register(registered)

    result = from_error(_failed_call(registered.with_message("alice missing")))

    assert result is not None
    assert result is not registered
    assert result.is_(registered)
    assert result.message == "alice missing"
    assert result.metadata == {"kind": "user"}


def test_from_error_uses_injected_registry() -> None:
    """An explicit registry should be consulted instead of the default one."""
    registry = ErrorRegistry()
    registry.register(new(14, "db_down", "").with_metadata({"db": "primary"}))

    result = from_error(_failed_call(new(14, "db_down", "timeout")), registry=registry)

    assert result is not None
    assert result.metadata == {"db": "primary"}


def test_from_error_falls_back_for_rpc_error_without_rich_status() -> None:
    """A failed call without ErrorInfo should be normalized like any foreign error."""
    err = _FakeRpcError(code=grpc.StatusCode.UNAVAILABLE, details="connection refused")

    result = from_error(err)

    assert result is not None
    assert result.code == UNKNOWN_CODE
    assert result.reason == UNKNOWN_REASON
    assert result.message == "rpc failed (UNAVAILABLE): connection refused"


def test_from_error_falls_back_for_inconsistent_rich_status() -> None:
    """Trailing status that disagrees with the call should not raise."""
    status = status_pb2.Status(code=5, message="mismatch")
    err = _FakeRpcError(
        code=grpc.StatusCode.INTERNAL,
        details="internal",
        trailing_metadata=(("grpc-status-details-bin", status.SerializeToString()),),
    )

    result = from_error(err)

    assert result is not None
    assert result.reason == UNKNOWN_REASON
