"""Status code helpers shared by the error type and the status bridge.

Codes are carried as plain integers on ``AppError`` and resolved against
``grpc.StatusCode`` only at the edges (wire status, HTTP mapping, logging).
"""

from __future__ import annotations

from typing import Final

import grpc

UNKNOWN_REASON: Final[str] = "unknown"
DEFAULT_HTTP_STATUS: Final[int] = 500

_BY_INT: Final[dict[int, grpc.StatusCode]] = {
    member.value[0]: member for member in grpc.StatusCode
}

# Conventional grpc-gateway mapping.
_HTTP_BY_STATUS: Final[dict[grpc.StatusCode, int]] = {
    grpc.StatusCode.OK: 200,
    grpc.StatusCode.CANCELLED: 499,
    grpc.StatusCode.UNKNOWN: 500,
    grpc.StatusCode.INVALID_ARGUMENT: 400,
    grpc.StatusCode.DEADLINE_EXCEEDED: 504,
    grpc.StatusCode.NOT_FOUND: 404,
    grpc.StatusCode.ALREADY_EXISTS: 409,
    grpc.StatusCode.PERMISSION_DENIED: 403,
    grpc.StatusCode.UNAUTHENTICATED: 401,
    grpc.StatusCode.RESOURCE_EXHAUSTED: 429,
    grpc.StatusCode.FAILED_PRECONDITION: 400,
    grpc.StatusCode.ABORTED: 409,
    grpc.StatusCode.OUT_OF_RANGE: 400,
    grpc.StatusCode.UNIMPLEMENTED: 501,
    grpc.StatusCode.INTERNAL: 500,
    grpc.StatusCode.UNAVAILABLE: 503,
    grpc.StatusCode.DATA_LOSS: 500,
}


def code_value(status: grpc.StatusCode) -> int:
    """Return the integer wire value of one ``grpc.StatusCode``."""
    return int(status.value[0])


def status_code_for(code: int) -> grpc.StatusCode | None:
    """Resolve an integer code to its ``grpc.StatusCode`` member, if defined."""
    return _BY_INT.get(code)


def status_name(code: int) -> str:
    """Return the enum name for one code, or ``CODE(<n>)`` when undefined."""
    status = status_code_for(code)
    if status is None:
        return f"CODE({code})"
    return status.name


def http_status_for(code: int, *, default: int = DEFAULT_HTTP_STATUS) -> int:
    """Map one integer status code to its conventional HTTP status number."""
    status = status_code_for(code)
    if status is None:
        return default
    return _HTTP_BY_STATUS.get(status, default)


UNKNOWN_CODE: Final[int] = code_value(grpc.StatusCode.UNKNOWN)
