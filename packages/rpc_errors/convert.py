"""Normalize arbitrary exceptions into ``AppError`` values."""

from __future__ import annotations

import logging

import grpc

from .codes import UNKNOWN_CODE, UNKNOWN_REASON
from .errors import AppError, find_app_error
from .registry import ErrorRegistry
from .status import StatusBridge, default_bridge

_LOGGER = logging.getLogger(__name__)


def from_error(
    err: BaseException | None,
    *,
    registry: ErrorRegistry | None = None,
) -> AppError | None:
    """Convert any exception into an ``AppError``; never raises.

    ``None`` stays ``None``. An ``AppError`` found on the explicit cause chain
    is returned as-is. A failed gRPC call carrying an ``ErrorInfo`` detail is
    parsed through the status bridge. Everything else becomes an
    ``UNKNOWN``/``UNKNOWN_REASON`` error whose message is ``str(err)``.
    """
    if err is None:
        return None

    found = find_app_error(err)
    if found is not None:
        return found

    if isinstance(err, grpc.RpcError):
        bridge = default_bridge() if registry is None else StatusBridge(registry=registry)
        parsed = bridge.from_rpc_error(err)
        if parsed is not None:
            return parsed

    _LOGGER.debug(
        "normalizing foreign exception",
        extra={"exception_type": type(err).__name__},
    )
    return AppError(code=UNKNOWN_CODE, reason=UNKNOWN_REASON, message=_describe(err))


def _describe(err: BaseException) -> str:
    """Return the text of ``err``, or its type name when ``__str__`` fails."""
    try:
        return str(err)
    except Exception:
        _LOGGER.debug("exception text unavailable", exc_info=True)
        return type(err).__name__
