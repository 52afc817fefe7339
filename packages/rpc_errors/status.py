"""Bridge between ``AppError`` and the gRPC rich status protocol.

Outbound, an error becomes a ``google.rpc.Status`` whose single detail is an
``ErrorInfo`` carrying the reason. Inbound, the status code, message and first
``ErrorInfo`` detail are parsed back into an ``AppError``.

Known limitation: error metadata is not written onto the outbound
``ErrorInfo`` record, so a round trip preserves code, reason and message but
not metadata. Inbound ``ErrorInfo.metadata`` is still read when a peer sends
it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import grpc
from google.protobuf import any_pb2
from google.rpc import error_details_pb2, status_pb2
from grpc_status import rpc_status

from .codes import (
    DEFAULT_HTTP_STATUS,
    UNKNOWN_CODE,
    UNKNOWN_REASON,
    http_status_for,
    status_code_for,
)
from .errors import AppError
from .registry import ErrorRegistry, default_registry

if TYPE_CHECKING:
    from packages.rpc_shared.config import RpcErrorsSettings

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatusBridge:
    """Convert errors to and from wire statuses using one registry."""

    registry: ErrorRegistry = field(default_factory=default_registry)
    domain: str = ""
    default_http_status: int = DEFAULT_HTTP_STATUS

    @classmethod
    def from_settings(
        cls,
        settings: RpcErrorsSettings,
        *,
        registry: ErrorRegistry | None = None,
    ) -> StatusBridge:
        """Build a bridge from the ``status`` settings subtree."""
        return cls(
            registry=registry if registry is not None else default_registry(),
            domain=settings.status.domain,
            default_http_status=settings.status.default_http_status,
        )

    def to_status(self, err: AppError) -> status_pb2.Status:
        """Build a ``google.rpc.Status`` with one ``ErrorInfo`` detail."""
        detail = any_pb2.Any()
        detail.Pack(error_details_pb2.ErrorInfo(reason=err.reason, domain=self.domain))
        return status_pb2.Status(code=err.code, message=err.message, details=[detail])

    def to_grpc_status(self, err: AppError) -> grpc.Status:
        """Build a ``grpc.Status`` suitable for ``context.abort_with_status``.

        Codes outside ``grpc.StatusCode`` are sent as ``UNKNOWN``.
        """
        status = self.to_status(err)
        if status_code_for(status.code) is None:
            status.code = UNKNOWN_CODE
        return rpc_status.to_status(status)

    def from_status(self, status: status_pb2.Status) -> AppError:
        """Parse a ``google.rpc.Status`` back into an ``AppError``.

        A registered error with the wire code and reason is reused with the wire
        message.
        Without an ``ErrorInfo`` detail the reason falls back to ``UNKNOWN_REASON``.
        """
        info = _first_error_info(status)
        if info is None:
            return AppError(code=status.code, reason=UNKNOWN_REASON, message=status.message)

        metadata = dict(info.metadata) or None
        known = self.registry.lookup(status.code, info.reason)
        if known is not None:
            restored = known.with_message(status.message)
            if metadata is not None:
                restored = restored.with_metadata(metadata)
            return restored
        return AppError(
            code=status.code,
            reason=info.reason,
            message=status.message,
            metadata=metadata,
        )

    def from_rpc_error(self, err: grpc.RpcError) -> AppError | None:
        """Parse the rich status attached to a failed call, if there is one."""
        if not isinstance(err, grpc.Call):
            return None
        try:
            status = rpc_status.from_call(err)
        except ValueError:
            _LOGGER.debug("rpc error carries an inconsistent rich status", exc_info=True)
            return None
        if status is None or _first_error_info(status) is None:
            return None
        return self.from_status(status)

    def to_http_status_code(self, err: AppError) -> int:
        """Map the error code to a conventional HTTP status number."""
        return http_status_for(err.code, default=self.default_http_status)

    def abort(self, context: grpc.ServicerContext, err: AppError) -> None:
        """Abort the current servicer call with ``err`` as a rich status.

        ``abort_with_status`` raises, so this never returns normally inside a
        live servicer.
        """
        _LOGGER.info("aborting call with application error", extra=err.log_fields())
        context.abort_with_status(self.to_grpc_status(err))


def _first_error_info(status: status_pb2.Status) -> error_details_pb2.ErrorInfo | None:
    """Return the first ``ErrorInfo`` detail packed on ``status``."""
    for detail in status.details:
        if detail.Is(error_details_pb2.ErrorInfo.DESCRIPTOR):
            info = error_details_pb2.ErrorInfo()
            detail.Unpack(info)
            return info
    return None


_DEFAULT_BRIDGE = StatusBridge()


def default_bridge() -> StatusBridge:
    """Return the bridge used by module-level helpers."""
    return _DEFAULT_BRIDGE


def set_default_bridge(bridge: StatusBridge) -> None:
    """Replace the bridge used by module-level helpers during startup."""
    global _DEFAULT_BRIDGE
    _DEFAULT_BRIDGE = bridge


def to_status(err: AppError) -> status_pb2.Status:
    return _DEFAULT_BRIDGE.to_status(err)


def to_grpc_status(err: AppError) -> grpc.Status:
    return _DEFAULT_BRIDGE.to_grpc_status(err)


def from_status(status: status_pb2.Status) -> AppError:
    return _DEFAULT_BRIDGE.from_status(status)


def to_http_status_code(err: AppError) -> int:
    return _DEFAULT_BRIDGE.to_http_status_code(err)


def abort(context: grpc.ServicerContext, err: AppError) -> None:
    _DEFAULT_BRIDGE.abort(context, err)
