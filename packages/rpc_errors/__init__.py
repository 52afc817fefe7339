"""Public API for structured application errors and gRPC status mapping."""

from .codes import UNKNOWN_CODE, UNKNOWN_REASON, http_status_for, status_code_for
from .convert import from_error
from .errors import (
    AppError,
    error_is,
    get_code,
    get_message,
    get_metadata,
    get_reason,
    new,
)
from .registry import ErrorRegistry, default_registry, register
from .startup import StartupResult, run_startup
from .status import (
    StatusBridge,
    abort,
    default_bridge,
    from_status,
    set_default_bridge,
    to_grpc_status,
    to_http_status_code,
    to_status,
)

__all__ = [
    "AppError",
    "ErrorRegistry",
    "StartupResult",
    "StatusBridge",
    "UNKNOWN_CODE",
    "UNKNOWN_REASON",
    "abort",
    "default_bridge",
    "default_registry",
    "error_is",
    "from_error",
    "from_status",
    "get_code",
    "get_message",
    "get_metadata",
    "get_reason",
    "http_status_for",
    "new",
    "register",
    "run_startup",
    "set_default_bridge",
    "status_code_for",
    "to_grpc_status",
    "to_http_status_code",
    "to_status",
]
