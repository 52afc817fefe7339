"""Public logging API for ``rpc_errors`` consumers.

This package wraps Python's ``logging`` module with opinionated defaults for
stdout emission and structured context propagation.
"""

from .config import ContextFilter, StructuredFormatter, configure_logging
from .context import bind_context, clear_context, error_context, get_context, log_context

__all__ = [
    "ContextFilter",
    "StructuredFormatter",
    "bind_context",
    "clear_context",
    "configure_logging",
    "error_context",
    "get_context",
    "log_context",
]
