"""Public API for ``rpc_errors`` configuration."""

from .loader import load_settings
from .models import DEFAULT_CONFIG_PATH, LoggingSettings, RpcErrorsSettings, StatusSettings

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "LoggingSettings",
    "RpcErrorsSettings",
    "StatusSettings",
    "load_settings",
]
