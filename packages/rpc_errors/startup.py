"""Startup wiring: logging first, then well-known errors, then the status bridge."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from packages.rpc_shared.config import RpcErrorsSettings
from packages.rpc_shared.logging import configure_logging

from .errors import AppError
from .registry import ErrorRegistry, default_registry
from .status import StatusBridge, set_default_bridge

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StartupResult:
    """Registry and bridge installed by one startup pass."""

    registry: ErrorRegistry
    bridge: StatusBridge


def run_startup(
    *,
    settings: RpcErrorsSettings,
    well_known: Iterable[AppError] = (),
    registry: ErrorRegistry | None = None,
    configure_logs: bool = True,
) -> StartupResult:
    """Configure logging, register ``well_known`` errors and install the default bridge.

    Run once before request traffic begins; lookups after this point only read
    the registry.
    """
    if configure_logs:
        configure_logging(
            level=settings.logging.level,
            json_output=settings.logging.json_output,
            service=settings.logging.service,
        )

    target = registry if registry is not None else default_registry()
    for err in well_known:
        target.register(err)

    bridge = StatusBridge.from_settings(settings, registry=target)
    set_default_bridge(bridge)
    _LOGGER.info("error registry ready with %d registered errors", len(target))
    return StartupResult(registry=target, bridge=bridge)
