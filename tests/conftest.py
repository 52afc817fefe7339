"""Pytest configuration for the rpc_errors test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from packages.rpc_errors import default_bridge, default_registry, set_default_bridge  # noqa: E402
from packages.rpc_shared.logging import clear_context  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Reset the default registry, default bridge and logging context per test."""
    bridge = default_bridge()
    default_registry().clear()
    clear_context()
    yield
    default_registry().clear()
    set_default_bridge(bridge)
    clear_context()
