"""Stdout logging for services using ``rpc_errors``.

One handler, one formatter. Each record is rendered with the bound logging
context and the error identity fields passed through ``extra=``, either as a
JSON line or as plain text ending in sorted ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from . import fields
from .context import bind_context, get_context


class ContextFilter(logging.Filter):
    """Attach a snapshot of the bound logging context as ``record.context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


class StructuredFormatter(logging.Formatter):
    """Render context and error fields as JSON or as a plain-text suffix."""

    def __init__(self, *, json_output: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        structured: dict[str, Any] = dict(getattr(record, "context", None) or {})
        for name in fields.RECORD_EXTRA_FIELDS:
            if hasattr(record, name):
                structured[name] = getattr(record, name)

        if not self.json_output:
            line = super().format(record)
            if structured:
                line += " " + " ".join(f"{k}={v}" for k, v in sorted(structured.items()))
            return line

        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **structured,
        }
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
) -> None:
    """Replace root handlers with a single stdout handler.

    ``service`` is bound into the logging context so every record carries it.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(StructuredFormatter(json_output=json_output))
    root.addHandler(handler)

    if service:
        bind_context(**{fields.SERVICE: service})
