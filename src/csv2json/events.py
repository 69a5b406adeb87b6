"""Domain event emitters built on top of structured logging."""

from __future__ import annotations

import logging
from typing import Any

NAMESPACE = "csv2json"


class EventLogger:
    """Emit structured domain events, with optional namespace qualification."""

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter, *, namespace: str = NAMESPACE) -> None:
        self._logger = logger
        self._namespace = namespace.rstrip(".")

    @property
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        return self._logger

    def _qualify(self, event_name: str) -> str:
        if not self._namespace:
            return event_name
        prefix = f"{self._namespace}."
        return event_name if event_name.startswith(prefix) else prefix + event_name

    def emit(
        self,
        event_name: str,
        *,
        message: str | None = None,
        level: int = logging.INFO,
        **data: Any,
    ) -> None:
        """Emit a domain event as a structured log record.

        Args:
            event_name:
                Stable event name (e.g. ``"line.failed"``).
            message:
                Optional human-friendly message (defaults to the event name).
            level:
                Standard logging level (INFO by default).
            **data:
                Structured payload, stored under ``data`` in NDJSON output.
        """
        if not self._logger.isEnabledFor(level):
            return

        full_name = self._qualify(str(event_name))

        extra: dict[str, Any] = {"event": full_name}
        if data:
            extra["data"] = data
        self._logger.log(level, message or full_name, extra=extra)


def null_events() -> EventLogger:
    """Return an emitter whose records go nowhere."""
    logger = logging.getLogger(f"{NAMESPACE}.null")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return EventLogger(logger)


__all__ = ["NAMESPACE", "EventLogger", "null_events"]
