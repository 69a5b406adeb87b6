"""Structured logging for conversion runs.

Records go to stderr (and optionally a log file) either as readable text
or as one JSON object per line. stdout is reserved for converted rows.

Events carry a payload; ``line_number`` and ``code`` are lifted out of it
because nearly every warning and error is about one input line.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import IO, Any

from csv2json.events import NAMESPACE, EventLogger

LOG_FORMATS = ("text", "ndjson")
PROMOTED_FIELDS = ("line_number", "code")
MAX_VALUE_LENGTH = 80


def _split_payload(record: logging.LogRecord) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return ``(promoted, rest)`` from the record's event payload."""
    data = dict(getattr(record, "data", None) or {})
    promoted = {key: data.pop(key) for key in PROMOTED_FIELDS if key in data}
    return promoted, data


def _event_name(record: logging.LogRecord) -> str:
    # Plain module loggers (e.g. the tokenizer trace) have no event name.
    return getattr(record, "event", None) or record.name


def _short(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    if len(text) > MAX_VALUE_LENGTH:
        text = text[: MAX_VALUE_LENGTH - 3] + "..."
    return text


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"


class JsonFormatter(_UtcFormatter):
    """One JSON object per record: ts, level, event, line_number, code, message, data."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - logging.Formatter API
        promoted, data = _split_payload(record)
        payload: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname.lower(),
            "event": _event_name(record),
            **promoted,
            "message": record.getMessage(),
        }
        if data:
            payload["data"] = data
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(_UtcFormatter):
    """Single-line text, e.g.

    ``2024-01-01T00:00:00.000Z WARNING csv2json.line.failed line 2 [quote_in_the_middle]: Line 2 a"b QuoteInTheMiddle``
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - logging.Formatter API
        promoted, data = _split_payload(record)

        parts = [self.formatTime(record), record.levelname, _event_name(record)]
        if "line_number" in promoted:
            parts.append(f"line {promoted['line_number']}")
        if "code" in promoted:
            parts.append(f"[{promoted['code']}]")

        text = " ".join(parts) + f": {record.getMessage()}"
        if data:
            text += " " + " ".join(f"{key}={_short(data[key])}" for key in sorted(data))
        return text


class RunLogContext:
    """Handlers installed for one run; closing detaches them."""

    def __init__(self, logger: logging.Logger, handlers: list[logging.Handler]) -> None:
        self.logger = logger
        self.handlers = handlers
        self.events = EventLogger(logger.getChild("run"), namespace=NAMESPACE)

    def close(self) -> None:
        for handler in self.handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self.handlers = []

    def __enter__(self) -> "RunLogContext":
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.close()


def start_run_logging(
    *,
    log_format: str = "text",
    log_level: int = logging.WARNING,
    log_file: Path | None = None,
    stream: IO[str] | None = None,
) -> RunLogContext:
    """Configure the ``csv2json`` logger tree for a single run.

    Args:
        log_format:
            Either ``"text"`` or ``"ndjson"``.
        log_level:
            Minimum level emitted by any handler.
        log_file:
            Optional file that receives the same records as the console.
        stream:
            Console stream; defaults to the current ``sys.stderr``.
    """
    normalized_format = (log_format or "text").strip().lower()
    if normalized_format not in LOG_FORMATS:
        raise ValueError("log_format must be 'text' or 'ndjson'")
    formatter = JsonFormatter() if normalized_format == "ndjson" else TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)

    base_logger = logging.getLogger(NAMESPACE)
    base_logger.setLevel(log_level)
    base_logger.handlers = list(handlers)
    base_logger.propagate = False

    return RunLogContext(base_logger, handlers)


__all__ = [
    "JsonFormatter",
    "RunLogContext",
    "TextFormatter",
    "start_run_logging",
]
