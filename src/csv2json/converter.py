"""Line-level conversion: CSV text in, one JSON document out."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, TextIO

from csv2json.core.convert import Builder, Header
from csv2json.core.tokenizer import FieldIterator
from csv2json.events import EventLogger, null_events
from csv2json.exceptions import Csv2JsonError
from csv2json.io.lines import iter_lines
from csv2json.models import RunError, RunResult, RunStatus
from csv2json.runner import LineRunner, check_line_length


def build_header(line: str) -> Header:
    """Build the header from ``line``; names are never type-inferred."""
    return Header.from_line(line)


class Converter:
    """Convert CSV lines to JSON using a fixed (optional) header.

    The converter owns a single :class:`Builder` that is reset after each
    line, so nothing from one line survives into the next.
    """

    def __init__(self, header: Header | None = None, *, ensure_ascii: bool = False) -> None:
        self.header = header
        self._builder = Builder(header, ensure_ascii=ensure_ascii)

    def convert_line(self, line: str) -> str:
        builder = self._builder
        try:
            for field in FieldIterator(line):
                builder.append(field.value())
            return builder.dumps()
        finally:
            builder.reset()

    __call__ = convert_line


def convert_stream(
    source: Iterable[bytes | str],
    out: TextIO,
    *,
    header: bool = False,
    exit_on_error: bool = False,
    ensure_ascii: bool = False,
    max_line_length: int | None = None,
    encoding: str = "utf-8",
    events: EventLogger | None = None,
) -> RunResult:
    """Convert every line of ``source`` and write JSON lines to ``out``.

    With ``header`` the first line names the object keys and produces no
    output of its own. An empty source is a successful, empty run.
    """

    events = events or null_events()
    lines = iter_lines(source, encoding=encoding)
    events.emit("run.started", level=logging.DEBUG, header=header, exit_on_error=exit_on_error)

    parsed_header: Header | None = None
    if header:
        try:
            first = next(lines, None)
            if first is None:
                return _finish(events, RunResult(status=RunStatus.SUCCEEDED))
            line_number, line = first
            check_line_length(line, max_line_length)
            parsed_header = build_header(line)
        except Csv2JsonError as exc:
            events.emit(
                "header.failed",
                message=f"Line 1 header {type(exc).__name__}: {exc}",
                level=logging.ERROR,
                line_number=1,
                code=exc.code,
            )
            error = RunError(code=exc.code, message=str(exc), line_number=1)
            return _finish(events, RunResult(status=RunStatus.FAILED, lines_read=1, error=error))
        events.emit("header.loaded", level=logging.INFO, line_number=line_number, fields=list(parsed_header.fields))

    converter = Converter(parsed_header, ensure_ascii=ensure_ascii)
    runner = LineRunner(converter.convert_line, events=events, max_line_length=max_line_length)
    result = runner.run(lines, out, exit_on_error=exit_on_error)
    if parsed_header is not None:
        result = replace(result, lines_read=result.lines_read + 1)
    return _finish(events, result)


def _finish(events: EventLogger, result: RunResult) -> RunResult:
    events.emit(
        "run.completed",
        message=f"Run {result.status.value}",
        level=logging.INFO if result.succeeded else logging.ERROR,
        status=result.status.value,
        lines_read=result.lines_read,
        lines_written=result.lines_written,
        lines_failed=result.lines_failed,
    )
    return result


__all__ = ["Converter", "build_header", "convert_stream"]
