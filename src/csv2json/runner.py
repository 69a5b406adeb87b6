"""Map input lines through a conversion function and write the results.

Each line is converted independently. A line that fails is reported on the
event stream and then either skipped or, with ``exit_on_error``, ends the
run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, TextIO

from csv2json.events import EventLogger, null_events
from csv2json.exceptions import Csv2JsonError, InputError
from csv2json.models import RunError, RunResult, RunStatus

LineFunc = Callable[[str], str]


def _error_name(exc: BaseException) -> str:
    name = type(exc).__name__
    return name[: -len("Error")] if name.endswith("Error") and name != "Error" else name


def check_line_length(line: str, max_line_length: int | None) -> None:
    if max_line_length is not None and len(line) > max_line_length:
        raise InputError(f"line is {len(line)} characters long, the limit is {max_line_length}")


@dataclass
class _Counters:
    read: int = 0
    last_line: int = 0
    written: int = 0
    failed: int = 0
    first_error: RunError | None = None


class LineRunner:
    """Drive ``func`` over numbered lines."""

    def __init__(
        self,
        func: LineFunc,
        *,
        events: EventLogger | None = None,
        max_line_length: int | None = None,
    ) -> None:
        self.func = func
        self.events = events or null_events()
        self.max_line_length = max_line_length

    def _convert(self, line: str) -> str:
        check_line_length(line, self.max_line_length)
        return self.func(line)

    def run(
        self,
        lines: Iterable[tuple[int, str]],
        out: TextIO,
        *,
        exit_on_error: bool = False,
    ) -> RunResult:
        started_at = datetime.now(timezone.utc)
        counters = _Counters()
        status = RunStatus.SUCCEEDED

        try:
            for line_number, line in lines:
                counters.read += 1
                counters.last_line = line_number
                self.events.emit("line.read", level=logging.DEBUG, line_number=line_number, line=line)

                try:
                    result = self._convert(line)
                except Csv2JsonError as exc:
                    counters.failed += 1
                    error = RunError(code=exc.code, message=str(exc), line_number=line_number)
                    counters.first_error = counters.first_error or error
                    self.events.emit(
                        "line.failed",
                        message=f"Line {line_number} {line} {_error_name(exc)}",
                        level=logging.WARNING,
                        line_number=line_number,
                        code=exc.code,
                        error=str(exc),
                    )
                    if exit_on_error:
                        status = RunStatus.FAILED
                        break
                    continue

                out.write(result)
                out.write("\n")
                counters.written += 1
                self.events.emit("line.converted", level=logging.DEBUG, line_number=line_number, output=result)
        except InputError as exc:
            # Raised by the line source itself; nothing after it can be read.
            status = RunStatus.FAILED
            line_number = exc.line_number if exc.line_number is not None else counters.last_line + 1
            counters.first_error = RunError(code=exc.code, message=str(exc), line_number=line_number)
            self.events.emit(
                "input.failed", message=str(exc), level=logging.ERROR, line_number=line_number, code=exc.code
            )

        return RunResult(
            status=status,
            lines_read=counters.read,
            lines_written=counters.written,
            lines_failed=counters.failed,
            error=counters.first_error,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )


__all__ = ["LineFunc", "LineRunner", "check_line_length"]
