from __future__ import annotations

import io
import logging

from csv2json.events import EventLogger
from csv2json.exceptions import InputError, QuoteInTheMiddleError
from csv2json.models import RunStatus
from csv2json.runner import LineRunner


class SpyLogger:
    def __init__(self) -> None:
        self.records: list[tuple[int, str, dict]] = []

    def isEnabledFor(self, _level: int) -> bool:  # noqa: N802 - match logging API
        return True

    def log(self, level: int, message: str, *, extra: dict) -> None:
        self.records.append((level, message, extra))


def echo(line: str) -> str:
    return f"Got '{line}'"


def failing_on(bad: str):
    def call(line: str) -> str:
        if line == bad:
            raise QuoteInTheMiddleError(position=0)
        return echo(line)

    return call


def numbered(*lines: str) -> list[tuple[int, str]]:
    return list(enumerate(lines, start=1))


def test_run_writes_one_line_per_result() -> None:
    out = io.StringIO()

    result = LineRunner(echo).run(numbered("a", "bc", "def"), out)

    assert out.getvalue() == "Got 'a'\nGot 'bc'\nGot 'def'\n"
    assert result.status is RunStatus.SUCCEEDED
    assert (result.lines_read, result.lines_written, result.lines_failed) == (3, 3, 0)
    assert result.error is None
    assert result.started_at <= result.completed_at


def test_run_continues_on_error() -> None:
    out = io.StringIO()
    spy = SpyLogger()

    result = LineRunner(failing_on("bc"), events=EventLogger(spy)).run(numbered("a", "bc", "def"), out)

    assert out.getvalue() == "Got 'a'\nGot 'def'\n"
    assert result.succeeded
    assert result.lines_failed == 1
    assert result.error.code == "quote_in_the_middle"
    assert result.error.line_number == 2

    warnings = [record for record in spy.records if record[0] == logging.WARNING]
    assert len(warnings) == 1
    _, message, extra = warnings[0]
    assert message == "Line 2 bc QuoteInTheMiddle"
    assert extra["event"] == "csv2json.line.failed"
    assert extra["data"]["code"] == "quote_in_the_middle"


def test_run_exits_on_error() -> None:
    out = io.StringIO()

    result = LineRunner(failing_on("bc")).run(numbered("a", "bc", "def"), out, exit_on_error=True)

    assert out.getvalue() == "Got 'a'\n"
    assert result.status is RunStatus.FAILED
    assert result.lines_read == 2
    assert result.error.line_number == 2


def test_run_rejects_long_lines() -> None:
    out = io.StringIO()

    result = LineRunner(echo, max_line_length=3).run(numbered("abc", "abcd", "x"), out)

    assert out.getvalue() == "Got 'abc'\nGot 'x'\n"
    assert result.lines_failed == 1
    assert result.error.code == "input_error"


def test_run_fails_when_the_source_breaks() -> None:
    def lines():
        yield 1, "a"
        raise InputError("unreadable")

    out = io.StringIO()

    result = LineRunner(echo).run(lines(), out)

    assert out.getvalue() == "Got 'a'\n"
    assert result.status is RunStatus.FAILED
    assert result.error.message == "unreadable"
    assert result.error.line_number == 2


def test_run_reports_the_line_number_carried_by_the_source_error() -> None:
    def lines():
        yield 2, "a"
        raise InputError("bad bytes", line_number=5)

    result = LineRunner(echo).run(lines(), io.StringIO())

    assert result.error.line_number == 5
