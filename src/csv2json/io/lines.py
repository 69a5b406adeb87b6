"""Read physical lines and open the run's streams.

Input is read as bytes and split on ``\\n`` only. Each line is decoded on
its own, so a bad byte fails the line it sits on and nothing before it.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterable, Iterator

import typer

from csv2json.exceptions import InputError

STDIO_PATH = "-"


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_lines(stream: Iterable[bytes | str], *, encoding: str = "utf-8") -> Iterator[tuple[int, str]]:
    """Stream 1-based line numbers and lines without their line terminator.

    ``stream`` yields raw lines, either bytes (decoded with ``encoding``) or
    already decoded text. Only a ``\\r`` that ends a line is dropped.
    """

    iterator = iter(stream)
    line_number = 0
    while True:
        try:
            raw = next(iterator)
        except StopIteration:
            return
        except UnicodeDecodeError as exc:
            # Text streams decode ahead of the line they hand out.
            raise InputError(f"Could not decode input after line {line_number}: {exc}") from exc

        line_number += 1
        if isinstance(raw, bytes):
            try:
                line = raw.decode(encoding)
            except UnicodeDecodeError as exc:
                raise InputError(f"Could not decode line {line_number}: {exc}", line_number=line_number) from exc
        else:
            line = raw
        yield line_number, _strip_newline(line)


def _is_stdio(path: Path | str | None) -> bool:
    return path is None or str(path) == STDIO_PATH


@contextmanager
def open_input(path: Path | str | None) -> Iterator[IO[bytes]]:
    """Open ``path`` for binary reading; ``None`` or ``-`` selects stdin."""

    if _is_stdio(path):
        yield typer.get_binary_stream("stdin")
        return

    source = Path(path)
    if not source.exists():
        raise InputError(f"Source file not found: {source}")
    if not source.is_file():
        raise InputError(f"Source path is not a file: {source}")

    try:
        handle = source.open("rb")
    except OSError as exc:
        raise InputError(f"Could not open `{source}`: {exc}") from exc

    with handle:
        yield handle


@contextmanager
def open_output(path: Path | str | None, *, encoding: str = "utf-8") -> Iterator[IO[str]]:
    """Open ``path`` for writing; ``None`` or ``-`` selects stdout."""

    if _is_stdio(path):
        stream = typer.get_text_stream("stdout", encoding=encoding)
        try:
            yield stream
        finally:
            stream.flush()
        return

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding=encoding, newline="\n") as handle:
        yield handle


__all__ = ["STDIO_PATH", "iter_lines", "open_input", "open_output"]
