"""CLI entrypoint for :mod:`csv2json`.

Reads CSV from a file or stdin, one line at a time, and writes one JSON
document per line: an array per row, or an object per row when the first
line is used as the header.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from typer import BadParameter

from csv2json import __version__
from csv2json.converter import convert_stream
from csv2json.exceptions import InputError
from csv2json.io.lines import open_input, open_output
from csv2json.logging import start_run_logging
from csv2json.settings import Settings

app = typer.Typer(
    help=(
        "Convert CSV data into JSON lines.\n\n"
        "```bash\n"
        "printf 'x,y\\n1,2.5\\n' | csv2json --header\n"
        "```"
    ),
    add_completion=False,
    rich_markup_mode="markdown",
)


class LogFormat(str, Enum):
    """Supported log output formats."""

    text = "text"
    ndjson = "ndjson"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def resolve_log_level(log_level: Optional[str], default_level: int) -> int:
    """Resolve a string log level to a logging level constant."""
    if not log_level:
        return default_level

    mapping = logging.getLevelNamesMapping()
    resolved = mapping.get(str(log_level).upper())
    if isinstance(resolved, int):
        return resolved

    raise BadParameter(f"Invalid log level: {log_level}", param_hint="log_level")


def resolve_logging(
    *,
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    debug: bool,
    quiet: bool,
    settings: Settings,
) -> tuple[str, int]:
    """Compute effective log format/level with explicit precedence.

    Precedence: --quiet > --debug > --log-level > settings.
    """
    effective_format = log_format.value if log_format else settings.log_format
    base_level = resolve_log_level(log_level, settings.log_level)

    if quiet:
        effective_level = logging.ERROR
    elif debug:
        effective_level = logging.DEBUG
    else:
        effective_level = base_level

    return effective_format, effective_level


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@app.command()
def convert(
    input_path: Optional[Path] = typer.Argument(
        None,
        metavar="[INPUT]",
        show_default=False,
        help="CSV file to read. Omit or pass '-' to read stdin.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="File to write JSON lines to (default: stdout).",
    ),
    header: bool = typer.Option(
        False,
        "--header",
        "-i",
        help="Read the first line as the header and emit JSON objects.",
    ),
    failfast: bool = typer.Option(
        False,
        "--failfast",
        help="Exit on the first line that fails to convert instead of skipping it.",
    ),
    ensure_ascii: bool = typer.Option(
        False,
        "--ensure-ascii",
        help="Escape non-ASCII characters in the JSON output.",
    ),
    encoding: Optional[str] = typer.Option(
        None,
        "--encoding",
        help="Text encoding of the input and output (default: utf-8).",
    ),
    max_line_length: Optional[int] = typer.Option(
        None,
        "--max-line-length",
        min=1,
        help="Reject lines longer than this many characters.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        dir_okay=False,
        help="Also write log records to this file.",
    ),
    log_format: Optional[LogFormat] = typer.Option(
        None,
        "--log-format",
        case_sensitive=False,
        help="Log output format.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Log level (debug, info, warning, error, critical).",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "--quiet", help="Only log errors."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    """Convert CSV lines from INPUT (or stdin) into JSON lines."""

    try:
        settings = Settings.load(
            header=header or None,
            failfast=failfast or None,
            ensure_ascii=ensure_ascii or None,
            encoding=encoding,
            max_line_length=max_line_length,
        )
    except ValidationError as exc:
        raise BadParameter(f"Invalid settings: {exc}") from exc

    effective_format, effective_level = resolve_logging(
        log_format=log_format,
        log_level=log_level,
        debug=debug,
        quiet=quiet,
        settings=settings,
    )

    with start_run_logging(log_format=effective_format, log_level=effective_level, log_file=log_file) as log_ctx:
        try:
            with open_input(input_path) as source, open_output(output, encoding=settings.encoding) as out:
                result = convert_stream(
                    source,
                    out,
                    header=settings.header,
                    exit_on_error=settings.failfast,
                    ensure_ascii=settings.ensure_ascii,
                    max_line_length=settings.max_line_length,
                    encoding=settings.encoding,
                    events=log_ctx.events,
                )
        except InputError as exc:
            log_ctx.events.emit("input.failed", message=str(exc), level=logging.ERROR, code=exc.code)
            raise typer.Exit(code=1)

    raise typer.Exit(code=0 if result.succeeded else 1)


def main() -> None:
    """Entrypoint used by console scripts and `python -m csv2json`."""
    app()


__all__ = ["app", "main"]
