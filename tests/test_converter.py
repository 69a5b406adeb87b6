from __future__ import annotations

import io

import pytest

from csv2json.converter import Converter, build_header, convert_stream
from csv2json.exceptions import QuoteInTheMiddleError, QuoteUnbalancedError
from csv2json.models import RunStatus


def run(text: str, **kwargs):
    out = io.StringIO()
    result = convert_stream(io.StringIO(text), out, **kwargs)
    return out.getvalue(), result


def test_convert_line_without_header() -> None:
    converter = Converter()

    assert converter.convert_line('str,128,12.8,,"a ""b"""') == '["str",128,12.8,null,"a \\"b\\""]'
    assert converter.convert_line("") == "[null]"


def test_convert_line_with_header() -> None:
    converter = Converter(build_header("x,y,z"))

    assert converter.convert_line("x1,2") == '{"x":"x1","y":2,"z":null}'
    assert converter.convert_line("1,2,3,4") == '{"x":1,"y":2,"z":3}'


def test_convert_line_does_not_leak_values_between_lines() -> None:
    converter = Converter()

    with pytest.raises(QuoteInTheMiddleError):
        converter.convert_line('a,b"c')

    assert converter.convert_line("d") == '["d"]'


def test_header_names_are_never_numbers() -> None:
    assert build_header("1,2.5,").fields == ("1", "2.5", "")


def test_convert_stream_plain() -> None:
    output, result = run("x,y,z\nx1,y1,z1\nx2,y2,z2")

    assert output == '["x","y","z"]\n["x1","y1","z1"]\n["x2","y2","z2"]\n'
    assert result.status is RunStatus.SUCCEEDED
    assert result.lines_read == 3


def test_convert_stream_with_header() -> None:
    output, result = run("x,y,z\nx1,y1,z1\nx2,y2,z2\n", header=True)

    assert output == '{"x":"x1","y":"y1","z":"z1"}\n{"x":"x2","y":"y2","z":"z2"}\n'
    assert result.lines_read == 3
    assert result.lines_written == 2


def test_convert_stream_skips_bad_lines() -> None:
    output, result = run('x,y,z\nx1,y"1,z1\nx2,y2,z2')

    assert output == '["x","y","z"]\n["x2","y2","z2"]\n'
    assert result.succeeded
    assert result.lines_failed == 1


def test_convert_stream_exits_on_bad_line() -> None:
    output, result = run('x,y,z\nx1,y"1,z1\nx2,y2,z2', exit_on_error=True)

    assert output == '["x","y","z"]\n'
    assert result.status is RunStatus.FAILED


def test_convert_stream_reports_physical_line_numbers_with_header() -> None:
    _, result = run('a,b\n1,2\n3,"4', header=True)

    assert result.error.line_number == 3
    assert result.error.code == QuoteUnbalancedError.code


def test_convert_stream_header_mode_on_empty_input() -> None:
    output, result = run("", header=True)

    assert output == ""
    assert result.succeeded
    assert result.lines_read == 0


def test_convert_stream_bad_header_fails_the_run() -> None:
    output, result = run('a,"b\n1,2\n', header=True)

    assert output == ""
    assert result.status is RunStatus.FAILED
    assert result.error.code == "quote_unbalanced"
    assert result.error.line_number == 1


def test_convert_stream_keeps_lines_before_undecodable_bytes() -> None:
    out = io.StringIO()

    result = convert_stream(io.BytesIO(b"a\nb\n\xff\nc\n"), out)

    assert out.getvalue() == '["a"]\n["b"]\n'
    assert result.status is RunStatus.FAILED
    assert result.lines_read == 2
    assert result.error.code == "input_error"
    assert result.error.line_number == 3


def test_convert_stream_reports_undecodable_line_after_header() -> None:
    out = io.StringIO()

    result = convert_stream(io.BytesIO(b"x,y\n1,2\n\xff\n"), out, header=True)

    assert out.getvalue() == '{"x":1,"y":2}\n'
    assert result.error.line_number == 3


def test_convert_stream_keeps_bare_carriage_returns_inside_a_row() -> None:
    out = io.StringIO()

    result = convert_stream(io.BytesIO(b"a\rb,c\r\n"), out)

    assert out.getvalue() == '["a\\rb","c"]\n'
    assert result.lines_written == 1


def test_convert_stream_applies_line_limit_to_header() -> None:
    output, result = run("name,value\n1,2\n", header=True, max_line_length=5)

    assert output == ""
    assert result.status is RunStatus.FAILED
    assert result.error.code == "input_error"
    assert result.error.line_number == 1
