from __future__ import annotations

import pytest

from csv2json.core.tokenizer import Field, FieldIterator, split_fields
from csv2json.exceptions import QuoteInTheMiddleError, QuoteUnbalancedError, TokenizeError


def collect(line: str) -> tuple[list[str], TokenizeError | None]:
    it = FieldIterator(line)
    fields: list[str] = []
    while True:
        try:
            field = it.next_field()
        except TokenizeError as exc:
            return fields, exc
        if field is None:
            return fields, None
        fields.append(field.raw)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("aaa,10,c", ["aaa", "10", "c"]),
        ('"aaa,10,c",X', ["aaa,10,c", "X"]),
        ("", [""]),
        ("a,,b,", ["a", "", "b", ""]),
        ('a,"",b,""', ["a", "", "b", ""]),
        ('"a,b,c"', ["a,b,c"]),
        ('"a,""b,c"', ['a,""b,c']),
        (",", ["", ""]),
        ('"x",', ["x", ""]),
        ("plain field with spaces", ["plain field with spaces"]),
    ],
)
def test_split_fields(line: str, expected: list[str]) -> None:
    fields, error = collect(line)

    assert error is None
    assert fields == expected


def test_quote_in_the_middle_stops_after_prior_fields() -> None:
    fields, error = collect('a,b"d,c')

    assert fields == ["a"]
    assert isinstance(error, QuoteInTheMiddleError)
    assert error.code == "quote_in_the_middle"
    assert error.position == 3


def test_text_after_closing_quote_is_unbalanced() -> None:
    fields, error = collect('a,"z"x,c')

    assert fields == ["a"]
    assert isinstance(error, QuoteUnbalancedError)


def test_missing_closing_quote_is_unbalanced() -> None:
    fields, error = collect('a,"never closed')

    assert fields == ["a"]
    assert isinstance(error, QuoteUnbalancedError)
    assert error.position == len('a,"never closed')


def test_escaped_quote_at_end_of_line_is_unbalanced() -> None:
    fields, error = collect('"a""')

    assert fields == []
    assert isinstance(error, QuoteUnbalancedError)


def test_iterator_is_terminal_after_error() -> None:
    it = FieldIterator('a,b"d,c')

    assert it.next_field().raw == "a"
    with pytest.raises(QuoteInTheMiddleError):
        it.next_field()

    assert it.done
    assert it.next_field() is None
    assert it.next_field() is None
    assert list(it) == []


def test_iterator_is_terminal_after_last_field() -> None:
    it = FieldIterator("a,b")

    assert [field.raw for field in it] == ["a", "b"]
    assert it.done
    assert it.next_field() is None


def test_for_loop_raises_after_yielding_earlier_fields() -> None:
    seen: list[str] = []

    with pytest.raises(QuoteUnbalancedError):
        for field in FieldIterator('one,two,"three"3'):
            seen.append(field.raw)

    assert seen == ["one", "two"]


def test_field_is_a_view_into_the_line() -> None:
    line = 'key,"quoted ""value"""'
    first, second = split_fields(line)

    assert first == Field(line, 0, 3)
    assert second.buffer is line
    assert second.raw == 'quoted ""value""'
    assert len(second) == len(second.raw)


def test_field_never_includes_delimiters() -> None:
    line = "a,bb,,ccc"

    for field in split_fields(line):
        assert "," not in field.raw


def test_field_value_helpers() -> None:
    number, text = split_fields('123,"1""2"')

    assert number.value().value.data == 123
    assert number.string().value.data == "123"
    assert text.value().value.data == '1"2'
