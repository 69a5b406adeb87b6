"""Character-class helpers used by type inference."""

from __future__ import annotations

_DIGITS_AND_POINT = frozenset("0123456789.")


def is_digit_or_point(char: str) -> bool:
    return char in _DIGITS_AND_POINT


def is_maybe_number_string(text: str) -> bool:
    """Return True when ``text`` consists only of ASCII digits and ``.``.

    This is a cheap pre-filter, not a validator: ``".."`` and ``"1.2.3"``
    pass it even though neither parses as a number.
    """

    return all(is_digit_or_point(char) for char in text)


__all__ = ["is_digit_or_point", "is_maybe_number_string"]
