"""Typed field values and the inference rules that produce them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from csv2json.core.strings import is_maybe_number_string

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

QUOTE = '"'


class ValueKind(str, Enum):
    """Variants a CSV field can be inferred as."""

    NULL = "null"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"


_PAYLOAD_TYPES: dict[ValueKind, type | None] = {
    ValueKind.NULL: None,
    ValueKind.STRING: str,
    ValueKind.INTEGER: int,
    ValueKind.FLOAT: float,
}


@dataclass(frozen=True, slots=True)
class Value:
    """A tagged union of ``Null``, ``String``, ``Integer`` and ``Float``."""

    kind: ValueKind
    data: str | int | float | None = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.data is not None:
                raise TypeError("Null value cannot carry a payload")
            return
        # bool is an int subclass; keep it out of the integer variant.
        if not isinstance(self.data, expected) or isinstance(self.data, bool):
            raise TypeError(f"{self.kind.value} value requires a {expected.__name__} payload, got {self.data!r}")
        if self.kind is ValueKind.INTEGER and not INT64_MIN <= self.data <= INT64_MAX:
            raise OverflowError(f"integer value {self.data} does not fit in 64 bits")

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueKind.NULL)

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(ValueKind.STRING, text)

    @classmethod
    def integer(cls, number: int) -> "Value":
        return cls(ValueKind.INTEGER, number)

    @classmethod
    def float(cls, number: float) -> "Value":
        return cls(ValueKind.FLOAT, number)

    @property
    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def to_json(self) -> Any:
        """Return the plain Python object handed to the JSON encoder."""
        return self.data


def canonicalize_field(raw: str) -> str:
    """Collapse doubled quote markers (``""``) into a single quote.

    ``raw`` is tokenizer output: outer quotes already stripped, inner quotes
    always doubled. Every other character is copied unchanged.
    """

    if QUOTE not in raw:
        return raw

    out: list[str] = []
    pending_quote = False
    for char in raw:
        if char != QUOTE:
            if pending_quote:
                raise ValueError(f"lone quote in field content: {raw!r}")
            out.append(char)
            continue
        if pending_quote:
            out.append(char)
            pending_quote = False
            continue
        pending_quote = True
    if pending_quote:
        raise ValueError(f"lone quote in field content: {raw!r}")
    return "".join(out)


def _parse_int(raw: str) -> int | None:
    try:
        number = int(raw, 10)
    except ValueError:
        return None
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _parse_float(raw: str) -> float | None:
    try:
        number = float(raw)
    except ValueError:
        return None
    # Overflow to inf has no JSON representation.
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True, slots=True)
class FieldValue:
    """A :class:`Value` derived from one raw CSV field.

    Only the ``String`` variant carries text of its own (the canonicalized
    field); scalars are stored inline.
    """

    value: Value

    @property
    def kind(self) -> ValueKind:
        return self.value.kind

    @classmethod
    def string(cls, raw: str) -> "FieldValue":
        """Always produce a ``String``, skipping numeric inference."""
        return cls(Value.string(canonicalize_field(raw)))

    @classmethod
    def parse(cls, raw: str) -> "FieldValue":
        """Infer the value of ``raw``.

        Precedence: empty -> Null; anything that is not digits/dots -> String;
        otherwise Integer, then Float, then String as a fallback.
        """

        if not raw:
            return cls(Value.null())

        text = canonicalize_field(raw)
        if not is_maybe_number_string(text):
            return cls(Value.string(text))

        integer = _parse_int(raw)
        if integer is not None:
            return cls(Value.integer(integer))

        number = _parse_float(raw)
        if number is not None:
            return cls(Value.float(number))

        return cls(Value.string(text))


__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "FieldValue",
    "Value",
    "ValueKind",
    "canonicalize_field",
]
