"""Assemble typed fields into JSON arrays or header-keyed JSON objects."""

from __future__ import annotations

import json
from typing import Any, Iterable, TextIO

from csv2json.core.tokenizer import FieldIterator
from csv2json.core.values import FieldValue, Value
from csv2json.exceptions import AppendFailedError


class Header:
    """Ordered column names used as JSON object keys.

    Names are not required to be unique.
    """

    def __init__(self, fields: Iterable[str] = ()) -> None:
        self._fields: list[str] = []
        for name in fields:
            self.append(Value.string(name))

    @classmethod
    def from_line(cls, line: str) -> "Header":
        """Build a header from a CSV line; every field is kept as text."""
        header = cls()
        for field in FieldIterator(line):
            header.append(field.string().value)
        return header

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def append(self, value: Value) -> None:
        if not value.is_string:
            raise AppendFailedError(f"header names must be strings, got {value.kind.value}")
        self._fields.append(value.data)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"Header({self._fields!r})"


class Builder:
    """Collect one line's values and dump them as JSON.

    Without a header the row becomes an array. With a header it becomes an
    object whose key at position ``i`` is ``header[i]``: missing values are
    filled with ``null`` and values beyond the header are dropped.
    """

    def __init__(self, header: Header | None = None, *, ensure_ascii: bool = False) -> None:
        self.header = header
        self.ensure_ascii = ensure_ascii
        self._values: list[FieldValue] = []

    @property
    def values(self) -> tuple[FieldValue, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def append(self, value: FieldValue) -> None:
        self._values.append(value)

    def reset(self) -> None:
        """Drop the current row; the header is left untouched."""
        self._values.clear()

    def to_json_value(self) -> list[Any] | dict[str, Any]:
        if self.header is None:
            return [item.value.to_json() for item in self._values]

        count = len(self._values)
        obj: dict[str, Any] = {}
        for index, key in enumerate(self.header):
            obj[key] = self._values[index].value.to_json() if index < count else None
        return obj

    def dumps(self) -> str:
        """Return the row as one line of compact JSON (no trailing newline)."""
        return json.dumps(
            self.to_json_value(),
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
            separators=(",", ":"),
        )

    def dump(self, fp: TextIO) -> None:
        fp.write(self.dumps())


__all__ = ["Builder", "Header"]
