"""Quote-aware splitting of one CSV line into raw fields.

The dialect is fixed: ``,`` separates fields, ``"`` quotes them, and a
doubled ``""`` inside quotes stands for one literal quote. Fields never span
lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from csv2json.core.values import FieldValue
from csv2json.exceptions import QuoteInTheMiddleError, QuoteUnbalancedError, TokenizeError

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


@dataclass(frozen=True, slots=True)
class Field:
    """A view of one field's raw characters inside the line buffer.

    For quoted fields the outer quotes are excluded but doubled inner quotes
    are kept; see :func:`~csv2json.core.values.canonicalize_field`.
    """

    buffer: str
    start: int
    end: int

    @property
    def raw(self) -> str:
        return self.buffer[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def value(self) -> FieldValue:
        return FieldValue.parse(self.raw)

    def string(self) -> FieldValue:
        return FieldValue.string(self.raw)


class FieldIterator:
    """Yield the fields of a single line.

    Iteration stops for good after the last field or after the first error;
    an error is raised exactly once and later calls report exhaustion.

    >>> [field.raw for field in FieldIterator('a,"b,c",')]
    ['a', 'b,c', '']
    """

    def __init__(self, buffer: str) -> None:
        self.buffer = buffer
        # None marks a terminated iterator.
        self.index: int | None = 0

    def __iter__(self) -> Iterator[Field]:
        return self

    def __next__(self) -> Field:
        field = self.next_field()
        if field is None:
            raise StopIteration
        return field

    @property
    def done(self) -> bool:
        return self.index is None

    def next_field(self) -> Field | None:
        """Return the next field, or ``None`` once the line is exhausted."""
        try:
            return self._next()
        except TokenizeError:
            self.index = None
            raise

    def _next(self) -> Field | None:
        start = self.index
        if start is None:
            return None

        if not self.buffer:
            return self._next_empty()

        char = self._peek()
        if char is not None:
            if char == QUOTE:
                return self._next_quoted(start)
            return self._next_raw(start)

        # Past the last character: a trailing delimiter opens one more, empty field.
        if self.buffer[start - 1] == DELIMITER:
            return self._next_empty()

        self.index = None
        return None

    def _next_empty(self) -> Field:
        end = len(self.buffer)
        self.index = None
        return Field(self.buffer, end, end)

    def _next_raw(self, start: int) -> Field:
        while True:
            char = self._get()
            if char is None:
                break
            if char == QUOTE:
                raise QuoteInTheMiddleError(position=self.index - 1)
            if char == DELIMITER:
                return self._slice(start, self.index - 1)
        return self._slice(start, self.index)

    def _next_quoted(self, start: int) -> Field:
        self._get()  # opening quote

        while True:
            char = self._get()
            if char is None:
                break
            if char != QUOTE:
                continue

            following = self._get()
            if following is None:
                return self._slice(start + 1, self.index - 1)
            if following == QUOTE:
                continue  # escaped quote
            if following == DELIMITER:
                return self._slice(start + 1, self.index - 2)
            raise QuoteUnbalancedError(position=self.index - 1)

        raise QuoteUnbalancedError(position=len(self.buffer))

    def _get(self) -> str | None:
        """Return the current character and advance."""
        index = self.index
        if index is None or index >= len(self.buffer):
            return None
        self.index = index + 1
        return self.buffer[index]

    def _peek(self) -> str | None:
        index = self.index
        if index is None or index >= len(self.buffer):
            return None
        return self.buffer[index]

    def _slice(self, start: int, end: int) -> Field:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("slice [%s][%d..%d] => %s", self.buffer, start, end, self.buffer[start:end])
        return Field(self.buffer, start, end)


def split_fields(line: str) -> list[Field]:
    """Tokenize ``line`` completely; raises on the first malformed field."""
    return list(FieldIterator(line))


__all__ = ["DELIMITER", "QUOTE", "Field", "FieldIterator", "split_fields"]
