"""Converter error hierarchy."""

from __future__ import annotations


class Csv2JsonError(Exception):
    """Base class for converter-specific exceptions."""

    code = "csv2json_error"


class TokenizeError(Csv2JsonError):
    """Raised when a line cannot be split into CSV fields."""

    code = "tokenize_error"

    def __init__(self, message: str | None = None, *, position: int | None = None) -> None:
        super().__init__(message or self.__class__.__doc__)
        self.position = position


class QuoteInTheMiddleError(TokenizeError):
    """An unescaped quote appeared in the middle of an unquoted field."""

    code = "quote_in_the_middle"


class QuoteUnbalancedError(TokenizeError):
    """A quoted field was not closed, or its closing quote was followed by garbage."""

    code = "quote_unbalanced"


class HeaderError(Csv2JsonError):
    """Raised when the header cannot be built."""

    code = "header_error"


class AppendFailedError(HeaderError):
    """Raised when a non-string value is appended to a header."""

    code = "append_failed"


class InputError(Csv2JsonError):
    """Raised when an input source or line is unusable."""

    code = "input_error"

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class ConfigError(Csv2JsonError):
    """Raised when settings are invalid."""

    code = "config_error"


__all__ = [
    "AppendFailedError",
    "ConfigError",
    "Csv2JsonError",
    "HeaderError",
    "InputError",
    "QuoteInTheMiddleError",
    "QuoteUnbalancedError",
    "TokenizeError",
]
