"""CSV line tokenizer, type inference and JSON row assembly."""

from csv2json.core.convert import Builder, Header
from csv2json.core.strings import is_maybe_number_string
from csv2json.core.tokenizer import Field, FieldIterator, split_fields
from csv2json.core.values import FieldValue, Value, ValueKind, canonicalize_field

__all__ = [
    "Builder",
    "Field",
    "FieldIterator",
    "FieldValue",
    "Header",
    "Value",
    "ValueKind",
    "canonicalize_field",
    "is_maybe_number_string",
    "split_fields",
]
