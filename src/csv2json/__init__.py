"""Convert CSV lines into JSON documents, one per line."""

from importlib import metadata
from pathlib import Path
import tomllib

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _read_version() -> str:
    # Source checkouts read pyproject.toml directly.
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as handle:
            return tomllib.load(handle)["project"]["version"]
    try:
        return metadata.version("csv2json")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "0+unknown"


__version__ = _read_version()

_EXPORTS = {
    "Builder": ("csv2json.core.convert", "Builder"),
    "Header": ("csv2json.core.convert", "Header"),
    "Field": ("csv2json.core.tokenizer", "Field"),
    "FieldIterator": ("csv2json.core.tokenizer", "FieldIterator"),
    "FieldValue": ("csv2json.core.values", "FieldValue"),
    "Value": ("csv2json.core.values", "Value"),
    "ValueKind": ("csv2json.core.values", "ValueKind"),
    "Converter": ("csv2json.converter", "Converter"),
    "convert_stream": ("csv2json.converter", "convert_stream"),
    "Settings": ("csv2json.settings", "Settings"),
    "RunResult": ("csv2json.models", "RunResult"),
    "RunStatus": ("csv2json.models", "RunStatus"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = [
    "Builder",
    "Converter",
    "Field",
    "FieldIterator",
    "FieldValue",
    "Header",
    "RunResult",
    "RunStatus",
    "Settings",
    "Value",
    "ValueKind",
    "__version__",
    "convert_stream",
]
