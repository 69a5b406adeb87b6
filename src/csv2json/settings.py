"""Settings for :mod:`csv2json`.

Settings are defined in one place (this file) and loaded using `pydantic-settings`.

Supported sources (lowest → highest precedence):
1) `settings.toml` (current working directory; keys flat or under `[csv2json]`)
2) `.env` (current working directory)
3) environment variables (prefix: `CSV2JSON_`)
4) explicit overrides (`Settings(...)` / CLI)
"""

from __future__ import annotations

import codecs
import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ENV_PREFIX = "CSV2JSON_"
TOML_TABLE = "csv2json"


def _coerce_log_level(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("log_level must be an int or a log level name")

    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text:
        return logging.WARNING

    if text.isdigit():
        return int(text)

    mapped = logging.getLevelNamesMapping().get(text.upper())
    if isinstance(mapped, int):
        return mapped

    raise ValueError(f"Invalid log_level: {value!r}")


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read ``settings.toml``; a ``[csv2json]`` table wins over top-level keys."""

    def __init__(self, settings_cls: type[BaseSettings], toml_file: Path) -> None:
        super().__init__(settings_cls)
        self.toml_file = toml_file

    def _read(self) -> dict[str, Any]:
        if not self.toml_file.is_file():
            return {}
        data = tomllib.loads(self.toml_file.read_text(encoding="utf-8"))
        nested = data.get(TOML_TABLE)
        if isinstance(nested, dict):
            return nested
        return data

    def get_field_value(self, field, field_name: str) -> tuple[Any, str, bool]:  # pragma: no cover - unused
        return self._read().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        data = self._read()
        return {name: data[name] for name in self.settings_cls.model_fields if name in data}


class Settings(BaseSettings):
    """Runtime settings for a conversion run."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix=ENV_PREFIX,
        env_file=".env",
    )

    # Conversion behavior
    header: bool = Field(default=False, description="Treat the first input line as the header.")
    failfast: bool = Field(default=False, description="Stop at the first line that fails to convert.")
    ensure_ascii: bool = Field(default=False, description="Escape non-ASCII characters in JSON output.")

    # IO
    encoding: str = Field(default="utf-8", description="Text encoding for input and output.")
    max_line_length: int | None = Field(
        default=None,
        ge=1,
        description="Reject input lines longer than this many characters. None disables the guard.",
    )

    # Logging
    log_format: Literal["text", "ndjson"] = Field(default="text")
    log_level: int = Field(default=logging.WARNING)

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> int:
        return _coerce_log_level(value)

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        try:
            name = codecs.lookup(value).name
            newline = "\n".encode(name)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value!r}") from exc
        # Input is split on the newline byte before decoding.
        if newline != b"\n":
            raise ValueError(f"Encoding {name!r} does not encode newline as a single byte")
        return name

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = None
        if hasattr(init_settings, "init_kwargs"):
            toml_file = init_settings.init_kwargs.get("_csv2json_toml_file")  # type: ignore[attr-defined]

        if toml_file is None:
            toml_file = Path.cwd() / "settings.toml"

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlSettingsSource(settings_cls, Path(toml_file)),
            file_secret_settings,
        )

    @classmethod
    def load(cls, *, cwd: Path | None = None, **overrides: Any) -> "Settings":
        """Load settings relative to ``cwd``; ``None`` overrides are ignored."""
        cwd_path = (cwd or Path.cwd()).expanduser().resolve()
        explicit = {key: value for key, value in overrides.items() if value is not None}

        return cls(
            _csv2json_toml_file=cwd_path / "settings.toml",
            _env_file=cwd_path / ".env",
            **explicit,
        )


__all__ = ["ENV_PREFIX", "Settings"]
