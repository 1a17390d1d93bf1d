"""User settings file for dbf-dump defaults."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from dbfdump.config import (
    APP_NAME,
    DEFAULT_ENCODING,
    DEFAULT_LOG_LEVEL,
    LOG_LEVELS,
    SETTINGS_FILENAME,
    normalize_encoding,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    encoding: str = DEFAULT_ENCODING
    log_level: str = DEFAULT_LOG_LEVEL


def get_settings_path() -> Path:
    """Return the TOML settings file path via click.get_app_dir."""
    return Path(click.get_app_dir(APP_NAME)) / SETTINGS_FILENAME


def load_settings(path: Path | None = None) -> Settings:
    """Read TOML settings. Returns defaults if the file is missing."""
    path = path or get_settings_path()
    if not path.exists():
        return Settings()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise click.UsageError(f"Invalid settings file {path}: {e}")

    settings = Settings()
    if "encoding" in data:
        settings.encoding = resolve_encoding(str(data["encoding"]))
    if "log_level" in data:
        settings.log_level = resolve_log_level(str(data["log_level"]))
    return settings


def load_settings_or_defaults(path: Path | None = None) -> Settings:
    """Like load_settings, but an invalid file logs a warning and yields defaults."""
    try:
        return load_settings(path)
    except click.UsageError as e:
        logger.warning("Ignoring settings file: %s", e.format_message())
        return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings to TOML."""
    path = path or get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = [
        f"encoding = \"{settings.encoding}\"",
        f"log_level = \"{settings.log_level}\"",
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def resolve_encoding(name: str) -> str:
    """Validate an encoding name, returning its canonical form.

    Raises click.UsageError for unknown or multi-byte encodings.
    """
    canonical = normalize_encoding(name)
    if canonical is None:
        raise click.UsageError(
            f"Unsupported encoding '{name}'. Use a single-byte encoding "
            "such as ascii, latin-1 or cp1252."
        )
    return canonical


def resolve_log_level(name: str) -> str:
    level = name.upper()
    if level not in LOG_LEVELS:
        raise click.UsageError(
            f"Unknown log level '{name}'. Choose one of: {', '.join(LOG_LEVELS)}"
        )
    return level
