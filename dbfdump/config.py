"""Application defaults for dbf-dump."""
import codecs
import logging

APP_NAME = "dbf-dump"
SETTINGS_FILENAME = "config.toml"

# Text encoding used for field names and field values
DEFAULT_ENCODING = "ascii"

# Single-byte codecs accepted for --encoding (normalized codec names)
SINGLE_BYTE_ENCODINGS = frozenset({
    "ascii",
    "iso8859-1",
    "iso8859-15",
    "cp437",
    "cp850",
    "cp852",
    "cp866",
    "cp1250",
    "cp1251",
    "cp1252",
})

# Logging
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def normalize_encoding(name: str) -> str | None:
    """Return the canonical codec name if it is a supported single-byte encoding."""
    try:
        canonical = codecs.lookup(name).name
    except LookupError:
        return None
    return canonical if canonical in SINGLE_BYTE_ENCODINGS else None


def log_level_value(name: str) -> int:
    """Map a level name (any case) to its logging constant."""
    return logging.getLevelName(name.upper())
