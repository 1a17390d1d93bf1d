"""Logging configuration for the dbf-dump CLI."""
import logging

from dbfdump.config import LOG_FORMAT


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure root logging. Output goes to stderr so dumps stay clean."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        force=True,
    )
