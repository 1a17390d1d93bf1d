"""Click CLI for inspecting DBF files."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click

from dbfdump.config import log_level_value
from dbfdump.dbf.errors import DbfError
from dbfdump.dbf.reader import DbfFile, open_file
from dbfdump.logging_setup import configure_logging
from dbfdump.settings import (
    Settings,
    get_settings_path,
    load_settings_or_defaults,
    resolve_encoding,
    resolve_log_level,
    save_settings,
)

logger = logging.getLogger(__name__)

_file_argument = click.argument(
    "path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


class Context:
    """Holds the effective settings: command line > settings file > defaults."""

    def __init__(self, encoding: str | None = None, verbose: bool = False):
        self._explicit_encoding = encoding
        self.verbose = verbose
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = load_settings_or_defaults()
        return self._settings

    @property
    def encoding(self) -> str:
        if self._explicit_encoding is not None:
            return resolve_encoding(self._explicit_encoding)
        return self.settings.encoding

    @property
    def log_level(self) -> int:
        if self.verbose:
            return logging.DEBUG
        return log_level_value(self.settings.log_level)


pass_ctx = click.make_pass_decorator(Context)


@contextmanager
def opened(ctx: Context, path: Path) -> Iterator[DbfFile]:
    """Open a DBF file, reporting decode failures as CLI errors."""
    try:
        with open_file(path, encoding=ctx.encoding) as dbf:
            yield dbf
    except DbfError as e:
        logger.debug("Decode failed for %s", path, exc_info=True)
        raise click.ClickException(f"{path}: {e}")
    except OSError as e:
        raise click.ClickException(f"Couldn't open {path}: {e}")


def format_field_line(idx: int, field) -> str:
    return (
        f"Field {idx}: Type={field.display_type}, Title=`{field.name}', "
        f"Width={field.field_length}, Decimals={field.decimal_count}"
    )


def echo_fields(dbf: DbfFile) -> None:
    for idx, field in enumerate(dbf.fields):
        click.echo(format_field_line(idx, field))


def echo_record(index: int, rec: dict, dbf: DbfFile) -> None:
    click.echo("")
    click.echo(f"Record: {index}")
    for name in dbf.field_names:
        click.echo(f"{name}: {rec[name]}")


@click.group()
@click.option(
    "--encoding", "-e", default=None, type=str,
    help="Single-byte text encoding of the file (default: ascii, or the settings file)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log decoding details to stderr")
@click.version_option(package_name="dbfdump")
@click.pass_context
def cli(ctx, encoding: Optional[str], verbose: bool):
    """dbf-dump - inspect fixed-length record DBF files.

    Prints field metadata and decoded record values of dBase-style tables
    with Character and Numeric fields.
    """
    ctx.ensure_object(dict)
    ctx.obj = Context(encoding=encoding, verbose=verbose)
    configure_logging(ctx.obj.log_level)


@cli.command()
def init():
    """Write a settings file with default encoding and log level (interactive)."""
    current = load_settings_or_defaults()

    encoding = click.prompt("Default encoding", default=current.encoding)
    encoding = resolve_encoding(encoding.strip())

    log_level = click.prompt(
        "Log level", default=current.log_level,
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    )
    log_level = resolve_log_level(log_level)

    path = save_settings(Settings(encoding=encoding, log_level=log_level))
    click.echo(f"\nSettings saved to {path}")


@cli.command()
@_file_argument
@pass_ctx
def dump(ctx: Context, path: Path):
    """Print field metadata followed by every record."""
    with opened(ctx, path) as dbf:
        echo_fields(dbf)
        for idx, rec in enumerate(dbf.records()):
            echo_record(idx, rec, dbf)


@cli.command()
@_file_argument
@pass_ctx
def fields(ctx: Context, path: Path):
    """Print field metadata only."""
    with opened(ctx, path) as dbf:
        echo_fields(dbf)


@cli.command()
@_file_argument
@pass_ctx
def info(ctx: Context, path: Path):
    """Show header details: version, date, sizes, counts."""
    with opened(ctx, path) as dbf:
        hdr = dbf.header
        yy, mm, dd = hdr.last_modified
        click.echo(f"File:          {path}")
        click.echo(f"Version:       0x{hdr.version:02X}")
        click.echo(f"Last modified: {1900 + yy:04d}-{mm:02d}-{dd:02d}")
        click.echo(f"Records:       {hdr.record_count:,}")
        click.echo(f"Header length: {hdr.header_length} bytes")
        click.echo(f"Record width:  {hdr.record_width} bytes")
        click.echo(f"Fields:        {len(dbf.fields)}")


@cli.command()
@_file_argument
@click.argument("index", type=int)
@pass_ctx
def show(ctx: Context, path: Path, index: int):
    """Show a single record by zero-based INDEX."""
    with opened(ctx, path) as dbf:
        rec = dbf.record(index)
        if rec is None:
            click.echo(f"Record {index} not found ({dbf.record_count} records).")
            return
        click.echo(f"Record: {index}")
        for field in dbf.fields:
            click.echo(f"  {field.name:<11} = {rec[field.name]} ({field.display_type})")


@cli.command()
@_file_argument
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), required=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@pass_ctx
def export(ctx: Context, path: Path, fmt: str, output: Optional[str]):
    """Export all records as CSV or JSON."""
    with opened(ctx, path) as dbf:
        if fmt == "csv":
            from dbfdump.export.csv_export import export_csv
            data = export_csv(dbf)
        else:
            from dbfdump.export.json_export import export_json
            data = export_json(dbf)

    if output:
        Path(output).write_text(data, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(data)


@cli.command("settings")
def show_settings():
    """Show the settings file location and effective values."""
    path = get_settings_path()
    current = load_settings_or_defaults()
    status = "" if path.exists() else " (not created, using defaults)"
    click.echo(f"Settings file: {path}{status}")
    click.echo(f"  encoding  = {current.encoding}")
    click.echo(f"  log_level = {current.log_level}")
