"""Shared DBF fixtures built in memory."""
import struct

import pytest

_HEADER = struct.Struct("<B3Bihh2xBB12xBB2x")
_DESCRIPTOR = struct.Struct("<11sc4xBB14x")


def build_dbf(
    fields: list[tuple[str, bytes, int, int]],
    records: list[bytes],
    record_width: int | None = None,
    record_count: int | None = None,
    header_length: int | None = None,
    truncate: int = 0,
) -> bytes:
    """Build DBF bytes: header, descriptors, 0x0D + pad byte, space-padded records.

    `fields` holds (name, type_code, length, decimals). `truncate` drops that
    many bytes from the end of the file.
    """
    if record_width is None:
        record_width = sum(f[2] for f in fields)
    if record_count is None:
        record_count = len(records)
    if header_length is None:
        header_length = 32 + 32 * len(fields) + 1

    out = bytearray(_HEADER.pack(
        0x03, 124, 3, 15, record_count, header_length, record_width, 0, 0, 0, 0,
    ))
    for name, code, length, decimals in fields:
        out += _DESCRIPTOR.pack(name.encode("latin-1"), code, length, decimals)
    out += b"\x0d\x00"
    for rec in records:
        out += rec.ljust(record_width, b" ")
    if truncate:
        del out[-truncate:]
    return bytes(out)


SAMPLE_FIELDS = [("NAME", b"C", 10, 0), ("AMT", b"N", 10, 2)]

SAMPLE_RECORDS = [
    b"JOHN DOE  " + b"    123.45",
    b"          " + b"      7.00",
    b"*ANON     " + b"**********",
]


@pytest.fixture
def make_dbf():
    return build_dbf


@pytest.fixture
def sample_bytes() -> bytes:
    return build_dbf(SAMPLE_FIELDS, SAMPLE_RECORDS, record_width=20)


@pytest.fixture
def sample_path(tmp_path, sample_bytes):
    path = tmp_path / "sample.dbf"
    path.write_bytes(sample_bytes)
    return path


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point click.get_app_dir at a per-test directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
