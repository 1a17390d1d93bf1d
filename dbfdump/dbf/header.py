"""File header and field descriptor array parsing.

File header (32 bytes, little-endian):
  version(1) + last_modified YYMMDD(3) + record_count(i32) + header_length(i16)
  + record_width(i16) + reserved(2) + transaction(1) + encryption(1)
  + multi_user(12) + mdx(1) + language_driver(1) + reserved(2)

Field descriptor (32 bytes), one per field, directly after the file header:
  name(11) + type(1) + reserved(4) + length(u8) + decimals(u8)
  + work_area(2) + flags(1) + reserved(10) + mdx(1)
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from dbfdump.dbf.constants import (
    DESCRIPTOR_NAME_SIZE,
    DESCRIPTOR_SIZE,
    HEADER_SIZE,
)
from dbfdump.dbf.errors import (
    InvalidFieldText,
    MalformedHeader,
    UnsupportedFieldType,
)
from dbfdump.dbf.fields import FieldDescriptor, FieldType
from dbfdump.dbf.source import ByteSource

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<B3Bihh2xBB12xBB2x")
_DESCRIPTOR = struct.Struct("<11sc4xBB14x")


@dataclass(frozen=True, slots=True)
class FileHeader:
    """Decoded fixed file header."""
    version: int
    last_modified: tuple[int, int, int]    # (years since 1900, month, day)
    record_count: int
    header_length: int
    record_width: int

    @property
    def field_count(self) -> int:
        """Number of field descriptors implied by the header length.

        One is subtracted for the 0x0D terminator byte, and one more to match
        files seen in the wild.
        """
        # TODO: check the second -1 against the dBase III+ reference layout.
        return int((self.header_length - 1) / DESCRIPTOR_SIZE) - 1


def parse_header(data: bytes) -> FileHeader:
    """Parse the 32-byte file header."""
    if len(data) < HEADER_SIZE:
        raise MalformedHeader(
            f"Header needs {HEADER_SIZE} bytes", offset=0, length=len(data),
        )

    (version, yy, mm, dd, record_count, header_length, record_width,
     _txn, _enc, _mdx, _lang) = _HEADER.unpack_from(data)

    if record_count < 0:
        raise MalformedHeader(f"Negative record count {record_count}", offset=4)
    if header_length < 0:
        raise MalformedHeader(f"Negative header length {header_length}", offset=8)
    if record_width < 0:
        raise MalformedHeader(f"Negative record width {record_width}", offset=10)

    return FileHeader(
        version=version,
        last_modified=(yy, mm, dd),
        record_count=record_count,
        header_length=header_length,
        record_width=record_width,
    )


def parse_field_descriptor(data: bytes, index: int, encoding: str) -> FieldDescriptor:
    """Decode one 32-byte field descriptor block."""
    offset = HEADER_SIZE + index * DESCRIPTOR_SIZE
    raw_name, type_code, field_length, decimal_count = _DESCRIPTOR.unpack_from(data)

    try:
        name = raw_name.decode(encoding).rstrip("\x00")
    except UnicodeDecodeError as e:
        raise InvalidFieldText(
            f"Field name not decodable as {encoding}",
            offset=offset, length=DESCRIPTOR_NAME_SIZE, field_index=index,
        ) from e

    field_type = FieldType.from_code(type_code)
    if field_type is None:
        raise UnsupportedFieldType(
            f"Unknown field type {type_code!r}",
            offset=offset + DESCRIPTOR_NAME_SIZE, field_index=index, field_name=name,
        )

    return FieldDescriptor(
        name=name,
        field_type=field_type,
        field_length=field_length,
        decimal_count=decimal_count,
    )


def read_header(source: ByteSource) -> FileHeader:
    """Read and parse the file header from the start of the source."""
    # A file shorter than the header is a header problem, not an I/O one
    return parse_header(source.read_upto(0, HEADER_SIZE))


def read_field_descriptors(
    source: ByteSource, header: FileHeader, encoding: str,
) -> list[FieldDescriptor]:
    """Read the descriptor array following the file header."""
    count = header.field_count
    if count < 0:
        raise MalformedHeader(
            f"Header length {header.header_length} implies {count} fields", offset=8,
        )

    data = source.read_at(HEADER_SIZE, count * DESCRIPTOR_SIZE)
    fields = [
        parse_field_descriptor(data[i:i + DESCRIPTOR_SIZE], n, encoding)
        for n, i in enumerate(range(0, len(data), DESCRIPTOR_SIZE))
    ]

    total = sum(f.field_length for f in fields)
    if total > header.record_width:
        raise MalformedHeader(
            f"Field lengths total {total} bytes, record width is {header.record_width}",
            offset=10,
        )

    logger.debug(
        "Parsed %d field descriptors (%d of %d record bytes used)",
        len(fields), total, header.record_width,
    )
    return fields
