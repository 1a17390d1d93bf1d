"""Per-record decoding: offsets, field slicing, null detection, numeric parsing."""
from __future__ import annotations

import logging
import re
from typing import Sequence

from dbfdump.dbf.constants import (
    DESCRIPTOR_SIZE,
    HEADER_SIZE,
    HEADER_TRAILER_SIZE,
    NULL_MARKER,
)
from dbfdump.dbf.errors import InvalidFieldText, InvalidNumericLiteral, IoFailure
from dbfdump.dbf.fields import (
    NULL,
    FieldDescriptor,
    FieldType,
    FieldValue,
    Number,
    Record,
    Text,
)
from dbfdump.dbf.source import ByteSource

logger = logging.getLogger(__name__)

# Sign, digits with optional point, optional exponent. No inf/nan, no underscores.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def header_region_length(field_count: int) -> int:
    """Bytes preceding the first record."""
    return HEADER_SIZE + DESCRIPTOR_SIZE * field_count + HEADER_TRAILER_SIZE


def record_offset(field_count: int, record_width: int, index: int) -> int:
    """Absolute byte offset of record `index`."""
    return header_region_length(field_count) + index * record_width


def read_record_bytes(
    source: ByteSource,
    offset: int,
    record_width: int,
    is_last: bool,
) -> bytes:
    """Read one record, tolerating a final record written one byte short."""
    try:
        return source.read_at(offset, record_width)
    except IoFailure:
        if not is_last or record_width == 0:
            raise
        logger.debug(
            "Last record at offset %d is short, retrying with %d bytes",
            offset, record_width - 1,
        )
        return source.read_at(offset, record_width - 1)


def parse_numeric(text: str) -> float:
    """Parse a base-10 numeric literal. Raises ValueError if it isn't one."""
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError(f"not a decimal literal: {text!r}")
    return float(text)


def is_null(text: str, field_type: FieldType) -> bool:
    """`*` marks an absent value; blank text is absent only for Character fields."""
    if text.startswith(NULL_MARKER):
        return True
    return text == "" and field_type is FieldType.CHARACTER


def decode_field(
    raw: bytes,
    field: FieldDescriptor,
    encoding: str,
    *,
    record_index: int | None = None,
    field_index: int | None = None,
    offset: int | None = None,
) -> FieldValue:
    """Decode one field slice into a Text, Number, or Null value."""
    try:
        text = raw.decode(encoding).strip()
    except UnicodeDecodeError as e:
        raise InvalidFieldText(
            f"Field bytes not decodable as {encoding}",
            offset=offset, length=len(raw), record_index=record_index,
            field_index=field_index, field_name=field.name,
        ) from e

    if is_null(text, field.field_type):
        return NULL

    if field.field_type is FieldType.CHARACTER:
        return Text(text)
    if field.field_type is FieldType.NUMERIC:
        try:
            return Number(parse_numeric(text))
        except ValueError as e:
            raise InvalidNumericLiteral(
                f"Invalid numeric text {text!r}",
                offset=offset, length=len(raw), record_index=record_index,
                field_index=field_index, field_name=field.name,
            ) from e
    raise ValueError(f"Unhandled field type: {field.field_type!r}")


def decode_record(
    data: bytes,
    fields: Sequence[FieldDescriptor],
    encoding: str,
    *,
    record_index: int | None = None,
    base_offset: int = 0,
) -> Record:
    """Slice a record buffer by field length and decode every field."""
    record: Record = {}
    pos = 0
    for i, field in enumerate(fields):
        raw = data[pos:pos + field.field_length]
        record[field.name] = decode_field(
            raw, field, encoding,
            record_index=record_index, field_index=i, offset=base_offset + pos,
        )
        pos += field.field_length
    return record
