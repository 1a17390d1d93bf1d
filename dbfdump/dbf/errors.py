"""Typed decode failures raised by the DBF reader.

Every failure carries whatever location context was known when it happened
(byte offset, requested length, record index, field index and name) so that a
malformed file can be diagnosed from the message alone.
"""
from __future__ import annotations

from typing import Optional


class DbfError(Exception):
    """Base class for all DBF decode failures."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        length: Optional[int] = None,
        record_index: Optional[int] = None,
        field_index: Optional[int] = None,
        field_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.length = length
        self.record_index = record_index
        self.field_index = field_index
        self.field_name = field_name

    def context(self) -> dict[str, object]:
        """Known location details, in a stable order."""
        items = {
            "record": self.record_index,
            "field": self.field_index,
            "name": self.field_name,
            "offset": self.offset,
            "length": self.length,
        }
        return {k: v for k, v in items.items() if v is not None}

    def __str__(self) -> str:
        ctx = self.context()
        if not ctx:
            return self.message
        details = ", ".join(f"{k}={v!r}" if k == "name" else f"{k}={v}" for k, v in ctx.items())
        return f"{self.message} ({details})"


class IoFailure(DbfError):
    """Seek or read against the byte source failed or came up short."""


class MalformedHeader(DbfError):
    """File header is truncated or its derived sizes are inconsistent."""


class UnsupportedFieldType(DbfError):
    """Field descriptor carries a type code outside the supported set."""


class InvalidFieldText(DbfError):
    """Field or field-name bytes cannot be decoded with the file encoding."""


class InvalidNumericLiteral(DbfError):
    """Numeric field text is not a base-10 number."""
