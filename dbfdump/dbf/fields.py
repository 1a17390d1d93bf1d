"""Field types, field descriptors, and decoded field values."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

from dbfdump.dbf.constants import NULL_DISPLAY, TYPE_CHARACTER, TYPE_NUMERIC


class FieldType(Enum):
    """Closed set of supported field types, valued by descriptor type code."""
    CHARACTER = TYPE_CHARACTER
    NUMERIC = TYPE_NUMERIC

    @classmethod
    def from_code(cls, code: bytes) -> FieldType | None:
        """Map a one-byte type code to a FieldType, or None if unsupported."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def code(self) -> str:
        return self.value.decode("ascii")


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One column of the table, in declaration order."""
    name: str
    field_type: FieldType
    field_length: int       # Bytes consumed in every record (0-255)
    decimal_count: int      # Numeric precision, informational only

    @property
    def display_type(self) -> str:
        """Human-readable type as printed by the dump tool."""
        if self.field_type is FieldType.CHARACTER:
            return "String"
        if self.field_type is FieldType.NUMERIC:
            return "Integer" if self.decimal_count == 0 else "Double"
        raise ValueError(f"Unhandled field type: {self.field_type!r}")


@dataclass(frozen=True, slots=True)
class Text:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Number:
    value: float

    def __str__(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        # Positional notation, never an exponent
        return format(Decimal(repr(self.value)), "f")


@dataclass(frozen=True, slots=True)
class Null:
    def __str__(self) -> str:
        return NULL_DISPLAY


NULL = Null()

FieldValue = Union[Text, Number, Null]

# Field name -> decoded value, one entry per descriptor
Record = dict[str, FieldValue]


def to_python(value: FieldValue) -> str | float | None:
    """Unwrap a field value into a plain str, float, or None."""
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Number):
        return value.value
    if isinstance(value, Null):
        return None
    raise TypeError(f"Not a field value: {value!r}")
