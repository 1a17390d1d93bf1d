"""DBF file handle and lazy record sequence."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from dbfdump.config import DEFAULT_ENCODING, normalize_encoding
from dbfdump.dbf.errors import DbfError
from dbfdump.dbf.fields import FieldDescriptor, Record
from dbfdump.dbf.header import FileHeader, read_field_descriptors, read_header
from dbfdump.dbf.records import decode_record, read_record_bytes, record_offset
from dbfdump.dbf.source import ByteSource

logger = logging.getLogger(__name__)


class DbfFile:
    """An open DBF table.

    Owns its byte source. Field metadata and sizes are fixed at open time;
    records are decoded on demand, one seek and read per call, with no
    caching. Not safe to share between threads.
    """

    def __init__(
        self,
        source: ByteSource,
        header: FileHeader,
        fields: list[FieldDescriptor],
        encoding: str = DEFAULT_ENCODING,
        owns_source: bool = False,
    ):
        self._source: ByteSource | None = source
        self._owns_source = owns_source
        self.header = header
        self.fields: tuple[FieldDescriptor, ...] = tuple(fields)
        self.encoding = encoding

    @property
    def record_count(self) -> int:
        return self.header.record_count

    @property
    def record_width(self) -> int:
        return self.header.record_width

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def _require_source(self) -> ByteSource:
        if self._source is None:
            raise DbfError("File handle is closed")
        return self._source

    def record(self, index: int) -> Optional[Record]:
        """Decode record `index`, or return None if it is out of range."""
        if index < 0 or index >= self.record_count:
            return None

        source = self._require_source()
        offset = record_offset(len(self.fields), self.record_width, index)
        data = read_record_bytes(
            source, offset, self.record_width,
            is_last=index == self.record_count - 1,
        )
        return decode_record(
            data, self.fields, self.encoding,
            record_index=index, base_offset=offset,
        )

    def records(self) -> RecordSequence:
        """Wrap this handle in a forward sequence over all records.

        Random access through the handle while the sequence is in use moves
        no shared state, but the sequence is the intended owner until
        RecordSequence.into_inner() hands the handle back.
        """
        return RecordSequence(self)

    def close(self) -> None:
        """Close the underlying stream if this handle opened it."""
        if self._source is not None and self._owns_source:
            self._source.close()
        self._source = None

    def __enter__(self) -> DbfFile:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DbfFile(records={self.record_count}, width={self.record_width}, "
            f"fields={self.field_names!r})"
        )


class RecordSequence:
    """Single-pass, forward-only iterator over every record of a DbfFile."""

    def __init__(self, dbf: DbfFile):
        self._dbf = dbf
        self._next = 0

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        if self._next >= self._dbf.record_count:
            raise StopIteration
        rec = self._dbf.record(self._next)
        self._next += 1
        if rec is None:
            raise StopIteration
        return rec

    def __len__(self) -> int:
        return max(self._dbf.record_count - self._next, 0)

    @property
    def position(self) -> int:
        return self._next

    def into_inner(self) -> DbfFile:
        """Hand back the file handle; this sequence is exhausted afterwards."""
        dbf = self._dbf
        self._next = dbf.record_count
        return dbf


def open_dbf(stream: BinaryIO, encoding: str = DEFAULT_ENCODING) -> DbfFile:
    """Parse the header and field descriptors of a seekable binary stream.

    The caller keeps responsibility for closing `stream`.
    """
    encoding = check_encoding(encoding)
    return _open_source(ByteSource(stream), encoding, owns_source=False)


def open_file(path: Path | str, encoding: str = DEFAULT_ENCODING) -> DbfFile:
    """Open a DBF file on disk. The returned handle closes the file."""
    encoding = check_encoding(encoding)
    f = open(path, "rb")
    try:
        return _open_source(ByteSource(f), encoding, owns_source=True)
    except Exception:
        f.close()
        raise


def check_encoding(encoding: str) -> str:
    """Canonical codec name, or DbfError if it is not a supported single-byte encoding."""
    canonical = normalize_encoding(encoding)
    if canonical is None:
        raise DbfError(f"Unsupported encoding '{encoding}': only single-byte encodings are read")
    return canonical


def _open_source(source: ByteSource, encoding: str, owns_source: bool) -> DbfFile:
    header = read_header(source)
    fields = read_field_descriptors(source, header, encoding)
    logger.debug(
        "Opened DBF: %d records x %d bytes, %d fields",
        header.record_count, header.record_width, len(fields),
    )
    return DbfFile(source, header, fields, encoding=encoding, owns_source=owns_source)


def main():
    """Quick test: open a DBF file and print its fields and first records."""
    import sys
    if len(sys.argv) < 2:
        print("Usage: python -m dbfdump.dbf.reader <path/to/file.dbf>")
        sys.exit(1)

    path = Path(sys.argv[1])
    with open_file(path) as dbf:
        print(f"{path.name}: {dbf.record_count:,} records, {len(dbf.fields)} fields\n")
        for f in dbf.fields:
            print(f"  {f.name:<12} {f.field_type.code} {f.field_length:>3}.{f.decimal_count}")

        print("\nFirst records:")
        for i in range(min(dbf.record_count, 5)):
            rec = dbf.record(i)
            print(f"  {i}: " + ", ".join(f"{k}={v}" for k, v in rec.items()))


if __name__ == "__main__":
    main()
