"""Export DBF records as CSV."""
from __future__ import annotations

import csv
import io

from dbfdump.dbf.fields import Null
from dbfdump.dbf.reader import DbfFile


def export_csv(dbf: DbfFile) -> str:
    """Export every record as a CSV string, one column per field.

    Null values become empty cells; numbers use the same rendering as the dump.
    """
    output = io.StringIO()
    writer = csv.writer(output)

    names = dbf.field_names
    writer.writerow(names)

    for rec in dbf.records():
        writer.writerow([
            "" if isinstance(rec[name], Null) else str(rec[name])
            for name in names
        ])

    return output.getvalue()
