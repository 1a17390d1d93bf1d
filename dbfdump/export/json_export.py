"""Export DBF records as JSON."""
from __future__ import annotations

import json

from dbfdump.dbf.fields import to_python
from dbfdump.dbf.reader import DbfFile


def export_json(dbf: DbfFile) -> str:
    """Export field metadata and every record as a JSON string."""
    data = {
        "fields": [
            {
                "name": f.name,
                "type": f.field_type.code,
                "length": f.field_length,
                "decimals": f.decimal_count,
            }
            for f in dbf.fields
        ],
        "records": [
            {name: to_python(value) for name, value in rec.items()}
            for rec in dbf.records()
        ],
    }
    return json.dumps(data, indent=2)
