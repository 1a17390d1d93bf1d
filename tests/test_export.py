"""Tests for CSV and JSON export."""
import csv
import io
import json

from dbfdump.dbf.reader import open_dbf
from dbfdump.export.csv_export import export_csv
from dbfdump.export.json_export import export_json


class TestExportCsv:
    def test_rows_match_records(self, sample_bytes) -> None:
        """Test header row plus one row per record, nulls as empty cells."""
        dbf = open_dbf(io.BytesIO(sample_bytes))
        rows = list(csv.reader(io.StringIO(export_csv(dbf))))
        assert rows == [
            ["NAME", "AMT"],
            ["JOHN DOE", "123.45"],
            ["", "7"],
            ["", ""],
        ]

    def test_handle_usable_after_export(self, sample_bytes) -> None:
        dbf = open_dbf(io.BytesIO(sample_bytes))
        export_csv(dbf)
        assert dbf.record(0) is not None


class TestExportJson:
    def test_fields_and_records(self, sample_bytes) -> None:
        dbf = open_dbf(io.BytesIO(sample_bytes))
        data = json.loads(export_json(dbf))
        assert data["fields"] == [
            {"name": "NAME", "type": "C", "length": 10, "decimals": 0},
            {"name": "AMT", "type": "N", "length": 10, "decimals": 2},
        ]
        assert data["records"] == [
            {"NAME": "JOHN DOE", "AMT": 123.45},
            {"NAME": None, "AMT": 7.0},
            {"NAME": None, "AMT": None},
        ]
