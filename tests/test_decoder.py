"""
Tests for the tabular record decoder.
"""

import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest

from transit_refdata.data.errors import RecordDecodeError
from transit_refdata.data.objects import ExceptionType
from transit_refdata.ingest.decoder import (
    DATE, DECIMAL, ENUM, FLAG, FieldSpec, decode_records, parse_enum
)


@dataclass
class Row:
    code: str
    value: float
    day: Optional[date] = None
    kind: Optional[ExceptionType] = None
    running: Optional[bool] = None
    label: Optional[str] = None


FIELDS = [
    FieldSpec("Code", "code"),
    FieldSpec("Value", "value", DECIMAL),
    FieldSpec("Day", "day", DATE, required=False),
    FieldSpec("Kind", "kind", ENUM, required=False, enum=ExceptionType),
    FieldSpec("Running", "running", FLAG, required=False),
    FieldSpec("Label", "label", required=False),
]


def decode(content):
    return list(decode_records(io.BytesIO(content.encode("utf-8")), Row, FIELDS, source="test.csv"))


class TestDecoding:
    """Test successful decoding."""

    def test_typed_values(self):
        """Each field kind converts to its Python type."""
        rows = decode(
            'Code,Value,Day,Kind,Running,Label\n'
            'A,1.5,20180101,1,1,first\n'
            'B,-2,20181231,Removed,0,\n'
        )

        assert rows == [
            Row("A", 1.5, date(2018, 1, 1), ExceptionType.ADDED, True, "first"),
            Row("B", -2.0, date(2018, 12, 31), ExceptionType.REMOVED, False, None),
        ]

    def test_whitespace_is_trimmed(self):
        """Headers and values are stripped."""
        rows = decode(' Code , Value \n  A  ,  3.25  \n')
        assert rows == [Row("A", 3.25)]

    def test_quoted_fields_and_extra_columns(self):
        """Quoted fields decode and unknown columns are ignored."""
        rows = decode('"Extra","Code","Value"\n"x","010G0001",358929\n')
        assert rows == [Row("010G0001", 358929.0)]

    def test_optional_columns_may_be_absent(self):
        """Absent optional columns decode to None."""
        rows = decode('Code,Value\nA,1\n')
        assert rows[0].day is None
        assert rows[0].label is None

    def test_blank_lines_are_skipped(self):
        """Blank lines produce no record."""
        rows = decode('Code,Value\nA,1\n\nB,2\n')
        assert [r.code for r in rows] == ["A", "B"]

    def test_utf8_bom(self):
        """A leading byte order mark is not part of the first header."""
        content = '\ufeffCode,Value\nA,1\n'.encode("utf-8")
        rows = list(decode_records(io.BytesIO(content), Row, FIELDS))
        assert rows == [Row("A", 1.0)]

    def test_text_stream_accepted(self):
        """Text streams are read as they are."""
        rows = list(decode_records(io.StringIO('Code,Value\nA,1\n'), Row, FIELDS))
        assert rows == [Row("A", 1.0)]

    def test_caller_stream_left_open(self):
        """The caller's stream is still open afterwards."""
        stream = io.BytesIO(b'Code,Value\nA,1\n')
        list(decode_records(stream, Row, FIELDS))
        assert not stream.closed

    def test_decoding_is_lazy(self):
        """Records are decoded one at a time."""
        records = decode_records(io.BytesIO(b'Code,Value\nA,1\nB,oops\n'), Row, FIELDS)
        assert next(records) == Row("A", 1.0)
        with pytest.raises(RecordDecodeError):
            next(records)

    def test_empty_file_with_header_only(self):
        """A header without rows gives no records."""
        assert decode('Code,Value\n') == []

    def test_allow_empty_keeps_empty_string(self):
        """An empty value in an allow_empty column decodes to an empty string."""
        fields = [FieldSpec("Code", "code", allow_empty=True), FieldSpec("Value", "value", DECIMAL)]
        rows = list(decode_records(io.BytesIO(b"Code,Value\n ,1\n"), Row, fields))
        assert rows == [Row("", 1.0)]


class TestDecodeErrors:
    """Test that decode errors carry source, row and field."""

    def test_missing_required_column(self):
        """A missing required column fails on the header row."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Value\n1\n')
        assert excinfo.value.field == "Code"
        assert excinfo.value.row == 1
        assert excinfo.value.source == "test.csv"

    def test_empty_required_value(self):
        """An empty required value fails on its row."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value\nA,1\n ,2\n')
        assert excinfo.value.field == "Code"
        assert excinfo.value.row == 3

    def test_bad_decimal(self):
        """A non-numeric decimal names its column and row."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value\nA,abc\n')
        assert excinfo.value.field == "Value"
        assert excinfo.value.row == 2

    def test_non_finite_decimal(self):
        """NaN is not accepted as a decimal."""
        with pytest.raises(RecordDecodeError):
            decode('Code,Value\nA,nan\n')

    def test_bad_date(self):
        """Dates must be YYYYMMDD."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value,Day\nA,1,2018-01-01\n')
        assert excinfo.value.field == "Day"

    def test_bad_enum(self):
        """An unknown enum value fails."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value,Kind\nA,1,3\n')
        assert excinfo.value.field == "Kind"

    def test_bad_flag(self):
        """Flags must be 0 or 1."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value,Running\nA,1,yes\n')
        assert excinfo.value.field == "Running"

    def test_wrong_field_count(self):
        """A short row fails."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value,Label\nA,1\n')
        assert excinfo.value.row == 2

    def test_allow_empty_column_must_exist(self):
        """A required allow_empty column is still a missing column when absent."""
        fields = [FieldSpec("Code", "code", allow_empty=True), FieldSpec("Value", "value", DECIMAL)]
        with pytest.raises(RecordDecodeError) as excinfo:
            list(decode_records(io.BytesIO(b"Value\n1\n"), Row, fields))
        assert excinfo.value.field == "Code"
        assert excinfo.value.row == 1

    def test_duplicate_column(self):
        """A column read into the record may not appear twice in the header."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('Code,Value,Code\nA,1,B\n')
        assert excinfo.value.field == "Code"
        assert excinfo.value.row == 1
        assert "duplicate column" in str(excinfo.value)

    def test_duplicate_unused_column_is_ignored(self):
        """Repeated columns outside the record shape are not an error."""
        rows = decode('Code,Value,Note,Note\nA,1,x,y\n')
        assert rows == [Row("A", 1.0)]

    def test_empty_file(self):
        """An empty file is missing its required header."""
        with pytest.raises(RecordDecodeError) as excinfo:
            decode('')
        assert excinfo.value.field == "Code"

    def test_message_names_location(self):
        """The message starts with source, row and field."""
        with pytest.raises(RecordDecodeError, match=r"test.csv:2: field 'Value'"):
            decode('Code,Value\nA,x\n')


class TestParseEnum:
    """Test enum parsing by value or by name."""

    @pytest.mark.parametrize("value, expected", [
        ("1", ExceptionType.ADDED),
        ("2", ExceptionType.REMOVED),
        ("Added", ExceptionType.ADDED),
        ("REMOVED", ExceptionType.REMOVED),
    ])
    def test_accepted_values(self, value, expected):
        """Values and case-insensitive names are accepted."""
        assert parse_enum(ExceptionType, value) is expected

    def test_unknown_value(self):
        """Anything else raises ValueError."""
        with pytest.raises(ValueError):
            parse_enum(ExceptionType, "Cancelled")
