"""
Tabular Record Decoder

Turns a CSV byte stream into typed records, one per row, lazily and in
source order. Headers and values are trimmed of surrounding whitespace
before conversion. Any failure raises RecordDecodeError carrying the
source name, the 1-based line number and the offending column; the
caller decides whether that aborts its import step.

Usage:
    fields = [
        FieldSpec("StopAreaCode", "stop_area_code"),
        FieldSpec("Easting", "easting", DECIMAL),
    ]
    for record in decode_records(stream, NaPTANStopArea, fields, source="StopAreas.csv"):
        ...
"""

import csv
import io
import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence, Type

from transit_refdata.data.errors import RecordDecodeError

STRING = "string"
DECIMAL = "decimal"
DATE = "date"
ENUM = "enum"
FLAG = "flag"

# ISO 8601 basic calendar date, as written in GTFS files
DATE_FORMAT = "%Y%m%d"


@dataclass(frozen=True)
class FieldSpec:
    """
    One column of a record shape.

    Args:
        column: Header name in the source file
        attribute: Keyword used to build the record
        kind: One of STRING, DECIMAL, DATE, ENUM, FLAG
        required: Column must exist and every value must be non-empty;
            optional columns decode missing or empty values to None
        enum: Enum class for ENUM fields
        allow_empty: An empty value decodes to "" instead of failing;
            the column itself must still exist when required
    """

    column: str
    attribute: str
    kind: str = STRING
    required: bool = True
    enum: Optional[Type[Enum]] = None
    allow_empty: bool = False


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_decimal(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number '{value}'")
    return number


def parse_flag(value: str) -> bool:
    if value == "1":
        return True
    if value == "0":
        return False
    raise ValueError(f"expected 0 or 1, found '{value}'")


def parse_enum(enum_type: Type[Enum], value: str) -> Enum:
    """Accept either the enum value ('1') or its name ('Added', 'ADDED')."""
    try:
        return enum_type(value)
    except ValueError:
        pass
    for member in enum_type:
        if member.name.lower() == value.lower():
            return member
    allowed = ", ".join(m.value for m in enum_type)
    raise ValueError(f"unknown {enum_type.__name__} '{value}' (expected one of: {allowed})")


_PARSERS: Dict[str, Callable[[str], object]] = {
    STRING: lambda value: value,
    DECIMAL: parse_decimal,
    DATE: parse_date,
    FLAG: parse_flag,
}


def _convert(spec: FieldSpec, value: str):
    if spec.kind == ENUM:
        if spec.enum is None:
            raise ValueError(f"no enum type declared for column '{spec.column}'")
        return parse_enum(spec.enum, value)
    try:
        parser = _PARSERS[spec.kind]
    except KeyError:
        raise ValueError(f"unsupported field kind '{spec.kind}'")
    return parser(value)


def decode_records(
    stream,
    record_type: Callable[..., object],
    fields: Sequence[FieldSpec],
    source: str = "<stream>",
) -> Iterator:
    """
    Decode every row of a CSV stream into `record_type(**values)`.

    Args:
        stream: Binary file-like object (zip entry, open file, BytesIO)
            or an already decoded text stream
        record_type: Callable receiving one keyword per FieldSpec
        fields: Record shape; columns not listed are ignored
        source: Name used in error messages

    Yields:
        One record per non-blank data row

    Raises:
        RecordDecodeError: missing or repeated column, empty required value, bad
            number/date/enum, or wrong number of fields in a row
    """
    if isinstance(stream, io.TextIOBase):
        text, wrapper = stream, None
    else:
        text = wrapper = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")

    try:
        reader = csv.reader(text)
        header = next(reader, None)
        if header is None:
            missing = next((spec.column for spec in fields if spec.required), None)
            if missing is not None:
                raise RecordDecodeError(source, 1, missing, "empty file, missing header")
            return
        header = [name.strip() for name in header]
        positions = {name: pos for pos, name in enumerate(header)}

        for spec in fields:
            if spec.required and spec.column not in positions:
                raise RecordDecodeError(source, reader.line_num, spec.column, "missing column")
            if header.count(spec.column) > 1:
                raise RecordDecodeError(source, reader.line_num, spec.column, "duplicate column")

        for row in reader:
            if not row:
                continue
            line = reader.line_num
            if len(row) != len(header):
                raise RecordDecodeError(
                    source, line, "<row>",
                    f"expected {len(header)} fields, found {len(row)}"
                )

            values = {}
            for spec in fields:
                pos = positions.get(spec.column)
                value = row[pos].strip() if pos is not None else ""
                if not value:
                    if spec.allow_empty and pos is not None:
                        values[spec.attribute] = ""
                        continue
                    if spec.required:
                        raise RecordDecodeError(source, line, spec.column, "empty value")
                    values[spec.attribute] = None
                    continue
                try:
                    values[spec.attribute] = _convert(spec, value)
                except ValueError as e:
                    raise RecordDecodeError(source, line, spec.column, str(e)) from e

            yield record_type(**values)

    except csv.Error as e:
        raise RecordDecodeError(source, reader.line_num, "<row>", str(e)) from e
    except UnicodeDecodeError as e:
        raise RecordDecodeError(source, reader.line_num, "<row>", f"invalid UTF-8: {e}") from e
    finally:
        # The caller owns the underlying stream; leave it open.
        if wrapper is not None and not wrapper.closed:
            wrapper.detach()
