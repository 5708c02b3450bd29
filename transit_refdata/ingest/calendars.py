"""
GTFS Calendar Ingestion

Builds calendar services from calendar.txt and attaches the dated
exceptions of calendar_dates.txt. An exception pointing at an unknown
service is logged and skipped; a malformed row in either file aborts the
import.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from transit_refdata.config.config_main import CALENDAR_FILENAME, CALENDAR_DATES_FILENAME
from transit_refdata.data.collection import CollectionWithId
from transit_refdata.data.errors import ContainerError, UnresolvedReference
from transit_refdata.data.model import Collections
from transit_refdata.data.objects import WEEKDAYS, Calendar, ExceptionType

from .decoder import DATE, ENUM, FLAG, FieldSpec, decode_records
from .resolver import resolve

logger = logging.getLogger(__name__)


@dataclass
class CalendarDate:
    service_id: str
    date: date
    exception_type: ExceptionType


CALENDAR_FIELDS = (
    [FieldSpec("service_id", "service_id")]
    + [FieldSpec(day, day, FLAG, required=False) for day in WEEKDAYS]
    + [
        FieldSpec("start_date", "start_date", DATE, required=False),
        FieldSpec("end_date", "end_date", DATE, required=False),
    ]
)

CALENDAR_DATE_FIELDS = [
    FieldSpec("service_id", "service_id"),
    FieldSpec("date", "date", DATE),
    FieldSpec("exception_type", "exception_type", ENUM, enum=ExceptionType),
]


def _calendar_from_row(service_id, **pattern) -> Calendar:
    # Unset weekday flags mean "not running"
    values = {key: value for key, value in pattern.items() if value is not None}
    return Calendar(id=service_id, **values)


def read_calendars(reader, source: str = CALENDAR_FILENAME) -> CollectionWithId[Calendar]:
    """Read calendar services, keyed by service_id, in file order."""
    calendars = CollectionWithId(name="calendars")
    for calendar in decode_records(reader, _calendar_from_row, CALENDAR_FIELDS, source=source):
        calendars.insert(calendar)
    return calendars


def insert_calendar_date(calendars: CollectionWithId[Calendar], calendar_date: CalendarDate) -> bool:
    """
    Attach one exception to its service.

    Returns:
        False when the service is unknown (the exception is dropped)
    """
    try:
        calendar = resolve(calendar_date.service_id, calendars, "Calendar", "calendar date")
    except UnresolvedReference:
        logger.warning(f"{CALENDAR_DATES_FILENAME}: service_id={calendar_date.service_id} not found")
        return False
    calendar.add_exception(calendar_date.date, calendar_date.exception_type)
    return True


def read_calendar_dates(
    reader,
    calendars: CollectionWithId[Calendar],
    source: str = CALENDAR_DATES_FILENAME,
) -> dict:
    """
    Apply every exception of calendar_dates.txt to `calendars`.

    Returns:
        Statistics dictionary with counts
    """
    stats = {'applied': 0, 'skipped': 0}
    for calendar_date in decode_records(reader, CalendarDate, CALENDAR_DATE_FIELDS, source=source):
        if insert_calendar_date(calendars, calendar_date):
            stats['applied'] += 1
        else:
            stats['skipped'] += 1
    return stats


def manage_calendars(collections: Collections, path) -> Optional[dict]:
    """
    Import calendar.txt and the optional calendar_dates.txt of a GTFS directory.

    Args:
        collections: Destination model
        path: GTFS directory

    Returns:
        Exception statistics, or None when calendar_dates.txt is absent
    """
    path = Path(path)

    calendar_path = path / CALENDAR_FILENAME
    logger.info(f"Reading {CALENDAR_FILENAME}")
    try:
        reader = open(calendar_path, 'rb')
    except OSError as e:
        raise ContainerError(calendar_path, str(e)) from e
    with reader:
        calendars = read_calendars(reader, source=str(calendar_path))

    stats = None
    calendar_dates_path = path / CALENDAR_DATES_FILENAME
    if calendar_dates_path.is_file():
        logger.info(f"Reading {CALENDAR_DATES_FILENAME}")
        with open(calendar_dates_path, 'rb') as reader:
            stats = read_calendar_dates(reader, calendars, source=str(calendar_dates_path))
        logger.info(
            f"{CALENDAR_DATES_FILENAME}: {stats['applied']} exceptions applied, "
            f"{stats['skipped']} skipped"
        )
    else:
        logger.info(f"No {CALENDAR_DATES_FILENAME} found, skipping calendar exceptions")

    collections.calendars.merge(calendars)
    return stats
