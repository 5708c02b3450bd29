"""
In-memory transit model objects.

Stop areas and stop points come from NaPTAN; calendars come from GTFS
calendar.txt and calendar_dates.txt. Every object exposes an `id` used
as its key in a CollectionWithId.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Set, Tuple


class ExceptionType(Enum):
    """GTFS calendar_dates.txt exception_type."""

    ADDED = "1"
    REMOVED = "2"


@dataclass(frozen=True)
class Coord:
    lon: float = 0.0
    lat: float = 0.0


@dataclass
class StopArea:
    """Group of stop points (NaPTAN StopArea)."""

    id: str
    name: str
    coord: Coord = field(default_factory=Coord)

    def __repr__(self):
        return f"<StopArea(id='{self.id}', name='{self.name}', lon={self.coord.lon}, lat={self.coord.lat})>"


@dataclass
class StopPoint:
    """Boarding point (NaPTAN Stop), always attached to a stop area."""

    id: str
    name: str
    stop_area_id: str
    coord: Coord = field(default_factory=Coord)
    platform_code: Optional[str] = None

    def __repr__(self):
        return f"<StopPoint(id='{self.id}', name='{self.name}', stop_area='{self.stop_area_id}')>"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass
class Calendar:
    """Calendar service with its weekly pattern and dated exceptions."""

    id: str
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    calendar_dates: List[Tuple[date, ExceptionType]] = field(default_factory=list)

    def add_exception(self, day: date, exception_type: ExceptionType):
        self.calendar_dates.append((day, exception_type))

    def dates(self) -> List[date]:
        """
        Active dates of the service.

        Pattern days between start_date and end_date (both inclusive),
        then each exception applied in the order it was recorded.
        """
        active: Set[date] = set()
        if self.start_date is not None and self.end_date is not None:
            running = [getattr(self, day) for day in WEEKDAYS]
            current = self.start_date
            while current <= self.end_date:
                if running[current.weekday()]:
                    active.add(current)
                current += timedelta(days=1)

        for day, exception_type in self.calendar_dates:
            if exception_type is ExceptionType.ADDED:
                active.add(day)
            else:
                active.discard(day)

        return sorted(active)

    def __repr__(self):
        return f"<Calendar(id='{self.id}', exceptions={len(self.calendar_dates)})>"
