"""
Destination model shared by every importer.

Not synchronised: a single import run owns it at a time.
"""

from .collection import CollectionWithId
from .objects import Calendar, StopArea, StopPoint


class Collections:
    """All collections assembled by an import run."""

    def __init__(self):
        self.stop_areas: CollectionWithId[StopArea] = CollectionWithId(name="stop_areas")
        self.stop_points: CollectionWithId[StopPoint] = CollectionWithId(name="stop_points")
        self.calendars: CollectionWithId[Calendar] = CollectionWithId(name="calendars")

    def summary(self) -> dict:
        return {
            'stop_areas': len(self.stop_areas),
            'stop_points': len(self.stop_points),
            'calendars': len(self.calendars),
            'calendar_dates': sum(len(c.calendar_dates) for c in self.calendars),
        }

    def __repr__(self):
        counts = ", ".join(f"{key}={value}" for key, value in self.summary().items())
        return f"<Collections({counts})>"
