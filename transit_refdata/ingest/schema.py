"""
Database Schema Module

SQLAlchemy tables mirroring the in-memory model, plus atomic database
initialization and a writer that persists a finished Collections model.

Tables:
    - stop_areas, stop_points (NaPTAN)
    - calendars, calendar_dates (GTFS)
"""

import logging

from sqlalchemy import (
    Column, Integer, String, Float, Date, Boolean, ForeignKey, Index
)
from sqlalchemy.orm import relationship, declarative_base, Session

from transit_refdata.data.model import Collections
from transit_refdata.data.objects import WEEKDAYS

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


# ============================================================================
# STOPS
# ============================================================================

class StopAreaRow(Base):
    """NaPTAN stop area, keyed by its stop area code."""

    __tablename__ = 'stop_areas'

    stop_area_id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)

    # stop_points.stop_area_id is not a foreign key; it may name an
    # area absent from this table
    stop_points = relationship(
        'StopPointRow',
        primaryjoin='StopAreaRow.stop_area_id == foreign(StopPointRow.stop_area_id)',
        viewonly=True,
    )

    def __repr__(self):
        return f"<StopAreaRow(id='{self.stop_area_id}', name='{self.name}')>"


class StopPointRow(Base):
    """NaPTAN stop point, keyed by its ATCO code."""

    __tablename__ = 'stop_points'

    stop_point_id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    stop_area_id = Column(String(50), nullable=False, index=True)
    platform_code = Column(String(50), nullable=True)

    # None when the stop area is not in stop_areas
    stop_area = relationship(
        'StopAreaRow',
        primaryjoin='foreign(StopPointRow.stop_area_id) == StopAreaRow.stop_area_id',
        viewonly=True,
    )

    def __repr__(self):
        return f"<StopPointRow(id='{self.stop_point_id}', name='{self.name}', stop_area='{self.stop_area_id}')>"


# ============================================================================
# CALENDARS
# ============================================================================

class CalendarRow(Base):
    """GTFS service calendar with its weekly pattern."""

    __tablename__ = 'calendars'

    service_id = Column(String(100), primary_key=True)
    monday = Column(Boolean, nullable=False, default=False)
    tuesday = Column(Boolean, nullable=False, default=False)
    wednesday = Column(Boolean, nullable=False, default=False)
    thursday = Column(Boolean, nullable=False, default=False)
    friday = Column(Boolean, nullable=False, default=False)
    saturday = Column(Boolean, nullable=False, default=False)
    sunday = Column(Boolean, nullable=False, default=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Relationships
    calendar_dates = relationship(
        'CalendarDateRow', back_populates='calendar', order_by='CalendarDateRow.sequence'
    )

    def __repr__(self):
        return f"<CalendarRow(service_id='{self.service_id}')>"


class CalendarDateRow(Base):
    """Dated exception of a calendar, in the order it was read."""

    __tablename__ = 'calendar_dates'

    calendar_date_id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(String(100), ForeignKey('calendars.service_id'), nullable=False)
    sequence = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    exception_type = Column(String(1), nullable=False)  # '1' added, '2' removed

    calendar = relationship('CalendarRow', back_populates='calendar_dates')

    __table_args__ = (
        Index('idx_calendar_date_service', 'service_id', 'sequence'),
    )

    def __repr__(self):
        return f"<CalendarDateRow(service='{self.service_id}', date={self.date}, type={self.exception_type})>"


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def initialize_database(engine, drop_existing=False):
    """
    Initialize database schema atomically.

    Args:
        engine: SQLAlchemy engine instance
        drop_existing: If True, drops all existing tables before creation
    """
    if drop_existing:
        logger.warning("Dropping all existing tables")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")


def persist_collections(session: Session, collections: Collections) -> dict:
    """
    Write a finished model into the database.

    Rows are added to `session`; committing is left to the caller
    (ConnectionBroker.get_session commits on exit).

    Returns:
        Statistics dictionary with row counts per table
    """
    stats = {'stop_areas': 0, 'stop_points': 0, 'calendars': 0, 'calendar_dates': 0}

    for stop_area in collections.stop_areas:
        session.add(StopAreaRow(
            stop_area_id=stop_area.id,
            name=stop_area.name,
            longitude=stop_area.coord.lon,
            latitude=stop_area.coord.lat,
        ))
        stats['stop_areas'] += 1
    for stop_point in collections.stop_points:
        session.add(StopPointRow(
            stop_point_id=stop_point.id,
            name=stop_point.name,
            longitude=stop_point.coord.lon,
            latitude=stop_point.coord.lat,
            stop_area_id=stop_point.stop_area_id,
            platform_code=stop_point.platform_code,
        ))
        stats['stop_points'] += 1

    for calendar in collections.calendars:
        pattern = {day: getattr(calendar, day) for day in WEEKDAYS}
        session.add(CalendarRow(
            service_id=calendar.id,
            start_date=calendar.start_date,
            end_date=calendar.end_date,
            **pattern,
        ))
        stats['calendars'] += 1
    session.flush()

    for calendar in collections.calendars:
        for sequence, (day, exception_type) in enumerate(calendar.calendar_dates):
            session.add(CalendarDateRow(
                service_id=calendar.id,
                sequence=sequence,
                date=day,
                exception_type=exception_type.value,
            ))
            stats['calendar_dates'] += 1

    session.flush()
    logger.info(
        f"Persisted {stats['stop_areas']} stop areas, {stats['stop_points']} stop points, "
        f"{stats['calendars']} calendars, {stats['calendar_dates']} calendar dates"
    )
    return stats
