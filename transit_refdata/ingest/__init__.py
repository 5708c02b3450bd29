"""
Transit Reference Data Ingestion Module

Builds the shared in-memory model from reference files.

Entry Point:
    python -m transit_refdata.ingest --naptan NaPTANcsv.zip --gtfs ./gtfs

Components:
    - decoder: CSV byte stream -> typed records
    - projection: British National Grid -> WGS84
    - resolver: membership mappings and reference lookup
    - naptan: stop areas and stop points from the NaPTAN archive
    - calendars: calendar.txt and calendar_dates.txt
    - schema: database models and persistence of the model
    - orchestrator: main entry point coordinating all ingestion steps
"""

from .calendars import manage_calendars
from .naptan import read_naptan
from .orchestrator import run_full_ingestion
from .schema import initialize_database, Base

__all__ = ['manage_calendars', 'read_naptan', 'run_full_ingestion', 'initialize_database', 'Base']
