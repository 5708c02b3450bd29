"""
Transit reference data: NaPTAN stops and GTFS calendars assembled into
one cross-referenced in-memory model.
"""

__version__ = "0.1.0"
