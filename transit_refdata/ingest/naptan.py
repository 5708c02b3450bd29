"""
NaPTAN Stop Ingestion

Reads the NaPTAN CSV archive (https://en.wikipedia.org/wiki/NaPTAN):
    - StopAreas.csv: stop areas, located in British National Grid
    - StopsInArea.csv: stop -> stop area membership
    - Stops.csv: stop points, located in WGS84

Every error here is fatal for the stop import: a stop area that cannot
be projected, a duplicate code, or a stop without a stop area aborts the
whole step and nothing is merged into the model.
"""

import logging
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from tqdm import tqdm

from transit_refdata.config.config_main import (
    ingestion_config,
    STOP_AREAS_FILENAME,
    STOPS_IN_AREA_FILENAME,
    STOPS_FILENAME,
)
from transit_refdata.data.collection import CollectionWithId
from transit_refdata.data.errors import ContainerError
from transit_refdata.data.model import Collections
from transit_refdata.data.objects import Coord, StopArea, StopPoint

from .decoder import DECIMAL, FieldSpec, decode_records
from .projection import PlanarProjector, PyprojProjector
from .resolver import build_membership, resolve

logger = logging.getLogger(__name__)


# ============================================================================
# NAPTAN RECORDS
# ============================================================================

@dataclass
class NaPTANStopArea:
    stop_area_code: str
    name: str
    easting: float
    northing: float


@dataclass
class NaPTANStopInArea:
    atco_code: str
    stop_area_code: str


@dataclass
class NaPTANStop:
    atco_code: str
    name: str
    longitude: float
    latitude: float
    indicator: Optional[str] = None


STOP_AREA_FIELDS = [
    FieldSpec("StopAreaCode", "stop_area_code"),
    FieldSpec("Name", "name", allow_empty=True),
    FieldSpec("Easting", "easting", DECIMAL),
    FieldSpec("Northing", "northing", DECIMAL),
]

STOP_IN_AREA_FIELDS = [
    FieldSpec("AtcoCode", "atco_code"),
    FieldSpec("StopAreaCode", "stop_area_code"),
]

STOP_FIELDS = [
    FieldSpec("ATCOCode", "atco_code"),
    FieldSpec("CommonName", "name", allow_empty=True),
    FieldSpec("Longitude", "longitude", DECIMAL),
    FieldSpec("Latitude", "latitude", DECIMAL),
    FieldSpec("Indicator", "indicator", required=False),
]


# ============================================================================
# READERS
# ============================================================================

def read_stop_areas(
    reader,
    projector: PlanarProjector = None,
    source: str = STOP_AREAS_FILENAME,
) -> CollectionWithId[StopArea]:
    """
    Read stop areas and project them to geographic coordinates.

    Args:
        reader: Binary stream of StopAreas.csv
        projector: Planar to geographic converter (built from
            configuration when omitted)
        source: Name used in error messages

    Returns:
        Stop areas in file order
    """
    if projector is None:
        projector = PyprojProjector()

    stop_areas = CollectionWithId(name="stop_areas")
    records = decode_records(reader, NaPTANStopArea, STOP_AREA_FIELDS, source=source)
    for stop_area in tqdm(records, desc="Reading stop areas", unit="area",
                          disable=not ingestion_config.show_progress):
        stop_areas.insert(StopArea(
            id=stop_area.stop_area_code,
            name=stop_area.name,
            coord=projector.project(stop_area.easting, stop_area.northing),
        ))
    return stop_areas


def read_stops_in_area(reader, source: str = STOPS_IN_AREA_FILENAME) -> Dict[str, str]:
    """Read the stop -> stop area membership mapping."""
    records = decode_records(reader, NaPTANStopInArea, STOP_IN_AREA_FIELDS, source=source)
    return build_membership(
        (stop_in_area.atco_code, stop_in_area.stop_area_code) for stop_in_area in records
    )


def read_stops(
    reader,
    stops_in_area: Dict[str, str],
    source: str = STOPS_FILENAME,
) -> CollectionWithId[StopPoint]:
    """
    Read stop points and attach each one to its stop area.

    Raises:
        UnresolvedReference: a stop has no entry in `stops_in_area`
    """
    stop_points = CollectionWithId(name="stop_points")
    records = decode_records(reader, NaPTANStop, STOP_FIELDS, source=source)
    for stop in tqdm(records, desc="Reading stops", unit="stop",
                     disable=not ingestion_config.show_progress):
        stop_area_id = resolve(stop.atco_code, stops_in_area, "StopArea", "StopPoint")
        stop_points.insert(StopPoint(
            id=stop.atco_code,
            name=stop.name,
            coord=Coord(lon=stop.longitude, lat=stop.latitude),
            stop_area_id=stop_area_id,
            platform_code=stop.indicator,
        ))
    return stop_points


def validate_stops(
    stop_areas: CollectionWithId[StopArea],
    stop_points: CollectionWithId[StopPoint],
):
    """
    Structural checks over the finished stop collections.

    Nothing is rejected here. A stop point may belong to a stop area that
    StopAreas.csv does not list; those are only counted and logged.
    """
    unlisted = sum(1 for stop_point in stop_points if stop_point.stop_area_id not in stop_areas)
    if unlisted:
        logger.info(f"{unlisted} stop points reference a stop area not listed in {STOP_AREAS_FILENAME}")
    logger.debug(
        f"Validated {len(stop_areas)} stop areas and {len(stop_points)} stop points"
    )


# ============================================================================
# ARCHIVE
# ============================================================================

@contextmanager
def open_archive(path):
    """Open a zip archive, closing it whatever happens in the block."""
    try:
        archive = zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as e:
        raise ContainerError(path, str(e)) from e
    try:
        yield archive
    finally:
        archive.close()


@contextmanager
def open_entry(archive: zipfile.ZipFile, name: str):
    try:
        entry = archive.open(name)
    except KeyError as e:
        raise ContainerError(archive.filename, f"no entry named '{name}'") from e
    with entry:
        yield entry


def read_naptan(naptan_path, collections: Collections, projector: PlanarProjector = None):
    """
    Import stop areas and stop points from a NaPTAN CSV archive.

    Args:
        naptan_path: Path to the NaPTAN zip archive
        collections: Destination model
        projector: Planar to geographic converter (built from
            configuration when omitted)

    Raises:
        RefDataError: any failure; `collections` only receives data
            once every file has been read
    """
    if projector is None:
        projector = PyprojProjector()

    naptan_path = Path(naptan_path)
    with open_archive(naptan_path) as archive:
        logger.info(f"Reading NaPTAN file for {STOP_AREAS_FILENAME}")
        with open_entry(archive, STOP_AREAS_FILENAME) as entry:
            stop_areas = read_stop_areas(entry, projector)

        logger.info(f"Reading NaPTAN file for {STOPS_IN_AREA_FILENAME}")
        with open_entry(archive, STOPS_IN_AREA_FILENAME) as entry:
            stops_in_area = read_stops_in_area(entry)

        logger.info(f"Reading NaPTAN file for {STOPS_FILENAME}")
        with open_entry(archive, STOPS_FILENAME) as entry:
            stop_points = read_stops(entry, stops_in_area)

    validate_stops(stop_areas, stop_points)
    collections.stop_areas.merge(stop_areas)
    collections.stop_points.merge(stop_points)
    logger.info(
        f"NaPTAN import complete: {len(stop_areas)} stop areas, {len(stop_points)} stop points"
    )
