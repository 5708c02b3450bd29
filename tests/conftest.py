"""
Shared fixtures: NaPTAN archives and GTFS directories built on the fly.
"""

import zipfile

import pytest

from transit_refdata.data.objects import Coord
from transit_refdata.ingest.projection import PlanarProjector


STOP_AREAS_CSV = '''"StopAreaCode","Name","Easting","Northing"
"010G0001","Bristol Bus Station",358929,173523
"010G0002","Temple Meads",359657,172418
'''

STOPS_IN_AREA_CSV = '''"StopAreaCode","AtcoCode"
"010G0001","0100053316"
"010G0002","0100053264"
'''

STOPS_CSV = '''"ATCOCode","CommonName","Indicator","Longitude","Latitude"
"0100053316","Broad Walk Shops","Stop B",-2.5876178397,51.4558382170
"0100053264","Alberton Road","NE-bound",-2.5407019785,51.4889912765
'''


class ScaledProjector(PlanarProjector):
    """Deterministic stand-in: lon = easting / 1000, lat = northing / 1000."""

    def project(self, easting, northing):
        return Coord(lon=easting / 1000, lat=northing / 1000)


@pytest.fixture
def projector():
    return ScaledProjector()


@pytest.fixture
def make_naptan_zip(tmp_path):
    """Build a NaPTAN archive; pass None to leave an entry out."""

    def _make(stop_areas=STOP_AREAS_CSV, stops_in_area=STOPS_IN_AREA_CSV,
              stops=STOPS_CSV, name="naptan.zip"):
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            if stop_areas is not None:
                archive.writestr("StopAreas.csv", stop_areas)
            if stops_in_area is not None:
                archive.writestr("StopsInArea.csv", stops_in_area)
            if stops is not None:
                archive.writestr("Stops.csv", stops)
        return path

    return _make


@pytest.fixture
def make_gtfs_dir(tmp_path):
    """Write calendar.txt and, when given, calendar_dates.txt."""

    def _make(calendar, calendar_dates=None):
        path = tmp_path / "gtfs"
        path.mkdir(exist_ok=True)
        (path / "calendar.txt").write_text(calendar, encoding="utf-8")
        if calendar_dates is not None:
            (path / "calendar_dates.txt").write_text(calendar_dates, encoding="utf-8")
        return path

    return _make
