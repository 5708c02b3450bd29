"""
Tests for British National Grid to WGS84 projection.
"""

import math

import pytest
from pyproj import Transformer

from transit_refdata.data.errors import ProjectionConfigError, ProjectionError
from transit_refdata.data.objects import Coord
from transit_refdata.ingest.projection import PlanarProjector, PyprojProjector


class TestPyprojProjector:
    """Test the pyproj-backed projector."""

    @pytest.fixture(scope="class")
    def projector(self):
        return PyprojProjector("EPSG:27700", "EPSG:4326")

    def test_matches_pyproj(self, projector):
        """Each coordinate equals pyproj's own conversion."""
        transformer = Transformer.from_crs("EPSG:27700", "EPSG:4326", always_xy=True)
        for easting, northing in [(358929, 173523), (359657, 172418)]:
            lon, lat = transformer.transform(easting, northing)
            coord = projector.project(easting, northing)
            assert coord.lon == pytest.approx(lon, abs=1e-9)
            assert coord.lat == pytest.approx(lat, abs=1e-9)

    def test_bristol_lands_in_bristol(self, projector):
        """A Bristol grid reference projects into Bristol."""
        coord = projector.project(358929, 173523)
        assert -2.65 < coord.lon < -2.55
        assert 51.40 < coord.lat < 51.50

    def test_output_is_lon_lat(self, projector):
        """Coordinates come back as longitude then latitude."""
        coord = projector.project(530000, 180000)  # central London
        assert isinstance(coord, Coord)
        assert abs(coord.lon) < 1
        assert 51 < coord.lat < 52

    def test_deterministic(self, projector):
        """The same input always gives the same output."""
        assert projector.project(359657, 172418) == projector.project(359657, 172418)

    def test_callable(self, projector):
        """Calling the projector is the same as project()."""
        assert projector(359657, 172418) == projector.project(359657, 172418)

    def test_sub_metre_difference_is_visible(self, projector):
        """One metre east must move the longitude by roughly 1.4e-5 degrees."""
        a = projector.project(358929, 173523)
        b = projector.project(358930, 173523)
        delta = b.lon - a.lon
        assert 1e-5 < delta < 2e-5

    def test_default_crs_from_config(self):
        """The CRS pair defaults to the configured one."""
        projector = PyprojProjector()
        assert projector.source_crs == "EPSG:27700"
        assert projector.target_crs == "EPSG:4326"

    def test_non_finite_input_fails(self, projector):
        """Infinite coordinates raise ProjectionError."""
        with pytest.raises(ProjectionError):
            projector.project(math.inf, math.inf)


class TestProjectorConfiguration:
    """Test that a bad CRS pair fails before any record is read."""

    def test_unknown_crs(self):
        """An unknown EPSG code is a configuration error."""
        with pytest.raises(ProjectionConfigError) as excinfo:
            PyprojProjector("EPSG:999999", "EPSG:4326")
        assert excinfo.value.source_crs == "EPSG:999999"

    def test_garbage_crs(self):
        """An unparsable CRS is a configuration error."""
        with pytest.raises(ProjectionConfigError):
            PyprojProjector("not a projection", "EPSG:4326")


def test_interface_is_abstract():
    """The base projector does not project."""
    with pytest.raises(NotImplementedError):
        PlanarProjector().project(0, 0)
