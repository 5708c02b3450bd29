"""
Coordinate Projection

Planar (easting, northing) to geographic (longitude, latitude)
conversion. Importers only depend on the PlanarProjector interface; the
pyproj implementation is the default.
"""

import logging
import math

from pyproj import Transformer
from pyproj.exceptions import CRSError, ProjError

from transit_refdata.config.config_main import projection_config
from transit_refdata.data.errors import ProjectionConfigError, ProjectionError
from transit_refdata.data.objects import Coord

logger = logging.getLogger(__name__)


class PlanarProjector:
    """Pure planar to geographic conversion."""

    def project(self, easting: float, northing: float) -> Coord:
        raise NotImplementedError

    def __call__(self, easting: float, northing: float) -> Coord:
        return self.project(easting, northing)


class PyprojProjector(PlanarProjector):
    """
    pyproj-backed projector.

    The transformer is built once, in the constructor, so a bad CRS pair
    fails before any record is read.

    Args:
        source_crs: Planar CRS of the input (default from SOURCE_CRS)
        target_crs: Geographic CRS of the output (default from TARGET_CRS)
    """

    def __init__(self, source_crs: str = None, target_crs: str = None):
        self.source_crs = source_crs or projection_config.source_crs
        self.target_crs = target_crs or projection_config.target_crs
        try:
            # always_xy: (easting, northing) in, (lon, lat) out
            self._transformer = Transformer.from_crs(
                self.source_crs, self.target_crs, always_xy=True
            )
        except (CRSError, ProjError) as e:
            raise ProjectionConfigError(self.source_crs, self.target_crs, str(e)) from e

        logger.info(f"Projection ready: {self.source_crs} -> {self.target_crs}")

    def project(self, easting: float, northing: float) -> Coord:
        try:
            lon, lat = self._transformer.transform(easting, northing, errcheck=True)
        except ProjError as e:
            raise ProjectionError(easting, northing, str(e)) from e

        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise ProjectionError(easting, northing, "result outside the target domain")
        return Coord(lon=float(lon), lat=float(lat))

    def __repr__(self):
        return f"<PyprojProjector(source='{self.source_crs}', target='{self.target_crs}')>"
