"""Coordinate, angle and numerical utilities.

NOTE: Keep this package lightweight.
Avoid importing heavy/optional dependencies (matplotlib, pandas, ...) at import time.
"""

from galileo_pvt.utils.angles import elev_az_from_rx_sv, topocent
from galileo_pvt.utils.linalg import invert, solve_least_squares
from galileo_pvt.utils.logging import get_logger
from galileo_pvt.utils.wgs84 import (
    ELLIPSOIDS,
    cart2geo,
    ecef_to_enu_matrix,
    enu_from_ecef_delta,
    get_ellipsoid,
    lla_to_ecef,
    togeod,
)

__all__ = [
    "ELLIPSOIDS",
    "cart2geo",
    "ecef_to_enu_matrix",
    "elev_az_from_rx_sv",
    "enu_from_ecef_delta",
    "get_ellipsoid",
    "get_logger",
    "invert",
    "lla_to_ecef",
    "solve_least_squares",
    "togeod",
    "topocent",
]
