"""Topocentric angle utilities for GNSS geometry."""

from __future__ import annotations

import numpy as np

from galileo_pvt.utils.wgs84 import ELLIPSOID, enu_from_ecef_delta, togeod


def topocent(origin_ecef_m: np.ndarray, delta_ecef_m: np.ndarray) -> tuple[float, float, float]:
    """Transform ``delta_ecef_m`` into the topocentric frame at ``origin_ecef_m``.

    Returns:
        (azimuth_deg, elevation_deg, distance) with azimuth clockwise from north
        in [0, 360) and distance in the units of the inputs.
    """

    lat_deg, lon_deg, _ = togeod(ELLIPSOID.a, ELLIPSOID.finv, *origin_ecef_m)
    east, north, up = enu_from_ecef_delta(np.asarray(delta_ecef_m, dtype=float), lat_deg, lon_deg)

    horiz = np.hypot(east, north)
    if horiz < 1.0e-20:
        az = 0.0
        elev = 90.0
    else:
        az = float(np.rad2deg(np.arctan2(east, north)))
        elev = float(np.rad2deg(np.arctan2(up, horiz)))
    if az < 0.0:
        az += 360.0

    distance = float(np.linalg.norm(delta_ecef_m))
    return az, elev, distance


def elev_az_from_rx_sv(pos_rx: np.ndarray, pos_sv: np.ndarray) -> tuple[float, float]:
    """Compute elevation and azimuth (deg) from receiver to satellite."""

    az, elev, _ = topocent(pos_rx, np.asarray(pos_sv, dtype=float) - np.asarray(pos_rx, dtype=float))
    return elev, az
