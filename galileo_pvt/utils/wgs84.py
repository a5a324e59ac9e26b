"""Reference ellipsoids and ECEF/geodetic coordinate conversions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from galileo_pvt.models import GeodeticPosition

logger = logging.getLogger(__name__)

CART2GEO_MAX_ITER = 100
CART2GEO_TOL_M = 1e-12
TOGEOD_MAX_ITER = 10
TOGEOD_TOL_SQ = 1e-10


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid defined by semi-major axis and flattening."""

    name: str
    a: float
    f: float

    @property
    def b(self) -> float:
        return self.a * (1.0 - self.f)

    @property
    def e2(self) -> float:
        return self.f * (2.0 - self.f)

    @property
    def ep2(self) -> float:
        b = self.b
        return (self.a**2 - b**2) / b**2

    @property
    def finv(self) -> float:
        return 1.0 / self.f


ELLIPSOIDS: tuple[Ellipsoid, ...] = (
    Ellipsoid("International 1924", 6_378_388.0, 1.0 / 297.0),
    Ellipsoid("International 1967", 6_378_160.0, 1.0 / 298.247),
    Ellipsoid("WGS-72", 6_378_135.0, 1.0 / 298.26),
    Ellipsoid("GRS-80", 6_378_137.0, 1.0 / 298.257222101),
    Ellipsoid("WGS-84", 6_378_137.0, 1.0 / 298.257223563),
)
WGS84_INDEX = 4
ELLIPSOID = ELLIPSOIDS[WGS84_INDEX]


def get_ellipsoid(index: int) -> Ellipsoid:
    """Return the reference ellipsoid selected by index (0-4)."""

    if not 0 <= index < len(ELLIPSOIDS):
        raise ValueError(f"Unknown ellipsoid index {index}; expected 0..{len(ELLIPSOIDS) - 1}.")
    return ELLIPSOIDS[index]


def lla_to_ecef(lat_deg: float, lon_deg: float, alt_m: float, ellipsoid: int = WGS84_INDEX) -> np.ndarray:
    """Convert geodetic latitude/longitude/altitude to ECEF.

    Args:
        lat_deg: Latitude in degrees.
        lon_deg: Longitude in degrees.
        alt_m: Height above the selected ellipsoid in meters.
        ellipsoid: Ellipsoid index, see ``ELLIPSOIDS``.

    Returns:
        ECEF position (x, y, z) in meters.
    """

    ell = get_ellipsoid(ellipsoid)
    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    n = ell.a / np.sqrt(1.0 - ell.e2 * sin_lat**2)
    x = (n + alt_m) * cos_lat * np.cos(lon)
    y = (n + alt_m) * cos_lat * np.sin(lon)
    z = (n * (1.0 - ell.e2) + alt_m) * sin_lat
    return np.array([x, y, z], dtype=float)


def cart2geo(x_m: float, y_m: float, z_m: float, ellipsoid: int = WGS84_INDEX) -> GeodeticPosition:
    """Convert ECEF coordinates to geodetic coordinates on a selected ellipsoid.

    Ellipsoid choices:
        0. International Ellipsoid 1924
        1. International Ellipsoid 1967
        2. World Geodetic System 1972
        3. Geodetic Reference System 1980
        4. World Geodetic System 1984

    Latitude and height are refined by fixed-point iteration on the prime
    vertical radius of curvature until the height changes by less than
    ``CART2GEO_TOL_M`` or ``CART2GEO_MAX_ITER`` iterations have run. The cap is
    a best-effort bound: on reaching it a warning is logged and the last
    estimate is returned.
    """

    ell = get_ellipsoid(ellipsoid)
    f = ell.f
    lon = np.arctan2(y_m, x_m)
    p = np.hypot(x_m, y_m)

    if p == 0.0:
        lat = np.pi / 2.0 if z_m >= 0.0 else -np.pi / 2.0
        return GeodeticPosition(float(np.rad2deg(lat)), float(np.rad2deg(lon)), float(abs(z_m) - ell.b))

    ex2 = (2.0 - f) * f / ((1.0 - f) * (1.0 - f))
    c = ell.a * np.sqrt(1.0 + ex2)
    lat = np.arctan2(z_m, p * (1.0 - ell.e2))

    h = 0.1
    old_h = np.nan
    for iteration in range(1, CART2GEO_MAX_ITER + 1):
        older_h, old_h = old_h, h
        n = c / np.sqrt(1.0 + ex2 * np.cos(lat) ** 2)
        lat = np.arctan2(z_m, p * (1.0 - (2.0 - f) * f * n / (n + h)))
        h = p / np.cos(lat) - n
        # A two-cycle in the last bit is as converged as float64 allows.
        if abs(h - old_h) <= CART2GEO_TOL_M or h == older_h:
            break
    else:
        logger.warning(
            "Failed to approximate h with desired precision after %d iterations. h-oldh=%g",
            iteration,
            h - old_h,
        )

    return GeodeticPosition(float(np.rad2deg(lat)), float(np.rad2deg(lon)), float(h))


def togeod(a: float, finv: float, x_m: float, y_m: float, z_m: float) -> tuple[float, float, float]:
    """Geodetic latitude/longitude/height from ECEF for an ellipsoid (a, 1/f).

    Returns:
        (lat_deg, lon_deg, h) with longitude in [0, 360) and ``h`` in the units
        of the inputs.
    """

    flattening = 0.0 if finv < 1.0e-20 else 1.0 / finv
    esq = (2.0 - flattening) * flattening

    p = np.hypot(x_m, y_m)
    lon_deg = float(np.rad2deg(np.arctan2(y_m, x_m))) if p > 1.0e-20 else 0.0
    if lon_deg < 0.0:
        lon_deg += 360.0

    r = np.hypot(p, z_m)
    if r < 1.0e-20:
        return 0.0, lon_deg, 0.0
    sin_lat = z_m / r
    lat = np.arcsin(sin_lat)

    # Initial height: distance from origin minus approximate ellipsoid radius.
    h = r - a * (1.0 - sin_lat * sin_lat * flattening)

    one_esq = 1.0 - esq
    for _ in range(TOGEOD_MAX_ITER):
        sin_lat = np.sin(lat)
        cos_lat = np.cos(lat)
        n_lat = a / np.sqrt(1.0 - esq * sin_lat * sin_lat)
        d_p = p - (n_lat + h) * cos_lat
        d_z = z_m - (n_lat * one_esq + h) * sin_lat
        h = h + (sin_lat * d_z + cos_lat * d_p)
        lat = lat + (cos_lat * d_z - sin_lat * d_p) / (n_lat + h)
        if d_p * d_p + d_z * d_z < TOGEOD_TOL_SQ:
            break
    else:
        logger.info("The computation of geodetic coordinates did not converge")

    return float(np.rad2deg(lat)), lon_deg, float(h)


def ecef_to_enu_matrix(lat_deg: float, lon_deg: float) -> np.ndarray:
    """Return rotation matrix from ECEF to ENU at given geodetic coordinates."""

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    return np.array(
        [
            [-sin_lon, cos_lon, 0.0],
            [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ],
        dtype=float,
    )


def enu_from_ecef_delta(delta_ecef_m: np.ndarray, lat_deg: float, lon_deg: float) -> np.ndarray:
    """Convert delta ECEF to ENU at given geodetic coordinates."""

    rot = ecef_to_enu_matrix(lat_deg, lon_deg)
    return rot @ delta_ecef_m
