"""Earth rotation correction of satellite positions."""

from __future__ import annotations

import numpy as np

from galileo_pvt.constants import OMEGA_EARTH_DOT


def _rot_z(angle_rad: float) -> np.ndarray:
    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    return np.array(
        [
            [cos_a, sin_a, 0.0],
            [-sin_a, cos_a, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def rotate_satellite(travel_time_s: float, sat_pos_ecef_m: np.ndarray) -> np.ndarray:
    """Rotate a satellite ECEF position by the Earth rotation during signal travel.

    Args:
        travel_time_s: One-way signal travel time in seconds.
        sat_pos_ecef_m: Satellite ECEF position at transmit time.

    Returns:
        Satellite position expressed in the ECEF frame at reception time.
    """

    return _rot_z(OMEGA_EARTH_DOT * travel_time_s) @ np.asarray(sat_pos_ecef_m, dtype=float)
