"""Satellite visibility filtering utilities."""

from __future__ import annotations

from typing import Mapping

import numpy as np

from galileo_pvt.models import SatelliteEphemeris
from galileo_pvt.utils.angles import elev_az_from_rx_sv


def visible_ephemerides(
    receiver_ecef_m: np.ndarray,
    ephemerides: Mapping[int, SatelliteEphemeris],
    t_s: float,
    elevation_mask_deg: float = 10.0,
) -> dict[int, SatelliteEphemeris]:
    """Filter ephemerides by the elevation of their satellite at ``t_s``."""

    visible: dict[int, SatelliteEphemeris] = {}
    for prn, ephemeris in ephemerides.items():
        elev_deg, _ = elev_az_from_rx_sv(receiver_ecef_m, ephemeris.position_at(t_s))
        if elev_deg >= elevation_mask_deg:
            visible[prn] = ephemeris
    return visible
