from __future__ import annotations

"""Pytest configuration.

This file is imported during *collection*, so it's the right place to set
process-wide environment variables needed for stable imports.
"""

import os
import tempfile

import numpy as np
import pytest

# Force a non-interactive backend in test environments.
os.environ.setdefault("MPLBACKEND", "Agg")

# Isolate matplotlib cache to avoid flaky font-cache locking (stale locks in
# ~/.cache/matplotlib can break collection).
os.environ.setdefault("MPLCONFIGDIR", tempfile.mkdtemp(prefix="mplconfig-"))

from galileo_pvt.constants import GALILEO_C_M_S  # noqa: E402
from galileo_pvt.models import PseudorangeObservation, SatelliteEphemeris  # noqa: E402
from galileo_pvt.receiver.rotation import rotate_satellite  # noqa: E402
from galileo_pvt.timing.gst import galileo_system_time  # noqa: E402
from galileo_pvt.utils.wgs84 import lla_to_ecef  # noqa: E402

RX_LLA = (41.275, 1.987, 80.0)
SAT_ALT_M = 23_222_000.0
SAT_LAT_LON = (
    (41.0, 2.0),
    (70.0, 10.0),
    (12.0, -5.0),
    (45.0, 45.0),
    (35.0, -38.0),
    (20.0, 30.0),
)


class StaticEphemeris(SatelliteEphemeris):
    """Ephemeris of a satellite frozen in ECEF with a perfect clock."""

    def __init__(self, prn: int, position_ecef_m: np.ndarray, week_number: int = 1100) -> None:
        self.prn = prn
        self.week_number = week_number
        self.position_ecef_m = np.asarray(position_ecef_m, dtype=float)

    def clock_drift(self, tx_time_s: float) -> float:
        return 0.0

    def relativistic_correction(self, tx_time_s: float) -> float:
        return 0.0

    def position_at(self, tx_time_s: float) -> np.ndarray:
        return self.position_ecef_m.copy()

    def system_time(self, week_number: int, tow_s: float) -> float:
        return galileo_system_time(week_number, tow_s)


def static_satellites() -> list[np.ndarray]:
    return [lla_to_ecef(lat, lon, SAT_ALT_M) for lat, lon in SAT_LAT_LON]


def consistent_range_m(sat_ecef_m: np.ndarray, rx_ecef_m: np.ndarray) -> float:
    """Range the solver models for a static satellite and receiver."""

    travel_time_s = float(np.linalg.norm(sat_ecef_m - rx_ecef_m)) / GALILEO_C_M_S
    return float(np.linalg.norm(rotate_satellite(travel_time_s, sat_ecef_m) - rx_ecef_m))


@pytest.fixture
def static_ephemerides() -> dict[int, StaticEphemeris]:
    return {prn: StaticEphemeris(prn, sat) for prn, sat in enumerate(static_satellites(), start=1)}


@pytest.fixture
def make_observations():
    """Return a builder of pseudoranges for a receiver at ``rx_ecef_m``."""

    def build(
        ephemerides: dict[int, StaticEphemeris],
        rx_ecef_m: np.ndarray,
        clock_bias_m: float = 0.0,
    ) -> dict[int, PseudorangeObservation]:
        return {
            prn: PseudorangeObservation(
                prn=prn,
                pseudorange_m=consistent_range_m(eph.position_ecef_m, rx_ecef_m) + clock_bias_m,
                cn0_dbhz=42.0,
            )
            for prn, eph in ephemerides.items()
        }

    return build


@pytest.fixture
def rx_truth() -> np.ndarray:
    return lla_to_ecef(*RX_LLA)
