"""Synthetic pseudorange generation from ephemerides."""

from __future__ import annotations

from typing import Mapping

import numpy as np

from galileo_pvt.constants import GALILEO_C_M_S
from galileo_pvt.models import PseudorangeObservation, SatelliteEphemeris
from galileo_pvt.receiver.rotation import rotate_satellite
from galileo_pvt.utils.angles import elev_az_from_rx_sv

LIGHT_TIME_ITER = 5


def signal_travel_time_s(
    ephemeris: SatelliteEphemeris,
    receiver_ecef_m: np.ndarray,
    rx_true_time_s: float,
) -> tuple[float, np.ndarray]:
    """Solve the light-time equation for a static receiver.

    Returns:
        (travel time in seconds, satellite position at transmit time expressed
        in the ECEF frame at reception).
    """

    travel_time_s = 0.075
    sat_rot = np.zeros(3)
    for _ in range(LIGHT_TIME_ITER):
        sat = ephemeris.position_at(rx_true_time_s - travel_time_s)
        sat_rot = rotate_satellite(travel_time_s, sat)
        travel_time_s = float(np.linalg.norm(sat_rot - receiver_ecef_m)) / GALILEO_C_M_S
    return travel_time_s, sat_rot


def cn0_from_elevation(elev_deg: float, cn0_zenith_dbhz: float = 45.0, cn0_min_dbhz: float = 30.0) -> float:
    """Return a simple CN0 model based on elevation angle."""

    weight = np.sin(np.deg2rad(np.clip(float(elev_deg), 0.0, 90.0)))
    return float(cn0_min_dbhz + (cn0_zenith_dbhz - cn0_min_dbhz) * weight)


def synthesize_pseudoranges(
    ephemerides: Mapping[int, SatelliteEphemeris],
    receiver_ecef_m: np.ndarray,
    rx_time_s: float,
    rx_clock_bias_s: float = 0.0,
    sigma_m: float = 0.0,
    cn0_zenith_dbhz: float = 45.0,
    rng: np.random.Generator | None = None,
) -> dict[int, PseudorangeObservation]:
    """Generate pseudoranges as a receiver with a biased clock would measure them.

    ``rx_time_s`` is the receiver time tag; true reception time is the tag
    minus ``rx_clock_bias_s``. Satellite clock offsets come from each
    ephemeris clock model.
    """

    receiver_ecef_m = np.asarray(receiver_ecef_m, dtype=float)
    rx_true_time_s = rx_time_s - rx_clock_bias_s
    if sigma_m > 0.0 and rng is None:
        rng = np.random.default_rng()

    observations: dict[int, PseudorangeObservation] = {}
    for prn, ephemeris in ephemerides.items():
        travel_time_s, sat_rot = signal_travel_time_s(ephemeris, receiver_ecef_m, rx_true_time_s)
        tx_true_time_s = rx_true_time_s - travel_time_s
        sv_clock_s = ephemeris.clock_drift(tx_true_time_s) + ephemeris.relativistic_correction(tx_true_time_s)
        sv_time_s = tx_true_time_s + sv_clock_s
        sv_clock_s = ephemeris.clock_drift(sv_time_s) + ephemeris.relativistic_correction(sv_time_s)
        sv_time_s = tx_true_time_s + sv_clock_s

        pseudorange_m = GALILEO_C_M_S * (rx_time_s - sv_time_s)
        if sigma_m > 0.0:
            pseudorange_m += float(rng.normal(0.0, sigma_m))
        elev_deg, _ = elev_az_from_rx_sv(receiver_ecef_m, sat_rot)
        observations[prn] = PseudorangeObservation(
            prn=prn,
            pseudorange_m=pseudorange_m,
            cn0_dbhz=cn0_from_elevation(elev_deg, cn0_zenith_dbhz=cn0_zenith_dbhz),
        )
    return observations
