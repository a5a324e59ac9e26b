"""Simplified Galileo-like constellation with broadcast-style ephemerides."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

import numpy as np

from galileo_pvt.constants import GALILEO_F, GALILEO_MU, HALF_WEEK_S, OMEGA_EARTH_DOT, SECONDS_PER_WEEK
from galileo_pvt.models import SatelliteEphemeris
from galileo_pvt.timing.gst import galileo_system_time


@dataclass(frozen=True)
class SimpleGalileoConfig:
    """Configuration for the simplified Galileo constellation."""

    num_sats: int = 24
    num_planes: int = 3
    radius_m: float = 29_600_000.0
    inclination_deg: float = 56.0
    eccentricity: float = 0.0
    seed: int | None = 0
    clock_bias_sigma_s: float = 1e-4
    clock_drift_sigma_sps: float = 1e-11
    enable_clock: bool = True


def _rot_z(angle_rad: float) -> np.ndarray:
    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    return np.array(
        [
            [cos_a, -sin_a, 0.0],
            [sin_a, cos_a, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def _rot_x(angle_rad: float) -> np.ndarray:
    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    return np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, cos_a, -sin_a],
            [0.0, sin_a, cos_a],
        ],
        dtype=float,
    )


def _week_wrap(dt_s: float) -> float:
    if dt_s > HALF_WEEK_S:
        return dt_s - SECONDS_PER_WEEK
    if dt_s < -HALF_WEEK_S:
        return dt_s + SECONDS_PER_WEEK
    return dt_s


@dataclass(frozen=True)
class SyntheticEphemeris(SatelliteEphemeris):
    """Circular-orbit ephemeris with a polynomial clock model.

    Times are Galileo time of week in seconds. ``raan_rad`` is the longitude
    of the ascending node in ECEF at ``toe_s``.
    """

    prn: int
    week_number: int
    toe_s: float
    radius_m: float
    inclination_rad: float
    raan_rad: float
    mean_anomaly_rad: float
    eccentricity: float = 0.0
    toc_s: float = 0.0
    af0: float = 0.0
    af1: float = 0.0
    af2: float = 0.0

    @property
    def mean_motion(self) -> float:
        return float(np.sqrt(GALILEO_MU / self.radius_m**3))

    def _anomaly(self, t_s: float) -> float:
        return self.mean_anomaly_rad + self.mean_motion * _week_wrap(t_s - self.toe_s)

    def clock_drift(self, tx_time_s: float) -> float:
        dt = _week_wrap(tx_time_s - self.toc_s)
        return self.af0 + self.af1 * dt + self.af2 * dt * dt

    def relativistic_correction(self, tx_time_s: float) -> float:
        # Eccentric and mean anomaly coincide to first order in e.
        return GALILEO_F * self.eccentricity * np.sqrt(self.radius_m) * np.sin(self._anomaly(tx_time_s))

    def position_at(self, tx_time_s: float) -> np.ndarray:
        theta = self._anomaly(tx_time_s)
        r_orb = np.array([self.radius_m * np.cos(theta), self.radius_m * np.sin(theta), 0.0], dtype=float)
        node = self.raan_rad - OMEGA_EARTH_DOT * _week_wrap(tx_time_s - self.toe_s)
        return _rot_z(node) @ _rot_x(self.inclination_rad) @ r_orb

    def system_time(self, week_number: int, tow_s: float) -> float:
        return galileo_system_time(week_number, tow_s)


class SimpleGalileoConstellation:
    """Deterministic Walker-like constellation with circular orbits."""

    def __init__(self, config: SimpleGalileoConfig | None = None) -> None:
        self.config = config or SimpleGalileoConfig()
        self._rng = np.random.default_rng(self.config.seed)
        self._num_sats = self.config.num_sats
        self._num_planes = max(1, min(self.config.num_planes, self._num_sats))
        self._inclination_rad = float(np.deg2rad(self.config.inclination_deg))

        self._plane_raan = np.linspace(0.0, 2.0 * np.pi, self._num_planes, endpoint=False)
        self._plane_offsets = self._rng.uniform(0.0, 2.0 * np.pi, size=self._num_planes)
        sats_per_plane = ceil(self._num_sats / self._num_planes)
        self._mean_anom = np.array(
            [
                (2.0 * np.pi * (i // self._num_planes) / sats_per_plane)
                + self._plane_offsets[i % self._num_planes]
                for i in range(self._num_sats)
            ],
            dtype=float,
        )

        if self.config.enable_clock:
            self._af0 = self._rng.normal(0.0, self.config.clock_bias_sigma_s, size=self._num_sats)
            self._af1 = self._rng.normal(0.0, self.config.clock_drift_sigma_sps, size=self._num_sats)
        else:
            self._af0 = np.zeros(self._num_sats)
            self._af1 = np.zeros(self._num_sats)

    def ephemerides(self, week_number: int, toe_s: float) -> dict[int, SyntheticEphemeris]:
        """Return one ephemeris per satellite, keyed by PRN, referenced to ``toe_s``."""

        ephemerides: dict[int, SyntheticEphemeris] = {}
        for idx in range(self._num_sats):
            prn = idx + 1
            ephemerides[prn] = SyntheticEphemeris(
                prn=prn,
                week_number=week_number,
                toe_s=toe_s,
                radius_m=self.config.radius_m,
                inclination_rad=self._inclination_rad,
                raan_rad=float(self._plane_raan[idx % self._num_planes]),
                mean_anomaly_rad=float(self._mean_anom[idx]),
                eccentricity=self.config.eccentricity,
                toc_s=toe_s,
                af0=float(self._af0[idx]),
                af1=float(self._af1[idx]),
            )
        return ephemerides
