"""Core data models and interfaces for the least-squares PVT receiver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

import numpy as np


@dataclass(frozen=True)
class PseudorangeObservation:
    """Single-satellite pseudorange observation at a given epoch."""

    prn: int
    pseudorange_m: float
    cn0_dbhz: float
    valid: bool = True


@dataclass(frozen=True)
class GeodeticPosition:
    """Latitude/longitude/height above a reference ellipsoid."""

    latitude_deg: float
    longitude_deg: float
    height_m: float


@dataclass(frozen=True)
class DopMetrics:
    """Dilution of precision metrics. All values are -1 when unavailable."""

    gdop: float
    pdop: float
    hdop: float
    vdop: float
    tdop: float

    @classmethod
    def invalid(cls) -> DopMetrics:
        return cls(gdop=-1.0, pdop=-1.0, hdop=-1.0, vdop=-1.0, tdop=-1.0)

    @property
    def is_valid(self) -> bool:
        return self.gdop >= 0.0


@dataclass(frozen=True)
class SatelliteReport:
    """Per-satellite diagnostics for the satellites used in a solve."""

    prn: int
    cn0_dbhz: float
    azimuth_deg: float
    elevation_deg: float
    range_m: float


@dataclass(frozen=True)
class EpochLog:
    """Per-epoch log data."""

    t: float
    fix_valid: bool
    sats_used: int
    pos_ecef: np.ndarray | None = None
    clk_bias_m: float | None = None
    geodetic: GeodeticPosition | None = None
    averaged: GeodeticPosition | None = None
    dop: DopMetrics | None = None
    utc_time: datetime | None = None
    truth_pos_ecef: np.ndarray | None = None


class SatelliteEphemeris(ABC):
    """Broadcast ephemeris of one satellite: clock model and orbit."""

    prn: int
    week_number: int

    @abstractmethod
    def clock_drift(self, tx_time_s: float) -> float:
        """Return the satellite clock offset polynomial at transmit time (s)."""

    @abstractmethod
    def relativistic_correction(self, tx_time_s: float) -> float:
        """Return the relativistic clock correction at transmit time (s)."""

    @abstractmethod
    def position_at(self, tx_time_s: float) -> np.ndarray:
        """Return the satellite ECEF position (m) at the given transmit time."""

    @abstractmethod
    def system_time(self, week_number: int, tow_s: float) -> float:
        """Convert week number and time of week into continuous system time (s)."""


class UtcModel(ABC):
    """Interface for system-time to UTC conversion."""

    @abstractmethod
    def gst_to_utc_time(self, gst_s: float, week_number: int) -> float:
        """Return UTC seconds counted from the system time epoch."""
