"""Configuration objects for the least-squares PVT receiver."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PvtConfig:
    """PVT block configuration defaults."""

    nchannels: int = 12
    averaging_depth: int = 0
    dump_enabled: bool = False
    dump_filename: str = "./pvt.dat"
    ellipsoid: int = 4
    max_height_m: float = 50_000.0
    min_valid_obs: int = 4
    ls_max_iter: int = 10
    ls_tol_m: float = 1e-4


@dataclass(frozen=True)
class SimConfig:
    """Static demo configuration defaults."""

    rng_seed: int = 42
    dt: float = 1.0
    duration: float = 30.0
    start_tow_s: float = 345_600.0
    week_number: int = 1100
    rx_lat_deg: float = 41.275
    rx_lon_deg: float = 1.987
    rx_alt_m: float = 80.0
    rx_clock_bias_s: float = 2.5e-4
    elev_mask_deg: float = 10.0
    pr_sigma_m: float = 0.0
    cn0_dbhz: float = 45.0
    missing_ephemeris_prns: tuple[int, ...] = ()
    averaging: bool = False
    averaging_depth: int = 10
