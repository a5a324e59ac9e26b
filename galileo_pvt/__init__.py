"""Galileo E1 least-squares PVT package."""

from galileo_pvt.config import PvtConfig, SimConfig

__all__ = [
    "PvtConfig",
    "SimConfig",
    "meas",
    "receiver",
    "sat",
    "timing",
    "utils",
]
