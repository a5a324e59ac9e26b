"""Satellite models."""

from galileo_pvt.sat.simple_galileo import SimpleGalileoConfig, SimpleGalileoConstellation, SyntheticEphemeris
from galileo_pvt.sat.visibility import visible_ephemerides

__all__ = [
    "SimpleGalileoConfig",
    "SimpleGalileoConstellation",
    "SyntheticEphemeris",
    "visible_ephemerides",
]
