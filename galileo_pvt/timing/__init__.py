"""Galileo time scale helpers."""

from galileo_pvt.timing.gst import GalileoUtcModel, galileo_system_time, utc_datetime

__all__ = ["GalileoUtcModel", "galileo_system_time", "utc_datetime"]
