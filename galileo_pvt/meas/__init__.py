"""Measurement models."""

from galileo_pvt.meas.pseudorange import cn0_from_elevation, signal_travel_time_s, synthesize_pseudoranges

__all__ = ["cn0_from_elevation", "signal_travel_time_s", "synthesize_pseudoranges"]
