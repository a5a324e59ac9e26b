"""Receiver algorithms."""

from galileo_pvt.receiver.averaging import MovingAverageFilter
from galileo_pvt.receiver.dop import compute_dop
from galileo_pvt.receiver.ls_solver import LsSolution, least_square_pos
from galileo_pvt.receiver.pvt import GalileoLsPvt
from galileo_pvt.receiver.rotation import rotate_satellite

__all__ = [
    "GalileoLsPvt",
    "LsSolution",
    "MovingAverageFilter",
    "compute_dop",
    "least_square_pos",
    "rotate_satellite",
]
