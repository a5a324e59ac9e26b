"""Physical and system constants for Galileo E1 positioning."""

from __future__ import annotations

from datetime import datetime

GALILEO_C_M_S = 299_792_458.0
OMEGA_EARTH_DOT = 7.2921151467e-5
GALILEO_MU = 3.986004418e14
# Relativistic clock correction constant, -2*sqrt(mu)/c^2 (s/m^0.5).
GALILEO_F = -4.442807309e-10

SECONDS_PER_WEEK = 604_800.0
HALF_WEEK_S = 302_400.0

# Galileo System Time starts at 00:00 UT on Sunday 22 August 1999.
GST_EPOCH = datetime(1999, 8, 22)
