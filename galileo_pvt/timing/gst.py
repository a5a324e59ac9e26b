"""Galileo System Time and GST to UTC conversion (OS SIS ICD 5.1.7)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from galileo_pvt.constants import GST_EPOCH, SECONDS_PER_WEEK
from galileo_pvt.models import UtcModel

SECONDS_PER_DAY = 86_400.0
LEAP_WINDOW_S = 21_600.0


def galileo_system_time(week_number: int, tow_s: float) -> float:
    """Continuous GST in seconds from week number and time of week."""

    return week_number * SECONDS_PER_WEEK + tow_s


def utc_datetime(utc_s: float) -> datetime:
    """Calendar time for UTC seconds counted from the GST epoch."""

    return GST_EPOCH + timedelta(seconds=utc_s)


@dataclass(frozen=True)
class GalileoUtcModel(UtcModel):
    """Broadcast GST-UTC conversion parameters.

    Defaults describe the leap second state since 2017 (18 s) with no
    pending leap second event.
    """

    a0: float = 0.0
    a1: float = 0.0
    delta_t_ls: float = 18.0
    t0t: float = 0.0
    wn_ot: int = 0
    wn_lsf: int = 0
    dn: int = 7
    delta_t_lsf: float = 18.0

    def _delta_utc(self, delta_ls: float, tow_s: float, week_number: int) -> float:
        return delta_ls + self.a0 + self.a1 * (tow_s - self.t0t + SECONDS_PER_WEEK * (week_number - self.wn_ot))

    def gst_to_utc_time(self, gst_s: float, week_number: int) -> float:
        tow_s = gst_s - week_number * SECONDS_PER_WEEK
        weeks_to_leap = self.wn_lsf - week_number
        leap_event_s = self.dn * SECONDS_PER_DAY

        if weeks_to_leap < 0 or (weeks_to_leap == 0 and tow_s - leap_event_s > LEAP_WINDOW_S):
            # Case c: leap second event already in the past.
            return gst_s - self._delta_utc(self.delta_t_lsf, tow_s, week_number)

        delta_utc = self._delta_utc(self.delta_t_ls, tow_s, week_number)
        if weeks_to_leap > 0 or abs(tow_s - leap_event_s) > LEAP_WINDOW_S:
            # Case a: event in the future and outside the six hour window.
            return gst_s - delta_utc

        # Case b: within six hours of the event, the day may hold an extra second.
        w = math.fmod(tow_s - delta_utc - 43_200.0, SECONDS_PER_DAY) + 43_200.0
        day_s = math.fmod(w, SECONDS_PER_DAY + self.delta_t_lsf - self.delta_t_ls)
        return math.floor(gst_s / SECONDS_PER_DAY) * SECONDS_PER_DAY + day_s
