from datetime import datetime

import numpy as np

from galileo_pvt.timing.gst import GalileoUtcModel, galileo_system_time, utc_datetime

WEEK = 1100


def test_galileo_system_time() -> None:
    assert galileo_system_time(1, 10.0) == 604_810.0
    assert galileo_system_time(WEEK, 0.0) == WEEK * 604_800.0


def test_utc_datetime_epoch() -> None:
    assert utc_datetime(0.0) == datetime(1999, 8, 22)
    assert utc_datetime(86_400.0 + 3_600.5) == datetime(1999, 8, 23, 1, 0, 0, 500_000)


def test_default_model_removes_leap_seconds() -> None:
    gst = galileo_system_time(WEEK, 345_600.0)
    assert GalileoUtcModel().gst_to_utc_time(gst, WEEK) == gst - 18.0


def test_future_leap_second_uses_current_offset() -> None:
    model = GalileoUtcModel(a0=1e-6, delta_t_ls=17.0, delta_t_lsf=18.0, wn_lsf=WEEK + 4, t0t=0.0, wn_ot=WEEK)
    gst = galileo_system_time(WEEK, 1_000.0)

    assert np.isclose(model.gst_to_utc_time(gst, WEEK), gst - 17.0 - 1e-6, rtol=0.0, atol=1e-6)


def test_drift_term_scales_with_time_from_reference() -> None:
    model = GalileoUtcModel(a1=1e-9, t0t=0.0, wn_ot=WEEK)
    gst = galileo_system_time(WEEK + 1, 0.0)

    assert np.isclose(model.gst_to_utc_time(gst, WEEK + 1), gst - 18.0 - 1e-9 * 604_800.0, rtol=0.0, atol=1e-6)


def test_past_leap_second_uses_future_offset() -> None:
    model = GalileoUtcModel(delta_t_ls=17.0, delta_t_lsf=18.0, wn_lsf=WEEK - 1)
    gst = galileo_system_time(WEEK, 1_000.0)

    assert model.gst_to_utc_time(gst, WEEK) == gst - 18.0


def test_leap_second_window_before_event() -> None:
    model = GalileoUtcModel(delta_t_ls=17.0, delta_t_lsf=18.0, wn_lsf=WEEK, dn=3)
    # One hour before the end of day 3 of the week.
    tow = 3 * 86_400.0 - 3_600.0
    gst = galileo_system_time(WEEK, tow)

    assert np.isclose(model.gst_to_utc_time(gst, WEEK), gst - 17.0, rtol=0.0, atol=1e-6)


def test_leap_second_well_after_event_in_same_week() -> None:
    model = GalileoUtcModel(delta_t_ls=17.0, delta_t_lsf=18.0, wn_lsf=WEEK, dn=3)
    gst = galileo_system_time(WEEK, 3 * 86_400.0 + 30_000.0)

    assert model.gst_to_utc_time(gst, WEEK) == gst - 18.0
