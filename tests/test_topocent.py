import numpy as np

from galileo_pvt.utils.angles import topocent
from galileo_pvt.utils.wgs84 import lla_to_ecef


def test_two_km_north_at_equator() -> None:
    origin = lla_to_ecef(0.0, 0.0, 0.0)
    az, el, dist = topocent(origin, np.array([0.0, 0.0, 2_000.0]))

    assert np.isclose(az, 0.0, atol=1e-9)
    assert np.isclose(el, 0.0, atol=1e-9)
    assert np.isclose(dist, 2_000.0)


def test_east_is_ninety_degrees() -> None:
    origin = lla_to_ecef(0.0, 0.0, 0.0)
    az, el, _ = topocent(origin, np.array([0.0, 1_000.0, 0.0]))

    assert np.isclose(az, 90.0)
    assert np.isclose(el, 0.0, atol=1e-9)


def test_azimuth_is_wrapped_to_positive_range() -> None:
    origin = lla_to_ecef(0.0, 0.0, 0.0)
    az, _, _ = topocent(origin, np.array([0.0, -1_000.0, 0.0]))

    assert np.isclose(az, 270.0)


def test_straight_up_has_zero_azimuth() -> None:
    origin = lla_to_ecef(0.0, 0.0, 0.0)
    az, el, dist = topocent(origin, np.array([1_000.0, 0.0, 0.0]))

    assert az == 0.0
    assert el == 90.0
    assert np.isclose(dist, 1_000.0)


def test_origin_at_earth_center() -> None:
    az, el, dist = topocent(np.zeros(3), np.array([0.0, 0.0, 2_000.0]))

    assert np.isclose(az, 0.0, atol=1e-9)
    assert np.isclose(el, 0.0, atol=1e-9)
    assert np.isclose(dist, 2_000.0)
