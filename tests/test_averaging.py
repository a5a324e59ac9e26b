import numpy as np
import pytest

from galileo_pvt.models import GeodeticPosition
from galileo_pvt.receiver.averaging import MovingAverageFilter


def _sample(k: float) -> GeodeticPosition:
    return GeodeticPosition(latitude_deg=41.0 + k * 1e-6, longitude_deg=2.0 - k * 1e-6, height_m=80.0 + k)


def test_depth_three_warm_up_and_eviction() -> None:
    flt = MovingAverageFilter(3)
    samples = [_sample(k) for k in range(1, 5)]

    out1, valid1 = flt.update(samples[0])
    out2, valid2 = flt.update(samples[1])
    assert not valid1 and not valid2
    assert out2 == samples[1]

    out3, valid3 = flt.update(samples[2])
    assert valid3
    assert np.isclose(out3.height_m, 82.0)
    assert np.isclose(out3.latitude_deg, 41.0 + 2e-6)

    out4, valid4 = flt.update(samples[3])
    assert valid4
    assert np.isclose(out4.height_m, 83.0)
    assert np.isclose(out4.longitude_deg, 2.0 - 3e-6)
    assert len(flt) == 3
    assert list(flt.hist_height_m) == [84.0, 83.0, 82.0]


def test_depth_zero_never_fills() -> None:
    flt = MovingAverageFilter(0)
    for k in range(5):
        out, valid = flt.update(_sample(k))
        assert not valid
        assert out == _sample(k)
    assert len(flt) == 0


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ValueError):
        MovingAverageFilter(-1)


def test_reset_restarts_warm_up() -> None:
    flt = MovingAverageFilter(2)
    flt.update(_sample(1))
    assert flt.update(_sample(2))[1]

    flt.reset()

    assert len(flt) == 0
    assert not flt.update(_sample(3))[1]
