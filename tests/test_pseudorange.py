from dataclasses import replace

import numpy as np

from galileo_pvt.constants import GALILEO_C_M_S
from galileo_pvt.meas.pseudorange import cn0_from_elevation, signal_travel_time_s, synthesize_pseudoranges
from galileo_pvt.receiver.rotation import rotate_satellite
from galileo_pvt.sat.simple_galileo import SimpleGalileoConfig, SimpleGalileoConstellation
from galileo_pvt.sat.visibility import visible_ephemerides
from galileo_pvt.utils.wgs84 import lla_to_ecef

TOW_S = 345_600.0


def _visible(enable_clock: bool = True):
    receiver = lla_to_ecef(41.275, 1.987, 80.0)
    constellation = SimpleGalileoConstellation(SimpleGalileoConfig(seed=42, enable_clock=enable_clock))
    return receiver, visible_ephemerides(receiver, constellation.ephemerides(1100, TOW_S), TOW_S)


def test_travel_time_solves_light_time_equation() -> None:
    receiver, visible = _visible()
    eph = next(iter(visible.values()))

    tau, sat_rot = signal_travel_time_s(eph, receiver, TOW_S)

    expected = rotate_satellite(tau, eph.position_at(TOW_S - tau))
    assert np.allclose(sat_rot, expected, atol=1e-3)
    assert np.isclose(np.linalg.norm(sat_rot - receiver), GALILEO_C_M_S * tau, rtol=0.0, atol=1e-3)
    assert 0.06 < tau < 0.1


def test_ideal_clocks_give_geometric_range() -> None:
    receiver, visible = _visible(enable_clock=False)

    observations = synthesize_pseudoranges(visible, receiver, TOW_S)

    assert sorted(observations) == sorted(visible)
    for prn, eph in visible.items():
        tau, _ = signal_travel_time_s(eph, receiver, TOW_S)
        assert np.isclose(observations[prn].pseudorange_m, GALILEO_C_M_S * tau, rtol=0.0, atol=0.05)
        assert observations[prn].valid


def test_receiver_clock_bias_adds_range() -> None:
    receiver, visible = _visible(enable_clock=False)

    biased = synthesize_pseudoranges(visible, receiver, TOW_S, rx_clock_bias_s=1e-6)
    ideal = synthesize_pseudoranges(visible, receiver, TOW_S)

    for prn in visible:
        diff = biased[prn].pseudorange_m - ideal[prn].pseudorange_m
        assert np.isclose(diff, GALILEO_C_M_S * 1e-6, rtol=0.0, atol=0.05)


def test_satellite_clock_offset_shortens_range() -> None:
    receiver, visible = _visible(enable_clock=False)
    prn, eph = next(iter(visible.items()))
    fast = {prn: replace(eph, af0=1e-5)}

    ideal = synthesize_pseudoranges({prn: eph}, receiver, TOW_S)[prn].pseudorange_m
    offset = synthesize_pseudoranges(fast, receiver, TOW_S)[prn].pseudorange_m

    assert np.isclose(offset - ideal, -GALILEO_C_M_S * 1e-5, rtol=0.0, atol=0.05)


def test_noise_is_seeded() -> None:
    receiver, visible = _visible()

    noisy_a = synthesize_pseudoranges(visible, receiver, TOW_S, sigma_m=3.0, rng=np.random.default_rng(1))
    noisy_b = synthesize_pseudoranges(visible, receiver, TOW_S, sigma_m=3.0, rng=np.random.default_rng(1))
    clean = synthesize_pseudoranges(visible, receiver, TOW_S)

    assert noisy_a == noisy_b
    errors = [noisy_a[prn].pseudorange_m - clean[prn].pseudorange_m for prn in visible]
    assert any(error != 0.0 for error in errors)
    assert max(abs(error) for error in errors) < 30.0


def test_cn0_follows_elevation() -> None:
    assert cn0_from_elevation(90.0) == 45.0
    assert cn0_from_elevation(0.0) == 30.0
    assert cn0_from_elevation(-5.0) == 30.0
    assert 30.0 < cn0_from_elevation(30.0) < 45.0
