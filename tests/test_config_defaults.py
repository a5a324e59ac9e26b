from dataclasses import replace

import pytest

from galileo_pvt.config import PvtConfig, SimConfig


def test_pvtconfig_defaults() -> None:
    cfg = PvtConfig()

    assert cfg.nchannels == 12
    assert cfg.averaging_depth == 0
    assert not cfg.dump_enabled
    assert cfg.ellipsoid == 4
    assert cfg.max_height_m == 50_000.0
    assert cfg.min_valid_obs == 4
    assert cfg.ls_max_iter == 10
    assert cfg.ls_tol_m == 1e-4


def test_simconfig_receiver_defaults() -> None:
    cfg = SimConfig()

    assert cfg.rx_lat_deg == 41.275
    assert cfg.rx_lon_deg == 1.987
    assert cfg.rx_alt_m == 80.0
    assert cfg.missing_ephemeris_prns == ()


def test_configs_are_frozen() -> None:
    cfg = PvtConfig()
    with pytest.raises(AttributeError):
        cfg.nchannels = 4  # type: ignore[misc]
    assert replace(cfg, nchannels=4).nchannels == 4
