from __future__ import annotations

import sys
from pathlib import Path

from galileo_pvt.config import SimConfig
from sim.run_static_demo import DUMP_FILENAME, EPOCH_LOG_FILENAME, run_static_demo


def test_headless_run_writes_only_logs(tmp_path: Path) -> None:
    sys.modules.pop("galileo_pvt.plots", None)

    epoch_log_path = run_static_demo(SimConfig(duration=2.0), tmp_path / "logs_only", save_figs=False)

    written = sorted(path.name for path in epoch_log_path.parent.iterdir())
    assert written == sorted([DUMP_FILENAME, EPOCH_LOG_FILENAME])
    assert not list(tmp_path.rglob("*.png"))
    assert "galileo_pvt.plots" not in sys.modules


def test_verbose_run_reports_geometry(tmp_path: Path, capsys) -> None:
    cfg = SimConfig(duration=1.0)

    run_static_demo(cfg, tmp_path / "quiet", save_figs=False)
    assert capsys.readouterr().out == ""

    run_static_demo(cfg, tmp_path / "verbose", save_figs=False, verbose=True)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("Receiver LLA")
    assert any("visible satellites at TOW=345600s" in line for line in lines)
    prn_lines = [line for line in lines if line.strip().startswith("E")]
    assert prn_lines
    assert all("cn0" in line for line in prn_lines)
