"""Run a static receiver demo of the least-squares PVT solver."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

import numpy as np

from galileo_pvt.config import PvtConfig, SimConfig
from galileo_pvt.logger import save_epochs_csv
from galileo_pvt.meas.pseudorange import synthesize_pseudoranges
from galileo_pvt.models import EpochLog
from galileo_pvt.receiver.pvt import GalileoLsPvt
from galileo_pvt.sat.simple_galileo import SimpleGalileoConfig, SimpleGalileoConstellation
from galileo_pvt.sat.visibility import visible_ephemerides
from galileo_pvt.timing.gst import GalileoUtcModel
from galileo_pvt.utils.logging import get_logger
from galileo_pvt.utils.wgs84 import lla_to_ecef

DUMP_FILENAME = "pvt_dump.dat"
EPOCH_LOG_FILENAME = "epoch_logs.csv"


def build_pvt_with_truth(cfg: SimConfig, run_dir: Path) -> tuple[GalileoLsPvt, dict, np.ndarray]:
    """Return a PVT block loaded with ephemerides, the visible set and receiver truth."""

    receiver_truth = lla_to_ecef(cfg.rx_lat_deg, cfg.rx_lon_deg, cfg.rx_alt_m)
    constellation = SimpleGalileoConstellation(SimpleGalileoConfig(seed=cfg.rng_seed))
    ephemerides = constellation.ephemerides(cfg.week_number, cfg.start_tow_s)
    visible = visible_ephemerides(receiver_truth, ephemerides, cfg.start_tow_s, cfg.elev_mask_deg)

    pvt_cfg = PvtConfig(
        averaging_depth=cfg.averaging_depth,
        dump_enabled=True,
        dump_filename=str(run_dir / DUMP_FILENAME),
    )
    pvt = GalileoLsPvt(pvt_cfg, utc_model=GalileoUtcModel())
    channel = 0
    for prn, ephemeris in sorted(visible.items()):
        if prn in cfg.missing_ephemeris_prns:
            continue
        if channel >= pvt_cfg.nchannels:
            break
        pvt.set_channel_ephemeris(channel, ephemeris)
        channel += 1
    return pvt, visible, receiver_truth


def build_epoch_log(pvt: GalileoLsPvt, t_s: float, fix_valid: bool, truth_pos_ecef: np.ndarray | None) -> EpochLog:
    """Snapshot the PVT block state after an epoch."""

    solved = pvt.epoch_solved
    return EpochLog(
        t=float(t_s),
        fix_valid=fix_valid,
        sats_used=pvt.valid_observations,
        pos_ecef=pvt.rx_pos[:3].copy() if solved else None,
        clk_bias_m=float(pvt.rx_pos[3]) if solved else None,
        geodetic=pvt.geodetic if solved else None,
        averaged=pvt.averaged if solved else None,
        dop=pvt.dop if solved else None,
        utc_time=pvt.position_utc_time,
        truth_pos_ecef=truth_pos_ecef,
    )


def run_static_demo(
    cfg: SimConfig,
    run_dir: Path,
    save_figs: bool = True,
    *,
    verbose: bool = False,
) -> Path:
    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    get_logger(level=logging.DEBUG if verbose else logging.WARNING)
    rng = np.random.default_rng(cfg.rng_seed)

    pvt, visible, receiver_truth = build_pvt_with_truth(cfg, run_dir)
    if verbose:
        print(f"Receiver LLA (deg, deg, m): ({cfg.rx_lat_deg:.6f}, {cfg.rx_lon_deg:.6f}, {cfg.rx_alt_m:.2f})")
        print(f"Receiver ECEF (m): {receiver_truth}")
        print(f"{len(visible)} visible satellites at TOW={cfg.start_tow_s:.0f}s")

    epochs: list[EpochLog] = []
    with pvt:
        for t in np.arange(0.0, cfg.duration, cfg.dt):
            tow_s = cfg.start_tow_s + float(t)
            observations = synthesize_pseudoranges(
                visible,
                receiver_truth,
                tow_s,
                rx_clock_bias_s=cfg.rx_clock_bias_s,
                sigma_m=cfg.pr_sigma_m,
                cn0_zenith_dbhz=cfg.cn0_dbhz,
                rng=rng,
            )
            if verbose and not epochs:
                print("First-epoch pseudoranges (m):")
                for prn, observation in sorted(observations.items()):
                    print(f"  E{prn:02d}: {observation.pseudorange_m:.3f} (cn0 {observation.cn0_dbhz:.1f})")
            fix_valid = pvt.get_pvt(observations, tow_s, cfg.averaging)
            epochs.append(build_epoch_log(pvt, tow_s, fix_valid, receiver_truth))

    epoch_log_path = run_dir / EPOCH_LOG_FILENAME
    save_epochs_csv(epoch_log_path, epochs)
    if save_figs:
        from galileo_pvt.plots import save_run_plots

        save_run_plots(epochs, out_dir=run_dir.parent, run_name=run_dir.name)
    return epoch_log_path


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a static least-squares PVT demo.")
    parser.add_argument("--duration-s", type=float, default=30.0, help="Run length in seconds.")
    parser.add_argument("--out-dir", type=str, default="out", help="Root folder for outputs.")
    parser.add_argument("--run-name", type=str, default=None, help="Output subfolder name.")
    parser.add_argument("--rng-seed", type=int, default=42, help="Constellation and noise seed.")
    parser.add_argument("--sigma-m", type=float, default=0.0, help="Pseudorange noise sigma (m).")
    parser.add_argument("--averaging-depth", type=int, default=10, help="Moving average depth.")
    parser.add_argument("--averaging", action="store_true", help="Smooth the output position.")
    parser.add_argument("--no-plots", action="store_true", help="Disable saving run plots.")
    parser.add_argument("--verbose", action="store_true", help="Print debug info.")
    args = parser.parse_args()
    cfg = SimConfig(
        duration=args.duration_s,
        rng_seed=args.rng_seed,
        pr_sigma_m=args.sigma_m,
        averaging=args.averaging,
        averaging_depth=args.averaging_depth,
    )
    run_name = args.run_name or datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(args.out_dir) / run_name
    epoch_log_path = run_static_demo(
        cfg,
        run_dir,
        save_figs=not args.no_plots,
        verbose=args.verbose,
    )
    print(f"Saved outputs to {epoch_log_path.parent}")


if __name__ == "__main__":
    main()
