"""Plotting utilities for PVT run outputs."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import matplotlib
import numpy as np

from galileo_pvt.logger import position_error_m
from galileo_pvt.models import EpochLog

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt  # noqa: E402

PLOT_FILES = ("position_error.png", "geodetic_track.png", "dop.png", "fix_status.png")


def epochs_to_frame(epochs: list[EpochLog]) -> Any:
    """Build a DataFrame from EpochLog entries."""

    import pandas as pd

    nan = float("nan")
    payload = []
    for epoch in epochs:
        geo = epoch.geodetic
        avg = epoch.averaged
        dop = epoch.dop
        error = position_error_m(epoch)
        payload.append(
            {
                "t_s": epoch.t,
                "fix_valid": float(epoch.fix_valid),
                "sats_used": float(epoch.sats_used),
                "pos_error_m": error if error is not None else nan,
                "latitude_deg": geo.latitude_deg if geo else nan,
                "longitude_deg": geo.longitude_deg if geo else nan,
                "height_m": geo.height_m if geo else nan,
                "avg_latitude_deg": avg.latitude_deg if avg else nan,
                "avg_longitude_deg": avg.longitude_deg if avg else nan,
                "gdop": dop.gdop if dop and dop.is_valid else nan,
                "pdop": dop.pdop if dop and dop.is_valid else nan,
                "hdop": dop.hdop if dop and dop.is_valid else nan,
                "vdop": dop.vdop if dop and dop.is_valid else nan,
                "tdop": dop.tdop if dop and dop.is_valid else nan,
            }
        )
    return pd.DataFrame(payload)


def save_run_plots(
    epochs: list[EpochLog],
    *,
    out_dir: str | Path = "out",
    run_name: str | None = None,
) -> Path:
    """Save standard run plots to an output directory."""

    frame = epochs_to_frame(epochs)
    output_dir = _prepare_output_dir(out_dir, run_name)
    times = frame["t_s"].to_numpy(dtype=float)
    _plot_position_error(times, frame["pos_error_m"].to_numpy(dtype=float), output_dir / "position_error.png")
    _plot_geodetic_track(frame, output_dir / "geodetic_track.png")
    dop = frame[["gdop", "pdop", "hdop", "vdop", "tdop"]].to_numpy(dtype=float)
    _plot_dop(times, dop, output_dir / "dop.png")
    _plot_fix_status(
        times,
        frame["sats_used"].to_numpy(dtype=float),
        frame["fix_valid"].to_numpy(dtype=float),
        output_dir / "fix_status.png",
    )
    return output_dir


def _prepare_output_dir(out_dir: str | Path, run_name: str | None) -> Path:
    root = Path(out_dir)
    label = run_name or datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = root / label
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def _plot_position_error(times: np.ndarray, errors: np.ndarray, path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(times, errors, color="tab:blue")
    ax.set_title("Position Error vs Time")
    ax.set_xlabel("Time of week (s)")
    ax.set_ylabel("3D error (m)")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def _plot_geodetic_track(frame: Any, path: Path) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(frame["longitude_deg"], frame["latitude_deg"], ".", color="tab:gray", label="Raw")
    ax.plot(frame["avg_longitude_deg"], frame["avg_latitude_deg"], "-", color="tab:red", label="Output")
    ax.set_title("Geodetic Track")
    ax.set_xlabel("Longitude (deg)")
    ax.set_ylabel("Latitude (deg)")
    ax.ticklabel_format(useOffset=False)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def _plot_dop(times: np.ndarray, dop: np.ndarray, path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    for column, label in enumerate(["GDOP", "PDOP", "HDOP", "VDOP", "TDOP"]):
        ax.plot(times, dop[:, column], label=label)
    ax.set_title("DOP vs Time")
    ax.set_xlabel("Time of week (s)")
    ax.set_ylabel("DOP")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def _plot_fix_status(times: np.ndarray, sats_used: np.ndarray, fix_valid: np.ndarray, path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.step(times, sats_used, where="post", label="Satellites used", color="tab:green")
    ax.step(times, fix_valid, where="post", label="Fix valid (0/1)", color="tab:red")
    ax.set_title("Fix Status vs Time")
    ax.set_xlabel("Time of week (s)")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
