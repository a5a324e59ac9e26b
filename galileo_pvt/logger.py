"""Binary PVT dump sink and epoch log outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from galileo_pvt.models import EpochLog, GeodeticPosition

logger = logging.getLogger(__name__)

DUMP_FIELDS = (
    "time_s",
    "x_m",
    "y_m",
    "z_m",
    "clock_offset",
    "latitude_deg",
    "longitude_deg",
    "height_m",
)
DUMP_DTYPE = np.dtype([(name, "<f8") for name in DUMP_FIELDS])
DUMP_RECORD_SIZE = DUMP_DTYPE.itemsize

EPOCH_CSV_COLUMNS = [
    "t",
    "fix_valid",
    "sats_used",
    "pos_ecef_x",
    "pos_ecef_y",
    "pos_ecef_z",
    "clk_bias_m",
    "latitude_deg",
    "longitude_deg",
    "height_m",
    "avg_latitude_deg",
    "avg_longitude_deg",
    "avg_height_m",
    "gdop",
    "pdop",
    "hdop",
    "vdop",
    "tdop",
    "utc_time",
    "pos_error_m",
]
_CSV_HEADER = ",".join(EPOCH_CSV_COLUMNS) + "\n"


class PvtDumpFile:
    """Append-only binary file of fixed-size PVT records.

    Each record is eight little-endian doubles: epoch time, ECEF X/Y/Z, clock
    offset, latitude, longitude and height. Open and write failures are logged
    and never raised.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._handle = None
        try:
            self._handle = self.path.open("wb")
        except OSError as exc:
            logger.warning("Exception opening PVT lib dump file %s: %s", self.path, exc)
        else:
            logger.info("PVT lib dump enabled Log file: %s", self.path)

    @property
    def is_open(self) -> bool:
        return self._handle is not None and not self._handle.closed

    def write_record(
        self,
        time_s: float,
        pos_ecef_m: np.ndarray,
        clock_offset_s: float,
        geodetic: GeodeticPosition,
    ) -> bool:
        """Append one record. Returns False if the sink is closed or the write failed."""

        if not self.is_open:
            return False
        record = np.array(
            [
                (
                    time_s,
                    pos_ecef_m[0],
                    pos_ecef_m[1],
                    pos_ecef_m[2],
                    clock_offset_s,
                    geodetic.latitude_deg,
                    geodetic.longitude_deg,
                    geodetic.height_m,
                )
            ],
            dtype=DUMP_DTYPE,
        )
        try:
            self._handle.write(record.tobytes())
            self._handle.flush()
        except (OSError, ValueError) as exc:
            logger.warning("Exception writing PVT LS dump file %s: %s", self.path, exc)
            return False
        return True

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()

    def __enter__(self) -> PvtDumpFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def read_pvt_dump(path: str | Path) -> np.ndarray:
    """Load a PVT dump file into a structured array with ``DUMP_FIELDS`` columns."""

    raw = Path(path).read_bytes()
    extra = len(raw) % DUMP_RECORD_SIZE
    if extra:
        logger.warning("Ignoring %d trailing bytes of a partial record in %s", extra, path)
        raw = raw[: len(raw) - extra]
    return np.frombuffer(raw, dtype=DUMP_DTYPE).copy()


def load_pvt_dump_frame(path: str | Path) -> Any:
    """Load a PVT dump file into a pandas DataFrame."""

    import pandas as pd

    return pd.DataFrame.from_records(read_pvt_dump(path))


def append_epoch_csv(path: str | Path, epoch: EpochLog) -> None:
    """Append a single epoch summary to a CSV file."""

    target = Path(path)
    line = _epoch_to_csv_line(epoch)
    if not target.exists():
        target.write_text(_CSV_HEADER)
    with target.open("a", encoding="utf-8") as handle:
        handle.write(line)


def save_epochs_csv(path: str | Path, epochs: list[EpochLog]) -> None:
    """Save all epoch summaries to a CSV file."""

    target = Path(path)
    target.write_text(_CSV_HEADER)
    with target.open("a", encoding="utf-8") as handle:
        for epoch in epochs:
            handle.write(_epoch_to_csv_line(epoch))


def position_error_m(epoch: EpochLog) -> float | None:
    if epoch.pos_ecef is None or epoch.truth_pos_ecef is None:
        return None
    return float(np.linalg.norm(np.asarray(epoch.pos_ecef[:3]) - np.asarray(epoch.truth_pos_ecef)))


def _epoch_to_csv_line(epoch: EpochLog) -> str:
    pos = epoch.pos_ecef if epoch.pos_ecef is not None else [None, None, None]
    geo = epoch.geodetic
    avg = epoch.averaged
    dop = epoch.dop
    row = [
        epoch.t,
        _format_value(epoch.fix_valid),
        _format_value(epoch.sats_used),
        _format_value(pos[0]),
        _format_value(pos[1]),
        _format_value(pos[2]),
        _format_value(epoch.clk_bias_m),
        _format_value(geo.latitude_deg if geo else None),
        _format_value(geo.longitude_deg if geo else None),
        _format_value(geo.height_m if geo else None),
        _format_value(avg.latitude_deg if avg else None),
        _format_value(avg.longitude_deg if avg else None),
        _format_value(avg.height_m if avg else None),
        _format_value(dop.gdop if dop else None),
        _format_value(dop.pdop if dop else None),
        _format_value(dop.hdop if dop else None),
        _format_value(dop.vdop if dop else None),
        _format_value(dop.tdop if dop else None),
        epoch.utc_time.isoformat() if epoch.utc_time is not None else "",
        _format_value(position_error_m(epoch)),
    ]
    return ",".join(str(value) for value in row) + "\n"


def _format_value(value: float | int | bool | None) -> str:
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "1" if value else "0"
    return str(float(value)) if isinstance(value, np.floating) else str(value)
