"""Per-epoch least-squares PVT orchestration."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping

import numpy as np

from galileo_pvt.config import PvtConfig
from galileo_pvt.constants import GALILEO_C_M_S
from galileo_pvt.logger import PvtDumpFile
from galileo_pvt.models import (
    DopMetrics,
    GeodeticPosition,
    PseudorangeObservation,
    SatelliteEphemeris,
    SatelliteReport,
    UtcModel,
)
from galileo_pvt.receiver.averaging import MovingAverageFilter
from galileo_pvt.receiver.dop import compute_dop
from galileo_pvt.receiver.ls_solver import LsSolution, least_square_pos
from galileo_pvt.timing.gst import utc_datetime
from galileo_pvt.utils.wgs84 import cart2geo

logger = logging.getLogger(__name__)


class GalileoLsPvt:
    """Least-squares PVT solver fed once per epoch with pseudoranges.

    The instance owns all mutable state (ephemerides, last fix, DOP, position
    history, validity). ``get_pvt`` is the single writer; epochs must be fed in
    time order from one caller. ``epoch_solved`` tells whether the last call
    committed a new fix; rejected epochs keep the previous one.
    """

    def __init__(self, config: PvtConfig | None = None, utc_model: UtcModel | None = None) -> None:
        self.config = config or PvtConfig()
        self.utc_model = utc_model
        self.channel_ephemeris: list[SatelliteEphemeris | None] = [None] * self.config.nchannels
        self.ephemeris_map: dict[int, SatelliteEphemeris] = {}
        self.averaging = MovingAverageFilter(self.config.averaging_depth)
        self.dump: PvtDumpFile | None = (
            PvtDumpFile(self.config.dump_filename) if self.config.dump_enabled else None
        )

        self.current_time_s = 0.0
        self.flag_averaging = False
        self.valid_position = False
        self.valid_observations = 0
        self.solution: LsSolution | None = None
        self.epoch_solved = False
        self.rx_pos = np.zeros(4, dtype=float)
        self.geodetic: GeodeticPosition | None = None
        self.averaged: GeodeticPosition | None = None
        self.dop = DopMetrics.invalid()
        self.satellites: list[SatelliteReport] = []
        self.position_utc_time: datetime | None = None

    @property
    def averaging_depth(self) -> int:
        return self.averaging.depth

    @property
    def clock_bias_s(self) -> float:
        return float(self.rx_pos[3] / GALILEO_C_M_S)

    def set_averaging_depth(self, depth: int) -> None:
        """Change the moving-average depth. Clears the position history."""

        self.averaging = MovingAverageFilter(depth)

    def set_channel_ephemeris(self, channel: int, ephemeris: SatelliteEphemeris) -> None:
        """Store a decoded ephemeris for a channel and index it by PRN."""

        if not 0 <= channel < len(self.channel_ephemeris):
            raise IndexError(f"Channel {channel} out of range for {len(self.channel_ephemeris)} channels.")
        self.channel_ephemeris[channel] = ephemeris
        self.ephemeris_map[ephemeris.prn] = ephemeris

    def reset(self) -> None:
        self.averaging.reset()
        self.valid_position = False

    def close(self) -> None:
        if self.dump is not None:
            self.dump.close()

    def __enter__(self) -> GalileoLsPvt:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_pvt(
        self,
        pseudoranges: Mapping[int, PseudorangeObservation],
        current_time_s: float,
        flag_averaging: bool = False,
    ) -> bool:
        """Compute the fix for one epoch.

        Args:
            pseudoranges: Observations keyed by satellite PRN.
            current_time_s: Receiver time tag (time of week, seconds).
            flag_averaging: Smooth the geodetic output with the moving average.

        Returns:
            True when the (possibly averaged) position is usable. False for too
            few satellites with ephemeris, an implausible height, or while the
            averaging history warms up.
        """

        self.current_time_s = float(current_time_s)
        self.flag_averaging = flag_averaging
        self.epoch_solved = False

        prns = sorted(pseudoranges)
        num_obs = len(prns)
        weights = np.eye(num_obs, dtype=float)
        obs = np.zeros(num_obs, dtype=float)
        satpos = np.zeros((3, num_obs), dtype=float)

        used: list[int] = []
        reports: list[tuple[int, float]] = []
        last_ephemeris: SatelliteEphemeris | None = None
        for index, prn in enumerate(prns):
            observation = pseudoranges[prn]
            ephemeris = self.ephemeris_map.get(prn)
            if ephemeris is None or not observation.valid:
                weights[index, index] = 0.0
                # Sentinel to avoid dividing by zero in the design matrix.
                obs[index] = 1.0
                logger.debug("No ephemeris data for SV %d", prn)
                continue

            tx_time_s = current_time_s - observation.pseudorange_m / GALILEO_C_M_S
            sv_clock_bias_s = ephemeris.clock_drift(tx_time_s) + ephemeris.relativistic_correction(tx_time_s)
            tx_time_corrected_s = tx_time_s - sv_clock_bias_s
            satpos[:, index] = ephemeris.position_at(tx_time_corrected_s)
            obs[index] = observation.pseudorange_m + sv_clock_bias_s * GALILEO_C_M_S

            used.append(index)
            reports.append((ephemeris.prn, observation.cn0_dbhz))
            last_ephemeris = ephemeris
            logger.debug(
                "ECEF satellite SV ID=%d X=%.3f [m] Y=%.3f [m] Z=%.3f [m] PR_obs=%.3f [m]",
                ephemeris.prn,
                satpos[0, index],
                satpos[1, index],
                satpos[2, index],
                obs[index],
            )

        self.valid_observations = len(used)
        logger.debug("Galileo PVT: valid observations=%d", self.valid_observations)
        self._update_utc_time(last_ephemeris)
        if self.valid_observations < self.config.min_valid_obs:
            self.valid_position = False
            return False

        solution = least_square_pos(
            satpos,
            obs,
            weights,
            max_iter=self.config.ls_max_iter,
            tol_m=self.config.ls_tol_m,
        )

        geodetic = cart2geo(*solution.pos[:3], ellipsoid=self.config.ellipsoid)
        if geodetic.height_m > self.config.max_height_m:
            logger.info("Erratic PVT solution rejected, height=%.1f m", geodetic.height_m)
            self.valid_position = False
            return False
        logger.debug(
            "Galileo Position at TOW=%.3f is Lat = %.9f [deg], Long = %.9f [deg], Height= %.3f [m]",
            current_time_s,
            geodetic.latitude_deg,
            geodetic.longitude_deg,
            geodetic.height_m,
        )

        self.solution = solution
        self.epoch_solved = True
        self.rx_pos = solution.pos.copy()
        self.geodetic = geodetic
        self.satellites = [
            SatelliteReport(
                prn=prn,
                cn0_dbhz=cn0,
                azimuth_deg=float(solution.azimuth_deg[index]),
                elevation_deg=float(solution.elevation_deg[index]),
                range_m=float(solution.range_m[index]),
            )
            for index, (prn, cn0) in zip(used, reports)
        ]
        self.dop = compute_dop(
            solution.covariance if solution.covariance_valid else None,
            geodetic.latitude_deg,
            geodetic.longitude_deg,
        )

        if self.dump is not None:
            self.dump.write_record(current_time_s, self.rx_pos[:3], self.clock_bias_s, geodetic)

        if flag_averaging:
            self.averaged, self.valid_position = self.averaging.update(geodetic)
        else:
            self.averaged = geodetic
            self.valid_position = True
        return self.valid_position

    def _update_utc_time(self, ephemeris: SatelliteEphemeris | None) -> None:
        if self.utc_model is None or ephemeris is None:
            return
        week_number = ephemeris.week_number
        gst_s = ephemeris.system_time(week_number, self.current_time_s)
        utc_s = self.utc_model.gst_to_utc_time(gst_s, week_number)
        self.position_utc_time = utc_datetime(utc_s)
