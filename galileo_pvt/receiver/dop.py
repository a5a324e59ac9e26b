"""Dilution of precision from the least-squares covariance."""

from __future__ import annotations

import numpy as np

from galileo_pvt.models import DopMetrics
from galileo_pvt.utils.wgs84 import ecef_to_enu_matrix


def compute_dop(covariance: np.ndarray | None, lat_deg: float, lon_deg: float) -> DopMetrics:
    """Project the ECEF position covariance into ENU and derive DOP values.

    Returns ``DopMetrics.invalid()`` (all -1) when the covariance is missing,
    all zeros, not finite, or projects to a negative variance.
    """

    if covariance is None:
        return DopMetrics.invalid()
    q = np.asarray(covariance, dtype=float)
    if q.shape != (4, 4) or not np.all(np.isfinite(q)) or not np.any(q):
        return DopMetrics.invalid()

    rot = ecef_to_enu_matrix(lat_deg, lon_deg)
    q_enu = rot @ q[:3, :3] @ rot.T
    diag_enu = np.diag(q_enu)
    if np.any(diag_enu < 0.0) or q[3, 3] < 0.0:
        return DopMetrics.invalid()

    return DopMetrics(
        gdop=float(np.sqrt(np.trace(q_enu))),
        pdop=float(np.sqrt(np.sum(diag_enu))),
        hdop=float(np.sqrt(diag_enu[0] + diag_enu[1])),
        vdop=float(np.sqrt(diag_enu[2])),
        tdop=float(np.sqrt(q[3, 3])),
    )
