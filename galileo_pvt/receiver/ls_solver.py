"""Iterative least-squares position and receiver clock solver."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from galileo_pvt.constants import GALILEO_C_M_S
from galileo_pvt.receiver.rotation import rotate_satellite
from galileo_pvt.utils.angles import topocent
from galileo_pvt.utils.linalg import invert, solve_least_squares

logger = logging.getLogger(__name__)

# Best-effort bounds, not convergence guarantees: the estimate after the last
# iteration is returned whether or not the tolerance was met.
LS_MAX_ITER = 10
LS_TOL_M = 1e-4


@dataclass(frozen=True)
class LsSolution:
    """Least-squares estimate and diagnostics.

    ``pos`` is [X, Y, Z, clock bias] in meters. ``covariance`` is the inverse of
    the unweighted normal matrix AᵀA, or zeros when that matrix is singular
    (``covariance_valid`` is then False). Azimuth, elevation and range are
    computed at the last iteration for every column of the input.
    """

    pos: np.ndarray
    covariance: np.ndarray
    covariance_valid: bool
    azimuth_deg: np.ndarray
    elevation_deg: np.ndarray
    range_m: np.ndarray
    iterations: int
    converged: bool


def least_square_pos(
    satpos: np.ndarray,
    obs: np.ndarray,
    weights: np.ndarray,
    max_iter: int = LS_MAX_ITER,
    tol_m: float = LS_TOL_M,
) -> LsSolution:
    """Solve for receiver position and clock bias from corrected pseudoranges.

    Args:
        satpos: Satellite ECEF positions at transmit time, shape (3, N).
        obs: Corrected pseudoranges in meters, shape (N,).
        weights: Diagonal weight matrix, shape (N, N). Zero rows disable a
            satellite without changing the array sizes.
        max_iter: Iteration cap.
        tol_m: Norm of the update below which the solve is declared converged.
    """

    satpos = np.asarray(satpos, dtype=float)
    obs = np.asarray(obs, dtype=float)
    weights = np.asarray(weights, dtype=float)
    num_sats = satpos.shape[1]

    pos = np.zeros(4, dtype=float)
    a_matrix = np.zeros((num_sats, 4), dtype=float)
    omc = np.zeros(num_sats, dtype=float)
    az = np.zeros(num_sats, dtype=float)
    el = np.zeros(num_sats, dtype=float)
    dist = np.zeros(num_sats, dtype=float)

    converged = False
    iterations = 0
    for iteration in range(max_iter):
        iterations = iteration + 1
        for i in range(num_sats):
            sat = satpos[:, i]
            if iteration == 0:
                rot_x = sat
                trop = 0.0
            else:
                travel_time_s = float(np.linalg.norm(sat - pos[:3])) / GALILEO_C_M_S
                rot_x = rotate_satellite(travel_time_s, sat)
                az[i], el[i], dist[i] = topocent(pos[:3], rot_x - pos[:3])
                # No troposphere model is applied.
                trop = 0.0

            omc[i] = obs[i] - np.linalg.norm(rot_x - pos[:3]) - pos[3] - trop
            # Line of sight normalised by the measured pseudorange.
            a_matrix[i, :3] = -(rot_x - pos[:3]) / obs[i]
            a_matrix[i, 3] = 1.0

        delta = solve_least_squares(weights @ a_matrix, weights @ omc)
        if delta is None:
            logger.warning("Singular least-squares system at iteration %d; keeping current estimate.", iteration)
            break

        pos = pos + delta
        if np.linalg.norm(delta) < tol_m:
            converged = True
            break

    if not converged:
        logger.debug("Least-squares position did not converge in %d iterations.", iterations)

    covariance = invert(a_matrix.T @ a_matrix)
    covariance_valid = covariance is not None
    if covariance is None:
        covariance = np.zeros((4, 4), dtype=float)

    return LsSolution(
        pos=pos,
        covariance=covariance,
        covariance_valid=covariance_valid,
        azimuth_deg=az,
        elevation_deg=el,
        range_m=dist,
        iterations=iterations,
        converged=converged,
    )
