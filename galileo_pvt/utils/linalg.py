"""Linear algebra helpers that report singular systems as ``None``."""

from __future__ import annotations

import numpy as np


def solve_least_squares(a_matrix: np.ndarray, b_vector: np.ndarray) -> np.ndarray | None:
    """Solve ``a_matrix @ x = b_vector`` in the least-squares sense.

    Returns ``None`` when the system is rank deficient or the solution is not
    finite.
    """

    try:
        solution, _, rank, _ = np.linalg.lstsq(a_matrix, b_vector, rcond=None)
    except np.linalg.LinAlgError:
        return None
    if rank < a_matrix.shape[1] or not np.all(np.isfinite(solution)):
        return None
    return solution


def invert(matrix: np.ndarray) -> np.ndarray | None:
    """Return the inverse of a square matrix, or ``None`` if it is singular."""

    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(inverse)):
        return None
    return inverse
