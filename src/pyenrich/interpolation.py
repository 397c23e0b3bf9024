"""Table interpolation kernels shared by the lifetime and yield models."""

from __future__ import annotations

from typing import Tuple

import numpy as np


def interpol_1d(table: np.ndarray, i: int, dx: float) -> float:
    """Linear interpolation between ``table[i]`` and ``table[i + 1]``."""
    return float((1.0 - dx) * table[i] + dx * table[i + 1])


def interpol_2d(table: np.ndarray, i: int, j: int, dx: float, dy: float) -> float:
    """Bilinear interpolation in the cell with lower corner ``table[i, j]``."""
    return float(
        (1.0 - dx) * (1.0 - dy) * table[i, j]
        + (1.0 - dx) * dy * table[i, j + 1]
        + dx * (1.0 - dy) * table[i + 1, j]
        + dx * dy * table[i + 1, j + 1]
    )


def bracket(knots: np.ndarray, x: float) -> Tuple[int, float]:
    """Locate ``x`` on ascending ``knots``, clamping at both ends.

    Returns the lower index of the bracketing pair and the fractional
    distance from it. Below the first knot this is ``(0, 0.0)``, at or above
    the last knot ``(n - 2, 1.0)``.
    """
    n = len(knots)
    if x <= knots[0]:
        return 0, 0.0
    if x >= knots[n - 1]:
        return n - 2, 1.0
    i = 0
    while i < n - 1 and knots[i + 1] <= x:
        i += 1
    return i, float((x - knots[i]) / (knots[i + 1] - knots[i]))


def locate_bin(log_z: float, knots: np.ndarray, log_min_metallicity: float) -> Tuple[int, int, float]:
    """Bracketing metallicity bins of a yield table and their weight.

    Parameters
    ----------
    log_z : float
        log10 of the particle's total metal mass fraction.
    knots : np.ndarray
        Ascending log10 metallicity knots of the yield table.
    log_min_metallicity : float
        Floor at and below which only the first bin is used.

    Returns
    -------
    tuple
        ``(low, high, weight)`` such that a tabulated quantity is
        ``(1 - weight) * q[low] + weight * q[high]``.

    Notes
    -----
    Above the top knot the weight is 1, so the top model is used unchanged;
    below the range and at the floor it is 0. The two ends differ on purpose.
    """
    n = len(knots)
    if log_z <= log_min_metallicity or n == 1:
        return 0, 0, 0.0
    if log_z >= knots[n - 1]:
        return n - 2, n - 1, 1.0

    low = 0
    while low < n - 1 and log_z > knots[low + 1]:
        low += 1
    high = min(low + 1, n - 1)

    if log_z < knots[0]:
        return low, high, 0.0
    delta = knots[high] - knots[low]
    if delta <= 0.0:
        return low, high, 0.0
    return low, high, float((log_z - knots[low]) / delta)
