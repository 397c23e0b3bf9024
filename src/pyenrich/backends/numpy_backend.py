"""Default NumPy backend for IMF integration."""

from __future__ import annotations

import numpy as np


def trapezoid_between(x: np.ndarray, y: np.ndarray, lo: float, hi: float) -> float:
    """Integrate the piecewise-linear curve through ``(x, y)`` from ``lo`` to ``hi``.

    ``x`` is ascending and should bracket ``[lo, hi]``; values beyond the ends
    are held constant.
    """
    inner = (x > lo) & (x < hi)
    xs = np.concatenate(([lo], x[inner], [hi]))
    ys = np.concatenate(([np.interp(lo, x, y)], y[inner], [np.interp(hi, x, y)]))
    return float(np.sum(0.5 * (ys[1:] + ys[:-1]) * np.diff(xs)))


def build_numpy_backend():
    return trapezoid_between
