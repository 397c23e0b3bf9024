"""Numba-accelerated IMF integration backend."""

from __future__ import annotations

import numpy as np

try:
    from numba import njit
except Exception as exc:  # pragma: no cover - optional dependency
    njit = None
    _NUMBA_IMPORT_ERROR = exc
else:
    _NUMBA_IMPORT_ERROR = None


if njit is not None:

    @njit(cache=True)
    def _trapezoid_between_numba(x: np.ndarray, y: np.ndarray, lo: float, hi: float) -> float:
        total = 0.0
        x_prev = lo
        y_prev = np.interp(lo, x, y)
        for i in range(x.size):
            if x[i] <= lo:
                continue
            if x[i] >= hi:
                break
            total += 0.5 * (y[i] + y_prev) * (x[i] - x_prev)
            x_prev = x[i]
            y_prev = y[i]
        total += 0.5 * (np.interp(hi, x, y) + y_prev) * (hi - x_prev)
        return total

    # Prime JIT cache once to avoid a latency spike on the first particle.
    _trapezoid_between_numba(np.array([0.0, 1.0]), np.array([0.0, 1.0]), 0.25, 0.75)


def trapezoid_between(x: np.ndarray, y: np.ndarray, lo: float, hi: float) -> float:
    return float(
        _trapezoid_between_numba(
            np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64), float(lo), float(hi)
        )
    )


def build_numba_backend():
    if njit is None:
        raise RuntimeError(
            f"Numba backend unavailable: {_NUMBA_IMPORT_ERROR}"
        ) from _NUMBA_IMPORT_ERROR
    return trapezoid_between
