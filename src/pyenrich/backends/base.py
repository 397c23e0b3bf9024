"""Backend protocol for IMF integration kernels."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class IntegrationKernel(Protocol):
    def __call__(self, x: np.ndarray, y: np.ndarray, lo: float, hi: float) -> float:
        ...
