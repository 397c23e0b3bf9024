"""Initial mass function on a log-spaced mass grid.

The IMF is tabulated as ``by_number`` = dN/dm on ``n_bins`` masses equally
spaced in log10 between the minimum and maximum stellar mass, normalised so
that one solar mass of stars is formed:

    integral of m * phi(m) dm over [mass_min, mass_max] = 1

Integrals are evaluated in log10 mass with the trapezoidal rule, using the
identity dm = m ln(10) dlog10(m).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
import math
from typing import Tuple

import numpy as np

from .backends.base import IntegrationKernel
from .backends.factory import build_backend
from .backends.numpy_backend import trapezoid_between
from .constants import IMF_MAX_MASS, IMF_MIN_MASS, IMF_N_BINS

LN10 = math.log(10.0)


class IMFMode(enum.IntEnum):
    NUMBER = 0   # number of stars
    MASS = 1     # mass in stars
    YIELD = 2    # mass weighted by a per-bin yield per unit stellar mass


def _chabrier(mass: np.ndarray) -> np.ndarray:
    log_m = np.log10(mass)
    low = 0.852464 * np.exp((log_m - math.log10(0.079)) ** 2 / (-2.0 * 0.69**2)) / mass
    high = 0.237912 * mass**-2.3
    return np.where(mass > 1.0, high, low)


def _salpeter(mass: np.ndarray, exponent: float) -> np.ndarray:
    return mass**-exponent


@dataclass(frozen=True)
class IMF:
    model: str
    log10_mass: np.ndarray
    by_number: np.ndarray
    kernel: IntegrationKernel = field(default=trapezoid_between, compare=False, repr=False)

    def __post_init__(self) -> None:
        log10_mass = np.array(self.log10_mass, dtype=float, copy=True)
        by_number = np.array(self.by_number, dtype=float, copy=True)
        if log10_mass.ndim != 1 or log10_mass.size < 2:
            raise ValueError("IMF needs at least two mass bins")
        if by_number.shape != log10_mass.shape:
            raise ValueError("IMF values and mass bins differ in shape")
        log10_mass.setflags(write=False)
        by_number.setflags(write=False)
        object.__setattr__(self, "log10_mass", log10_mass)
        object.__setattr__(self, "by_number", by_number)
        object.__setattr__(self, "mass", 10.0**log10_mass)

    @property
    def n_bins(self) -> int:
        return int(self.log10_mass.size)

    @property
    def log10_min_mass(self) -> float:
        return float(self.log10_mass[0])

    @property
    def log10_max_mass(self) -> float:
        return float(self.log10_mass[-1])

    @property
    def dlog10_mass(self) -> float:
        return (self.log10_max_mass - self.log10_min_mass) / (self.n_bins - 1)

    def determine_mass_bins(self, log10_min_mass: float, log10_max_mass: float) -> Tuple[int, int]:
        """Indices of the first and last mass bin covering the interval."""
        lo = min(max(log10_min_mass, self.log10_min_mass), self.log10_max_mass)
        hi = min(max(log10_max_mass, self.log10_min_mass), self.log10_max_mass)
        d = self.dlog10_mass
        ilow = min(max(int((lo - self.log10_min_mass) / d), 0), self.n_bins - 2)
        ihigh = int(math.ceil((hi - self.log10_min_mass) / d))
        ihigh = min(max(ihigh, ilow + 1), self.n_bins - 1)
        return ilow, ihigh

    def integrate(
        self,
        log10_min_mass: float,
        log10_max_mass: float,
        exponent_offset: float = 0.0,
        mode: IMFMode = IMFMode.NUMBER,
        yields: np.ndarray | None = None,
    ) -> float:
        """Integrate the IMF between two log10 masses.

        Parameters
        ----------
        log10_min_mass, log10_max_mass : float
            Integration limits, clipped to the IMF mass range.
        exponent_offset : float
            Extra power of the stellar mass applied to the integrand.
        mode : IMFMode
            ``NUMBER`` counts stars, ``MASS`` weights them by mass and
            ``YIELD`` additionally weights by ``yields``.
        yields : np.ndarray, optional
            Per-bin yield per unit stellar mass, of length ``n_bins``. Only the
            bins returned by :meth:`determine_mass_bins` are read.

        Returns
        -------
        float
            Integral per unit stellar mass formed.
        """
        lo = max(log10_min_mass, self.log10_min_mass)
        hi = min(log10_max_mass, self.log10_max_mass)
        if lo >= hi:
            return 0.0

        ilow, ihigh = self.determine_mass_bins(lo, hi)
        idx = slice(ilow, ihigh + 1)
        mass = self.mass[idx]
        integrand = self.by_number[idx] * mass * LN10
        if mode in (IMFMode.MASS, IMFMode.YIELD):
            integrand = integrand * mass
        if mode == IMFMode.YIELD:
            if yields is None or len(yields) < self.n_bins:
                raise ValueError("YIELD integration needs one yield value per IMF mass bin")
            integrand = integrand * yields[idx]
        if exponent_offset != 0.0:
            integrand = integrand * mass**exponent_offset
        return float(self.kernel(self.log10_mass[idx], integrand, lo, hi))


def build_imf(
    model: str = "chabrier",
    mass_min: float = IMF_MIN_MASS,
    mass_max: float = IMF_MAX_MASS,
    n_bins: int = IMF_N_BINS,
    exponent: float = 2.35,
    backend: str = "numpy",
) -> IMF:
    """Tabulate and normalise an IMF."""
    log10_mass = np.linspace(math.log10(mass_min), math.log10(mass_max), n_bins)
    mass = 10.0**log10_mass
    if model == "chabrier":
        by_number = _chabrier(mass)
    elif model == "salpeter":
        by_number = _salpeter(mass, exponent)
    else:
        raise ValueError(f"Unknown IMF model: {model}")

    kernel = build_backend(backend)
    total_mass = kernel(log10_mass, by_number * mass * mass * LN10, log10_mass[0], log10_mass[-1])
    return IMF(model=model, log10_mass=log10_mass, by_number=by_number / total_mass, kernel=kernel)
