"""Stellar lifetimes and dying masses.

Three models are available: the closed-form fits of Padovani & Matteucci
(1993) and Maeder & Meynet (1989), and interpolation in the metallicity
dependent lifetime tables of Portinari et al. (1998). A model is chosen once
with :func:`build_lifetime_model`; the returned object exposes

* ``dying_mass(age_gyr, metallicity)``: the mass (Msun) of stars ending their
  life at the given age, clamped to the IMF maximum mass;
* ``lifetime(mass, metallicity)``: the lifetime in Gyr of a star of the given
  mass.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import math
from typing import Protocol

import numpy as np

from .constants import GYR_IN_YR, IMF_MAX_MASS
from .exceptions import ConfigurationError
from .interpolation import bracket, interpol_1d, interpol_2d
from .model_tables import LifetimeTable


class LifetimeModel(enum.Enum):
    PADOVANI_MATTEUCCI_1993 = 0
    MAEDER_MEYNET_1989 = 1
    PORTINARI_1998 = 2

    @classmethod
    def parse(cls, value: "LifetimeModel | str | int") -> "LifetimeModel":
        """Accept an enum member, its legacy integer selector or a name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key.isdigit():
                value = int(key)
            elif key in _MODEL_NAMES:
                return _MODEL_NAMES[key]
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                pass
        raise ConfigurationError(f"stellar lifetimes not defined for model {value!r}")


_MODEL_NAMES = {
    "padovani_matteucci_1993": LifetimeModel.PADOVANI_MATTEUCCI_1993,
    "padovani_matteucci": LifetimeModel.PADOVANI_MATTEUCCI_1993,
    "pm93": LifetimeModel.PADOVANI_MATTEUCCI_1993,
    "maeder_meynet_1989": LifetimeModel.MAEDER_MEYNET_1989,
    "maeder_meynet": LifetimeModel.MAEDER_MEYNET_1989,
    "mm89": LifetimeModel.MAEDER_MEYNET_1989,
    "portinari_1998": LifetimeModel.PORTINARI_1998,
    "portinari": LifetimeModel.PORTINARI_1998,
    "p98": LifetimeModel.PORTINARI_1998,
}


class Lifetimes(Protocol):
    def dying_mass(self, age_gyr: float, metallicity: float) -> float:
        ...

    def lifetime(self, mass: float, metallicity: float) -> float:
        ...


@dataclass(frozen=True)
class PadovaniMatteucciLifetimes:
    max_mass: float = IMF_MAX_MASS

    def dying_mass(self, age_gyr: float, metallicity: float) -> float:
        if age_gyr > 0.039765318659064693:
            x = 1.338 - 0.1116 * (9.0 + math.log10(age_gyr))
            mass = 10.0 ** (7.764 - (1.79 - x * x) / 0.2232)
        elif age_gyr > 0.003:
            mass = ((age_gyr - 0.003) / 1.2) ** (-1.0 / 1.85)
        else:
            mass = self.max_mass
        return min(mass, self.max_mass)

    def lifetime(self, mass: float, metallicity: float) -> float:
        if mass <= 0.6:
            return 160.0
        if mass <= 6.6:
            return 10.0 ** ((0.334 - math.sqrt(1.790 - 0.2232 * (7.764 - math.log10(mass)))) / 0.1116)
        return 1.2 * mass ** -1.85 + 0.003


@dataclass(frozen=True)
class MaederMeynetLifetimes:
    max_mass: float = IMF_MAX_MASS

    def dying_mass(self, age_gyr: float, metallicity: float) -> float:
        if age_gyr >= 8.4097378:
            mass = 10.0 ** ((1.0 - math.log10(age_gyr)) / 0.6545)
        elif age_gyr >= 0.35207776:
            mass = 10.0 ** ((1.35 - math.log10(age_gyr)) / 3.7)
        elif age_gyr >= 0.050931493:
            mass = 10.0 ** ((0.77 - math.log10(age_gyr)) / 2.51)
        elif age_gyr >= 0.010529099:
            mass = 10.0 ** ((0.17 - math.log10(age_gyr)) / 1.78)
        elif age_gyr >= 0.0037734787:
            mass = 10.0 ** ((-0.94 - math.log10(age_gyr)) / 0.86)
        elif age_gyr > 0.003:
            mass = ((age_gyr - 0.003) / 1.2) ** -0.54054053
        else:
            mass = self.max_mass
        return min(mass, self.max_mass)

    def lifetime(self, mass: float, metallicity: float) -> float:
        if mass <= 1.3:
            return 10.0 ** (-0.6545 * math.log10(mass) + 1.0)
        if mass <= 3.0:
            return 10.0 ** (-3.7 * math.log10(mass) + 1.35)
        if mass <= 7.0:
            return 10.0 ** (-2.51 * math.log10(mass) + 0.77)
        if mass <= 15.0:
            return 10.0 ** (-1.78 * math.log10(mass) + 0.17)
        if mass <= 60.0:
            return 10.0 ** (-0.86 * math.log10(mass) - 0.94)
        return 1.2 * mass ** -1.85 + 0.003


@dataclass(frozen=True)
class TabulatedLifetimes:
    """Interpolation in a :class:`LifetimeTable`."""

    table: LifetimeTable
    max_mass: float = IMF_MAX_MASS

    def _mass_along_row(self, row: np.ndarray, log_age_yr: float) -> float:
        n = row.size
        if log_age_yr >= row[0]:
            i, d = 0, 0.0
        elif log_age_yr <= row[n - 1]:
            i, d = n - 2, 1.0
        else:
            # Highest mass whose lifetime still exceeds the age.
            i = n - 1
            while i >= 0 and row[i] < log_age_yr:
                i -= 1
            d = float((log_age_yr - row[i]) / (row[i + 1] - row[i]))
        return interpol_1d(self.table.mass, i, d)

    def dying_mass(self, age_gyr: float, metallicity: float) -> float:
        if age_gyr <= 0.0:
            return self.max_mass
        log_age_yr = math.log10(age_gyr * GYR_IN_YR)
        iz, dz = bracket(self.table.metallicity, metallicity)
        mass1 = self._mass_along_row(self.table.row(iz), log_age_yr)
        mass2 = self._mass_along_row(self.table.row(iz + 1), log_age_yr)
        mass = (1.0 - dz) * mass1 + dz * mass2
        return min(mass, self.max_mass)

    def lifetime(self, mass: float, metallicity: float) -> float:
        im, dm = bracket(self.table.mass, mass)
        iz, dz = bracket(self.table.metallicity, metallicity)
        log_t = interpol_2d(self.table.log10_lifetime_yr, iz, im, dz, dm)
        return 10.0 ** log_t / GYR_IN_YR


def build_lifetime_model(
    model: LifetimeModel | str | int,
    table: LifetimeTable | None = None,
    max_mass: float = IMF_MAX_MASS,
) -> Lifetimes:
    kind = LifetimeModel.parse(model)
    if kind is LifetimeModel.PADOVANI_MATTEUCCI_1993:
        return PadovaniMatteucciLifetimes(max_mass=max_mass)
    if kind is LifetimeModel.MAEDER_MEYNET_1989:
        return MaederMeynetLifetimes(max_mass=max_mass)
    if kind is LifetimeModel.PORTINARI_1998:
        if table is None:
            raise ConfigurationError("tabulated stellar lifetimes require a lifetime table")
        return TabulatedLifetimes(table=table, max_mass=max_mass)
    raise ConfigurationError(f"stellar lifetimes not defined for model {kind!r}")
