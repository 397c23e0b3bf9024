"""Immutable table containers for stellar lifetimes and yields."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from .constants import ELEMENT_NAMES, FE
from .exceptions import ConfigurationError, TableError


def _frozen_array(values, ndim: int, name: str) -> np.ndarray:
    arr = np.array(values, dtype=float, copy=True)
    if arr.ndim != ndim:
        raise TableError(f"{name} must be {ndim}-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise TableError(f"{name} contains non-finite values")
    arr.setflags(write=False)
    return arr


def _check_ascending(arr: np.ndarray, name: str) -> None:
    if arr.size < 1:
        raise TableError(f"{name} must not be empty")
    if arr.size > 1 and not np.all(np.diff(arr) > 0.0):
        raise TableError(f"{name} must be strictly ascending")


@dataclass(frozen=True)
class LifetimeTable:
    """Stellar lifetimes on a (metallicity, mass) grid.

    ``log10_lifetime_yr[iz, imass]`` is the log10 of the lifetime in years of a
    star of mass ``mass[imass]`` (Msun) and metallicity ``metallicity[iz]``
    (mass fraction).
    """

    mass: np.ndarray
    metallicity: np.ndarray
    log10_lifetime_yr: np.ndarray

    def __post_init__(self) -> None:
        mass = _frozen_array(self.mass, 1, "lifetime mass knots")
        metallicity = _frozen_array(self.metallicity, 1, "lifetime metallicity knots")
        grid = _frozen_array(self.log10_lifetime_yr, 2, "lifetime grid")
        _check_ascending(mass, "lifetime mass knots")
        _check_ascending(metallicity, "lifetime metallicity knots")
        if mass.size < 2 or metallicity.size < 2:
            raise TableError("lifetime table needs at least two mass and two metallicity knots")
        if grid.shape != (metallicity.size, mass.size):
            raise TableError(
                f"lifetime grid has shape {grid.shape}, expected {(metallicity.size, mass.size)}"
            )
        if np.any(np.diff(grid, axis=1) > 0.0):
            raise TableError("lifetimes must not increase with stellar mass")
        object.__setattr__(self, "mass", mass)
        object.__setattr__(self, "metallicity", metallicity)
        object.__setattr__(self, "log10_lifetime_yr", grid)

    @property
    def n_mass(self) -> int:
        return int(self.mass.size)

    @property
    def n_z(self) -> int:
        return int(self.metallicity.size)

    def row(self, iz: int) -> np.ndarray:
        if not 0 <= iz < self.n_z:
            raise IndexError(f"metallicity index {iz} outside [0, {self.n_z})")
        return self.log10_lifetime_yr[iz]


@dataclass(frozen=True)
class YieldTable:
    """SNII or AGB yields on a (metallicity, element, mass) grid.

    ``yields`` holds newly synthesised mass per element, ``ejecta`` the mass
    of pre-existing material returned and ``total_metals`` the newly produced
    metal mass. Tables read from disk are in Msun per star on the model mass
    grid; :meth:`on_imf_grid` converts them to mass per unit stellar mass on
    the IMF grid used by the evaluator.
    """

    log10_mass: np.ndarray
    log10_metallicity: np.ndarray
    yields: np.ndarray
    ejecta: np.ndarray
    total_metals: np.ndarray
    element_names: tuple[str, ...] = ELEMENT_NAMES

    def __post_init__(self) -> None:
        log10_mass = _frozen_array(self.log10_mass, 1, "yield mass knots")
        log10_z = _frozen_array(self.log10_metallicity, 1, "yield metallicity knots")
        yields = _frozen_array(self.yields, 3, "element yields")
        ejecta = _frozen_array(self.ejecta, 2, "ejecta")
        total_metals = _frozen_array(self.total_metals, 2, "total metal yields")
        _check_ascending(log10_mass, "yield mass knots")
        _check_ascending(log10_z, "yield metallicity knots")
        names = tuple(self.element_names)
        expected = (log10_z.size, len(names), log10_mass.size)
        if yields.shape != expected:
            raise TableError(f"element yields have shape {yields.shape}, expected {expected}")
        for name, grid in (("ejecta", ejecta), ("total metal yields", total_metals)):
            if grid.shape != (log10_z.size, log10_mass.size):
                raise TableError(
                    f"{name} have shape {grid.shape}, expected {(log10_z.size, log10_mass.size)}"
                )
        object.__setattr__(self, "log10_mass", log10_mass)
        object.__setattr__(self, "log10_metallicity", log10_z)
        object.__setattr__(self, "yields", yields)
        object.__setattr__(self, "ejecta", ejecta)
        object.__setattr__(self, "total_metals", total_metals)
        object.__setattr__(self, "element_names", names)

    @property
    def n_mass(self) -> int:
        return int(self.log10_mass.size)

    @property
    def n_z(self) -> int:
        return int(self.log10_metallicity.size)

    @property
    def n_elements(self) -> int:
        return len(self.element_names)

    def _check(self, iz: int, ilow: int, ihigh: int) -> None:
        if not 0 <= iz < self.n_z:
            raise IndexError(f"metallicity index {iz} outside [0, {self.n_z})")
        if not 0 <= ilow <= ihigh < self.n_mass:
            raise IndexError(f"mass range [{ilow}, {ihigh}] outside [0, {self.n_mass})")

    def yield_row(self, iz: int, element: int, ilow: int, ihigh: int) -> np.ndarray:
        self._check(iz, ilow, ihigh)
        if not 0 <= element < self.n_elements:
            raise IndexError(f"element index {element} outside [0, {self.n_elements})")
        return self.yields[iz, element, ilow : ihigh + 1]

    def ejecta_row(self, iz: int, ilow: int, ihigh: int) -> np.ndarray:
        self._check(iz, ilow, ihigh)
        return self.ejecta[iz, ilow : ihigh + 1]

    def total_metals_row(self, iz: int, ilow: int, ihigh: int) -> np.ndarray:
        self._check(iz, ilow, ihigh)
        return self.total_metals[iz, ilow : ihigh + 1]

    def scaled(self, factors: Sequence[float]) -> "YieldTable":
        """Return a copy with each element's synthesised yield multiplied by ``factors``."""
        f = np.asarray(factors, dtype=float)
        if f.shape != (self.n_elements,):
            raise TableError(f"expected {self.n_elements} yield factors, got {f.shape}")
        return replace(self, yields=self.yields * f[None, :, None])

    def on_imf_grid(self, log10_imf_mass: np.ndarray) -> "YieldTable":
        """Resample onto the IMF mass grid, expressed per unit stellar mass.

        Masses outside the model grid take the boundary model's values.
        """
        grid = np.asarray(log10_imf_mass, dtype=float)
        inv_mass = 10.0 ** (-grid)

        def _resample(values: np.ndarray) -> np.ndarray:
            return np.interp(grid, self.log10_mass, values) * inv_mass

        yields = np.empty((self.n_z, self.n_elements, grid.size), dtype=float)
        ejecta = np.empty((self.n_z, grid.size), dtype=float)
        total_metals = np.empty((self.n_z, grid.size), dtype=float)
        for iz in range(self.n_z):
            for e in range(self.n_elements):
                yields[iz, e] = _resample(self.yields[iz, e])
            ejecta[iz] = _resample(self.ejecta[iz])
            total_metals[iz] = _resample(self.total_metals[iz])
        return YieldTable(
            log10_mass=grid,
            log10_metallicity=self.log10_metallicity,
            yields=yields,
            ejecta=ejecta,
            total_metals=total_metals,
            element_names=self.element_names,
        )


@dataclass(frozen=True)
class SNIaYields:
    """Metallicity-independent SNIa yields in Msun per supernova."""

    yields: np.ndarray
    total_metals: float
    element_names: tuple[str, ...] = ELEMENT_NAMES

    def __post_init__(self) -> None:
        yields = _frozen_array(self.yields, 1, "SNIa yields")
        names = tuple(self.element_names)
        if yields.size != len(names):
            raise TableError(f"SNIa yields have {yields.size} entries, expected {len(names)}")
        total = float(self.total_metals)
        if not np.isfinite(total):
            raise TableError("SNIa total metal yield is not finite")
        object.__setattr__(self, "yields", yields)
        object.__setattr__(self, "total_metals", total)
        object.__setattr__(self, "element_names", names)

    @property
    def iron_index(self) -> int:
        """Index of iron, which must match the ``FE`` slot of the element list."""
        if FE >= len(self.element_names) or self.element_names[FE] != "Fe":
            raise ConfigurationError(
                f"SNIa yield table does not store iron at index {FE}: {self.element_names}"
            )
        return FE


@dataclass(frozen=True)
class StarsTables:
    """Raw tables read from a yield-table directory."""

    lifetimes: LifetimeTable
    snii: YieldTable
    agb: YieldTable
    snia: SNIaYields

    def to_arrays(self) -> dict[str, np.ndarray]:
        """Flatten into plain arrays for ``np.savez``."""
        payload: dict[str, np.ndarray] = {
            "lifetime_mass": self.lifetimes.mass,
            "lifetime_metallicity": self.lifetimes.metallicity,
            "lifetime_grid": self.lifetimes.log10_lifetime_yr,
            "snia_yields": self.snia.yields,
            "snia_total_metals": np.array(self.snia.total_metals),
            "snia_elements": np.array(self.snia.element_names),
        }
        for prefix, table in (("snii", self.snii), ("agb", self.agb)):
            payload[f"{prefix}_log10_mass"] = table.log10_mass
            payload[f"{prefix}_log10_metallicity"] = table.log10_metallicity
            payload[f"{prefix}_yields"] = table.yields
            payload[f"{prefix}_ejecta"] = table.ejecta
            payload[f"{prefix}_total_metals"] = table.total_metals
            payload[f"{prefix}_elements"] = np.array(table.element_names)
        return payload

    @classmethod
    def from_arrays(cls, data) -> "StarsTables":
        def _yield_table(prefix: str) -> YieldTable:
            return YieldTable(
                log10_mass=data[f"{prefix}_log10_mass"],
                log10_metallicity=data[f"{prefix}_log10_metallicity"],
                yields=data[f"{prefix}_yields"],
                ejecta=data[f"{prefix}_ejecta"],
                total_metals=data[f"{prefix}_total_metals"],
                element_names=tuple(str(n) for n in data[f"{prefix}_elements"]),
            )

        return cls(
            lifetimes=LifetimeTable(
                mass=data["lifetime_mass"],
                metallicity=data["lifetime_metallicity"],
                log10_lifetime_yr=data["lifetime_grid"],
            ),
            snii=_yield_table("snii"),
            agb=_yield_table("agb"),
            snia=SNIaYields(
                yields=data["snia_yields"],
                total_metals=float(data["snia_total_metals"]),
                element_names=tuple(str(n) for n in data["snia_elements"]),
            ),
        )
