"""Readers for the plain-text lifetime and yield tables.

A table directory holds four whitespace-separated files, each with a one-line
header naming its columns:

``lifetimes.dat``
    ``M <Z_1> ... <Z_n>``; one row per stellar mass (Msun) with the lifetime
    in years at each metallicity.
``snii.dat``, ``agb.dat``
    ``Z mass ejecta total_metals <elements...>``; one row per (metallicity,
    mass) model, masses in Msun per star.
``snia.dat``
    ``total_metals <elements...>``; a single row in Msun per supernova.

Parsed tables are cached as ``.npz`` files keyed on the size and mtime of the
source files, so repeated runs skip the text parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
import logging
import os
from pathlib import Path

import numpy as np

from .constants import ELEMENT_NAMES, LOG_MIN_METALLICITY
from .exceptions import TableError
from .model_tables import LifetimeTable, SNIaYields, StarsTables, YieldTable

logger = logging.getLogger(__name__)

TABLE_CACHE_VERSION = 1
TABLE_FILES = {
    "lifetimes": "lifetimes.dat",
    "snii": "snii.dat",
    "agb": "agb.dat",
    "snia": "snia.dat",
}
YIELD_COLUMNS = ("Z", "mass", "ejecta", "total_metals")


@dataclass
class IORoutines:
    enable_table_cache: bool = True
    table_cache_dir: Path | None = None
    log_min_metallicity: float = LOG_MIN_METALLICITY

    def _resolve_table_cache_dir(self) -> Path:
        if self.table_cache_dir is not None:
            return Path(self.table_cache_dir)
        env_dir = os.getenv("PYENRICH_TABLE_CACHE_DIR")
        if env_dir:
            return Path(env_dir).expanduser()
        return Path.home() / ".cache" / "pyenrich"

    def _table_source_files(self, base_dir: Path) -> list[Path]:
        return [base_dir / name for name in TABLE_FILES.values()]

    def _table_cache_token(self, base_dir: Path) -> str:
        entries: list[tuple[str, int, int]] = []
        for path in self._table_source_files(base_dir):
            st = path.stat()
            entries.append((path.name, int(st.st_size), int(st.st_mtime_ns)))
        payload = {
            "version": TABLE_CACHE_VERSION,
            "directory": str(base_dir.resolve()),
            "log_min_metallicity": float(self.log_min_metallicity),
            "sources": entries,
        }
        raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        return hashlib.sha256(raw).hexdigest()[:16]

    def _table_cache_path(self, base_dir: Path) -> Path:
        token = self._table_cache_token(base_dir)
        return self._resolve_table_cache_dir() / f"stars_tables_v{TABLE_CACHE_VERSION}_{token}.npz"

    def _load_table_cache(self, base_dir: Path) -> StarsTables | None:
        path = self._table_cache_path(base_dir)
        if not path.exists():
            logger.debug("no table cache at %s", path)
            return None

        try:
            with np.load(path, allow_pickle=False) as data:
                tables = StarsTables.from_arrays(data)
        except Exception as exc:
            logger.debug("ignoring unreadable table cache %s: %s", path, exc)
            return None
        logger.debug("loaded tables from cache %s", path)
        return tables

    def _save_table_cache(self, base_dir: Path, tables: StarsTables) -> None:
        path = self._table_cache_path(base_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp.npz")
        np.savez(tmp, **tables.to_arrays())
        tmp.replace(path)

    def _read_header(self, path: Path) -> list[str]:
        with open(path, "r", encoding="ascii") as f:
            line = f.readline()
        header = line.split()
        if not header:
            raise TableError(f"{path.name}: missing column header")
        return header

    def _read_numeric_table(self, path: Path, ncols: int, skiprows: int = 1) -> np.ndarray:
        try:
            arr = np.loadtxt(path, skiprows=skiprows, ndmin=2)
        except ValueError as exc:
            raise TableError(f"{path.name}: {exc}") from exc
        if arr.shape[0] == 0:
            raise TableError(f"{path.name}: no data rows")
        if arr.shape[1] != ncols:
            raise TableError(f"{path.name}: expected {ncols} columns, found {arr.shape[1]}")
        return arr

    def _log10_metallicity(self, z: np.ndarray, name: str) -> np.ndarray:
        if np.any(z < 0.0):
            raise TableError(f"{name}: negative metallicity")
        log_z = np.full(z.shape, float(self.log_min_metallicity))
        positive = z > 0.0
        log_z[positive] = np.log10(z[positive])
        return log_z

    def read_lifetimes(self, path: Path) -> LifetimeTable:
        header = self._read_header(path)
        if header[0] != "M":
            raise TableError(f"{path.name}: first column must be M")
        try:
            metallicity = np.array([float(v) for v in header[1:]], dtype=float)
        except ValueError as exc:
            raise TableError(f"{path.name}: metallicity header is not numeric") from exc
        arr = self._read_numeric_table(path, ncols=len(header))
        lifetimes = arr[:, 1:]
        if np.any(lifetimes <= 0.0):
            raise TableError(f"{path.name}: lifetimes must be positive")
        return LifetimeTable(
            mass=arr[:, 0],
            metallicity=metallicity,
            log10_lifetime_yr=np.log10(lifetimes).T,
        )

    def read_yield_table(self, path: Path) -> YieldTable:
        header = self._read_header(path)
        if tuple(header[:4]) != YIELD_COLUMNS:
            raise TableError(f"{path.name}: header must start with {' '.join(YIELD_COLUMNS)}")
        names = tuple(header[4:])
        if names != ELEMENT_NAMES:
            raise TableError(f"{path.name}: elements {names} do not match {ELEMENT_NAMES}")
        arr = self._read_numeric_table(path, ncols=len(header))

        z_knots = np.unique(arr[:, 0])
        mass_knots = np.unique(arr[:, 1])
        nz, nm = z_knots.size, mass_knots.size
        if arr.shape[0] != nz * nm:
            raise TableError(f"{path.name}: models do not form a complete (Z, mass) grid")
        arr = arr[np.lexsort((arr[:, 1], arr[:, 0]))]
        cube = arr.reshape(nz, nm, len(header))
        if not (np.all(cube[:, :, 0] == z_knots[:, None]) and np.all(cube[:, :, 1] == mass_knots[None, :])):
            raise TableError(f"{path.name}: duplicated (Z, mass) models")
        if np.any(mass_knots <= 0.0):
            raise TableError(f"{path.name}: stellar masses must be positive")

        return YieldTable(
            log10_mass=np.log10(mass_knots),
            log10_metallicity=self._log10_metallicity(z_knots, path.name),
            yields=cube[:, :, 4:].transpose(0, 2, 1),
            ejecta=cube[:, :, 2],
            total_metals=cube[:, :, 3],
            element_names=names,
        )

    def read_snia_yields(self, path: Path) -> SNIaYields:
        header = self._read_header(path)
        if header[0] != "total_metals":
            raise TableError(f"{path.name}: first column must be total_metals")
        arr = self._read_numeric_table(path, ncols=len(header))
        if arr.shape[0] != 1:
            raise TableError(f"{path.name}: expected a single row of yields")
        return SNIaYields(
            yields=arr[0, 1:],
            total_metals=float(arr[0, 0]),
            element_names=tuple(header[1:]),
        )

    def read_stars_tables(self, base_dir: Path) -> StarsTables:
        return StarsTables(
            lifetimes=self.read_lifetimes(base_dir / TABLE_FILES["lifetimes"]),
            snii=self.read_yield_table(base_dir / TABLE_FILES["snii"]),
            agb=self.read_yield_table(base_dir / TABLE_FILES["agb"]),
            snia=self.read_snia_yields(base_dir / TABLE_FILES["snia"]),
        )

    def load_stars_tables(self, path: str | Path) -> StarsTables:
        """Load the tables in ``path``, going through the cache when enabled."""
        base_dir = Path(path)
        for source in self._table_source_files(base_dir):
            if not source.is_file():
                raise TableError(f"missing table file {source}")

        if self.enable_table_cache:
            cached = self._load_table_cache(base_dir)
            if cached is not None:
                return cached

        logger.info("reading stellar tables from %s", base_dir)
        tables = self.read_stars_tables(base_dir)
        if self.enable_table_cache:
            try:
                self._save_table_cache(base_dir, tables)
            except OSError as exc:
                logger.debug("could not write table cache: %s", exc)
        return tables
