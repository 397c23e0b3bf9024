"""Read-only inputs shared by every enrichment call."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import StarsConfig
from .constants import ELEMENT_NAMES
from .exceptions import ConfigurationError
from .imf import IMF, build_imf
from .io_routines import IORoutines
from .lifetime import Lifetimes, build_lifetime_model
from .model_tables import SNIaYields, StarsTables, YieldTable


@dataclass(frozen=True)
class Cosmology:
    """Conversion from internal time units to Gyr."""

    gyr_per_time_unit: float = 1.0

    def time_to_gyr(self, t: float) -> float:
        return t * self.gyr_per_time_unit


@dataclass(frozen=True)
class StarsProperties:
    """Tables, IMF and lifetime model, built once and never mutated.

    ``snii`` and ``agb`` are stored on the IMF mass grid in mass per unit
    stellar mass formed; use :meth:`from_tables` to build them from raw
    tables.
    """

    config: StarsConfig
    imf: IMF
    lifetimes: Lifetimes
    snii: YieldTable
    agb: YieldTable
    snia: SNIaYields
    raw_tables: StarsTables | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        for name, table in (("SNII", self.snii), ("AGB", self.agb)):
            if table.n_mass != self.imf.n_bins:
                raise ConfigurationError(
                    f"{name} table has {table.n_mass} mass bins but the IMF has {self.imf.n_bins}"
                )
            if table.element_names != ELEMENT_NAMES:
                raise ConfigurationError(
                    f"{name} table tracks elements {table.element_names}, expected {ELEMENT_NAMES}"
                )
        if self.snia.element_names != ELEMENT_NAMES:
            raise ConfigurationError(
                f"SNIa yields track elements {self.snia.element_names}, expected {ELEMENT_NAMES}"
            )

    @property
    def scratch_size(self) -> int:
        """Length of the per-mass-bin buffer a caller must provide."""
        return max(self.snii.n_mass, self.agb.n_mass)

    @classmethod
    def from_tables(cls, tables: StarsTables, config: StarsConfig | None = None) -> "StarsProperties":
        cfg = config if config is not None else StarsConfig()
        imf = build_imf(
            model=cfg.imf_model,
            mass_min=cfg.imf_min_mass,
            mass_max=cfg.imf_max_mass,
            n_bins=cfg.imf_n_bins,
            exponent=cfg.imf_exponent,
            backend=cfg.backend,
        )
        lifetimes = build_lifetime_model(cfg.lifetime_model, table=tables.lifetimes, max_mass=cfg.imf_max_mass)

        snii = tables.snii
        if cfg.snii_yield_factors is not None:
            snii = snii.scaled(cfg.snii_yield_factors)

        return cls(
            config=cfg,
            imf=imf,
            lifetimes=lifetimes,
            snii=snii.on_imf_grid(imf.log10_mass),
            agb=tables.agb.on_imf_grid(imf.log10_mass),
            snia=tables.snia,
            raw_tables=tables,
        )

    @classmethod
    def from_config(cls, config: StarsConfig, io: IORoutines | None = None) -> "StarsProperties":
        """Load the tables named by ``config.yield_table_path`` and build the properties."""
        if config.yield_table_path is None:
            raise ConfigurationError("yield_table_path is required to load stellar tables")
        if io is None:
            io = IORoutines(
                enable_table_cache=config.enable_table_cache,
                log_min_metallicity=config.log_min_metallicity,
            )
        return cls.from_tables(io.load_stars_tables(config.yield_table_path), config)
