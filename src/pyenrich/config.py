"""Run configuration for stellar enrichment."""

from __future__ import annotations

from dataclasses import dataclass, fields
import json
import math
from pathlib import Path
from typing import Any, Mapping

from .constants import (
    IMF_MAX_MASS,
    IMF_MIN_MASS,
    IMF_N_BINS,
    LOG_MIN_METALLICITY,
    NUM_ELEMENTS,
    SNIA_EFFICIENCY,
    SNIA_TIMESCALE_GYR,
)
from .lifetime import LifetimeModel

PARAMETER_SECTION = "EagleStellarEvolution"

# Parameter-file names that differ from the dataclass field names.
_ALIASES = {
    "filename": "yield_table_path",
    "stellar_lifetime_flag": "lifetime_model",
    "SNIa_efficiency": "snia_efficiency",
    "SNIa_timescale_Gyr": "snia_timescale_gyr",
    "SNIa_mass_transfer": "snia_mass_transfer",
    "SNII_mass_transfer": "snii_mass_transfer",
    "AGB_mass_transfer": "agb_mass_transfer",
    "IMF_Model": "imf_model",
    "IMF_Exponent": "imf_exponent",
}


@dataclass(frozen=True)
class StarsConfig:
    """Container for user-controlled stellar evolution parameters."""

    lifetime_model: LifetimeModel | str | int = LifetimeModel.PORTINARI_1998
    yield_table_path: str | None = None
    snia_mass_transfer: bool = True
    snii_mass_transfer: bool = True
    agb_mass_transfer: bool = True
    snia_efficiency: float = SNIA_EFFICIENCY
    snia_timescale_gyr: float = SNIA_TIMESCALE_GYR
    imf_model: str = "chabrier"
    imf_min_mass: float = IMF_MIN_MASS
    imf_max_mass: float = IMF_MAX_MASS
    imf_n_bins: int = IMF_N_BINS
    imf_exponent: float = 2.35
    log_min_metallicity: float = LOG_MIN_METALLICITY
    snii_yield_factors: tuple[float, ...] | None = None
    backend: str = "auto"
    enable_table_cache: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "lifetime_model", LifetimeModel.parse(self.lifetime_model))
        if self.yield_table_path is not None and str(self.yield_table_path).strip() == "":
            raise ValueError("yield_table_path cannot be empty")
        if not math.isfinite(self.snia_efficiency) or self.snia_efficiency < 0.0:
            raise ValueError("snia_efficiency must be finite and >= 0")
        if not math.isfinite(self.snia_timescale_gyr) or self.snia_timescale_gyr <= 0.0:
            raise ValueError("snia_timescale_gyr must be finite and > 0")
        if self.imf_model not in {"chabrier", "salpeter"}:
            raise ValueError("imf_model must be one of: chabrier, salpeter")
        if self.imf_min_mass <= 0.0:
            raise ValueError("imf_min_mass must be > 0")
        if self.imf_max_mass <= self.imf_min_mass:
            raise ValueError("imf_max_mass must be > imf_min_mass")
        if self.imf_n_bins < 2:
            raise ValueError("imf_n_bins must be >= 2")
        if self.imf_exponent <= 1.0:
            raise ValueError("imf_exponent must be > 1")
        if not math.isfinite(self.log_min_metallicity):
            raise ValueError("log_min_metallicity must be finite")
        if self.snii_yield_factors is not None:
            factors = tuple(float(f) for f in self.snii_yield_factors)
            if len(factors) != NUM_ELEMENTS:
                raise ValueError(f"snii_yield_factors must contain {NUM_ELEMENTS} values")
            for f in factors:
                if not math.isfinite(f) or f < 0.0:
                    raise ValueError("snii_yield_factors must be finite and >= 0")
            object.__setattr__(self, "snii_yield_factors", factors)
        if self.backend not in {"numpy", "numba", "auto"}:
            raise ValueError("backend must be one of: numpy, numba, auto")

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any], section: str = PARAMETER_SECTION) -> "StarsConfig":
        """Build a config from parsed parameters.

        ``params`` may be flat or nest the values under ``section``. Keys may
        use either the field names or the parameter-file names in ``_ALIASES``.
        """
        values = params.get(section, params)
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown stellar evolution parameter: {key}")
            if name == "snii_yield_factors" and value is not None:
                value = tuple(value)
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str | Path, section: str = PARAMETER_SECTION) -> "StarsConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_mapping(json.load(f), section=section)
