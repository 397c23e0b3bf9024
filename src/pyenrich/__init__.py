"""Stellar chemical enrichment from SNIa, SNII and AGB stars."""

from . import constants
from .config import StarsConfig
from .diagnostics import run_diagnostics
from .engine import evolve_stars
from .evolve import EnrichmentResult, evolve_star
from .exceptions import ConfigurationError, EnrichmentError, TableError
from .imf import IMF, IMFMode, build_imf
from .interpolation import locate_bin
from .io_routines import IORoutines
from .lifetime import LifetimeModel, build_lifetime_model
from .model_tables import LifetimeTable, SNIaYields, StarsTables, YieldTable
from .output_io import build_enrichment_rows, write_outputs
from .output_reader import read_outputs
from .plotting import create_diagnostic_plots
from .properties import Cosmology, StarsProperties
from .state import StarParticle
from .yields import ChannelYield

__all__ = [
    "constants",
    "ChannelYield",
    "ConfigurationError",
    "Cosmology",
    "EnrichmentError",
    "EnrichmentResult",
    "IMF",
    "IMFMode",
    "IORoutines",
    "LifetimeModel",
    "LifetimeTable",
    "SNIaYields",
    "StarParticle",
    "StarsConfig",
    "StarsProperties",
    "StarsTables",
    "TableError",
    "YieldTable",
    "build_enrichment_rows",
    "build_imf",
    "build_lifetime_model",
    "create_diagnostic_plots",
    "evolve_star",
    "evolve_stars",
    "locate_bin",
    "read_outputs",
    "run_diagnostics",
    "write_outputs",
]
