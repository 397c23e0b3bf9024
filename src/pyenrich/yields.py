"""Mass and metals released by SNIa, SNII and AGB stars.

Every channel receives the log10 mass range of stars dying during the step,
integrates the IMF weighted by the tabulated yields over that range and adds
the result, per unit stellar mass formed, to the particle's accumulators.
SNII and AGB yields are rescaled so that the released metal, hydrogen and
helium masses add up to the ejecta integrated straight from the table.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from .constants import (
    HE,
    H,
    LOG10_SNIA_MAX_MASS,
    LOG10_SNII_MAX_MASS,
    LOG10_SNII_MIN_MASS,
    SNIA_MAX_MASS,
)
from .exceptions import ConfigurationError
from .imf import IMFMode
from .interpolation import locate_bin
from .model_tables import YieldTable
from .properties import StarsProperties
from .state import StarParticle


@dataclass(frozen=True)
class ChannelYield:
    """Normalised release of one channel for one step.

    ``metals`` holds the mass of each element, ``metal_mass`` the total metal
    mass and ``ejecta_mass`` the table ejecta the two were normalised to, so
    that ``metal_mass + metals[H] + metals[He] == ejecta_mass``.
    """

    metals: np.ndarray
    metal_mass: float
    ejecta_mass: float

    @property
    def total_mass(self) -> float:
        return float(np.sum(self.metals))


def _log10_metallicity(z: float, floor: float) -> float:
    return math.log10(z) if z > 0.0 else floor


def integrate_yields(
    table: YieldTable,
    props: StarsProperties,
    particle: StarParticle,
    log10_min_mass: float,
    log10_max_mass: float,
    scratch: np.ndarray,
    channel: str,
) -> ChannelYield:
    """IMF-weighted, normalised yields of ``table`` between two log10 masses."""
    imf = props.imf
    ilow, ihigh = imf.determine_mass_bins(log10_min_mass, log10_max_mass)
    bins = slice(ilow, ihigh + 1)

    floor = props.config.log_min_metallicity
    log_z = _log10_metallicity(particle.metal_mass_fraction_total, floor)
    iz_low, iz_high, dz = locate_bin(log_z, table.log10_metallicity, floor)

    ejecta_low = table.ejecta_row(iz_low, ilow, ihigh)
    ejecta_high = table.ejecta_row(iz_high, ilow, ihigh)

    # yields are newly produced elements, ejecta the elements already in the star
    metals = np.zeros(table.n_elements, dtype=float)
    for i in range(table.n_elements):
        x = particle.metal_mass_fraction[i]
        scratch[bins] = (1.0 - dz) * (table.yield_row(iz_low, i, ilow, ihigh) + x * ejecta_low) + dz * (
            table.yield_row(iz_high, i, ilow, ihigh) + x * ejecta_high
        )
        metals[i] = imf.integrate(log10_min_mass, log10_max_mass, mode=IMFMode.YIELD, yields=scratch)

    z = particle.metal_mass_fraction_total
    scratch[bins] = (1.0 - dz) * (table.total_metals_row(iz_low, ilow, ihigh) + z * ejecta_low) + dz * (
        table.total_metals_row(iz_high, ilow, ihigh) + z * ejecta_high
    )
    mass = imf.integrate(log10_min_mass, log10_max_mass, mode=IMFMode.YIELD, yields=scratch)

    np.maximum(metals, 0.0, out=metals)
    mass = max(mass, 0.0)

    scratch[bins] = (1.0 - dz) * ejecta_low + dz * ejecta_high
    norm0 = imf.integrate(log10_min_mass, log10_max_mass, mode=IMFMode.YIELD, yields=scratch)
    norm1 = mass + metals[H] + metals[HE]
    if norm1 <= 0.0:
        raise ConfigurationError(f"wrong {channel} yield normalisation: norm1 = {norm1:e}")

    scale = norm0 / norm1
    return ChannelYield(metals=metals * scale, metal_mass=mass * scale, ejecta_mass=norm0)


def evolve_snia(
    log10_min_mass: float,
    log10_max_mass: float,
    props: StarsProperties,
    particle: StarParticle,
    dt_gyr: float,
) -> float | None:
    """Release the SNIa yields of the step; returns the number of SNIa per Msun.

    SNIa progenitors are stars below 8 Msun. The delay-time distribution is an
    exponential in ``particle.time_since_enrich_gyr``, which is moved to the
    end of the integrated window.
    """
    if log10_min_mass >= LOG10_SNIA_MAX_MASS:
        return None

    cfg = props.config
    t = particle.time_since_enrich_gyr
    if log10_max_mass > LOG10_SNIA_MAX_MASS:
        lifetime_gyr = props.lifetimes.lifetime(SNIA_MAX_MASS, particle.metal_mass_fraction_total)
        # the window cannot open before the most massive progenitor has died
        dt_gyr = max(t + dt_gyr - lifetime_gyr, 0.0)
        t = lifetime_gyr

    tau = cfg.snia_timescale_gyr
    num_snia = cfg.snia_efficiency * (math.exp(-t / tau) - math.exp(-(t + dt_gyr) / tau))
    particle.num_snia = num_snia
    particle.time_since_enrich_gyr = t + dt_gyr

    if cfg.snia_mass_transfer:
        snia = props.snia
        iron = snia.iron_index
        particle.metals_released += num_snia * snia.yields
        released = num_snia * snia.total_metals
        particle.mass_from_snia += released
        particle.metals_from_snia += released
        particle.metal_mass_released += released
        particle.iron_from_snia += num_snia * snia.yields[iron]
    else:
        particle.iron_from_snia = 0.0
        particle.metals_from_snia = 0.0
        particle.mass_from_snia = 0.0
    return num_snia


def evolve_snii(
    log10_min_mass: float,
    log10_max_mass: float,
    props: StarsProperties,
    particle: StarParticle,
    scratch: np.ndarray,
) -> ChannelYield | None:
    """Release the yields of stars between 6 and 100 Msun exploding as SNII."""
    log10_min_mass = max(log10_min_mass, LOG10_SNII_MIN_MASS)
    log10_max_mass = min(log10_max_mass, LOG10_SNII_MAX_MASS)
    if log10_min_mass >= log10_max_mass:
        return None

    if not props.config.snii_mass_transfer:
        particle.mass_from_snii = 0.0
        particle.metals_from_snii = 0.0
        return None

    result = integrate_yields(props.snii, props, particle, log10_min_mass, log10_max_mass, scratch, "SNII")
    particle.metals_released += result.metals
    particle.mass_from_snii += result.total_mass
    particle.metal_mass_released += result.metal_mass
    particle.metals_from_snii += result.metal_mass
    return result


def evolve_agb(
    log10_min_mass: float,
    log10_max_mass: float,
    props: StarsProperties,
    particle: StarParticle,
    scratch: np.ndarray,
) -> ChannelYield | None:
    """Release the mass lost on the AGB by stars below 6 Msun."""
    if not props.config.agb_mass_transfer:
        return None

    log10_max_mass = min(log10_max_mass, LOG10_SNII_MIN_MASS)
    if log10_min_mass >= log10_max_mass:
        return None

    result = integrate_yields(props.agb, props, particle, log10_min_mass, log10_max_mass, scratch, "AGB")
    particle.metals_released += result.metals
    particle.mass_from_agb += result.total_mass
    particle.metal_mass_released += result.metal_mass
    particle.metals_from_agb += result.metal_mass
    return result
