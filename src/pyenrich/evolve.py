"""Stellar evolution of a single star particle over one timestep.

A call goes through three stages: the particle's accumulators are reset, the
range of stellar masses dying during the step is computed from the lifetime
model, and the SNIa, SNII and AGB channels are evolved over that range, in
that order. A step in which no star dies ends after the second stage with
all accumulators at zero.

The SNIa time counter follows the particle age: the SNIa channel moves it to
the end of its window, and every step on which that channel does not run
advances it by the timestep.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math

import numpy as np

from .exceptions import EnrichmentError
from .properties import Cosmology, StarsProperties
from .state import StarParticle
from .yields import ChannelYield, evolve_agb, evolve_snia, evolve_snii

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentResult:
    """Dying mass range of a step and what each channel released."""

    log10_min_mass: float
    log10_max_mass: float
    num_snia: float | None = None
    snii: ChannelYield | None = None
    agb: ChannelYield | None = None

    @property
    def empty_interval(self) -> bool:
        return self.log10_min_mass == self.log10_max_mass


def dying_mass_bounds(
    particle: StarParticle,
    props: StarsProperties,
    cosmo: Cosmology,
    dt: float,
) -> tuple[float, float]:
    """log10 of the lightest and heaviest stellar mass dying during the step."""
    age_gyr = cosmo.time_to_gyr(particle.age)
    dt_gyr = cosmo.time_to_gyr(dt)
    z = particle.metal_mass_fraction_total
    log10_max_mass = math.log10(props.lifetimes.dying_mass(age_gyr, z))
    log10_min_mass = math.log10(props.lifetimes.dying_mass(age_gyr + dt_gyr, z))
    return log10_min_mass, log10_max_mass


def evolve_star(
    particle: StarParticle,
    props: StarsProperties,
    cosmo: Cosmology | None = None,
    dt: float = 0.0,
    scratch: np.ndarray | None = None,
) -> EnrichmentResult:
    """Compute the mass and metals released by ``particle`` during ``dt``.

    Parameters
    ----------
    particle : StarParticle
        Star particle; its accumulators are reset and refilled, and
        ``time_since_enrich_gyr`` may advance.
    props : StarsProperties
        Tables, IMF and lifetime model.
    cosmo : Cosmology, optional
        Converts ``particle.age`` and ``dt`` to Gyr. Identity by default.
    dt : float
        Timestep in internal time units.
    scratch : np.ndarray, optional
        Per-mass-bin work buffer of at least ``props.scratch_size`` entries.
        A fresh buffer is allocated when omitted.

    Returns
    -------
    EnrichmentResult
        The dying mass range and the per-channel releases, ``None`` for a
        channel that released nothing.
    """
    if cosmo is None:
        cosmo = Cosmology()
    particle.reset_enrichment()

    dt_gyr = cosmo.time_to_gyr(dt)
    log10_min_mass, log10_max_mass = dying_mass_bounds(particle, props, cosmo, dt)
    if log10_min_mass > log10_max_mass:
        raise EnrichmentError(
            f"particle {particle.id}: min dying mass {10**log10_min_mass:g} is greater than "
            f"max dying mass {10**log10_max_mass:g}"
        )
    if log10_min_mass == log10_max_mass:
        logger.debug("particle %s: empty dying mass interval", particle.id)
        particle.time_since_enrich_gyr += dt_gyr
        return EnrichmentResult(log10_min_mass, log10_max_mass)

    if scratch is None:
        scratch = np.zeros(props.scratch_size, dtype=float)
    elif scratch.size < props.scratch_size:
        raise ValueError(f"scratch buffer needs {props.scratch_size} entries, got {scratch.size}")

    num_snia = evolve_snia(log10_min_mass, log10_max_mass, props, particle, dt_gyr)
    if num_snia is None:
        particle.time_since_enrich_gyr += dt_gyr

    return EnrichmentResult(
        log10_min_mass,
        log10_max_mass,
        num_snia=num_snia,
        snii=evolve_snii(log10_min_mass, log10_max_mass, props, particle, scratch),
        agb=evolve_agb(log10_min_mass, log10_max_mass, props, particle, scratch),
    )
