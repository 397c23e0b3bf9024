"""Batch frontend running :func:`evolve_star` over many particles."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import threading
from typing import Sequence

import numpy as np

from .evolve import EnrichmentResult, evolve_star
from .properties import Cosmology, StarsProperties
from .state import StarParticle


class _WorkerScratch(threading.local):
    buffer: np.ndarray | None = None


def _scratch_for(local: _WorkerScratch, size: int) -> np.ndarray:
    if local.buffer is None or local.buffer.size < size:
        local.buffer = np.zeros(size, dtype=float)
    return local.buffer


def run_serial(
    particles: Sequence[StarParticle],
    props: StarsProperties,
    cosmo: Cosmology,
    dt: float,
) -> list[EnrichmentResult]:
    scratch = np.zeros(props.scratch_size, dtype=float)
    return [evolve_star(p, props, cosmo, dt, scratch=scratch) for p in particles]


def run_threaded(
    particles: Sequence[StarParticle],
    props: StarsProperties,
    cosmo: Cosmology,
    dt: float,
    workers: int,
) -> list[EnrichmentResult]:
    local = _WorkerScratch()

    def _evolve(particle: StarParticle) -> EnrichmentResult:
        return evolve_star(particle, props, cosmo, dt, scratch=_scratch_for(local, props.scratch_size))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_evolve, particles))


def evolve_stars(
    particles: Sequence[StarParticle],
    props: StarsProperties,
    cosmo: Cosmology | None = None,
    dt: float = 0.0,
    workers: int = 1,
) -> list[EnrichmentResult]:
    """Evolve every particle over ``dt``; returns one result per particle.

    Each particle is independent. With ``workers > 1`` the particles are
    shared out over a thread pool whose threads each own a scratch buffer.
    """
    if workers < 1:
        raise ValueError("workers must be >= 1")
    if cosmo is None:
        cosmo = Cosmology()
    if workers == 1 or len(particles) < 2:
        return run_serial(particles, props, cosmo, dt)
    return run_threaded(particles, props, cosmo, dt, workers)
