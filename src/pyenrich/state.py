"""Per-particle enrichment state."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .constants import HE, H, NUM_ELEMENTS


def _element_vector() -> np.ndarray:
    return np.zeros(NUM_ELEMENTS, dtype=float)


@dataclass
class StarParticle:
    """Mutable star particle evolved by :func:`pyenrich.evolve.evolve_star`.

    ``age`` is in internal time units; every other time is in Gyr and every
    mass in the particle's mass units. The accumulators below
    ``time_since_enrich_gyr`` describe what was released during the last
    step and are reset on each call.
    """

    id: int = 0
    mass: float = 0.0
    mass_init: float = 0.0
    age: float = 0.0
    metal_mass_fraction_total: float = 0.0
    metal_mass_fraction: np.ndarray = field(default_factory=_element_vector)
    time_since_enrich_gyr: float = 0.0

    metals_released: np.ndarray = field(default_factory=_element_vector)
    metal_mass_released: float = 0.0
    mass_from_agb: float = 0.0
    metals_from_agb: float = 0.0
    mass_from_snii: float = 0.0
    metals_from_snii: float = 0.0
    mass_from_snia: float = 0.0
    metals_from_snia: float = 0.0
    iron_from_snia: float = 0.0
    num_snia: float = 0.0

    def __post_init__(self) -> None:
        self.metal_mass_fraction = np.array(self.metal_mass_fraction, dtype=float, copy=True)
        if self.metal_mass_fraction.shape != (NUM_ELEMENTS,):
            raise ValueError(f"metal_mass_fraction must have {NUM_ELEMENTS} entries")
        self.metals_released = np.array(self.metals_released, dtype=float, copy=True)
        if self.metals_released.shape != (NUM_ELEMENTS,):
            raise ValueError(f"metals_released must have {NUM_ELEMENTS} entries")

    @classmethod
    def create(
        cls,
        *,
        id: int = 0,
        mass: float = 1.0,
        age: float = 0.0,
        metallicity: float = 0.0,
        abundances: np.ndarray | None = None,
    ) -> "StarParticle":
        """New particle with ``mass_init = mass``.

        ``abundances`` are mass fractions per element; by default only
        hydrogen and helium are set, sharing whatever the metals leave.
        """
        if abundances is None:
            abundances = _element_vector()
            abundances[H] = 0.752 * (1.0 - metallicity)
            abundances[HE] = 0.248 * (1.0 - metallicity)
        return cls(
            id=id,
            mass=mass,
            mass_init=mass,
            age=age,
            metal_mass_fraction_total=metallicity,
            metal_mass_fraction=abundances,
        )

    def reset_enrichment(self) -> None:
        self.metals_released[:] = 0.0
        self.metal_mass_released = 0.0
        self.mass_from_agb = 0.0
        self.metals_from_agb = 0.0
        self.mass_from_snii = 0.0
        self.metals_from_snii = 0.0
        self.mass_from_snia = 0.0
        self.metals_from_snia = 0.0
        self.iron_from_snia = 0.0
        self.num_snia = 0.0

    def enrichment(self) -> dict[str, object]:
        """Accumulators of the last step as plain Python values."""
        return {
            "id": int(self.id),
            "metals_released": [float(v) for v in self.metals_released],
            "metal_mass_released": float(self.metal_mass_released),
            "mass_from_agb": float(self.mass_from_agb),
            "metals_from_agb": float(self.metals_from_agb),
            "mass_from_snii": float(self.mass_from_snii),
            "metals_from_snii": float(self.metals_from_snii),
            "mass_from_snia": float(self.mass_from_snia),
            "metals_from_snia": float(self.metals_from_snia),
            "iron_from_snia": float(self.iron_from_snia),
            "num_snia": float(self.num_snia),
            "time_since_enrich_gyr": float(self.time_since_enrich_gyr),
        }
