from __future__ import annotations

import unittest

from pyenrich.engine import evolve_stars
from pyenrich.state import StarParticle

from _synthetic import synthetic_props


def _particles() -> list[StarParticle]:
    ages = (0.0, 0.01, 0.02, 0.05, 0.3, 1.0, 2.5, 5.0, 9.0, 12.0, 40.0)
    metallicities = (0.0, 0.0005, 0.004, 0.01, 0.02, 0.03)
    out = []
    for i, age in enumerate(ages):
        for j, z in enumerate(metallicities):
            p = StarParticle.create(id=i * len(metallicities) + j, age=age, metallicity=z)
            p.time_since_enrich_gyr = 0.1 * i
            out.append(p)
    return out


class TestEngine(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.props = synthetic_props()

    def test_threaded_matches_serial(self) -> None:
        serial, threaded = _particles(), _particles()
        results_serial = evolve_stars(serial, self.props, dt=0.05, workers=1)
        results_threaded = evolve_stars(threaded, self.props, dt=0.05, workers=4)
        self.assertEqual(
            [r.empty_interval for r in results_serial], [r.empty_interval for r in results_threaded]
        )
        for a, b in zip(serial, threaded):
            self.assertEqual(a.enrichment(), b.enrichment())

    def test_one_result_per_particle(self) -> None:
        particles = _particles()
        results = evolve_stars(particles, self.props, dt=0.05)
        self.assertEqual(len(results), len(particles))
        empty = [r.empty_interval for r in results]
        self.assertIn(True, empty)
        self.assertIn(False, empty)

    def test_invalid_worker_count(self) -> None:
        with self.assertRaises(ValueError):
            evolve_stars(_particles(), self.props, dt=0.05, workers=0)


if __name__ == "__main__":
    unittest.main()
