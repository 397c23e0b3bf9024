from __future__ import annotations

import math
import unittest

import numpy as np

from pyenrich.imf import IMFMode, build_imf


class TestIMF(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.imf = build_imf("chabrier", backend="numpy")

    def test_grid(self) -> None:
        self.assertEqual(self.imf.n_bins, 200)
        self.assertAlmostEqual(self.imf.log10_min_mass, -1.0)
        self.assertAlmostEqual(self.imf.log10_max_mass, 2.0)
        self.assertTrue(np.all(self.imf.by_number > 0.0))

    def test_normalised_to_one_solar_mass(self) -> None:
        total = self.imf.integrate(-1.0, 2.0, mode=IMFMode.MASS)
        self.assertAlmostEqual(total, 1.0, places=10)

    def test_limits_are_clipped_to_mass_range(self) -> None:
        self.assertAlmostEqual(
            self.imf.integrate(-3.0, 5.0, mode=IMFMode.MASS),
            self.imf.integrate(-1.0, 2.0, mode=IMFMode.MASS),
            places=12,
        )

    def test_empty_interval(self) -> None:
        self.assertEqual(self.imf.integrate(1.0, 1.0), 0.0)
        self.assertEqual(self.imf.integrate(1.5, 0.5, mode=IMFMode.MASS), 0.0)

    def test_integrals_are_additive(self) -> None:
        whole = self.imf.integrate(0.0, 1.5, mode=IMFMode.MASS)
        parts = self.imf.integrate(0.0, 0.7, mode=IMFMode.MASS) + self.imf.integrate(0.7, 1.5, mode=IMFMode.MASS)
        self.assertAlmostEqual(whole, parts, places=12)

    def test_yield_mode_with_unit_yields_matches_mass_mode(self) -> None:
        ones = np.ones(self.imf.n_bins)
        self.assertAlmostEqual(
            self.imf.integrate(0.3, 1.2, mode=IMFMode.YIELD, yields=ones),
            self.imf.integrate(0.3, 1.2, mode=IMFMode.MASS),
            places=14,
        )

    def test_exponent_offset_turns_number_into_mass(self) -> None:
        self.assertAlmostEqual(
            self.imf.integrate(0.3, 1.2, exponent_offset=1.0),
            self.imf.integrate(0.3, 1.2, mode=IMFMode.MASS),
            places=14,
        )

    def test_yield_mode_needs_full_yield_vector(self) -> None:
        with self.assertRaises(ValueError):
            self.imf.integrate(0.3, 1.2, mode=IMFMode.YIELD)
        with self.assertRaises(ValueError):
            self.imf.integrate(0.3, 1.2, mode=IMFMode.YIELD, yields=np.ones(10))

    def test_mass_bins_cover_interval(self) -> None:
        lo, hi = math.log10(6.0), math.log10(8.0)
        ilow, ihigh = self.imf.determine_mass_bins(lo, hi)
        self.assertLessEqual(self.imf.log10_mass[ilow], lo)
        self.assertGreaterEqual(self.imf.log10_mass[ihigh], hi)
        self.assertLess(ilow, ihigh)

    def test_mass_bins_are_clamped(self) -> None:
        self.assertEqual(self.imf.determine_mass_bins(-5.0, -4.0), (0, 1))
        self.assertEqual(self.imf.determine_mass_bins(3.0, 4.0), (198, 199))
        self.assertEqual(self.imf.determine_mass_bins(-5.0, 5.0), (0, 199))

    def test_salpeter(self) -> None:
        imf = build_imf("salpeter", exponent=2.35, backend="numpy")
        self.assertAlmostEqual(imf.integrate(-1.0, 2.0, mode=IMFMode.MASS), 1.0, places=10)
        ratio = imf.by_number[0] / imf.by_number[-1]
        self.assertAlmostEqual(math.log10(ratio), 2.35 * 3.0, places=8)

    def test_unknown_model(self) -> None:
        with self.assertRaises(ValueError):
            build_imf("kroupa")


if __name__ == "__main__":
    unittest.main()
