from __future__ import annotations

import unittest

import numpy as np

from pyenrich.interpolation import bracket, interpol_1d, interpol_2d, locate_bin

KNOTS = np.array([-4.0, -3.0, -2.0, -1.7])


class TestLocateBin(unittest.TestCase):
    def test_at_or_below_floor_uses_first_bin(self) -> None:
        self.assertEqual(locate_bin(-20.0, KNOTS, -20.0), (0, 0, 0.0))
        self.assertEqual(locate_bin(-25.0, KNOTS, -20.0), (0, 0, 0.0))
        self.assertEqual(locate_bin(float("-inf"), KNOTS, -20.0), (0, 0, 0.0))

    def test_at_or_above_top_knot_uses_last_pair(self) -> None:
        self.assertEqual(locate_bin(-1.7, KNOTS, -20.0), (2, 3, 1.0))
        self.assertEqual(locate_bin(0.0, KNOTS, -20.0), (2, 3, 1.0))

    def test_interior_weight(self) -> None:
        low, high, w = locate_bin(-2.5, KNOTS, -20.0)
        self.assertEqual((low, high), (1, 2))
        self.assertAlmostEqual(w, 0.5, places=14)

    def test_on_interior_knot(self) -> None:
        low, high, w = locate_bin(-3.0, KNOTS, -20.0)
        self.assertEqual((low, high), (0, 1))
        self.assertAlmostEqual(w, 1.0, places=14)

    def test_below_first_knot_has_zero_weight(self) -> None:
        self.assertEqual(locate_bin(-6.0, KNOTS, -20.0), (0, 1, 0.0))

    def test_single_knot_table(self) -> None:
        self.assertEqual(locate_bin(-1.0, np.array([-2.0]), -20.0), (0, 0, 0.0))

    def test_weight_within_unit_interval(self) -> None:
        for log_z in np.linspace(-5.0, 0.0, 51):
            low, high, w = locate_bin(float(log_z), KNOTS, -20.0)
            self.assertTrue(0 <= low <= high <= KNOTS.size - 1)
            self.assertTrue(0.0 <= w <= 1.0)


class TestBracket(unittest.TestCase):
    def test_clamps_at_both_ends(self) -> None:
        knots = np.array([1.0, 2.0, 4.0])
        self.assertEqual(bracket(knots, 0.5), (0, 0.0))
        self.assertEqual(bracket(knots, 4.0), (1, 1.0))
        self.assertEqual(bracket(knots, 9.0), (1, 1.0))

    def test_interior(self) -> None:
        i, d = bracket(np.array([1.0, 2.0, 4.0]), 3.0)
        self.assertEqual(i, 1)
        self.assertAlmostEqual(d, 0.5)


class TestInterpolation(unittest.TestCase):
    def test_interpol_1d(self) -> None:
        self.assertAlmostEqual(interpol_1d(np.array([1.0, 3.0, 7.0]), 1, 0.25), 4.0)

    def test_interpol_2d_is_bilinear(self) -> None:
        table = np.array([[0.0, 1.0], [2.0, 3.0]])
        self.assertAlmostEqual(interpol_2d(table, 0, 0, 0.5, 0.5), 1.5)
        self.assertAlmostEqual(interpol_2d(table, 0, 0, 1.0, 0.0), 2.0)
        self.assertAlmostEqual(interpol_2d(table, 0, 0, 0.0, 1.0), 1.0)


if __name__ == "__main__":
    unittest.main()
