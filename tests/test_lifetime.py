from __future__ import annotations

import unittest

import numpy as np

from pyenrich.exceptions import ConfigurationError
from pyenrich.lifetime import (
    LifetimeModel,
    MaederMeynetLifetimes,
    PadovaniMatteucciLifetimes,
    TabulatedLifetimes,
    build_lifetime_model,
)

from _synthetic import LIFETIME_MASSES, synthetic_tables

AGES_GYR = np.logspace(-3.0, np.log10(13.8), 80)


class TestLifetimeModelSelection(unittest.TestCase):
    def test_parse_accepts_names_and_selectors(self) -> None:
        self.assertIs(LifetimeModel.parse(0), LifetimeModel.PADOVANI_MATTEUCCI_1993)
        self.assertIs(LifetimeModel.parse("1"), LifetimeModel.MAEDER_MEYNET_1989)
        self.assertIs(LifetimeModel.parse("portinari_1998"), LifetimeModel.PORTINARI_1998)
        self.assertIs(LifetimeModel.parse("P98"), LifetimeModel.PORTINARI_1998)

    def test_unknown_model_is_rejected(self) -> None:
        for bad in (3, -1, "kodama", True):
            with self.assertRaises(ConfigurationError):
                LifetimeModel.parse(bad)

    def test_build_dispatches_once(self) -> None:
        tables = synthetic_tables()
        self.assertIsInstance(build_lifetime_model(0), PadovaniMatteucciLifetimes)
        self.assertIsInstance(build_lifetime_model(1), MaederMeynetLifetimes)
        self.assertIsInstance(build_lifetime_model(2, table=tables.lifetimes), TabulatedLifetimes)

    def test_tabulated_model_needs_a_table(self) -> None:
        with self.assertRaises(ConfigurationError):
            build_lifetime_model(LifetimeModel.PORTINARI_1998)


class TestDyingMass(unittest.TestCase):
    def setUp(self) -> None:
        self.models = [
            build_lifetime_model(0),
            build_lifetime_model(1),
            build_lifetime_model(2, table=synthetic_tables().lifetimes),
        ]

    def test_non_increasing_in_age(self) -> None:
        for model in self.models:
            for z in (0.0, 0.001, 0.02, 0.08):
                masses = np.array([model.dying_mass(float(t), z) for t in AGES_GYR])
                self.assertTrue(np.all(np.diff(masses) <= 1.0e-12), msg=f"{model} at Z={z}")

    def test_clamped_to_imf_max_mass(self) -> None:
        for model in self.models:
            self.assertEqual(model.dying_mass(0.0, 0.02), 100.0)
            self.assertLessEqual(model.dying_mass(1.0e-4, 0.02), 100.0)

    def test_tabulated_round_trip_at_metallicity_knot(self) -> None:
        model = self.models[2]
        for age in (0.05, 0.5, 2.0, 5.0):
            mass = model.dying_mass(age, 0.02)
            self.assertAlmostEqual(model.lifetime(mass, 0.02) / age, 1.0, places=10)

    def test_tabulated_round_trip_between_knots(self) -> None:
        model = self.models[2]
        mass = model.dying_mass(1.0, 0.01)
        self.assertAlmostEqual(model.lifetime(mass, 0.01), 1.0, delta=0.05)

    def test_five_gyr_scenario_brackets_mass_knots(self) -> None:
        model = self.models[2]
        mass = model.dying_mass(5.0, 0.02)
        self.assertGreater(mass, LIFETIME_MASSES[1])
        self.assertLess(mass, LIFETIME_MASSES[2])
        self.assertEqual(mass, model.dying_mass(5.0, 0.02))

    def test_older_than_table_gives_lightest_mass(self) -> None:
        model = self.models[2]
        self.assertAlmostEqual(model.dying_mass(1.0e3, 0.02), LIFETIME_MASSES[0])

    def test_closed_form_lifetimes_decrease_with_mass(self) -> None:
        for model in self.models[:2]:
            lifetimes = [model.lifetime(m, 0.02) for m in (0.8, 1.5, 3.0, 8.0, 20.0, 80.0)]
            self.assertTrue(all(a > b for a, b in zip(lifetimes, lifetimes[1:])))


if __name__ == "__main__":
    unittest.main()
