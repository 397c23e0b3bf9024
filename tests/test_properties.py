from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import tempfile
import unittest

import numpy as np

from pyenrich.config import StarsConfig
from pyenrich.constants import ELEMENT_NAMES
from pyenrich.exceptions import ConfigurationError
from pyenrich.imf import build_imf
from pyenrich.model_tables import SNIaYields
from pyenrich.properties import Cosmology, StarsProperties

from _synthetic import SNIA_YIELDS, synthetic_props, synthetic_tables, write_table_dir


class TestStarsProperties(unittest.TestCase):
    def test_tables_are_resampled_on_the_imf_grid(self) -> None:
        props = synthetic_props()
        self.assertEqual(props.snii.n_mass, props.imf.n_bins)
        self.assertEqual(props.agb.n_mass, props.imf.n_bins)
        self.assertEqual(props.scratch_size, props.imf.n_bins)
        np.testing.assert_array_equal(props.snii.log10_mass, props.imf.log10_mass)

    def test_resampled_yields_are_per_unit_mass(self) -> None:
        tables = synthetic_tables()
        props = synthetic_props()
        i = int(np.searchsorted(props.imf.log10_mass, np.log10(20.0)))
        mass = 10.0 ** props.imf.log10_mass[i]
        raw_ejecta = np.interp(props.imf.log10_mass[i], tables.snii.log10_mass, tables.snii.ejecta[0])
        self.assertAlmostEqual(props.snii.ejecta[0, i], raw_ejecta / mass, places=12)

    def test_imf_and_table_mismatch(self) -> None:
        props = synthetic_props()
        with self.assertRaises(ConfigurationError):
            replace(props, imf=build_imf(n_bins=50, backend="numpy"))

    def test_element_count_mismatch(self) -> None:
        tables = synthetic_tables()
        short = replace(tables.snii, yields=tables.snii.yields[:, :-1, :], element_names=ELEMENT_NAMES[:-1])
        with self.assertRaises(ConfigurationError):
            StarsProperties.from_tables(replace(tables, snii=short), StarsConfig(backend="numpy"))

    def test_agb_and_snii_element_order_must_agree(self) -> None:
        tables = synthetic_tables()
        swapped = ELEMENT_NAMES[:2] + (ELEMENT_NAMES[3], ELEMENT_NAMES[2]) + ELEMENT_NAMES[4:]
        with self.assertRaises(ConfigurationError):
            StarsProperties.from_tables(
                replace(tables, agb=replace(tables.agb, element_names=swapped)), StarsConfig(backend="numpy")
            )

    def test_misplaced_snia_iron_fails_at_build_time(self) -> None:
        tables = synthetic_tables()
        names = ELEMENT_NAMES[:-2] + ("Fe", "Si")
        snia = SNIaYields(yields=SNIA_YIELDS, total_metals=1.0, element_names=names)
        with self.assertRaises(ConfigurationError):
            StarsProperties.from_tables(replace(tables, snia=snia), StarsConfig(backend="numpy"))

    def test_from_config_requires_table_path(self) -> None:
        with self.assertRaises(ConfigurationError):
            StarsProperties.from_config(StarsConfig())

    def test_from_config_loads_table_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            table_dir = write_table_dir(Path(tmp) / "tables")
            cfg = StarsConfig(yield_table_path=str(table_dir), backend="numpy", enable_table_cache=False)
            props = StarsProperties.from_config(cfg)
        self.assertEqual(props.snii.n_z, 3)
        self.assertEqual(props.agb.n_z, 3)

    def test_cosmology(self) -> None:
        self.assertEqual(Cosmology().time_to_gyr(3.5), 3.5)
        self.assertAlmostEqual(Cosmology(gyr_per_time_unit=0.978).time_to_gyr(2.0), 1.956)


if __name__ == "__main__":
    unittest.main()
