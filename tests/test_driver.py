from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

from pyenrich.driver import main

from _synthetic import write_table_dir


class TestDriver(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.tables = write_table_dir(self.tmp / "tables")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *extra: str) -> dict:
        argv = ["--tables", str(self.tables), "--age", "5.0", "--metallicity", "0.02", "--dt", "0.1",
                "--backend", "numpy", "--no-cache", *extra]
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            main(argv)
        return json.loads(buf.getvalue())

    def test_prints_accumulators_as_json(self) -> None:
        result = self._run()
        self.assertFalse(result["empty_interval"])
        self.assertEqual(len(result["metals_released"]), 9)
        self.assertEqual(result["elements"][-1], "Fe")
        self.assertGreater(result["num_snia"], 0.0)
        self.assertGreater(result["mass_from_agb"], 0.0)
        self.assertEqual(result["mass_from_snii"], 0.0)

    def test_writes_outputs(self) -> None:
        self._run("--output-dir", str(self.tmp / "out"))
        self.assertTrue((self.tmp / "out" / "enrichment.dat").exists())

    def test_config_file_and_lifetime_override(self) -> None:
        cfg = self.tmp / "params.json"
        cfg.write_text(json.dumps({"EagleStellarEvolution": {"SNIa_mass_transfer": False}}), encoding="utf-8")
        result = self._run("--config", str(cfg), "--lifetime-model", "padovani_matteucci_1993")
        self.assertEqual(result["mass_from_snia"], 0.0)
        self.assertEqual(result["iron_from_snia"], 0.0)


if __name__ == "__main__":
    unittest.main()
