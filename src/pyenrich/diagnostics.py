"""Sanity checks on enrichment outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .constants import ELEMENT_NAMES
from .output_io import ENRICHMENT_COLUMNS
from .output_reader import read_outputs


def _to_numpy(table):
    if hasattr(table, "to_numpy"):
        return table.to_numpy(dtype=float)
    return np.asarray(table, dtype=float)


def diagnostics_from_rows(rows) -> dict:
    data = _to_numpy(rows)
    if data.ndim != 2 or data.shape[1] != len(ENRICHMENT_COLUMNS):
        raise ValueError(f"expected rows with {len(ENRICHMENT_COLUMNS)} columns")
    col = {name: i for i, name in enumerate(ENRICHMENT_COLUMNS)}
    elements = data[:, col[ELEMENT_NAMES[0]] :]
    channel_metals = (
        data[:, col["metals_from_snia"]] + data[:, col["metals_from_snii"]] + data[:, col["metals_from_agb"]]
    )
    tol = 1.0e-12

    checks = {
        "num_snia_nonnegative": bool(np.all(data[:, col["num_snia"]] >= -tol)),
        "elements_nonnegative": bool(np.all(elements >= -tol)),
        "metal_mass_nonnegative": bool(np.all(data[:, col["metal_mass_released"]] >= -tol)),
        "channel_metals_consistent": bool(
            np.allclose(channel_metals, data[:, col["metal_mass_released"]], rtol=1.0e-10, atol=tol)
        ),
    }
    return {
        "n_particles": int(data.shape[0]),
        "total_mass_released": float(np.sum(elements)),
        "total_metal_mass_released": float(np.sum(data[:, col["metal_mass_released"]])),
        "total_snia": float(np.sum(data[:, col["num_snia"]])),
        "checks": checks,
        "all_checks_pass": bool(all(checks.values())),
    }


def run_diagnostics(output_dir: str | Path, *, prefer: str = "auto", binary_format: str = "pickle") -> dict:
    payload = read_outputs(output_dir, prefer=prefer, binary_format=binary_format)
    diag = diagnostics_from_rows(payload["rows"])
    diag["format"] = payload["format"]
    return diag
