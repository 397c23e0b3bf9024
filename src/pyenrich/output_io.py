"""Output writing helpers for legacy and dataframe formats."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np

from .constants import ELEMENT_NAMES
from .state import StarParticle

ENRICHMENT_COLUMNS = [
    "id",
    "age",
    "metallicity",
    "time_since_enrich_gyr",
    "num_snia",
    "mass_from_snia",
    "metals_from_snia",
    "iron_from_snia",
    "mass_from_snii",
    "metals_from_snii",
    "mass_from_agb",
    "metals_from_agb",
    "metal_mass_released",
    *ELEMENT_NAMES,
]

LEGACY_FILE = "enrichment.dat"
DATAFRAME_STEM = "enrichment_df"


def build_enrichment_rows(particles: Sequence[StarParticle]) -> np.ndarray:
    """One row per particle holding its accumulators from the last step."""
    rows = np.zeros((len(particles), len(ENRICHMENT_COLUMNS)), dtype=float)
    for i, p in enumerate(particles):
        rows[i, :13] = (
            p.id,
            p.age,
            p.metal_mass_fraction_total,
            p.time_since_enrich_gyr,
            p.num_snia,
            p.mass_from_snia,
            p.metals_from_snia,
            p.iron_from_snia,
            p.mass_from_snii,
            p.metals_from_snii,
            p.mass_from_agb,
            p.metals_from_agb,
            p.metal_mass_released,
        )
        rows[i, 13:] = p.metals_released
    return rows


def _write_legacy(out_dir: Path, rows: np.ndarray) -> None:
    with open(out_dir / LEGACY_FILE, "w", encoding="ascii") as f:
        f.write(" ".join(ENRICHMENT_COLUMNS) + "\n")
        for row in rows:
            f.write(" ".join(f"{v: .8e}" for v in row) + "\n")


def _write_dataframe(out_dir: Path, rows: np.ndarray, *, binary_format: str, write_csv: bool) -> None:
    try:
        import pandas as pd
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("Dataframe output requires pandas installed") from exc

    df = pd.DataFrame(rows, columns=ENRICHMENT_COLUMNS)
    df["id"] = df["id"].astype("int64")

    if binary_format == "pickle":
        df.to_pickle(out_dir / f"{DATAFRAME_STEM}.pkl")
    elif binary_format == "parquet":
        df.to_parquet(out_dir / f"{DATAFRAME_STEM}.parquet", index=False)
    else:
        raise ValueError(f"Unknown dataframe format: {binary_format}")

    if write_csv:
        df.to_csv(out_dir / f"{DATAFRAME_STEM}.csv", index=False)


def write_outputs(
    out_dir: Path,
    *,
    rows: np.ndarray,
    output_mode: str = "legacy",
    df_binary_format: str = "pickle",
    df_write_csv: bool = False,
) -> None:
    if output_mode not in {"legacy", "dataframe", "both"}:
        raise ValueError("output_mode must be one of: legacy, dataframe, both")
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    if output_mode in {"legacy", "both"}:
        _write_legacy(out_dir, rows)
    if output_mode in {"dataframe", "both"}:
        _write_dataframe(out_dir, rows, binary_format=df_binary_format, write_csv=df_write_csv)
