"""Readers for legacy/dataframe enrichment outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .output_io import DATAFRAME_STEM, LEGACY_FILE


def _read_legacy(out_dir: Path):
    rows = np.loadtxt(out_dir / LEGACY_FILE, skiprows=1, ndmin=2)
    return {"rows": rows, "format": "legacy"}


def _read_dataframe(out_dir: Path, binary_format: str = "pickle"):
    try:
        import pandas as pd
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("Reading dataframe outputs requires pandas installed") from exc

    if binary_format == "pickle":
        rows = pd.read_pickle(out_dir / f"{DATAFRAME_STEM}.pkl")
    else:
        rows = pd.read_parquet(out_dir / f"{DATAFRAME_STEM}.parquet")
    return {"rows": rows, "format": "dataframe"}


def read_outputs(output_dir: str | Path, *, prefer: str = "auto", binary_format: str = "pickle"):
    out_dir = Path(output_dir)
    if prefer == "legacy":
        return _read_legacy(out_dir)
    if prefer == "dataframe":
        return _read_dataframe(out_dir, binary_format=binary_format)

    # auto
    pkl = out_dir / f"{DATAFRAME_STEM}.pkl"
    parquet = out_dir / f"{DATAFRAME_STEM}.parquet"
    if pkl.exists() or parquet.exists():
        return _read_dataframe(out_dir, binary_format="parquet" if parquet.exists() else "pickle")
    return _read_legacy(out_dir)
