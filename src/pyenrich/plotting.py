"""Diagnostic plotting utilities for enrichment outputs and lifetime models."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .constants import ELEMENT_NAMES
from .output_io import ENRICHMENT_COLUMNS
from .output_reader import read_outputs


def _pyplot():
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("Plotting requires matplotlib") from exc
    return plt


def _to_numpy(table):
    if hasattr(table, "to_numpy"):
        return table.to_numpy(dtype=float), list(table.columns)
    return np.asarray(table, dtype=float), None


def create_diagnostic_plots(
    output_dir: str | Path,
    *,
    plot_dir: str | Path | None = None,
    prefer: str = "auto",
    binary_format: str = "pickle",
) -> dict[str, str]:
    """Plot the released mass per channel and per element against stellar age.

    Returns mapping of plot names to file paths.
    """
    plt = _pyplot()

    payload = read_outputs(output_dir, prefer=prefer, binary_format=binary_format)
    rows, cols = _to_numpy(payload["rows"])
    cols = cols or ENRICHMENT_COLUMNS
    col = {name: i for i, name in enumerate(cols)}

    out = Path(plot_dir) if plot_dir is not None else (Path(output_dir) / "plots")
    out.mkdir(parents=True, exist_ok=True)

    order = np.argsort(rows[:, col["age"]])
    age = rows[order, col["age"]]
    eps = 1.0e-30

    written: dict[str, str] = {}

    fig, ax = plt.subplots(figsize=(7, 4))
    for name, label in (("mass_from_snia", "SNIa"), ("mass_from_snii", "SNII"), ("mass_from_agb", "AGB")):
        ax.plot(age, np.maximum(rows[order, col[name]], eps), lw=1.6, label=label)
    ax.set_xlabel("Age")
    ax.set_ylabel("Mass released per unit stellar mass")
    ax.set_yscale("log")
    ax.set_title("Mass Release by Channel")
    ax.legend(frameon=False)
    ax.grid(alpha=0.3)
    p = out / "channel_mass_vs_age.png"
    fig.tight_layout()
    fig.savefig(p, dpi=140)
    plt.close(fig)
    written["channel_mass_vs_age"] = str(p)

    fig, ax = plt.subplots(figsize=(7, 4))
    for name in ELEMENT_NAMES:
        ax.plot(age, np.maximum(rows[order, col[name]], eps), lw=1.2, label=name)
    ax.set_xlabel("Age")
    ax.set_ylabel("Element mass released")
    ax.set_yscale("log")
    ax.set_title("Element Release")
    ax.legend(frameon=False, ncol=3)
    ax.grid(alpha=0.3)
    p = out / "element_mass_vs_age.png"
    fig.tight_layout()
    fig.savefig(p, dpi=140)
    plt.close(fig)
    written["element_mass_vs_age"] = str(p)

    return written


def plot_dying_mass(
    lifetimes,
    path: str | Path,
    *,
    metallicities: tuple[float, ...] = (0.0004, 0.004, 0.02),
    age_range_gyr: tuple[float, float] = (1.0e-3, 13.8),
    n_points: int = 200,
) -> str:
    """Plot the dying mass against age for a lifetime model."""
    plt = _pyplot()

    ages = np.logspace(np.log10(age_range_gyr[0]), np.log10(age_range_gyr[1]), n_points)
    fig, ax = plt.subplots(figsize=(7, 4))
    for z in metallicities:
        masses = [lifetimes.dying_mass(float(t), z) for t in ages]
        ax.plot(ages, masses, lw=1.6, label=f"Z = {z:g}")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("Age [Gyr]")
    ax.set_ylabel("Dying mass [Msun]")
    ax.set_title("Dying Stellar Mass")
    ax.legend(frameon=False)
    ax.grid(alpha=0.3)
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(p, dpi=140)
    plt.close(fig)
    return str(p)
