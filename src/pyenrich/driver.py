"""Command line driver evolving a single star particle over one step."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
from time import perf_counter

from pyenrich.config import StarsConfig
from pyenrich.evolve import evolve_star
from pyenrich.output_io import build_enrichment_rows, write_outputs
from pyenrich.properties import Cosmology, StarsProperties
from pyenrich.state import StarParticle


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pyenrich",
        description="Compute the mass and metals released by a star particle during one timestep.",
    )
    ap.add_argument("--tables", required=True, help="Directory holding lifetimes.dat, snii.dat, agb.dat and snia.dat")
    ap.add_argument("--age", type=float, required=True, help="Particle age at the start of the step")
    ap.add_argument("--metallicity", type=float, required=True, help="Total metal mass fraction")
    ap.add_argument("--dt", type=float, required=True, help="Timestep length")
    ap.add_argument("--config", default=None, help="JSON parameter file")
    ap.add_argument("--lifetime-model", default=None, help="Override the lifetime model")
    ap.add_argument("--backend", choices=("numpy", "numba", "auto"), default=None)
    ap.add_argument("--time-since-enrich", type=float, default=0.0, help="Gyr since the particle's SNIa window opened")
    ap.add_argument("--gyr-per-time-unit", type=float, default=1.0)
    ap.add_argument("--no-cache", action="store_true", help="Do not read or write the table cache")
    ap.add_argument("--output-dir", default=None, help="Also write the accumulators to this directory")
    ap.add_argument("--output-mode", choices=("legacy", "dataframe", "both"), default="legacy")
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    cfg = StarsConfig.from_json(args.config) if args.config else StarsConfig()
    overrides: dict[str, object] = {"yield_table_path": args.tables}
    if args.lifetime_model is not None:
        overrides["lifetime_model"] = args.lifetime_model
    if args.backend is not None:
        overrides["backend"] = args.backend
    if args.no_cache:
        overrides["enable_table_cache"] = False
    cfg = replace(cfg, **overrides)

    t0 = perf_counter()
    props = StarsProperties.from_config(cfg)
    particle = StarParticle.create(age=args.age, metallicity=args.metallicity)
    particle.time_since_enrich_gyr = args.time_since_enrich
    outcome = evolve_star(particle, props, Cosmology(args.gyr_per_time_unit), args.dt)

    if args.output_dir is not None:
        write_outputs(Path(args.output_dir), rows=build_enrichment_rows([particle]), output_mode=args.output_mode)

    result = particle.enrichment()
    result["empty_interval"] = outcome.empty_interval
    result["elements"] = list(props.snii.element_names)
    print(json.dumps(result, indent=2, sort_keys=True))
    if args.verbose:
        print(f"total runtime (wall): {perf_counter() - t0:.3f} s")


if __name__ == "__main__":
    main()
