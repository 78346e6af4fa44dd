"""
Particle Source Runner Module

This module provides the main run function that can be called from
scripts or imported directly: read a ``geometry.in`` style file, build the
configured source, create the requested number of particles, then export
and plot their start states.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from . import config
from .core.errors import SourceError
from .core.io_utils import export_particles_to_csv, print_source_statistics
from .core.mc import MCGenerator
from .core.particles import Particle
from .core.source_config import ExperimentConfig, SourceOptions


def run_source(
    config_file: Path,
    n_particles: Optional[int] = None,
    seed: Optional[int] = config.DEFAULT_SEED,
    output_dir: Optional[Path] = None,
    save_results: bool = True,
    generate_plots: bool = True,
    gravity: bool = True,
) -> List[Particle]:
    """Create start states for ``n_particles`` histories.

    Parameters
    ----------
    config_file : Path
        Configuration file with [GEOMETRY], [SOURCE] and optional [FIELDS].
    n_particles : int, optional
        Number of particles. If None, uses config default.
    seed : int, optional
        Seed of the random generator; equal seeds give identical runs.
    output_dir : Path, optional
        Directory for output files (Data/, Figures/). If None, uses current working directory.
    save_results : bool
        Whether to save the start states to CSV.
    generate_plots : bool
        Whether to generate the spawn distribution figure.
    gravity : bool
        Set to False to switch gravity off regardless of [FIELDS].

    Raises
    ------
    SourceConfigError
        The configuration does not describe a valid source.
    SamplingExhaustedError
        An STL volume source found no point inside its solid within
        ``config.STL_VOLUME_MAX_TRIALS`` trials.
    """
    output_dir = Path.cwd() if output_dir is None else Path(output_dir)
    if n_particles is None:
        n_particles = config.DEFAULT_N_PARTICLES

    experiment = ExperimentConfig.from_file(config_file)
    geometry = experiment.load_geometry()
    field = experiment.field_manager()
    if not gravity:
        field.gravity = False
    options = SourceOptions(
        max_trials=config.MAX_DICE_ROLL,
        stl_max_trials=config.STL_VOLUME_MAX_TRIALS,
        base_dir=experiment.base_dir,
    )
    source = experiment.build_source(geometry, options)

    mc = MCGenerator(seed=seed)
    print(f"[info] Creating {n_particles} {source.particle_name}s from {source.mode} source...")
    particles = [
        source.create_particle(mc, geometry, field)
        for _ in tqdm(range(n_particles), desc="Creating particles")
    ]

    print_source_statistics(particles)

    if save_results and particles:
        csv_filename = str(output_dir / config.DATA_OUTPUT_DIR / config.PARTICLE_DATA_CSV)
        export_particles_to_csv(particles, filename=csv_filename)

    if generate_plots and particles:
        from .plotting import visualize_spawn_distribution
        save_base = str(output_dir / config.FIGURES_OUTPUT_DIR / config.SPAWN_FIGURE_BASE)
        visualize_spawn_distribution(particles, save_path=save_base)

    return particles


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Create particle start states from a SOURCE configuration")
    parser.add_argument("config_file", type=Path,
                        help="Configuration file with [GEOMETRY] and [SOURCE] sections")
    parser.add_argument("-n", "--particles", type=int, default=None,
                        help="Number of particles to create")
    parser.add_argument("--seed", type=int, default=config.DEFAULT_SEED,
                        help="Random seed")
    parser.add_argument("--no-save", action="store_true",
                        help="Don't save start states to CSV")
    parser.add_argument("--no-plot", action="store_true",
                        help="Don't generate the spawn distribution figure")
    parser.add_argument("--no-gravity", action="store_true",
                        help="Switch gravity off")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Output directory for results and figures")

    args = parser.parse_args(argv)

    try:
        run_source(
            config_file=args.config_file,
            n_particles=args.particles,
            seed=args.seed,
            output_dir=args.output_dir,
            save_results=not args.no_save,
            generate_plots=not args.no_plot,
            gravity=not args.no_gravity,
        )
    except (SourceError, FileNotFoundError) as exc:
        print(f"\n[error] {exc}")
        sys.exit(1)
    return 0


if __name__ == "__main__":
    main()
