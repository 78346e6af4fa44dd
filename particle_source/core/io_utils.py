"""
Export of particle start states.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np

from .constants import STATUS_INITIAL_NOT_FOUND
from .particles import Particle

CSV_HEADERS = [
    'particle_id',
    'particle',
    'status',
    'spawn_time_s',
    'x_m',
    'y_m',
    'z_m',
    'kinetic_energy_eV',
    'phi_rad',
    'theta_rad',
    'polarisation',
    'total_energy_eV',
]


def export_particles_to_csv(particles: Iterable[Particle], filename: str = "start_states.csv") -> Optional[Path]:
    """Export particle start states to a CSV file.

    Parameters
    ----------
    particles : iterable of Particle
        Particles returned by a source.
    filename : str
        Output CSV filename; parent directories are created.
    """
    particles = list(particles)
    if not particles:
        print("[warning] No particles to export.")
        return None

    output_path = Path(filename)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_HEADERS)
        for particle in particles:
            record = particle.spawn_record()
            writer.writerow([
                record.id,
                particle.name,
                record.status,
                record.spawn_time,
                *record.position,
                record.kinetic_energy,
                record.phi,
                record.theta,
                record.polarisation,
                record.h_start,
            ])

    print(f"[info] Exported {len(particles)} start states to {output_path}")
    return output_path


def print_source_statistics(particles: List[Particle]) -> None:
    """Print a short summary of the generated start states."""
    total = len(particles)
    if total == 0:
        print("No particles generated.")
        return
    valid = [p for p in particles if p.status != STATUS_INITIAL_NOT_FOUND]
    not_found = total - len(valid)

    print("\n" + "=" * 60)
    print("PARTICLE SOURCE STATISTICS")
    print("=" * 60)
    print(f"Particles created:         {total:,}")
    print(f"Start point not found:     {not_found:,} ({100 * not_found / total:.2f}%)")
    if valid:
        positions = np.array([p.position for p in valid])
        energies = np.array([p.e_start for p in valid])
        times = np.array([p.t_start for p in valid])
        mean = positions.mean(axis=0)
        print(f"Mean position (m):         ({mean[0]:.4g}, {mean[1]:.4g}, {mean[2]:.4g})")
        print(f"Kinetic energy (eV):       mean={energies.mean():.4g}, "
              f"min={energies.min():.4g}, max={energies.max():.4g}")
        print(f"Spawn time (s):            mean={times.mean():.4g}, max={times.max():.4g}")
    print("=" * 60)
