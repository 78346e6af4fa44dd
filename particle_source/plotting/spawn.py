"""
Spawn distribution visualization.

Histograms of the start positions, energies and directions produced by a
source, for checking a configuration before a long transport run.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt

from .. import config
from ..core.constants import STATUS_INITIAL_NOT_FOUND
from ..core.particles import Particle


def visualize_spawn_distribution(particles: List[Particle], save_path: Optional[str] = None,
                                 show: bool = False):
    """Plot histograms of x, y, z, r, kinetic energy and cos(theta).

    Parameters
    ----------
    particles : list of Particle
        Particles returned by a source; sentinel particles are skipped.
    save_path : str, optional
        Base path for the figure; ``.png`` is appended.
    show : bool
        Open an interactive window after saving.
    """
    valid = [p for p in particles if p.status != STATUS_INITIAL_NOT_FOUND]
    if not valid:
        print("[warning] No particles to visualize.")
        return None

    positions = np.array([p.position for p in valid])
    energies = np.array([p.e_start for p in valid])
    cos_theta = np.cos([p.theta_start for p in valid])
    radii = np.hypot(positions[:, 0], positions[:, 1])

    fig, axes = plt.subplots(2, 3, figsize=(15, 9))
    panels = [
        (positions[:, 0], 'x (m)', 'steelblue'),
        (positions[:, 1], 'y (m)', 'steelblue'),
        (positions[:, 2], 'z (m)', 'steelblue'),
        (radii, 'r (m)', 'teal'),
        (energies, 'Kinetic energy (eV)', 'darkorange'),
        (cos_theta, 'cos(theta)', 'purple'),
    ]
    for ax, (values, label, color) in zip(axes.flat, panels):
        ax.hist(values, bins=50, color=color, alpha=0.7)
        ax.set_xlabel(label)
        ax.set_ylabel('Count')
        ax.grid(True, alpha=0.3)
    fig.suptitle(f"Spawn distribution of {len(valid)} {valid[0].name}s")
    fig.tight_layout()

    if save_path:
        output = Path(f"{save_path}.png")
        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=config.PLOT_DPI)
        print(f"[info] Saved spawn distribution figure to {output}")
    if show:
        plt.show()
    plt.close(fig)
    return fig
