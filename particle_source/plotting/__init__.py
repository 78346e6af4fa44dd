"""
Plotting subpackage for spawn distribution figures.

Example usage:
    from particle_source.plotting import visualize_spawn_distribution

    visualize_spawn_distribution(particles, save_path='Figures/spawn_distribution')
"""

from .spawn import visualize_spawn_distribution

__all__ = [
    "visualize_spawn_distribution",
]
