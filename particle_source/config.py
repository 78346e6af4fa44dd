"""
Configuration settings for the particle source.

This module collects the tunable parameters of the source subsystem.
Users can modify these values to customize sampling without changing the
core code. The experiment-specific part (geometry, SOURCE line, fields) is
read from a ``geometry.in`` style file, see
:mod:`particle_source.core.source_config`.
"""

from __future__ import annotations

import math

# =============================================================================
# Sampling Limits
# =============================================================================

# Number of tries to find a particle start point during phase-space weighting
MAX_DICE_ROLL = 42_000_000

# Print a progress dot every PROGRESS_INTERVAL phase-space trials
PROGRESS_INTERVAL = 100_000

# Trial cap for the bounding-box rejection loop of STL volume sources
STL_VOLUME_MAX_TRIALS = 1_000_000

# Offset of surface-emitted particles along the surface normal (m)
REFLECT_TOLERANCE = 1.0e-8

# =============================================================================
# Units
# =============================================================================

# Angles in the SOURCE line are given in degrees
ANGLE_UNIT = math.pi / 180.0

# STL coordinates are metres
STL_UNIT_SCALE = 1.0

# =============================================================================
# Particle Emission Settings
# =============================================================================

# Keyword arguments for core.data_classes.ParticleSettings.
# Energies in eV, angles in radians.
DEFAULT_PARTICLE_SETTINGS = {
    "neutron": {"e_min": 0.0, "e_max": 300.0e-9, "spectrum": "sqrt"},
    "proton": {"e_min": 0.0, "e_max": 750.0},
    "electron": {"e_min": 0.0, "e_max": 782.0e3},
}

# =============================================================================
# Run Settings
# =============================================================================

DEFAULT_N_PARTICLES = 1000
DEFAULT_SEED = None

# Output directories and file names
DATA_OUTPUT_DIR = "Data"
FIGURES_OUTPUT_DIR = "Figures"
PARTICLE_DATA_CSV = "start_states.csv"
SPAWN_FIGURE_BASE = "spawn_distribution"

PLOT_DPI = 150
