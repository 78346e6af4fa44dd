"""
Shared fixtures for the particle source tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from particle_source import MCGenerator, ParticleSettings, prepare_mesh_geometry


FIXED_ENERGY_SETTINGS = {
    "neutron": ParticleSettings(e_min=1.0, e_max=1.0),
    "proton": ParticleSettings(e_min=1.0, e_max=1.0),
    "electron": ParticleSettings(e_min=1.0, e_max=1.0),
}


@pytest.fixture
def mc():
    """Seeded generator with the default particle settings."""
    return MCGenerator(seed=12345)


@pytest.fixture
def fixed_energy_mc():
    """Seeded generator emitting every particle type at exactly 1 eV."""
    return MCGenerator(seed=2024, particle_settings=FIXED_ENERGY_SETTINGS)


@pytest.fixture
def two_triangles():
    """Two parallel triangles with areas 1 (z=0) and 3 (z=1), normals +z."""
    corners = np.array([
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0]],
        [[0.0, 0.0, 1.0], [3.0, 0.0, 1.0], [0.0, 2.0, 1.0]],
    ])
    return prepare_mesh_geometry(corners)
