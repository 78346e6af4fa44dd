"""
Data classes for the particle source.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

import numpy as np


@dataclass
class MeshGeometry:
    """Preprocessed triangle data of an STL mesh.

    Normals are unit length and point out of the solid. Areas are cached
    because both the emitting-surface bookkeeping and the area-weighted
    triangle selection need them.
    """

    vertices0: np.ndarray
    edge1: np.ndarray
    edge2: np.ndarray
    normals: np.ndarray
    areas: np.ndarray

    def __len__(self) -> int:
        return self.vertices0.shape[0]

    @property
    def vertices(self) -> np.ndarray:
        """All triangle corners, shape (n_facets, 3, 3)."""
        v0 = self.vertices0
        return np.stack([v0, v0 + self.edge1, v0 + self.edge2], axis=1)

    @property
    def bbox_min(self) -> np.ndarray:
        return self.vertices.reshape(-1, 3).min(axis=0)

    @property
    def bbox_max(self) -> np.ndarray:
        return self.vertices.reshape(-1, 3).max(axis=0)

    def subset(self, mask: np.ndarray) -> "MeshGeometry":
        """Return the triangles selected by a boolean mask, in mesh order."""
        return MeshGeometry(
            vertices0=self.vertices0[mask],
            edge1=self.edge1[mask],
            edge2=self.edge2[mask],
            normals=self.normals[mask],
            areas=self.areas[mask],
        )


@dataclass
class EmittingSurface:
    """Ordered emitting triangles with their cumulative area.

    ``cumulative_area[i]`` is the summed area of triangles ``0..i``, so
    ``total_area`` always equals the sum of the member areas.
    """

    triangles: MeshGeometry
    cumulative_area: np.ndarray

    @classmethod
    def from_mesh(cls, triangles: MeshGeometry) -> "EmittingSurface":
        return cls(triangles=triangles, cumulative_area=np.cumsum(triangles.areas))

    @property
    def total_area(self) -> float:
        if self.cumulative_area.size == 0:
            return 0.0
        return float(self.cumulative_area[-1])

    def __len__(self) -> int:
        return len(self.triangles)


@dataclass
class ParticleSettings:
    """Emission settings of one particle type.

    ``spectrum`` is one of ``"uniform"``, ``"linear"`` (density ∝ E),
    ``"sqrt"`` (density ∝ √E) or a callable returning a non-negative weight
    for a given energy. ``polarisation`` of ``None`` dices ±1, any other
    value is used as is.
    """

    e_min: float  # eV
    e_max: float  # eV
    spectrum: Union[str, Callable[[float], float]] = "uniform"
    phi_min: float = 0.0  # rad
    phi_max: float = 2.0 * math.pi  # rad
    theta_min: float = 0.0  # rad
    theta_max: float = math.pi  # rad
    polarisation: Optional[int] = None


@dataclass
class SourceEntry:
    """One parsed SOURCE configuration line."""

    particle_name: str
    mode: str
    fields: List[str] = field(default_factory=list)


@dataclass
class SpawnRecord:
    """Initial state of one emitted particle."""

    id: int
    status: str
    spawn_time: float  # s
    position: Tuple[float, float, float]  # m
    kinetic_energy: float  # eV
    phi: float  # rad
    theta: float  # rad
    polarisation: int
    h_start: float  # eV
