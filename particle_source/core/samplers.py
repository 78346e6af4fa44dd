"""
Emitting regions: volume samplers and surface restrictions.

A volume sampler draws a random point inside a shape. A surface restriction
selects the triangles of the experiment geometry that emit particles and
returns them as an :class:`EmittingSurface`.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from .data_classes import EmittingSurface, MeshGeometry
from .errors import SamplingExhaustedError, SourceConfigError
from .geometry import SolidIndex
from .mc import MCGenerator

Point = Tuple[float, float, float]


# =============================================================================
# Volume samplers
# =============================================================================

class CuboidSampler:
    """Uniform points in an axis-aligned box."""

    def __init__(self, x_min: float, x_max: float, y_min: float, y_max: float,
                 z_min: float, z_max: float):
        self.x_min, self.x_max = x_min, x_max
        self.y_min, self.y_max = y_min, y_max
        self.z_min, self.z_max = z_min, z_max

    def random_point(self, mc: MCGenerator) -> Point:
        x = mc.uniform_dist(self.x_min, self.x_max)
        y = mc.uniform_dist(self.y_min, self.y_max)
        z = mc.uniform_dist(self.z_min, self.z_max)
        return x, y, z


class CylindricalSectorSampler:
    """Uniform points in an annular cylinder sector (angles in radians)."""

    def __init__(self, r_min: float, r_max: float, phi_min: float, phi_max: float,
                 z_min: float, z_max: float):
        self.r_min, self.r_max = r_min, r_max
        self.phi_min, self.phi_max = phi_min, phi_max
        self.z_min, self.z_max = z_min, z_max

    def random_point(self, mc: MCGenerator) -> Point:
        r = mc.linear_dist(self.r_min, self.r_max)  # area element r dr dphi
        phi = mc.uniform_dist(self.phi_min, self.phi_max)
        z = mc.uniform_dist(self.z_min, self.z_max)
        return r * math.cos(phi), r * math.sin(phi), z


class SolidSampler:
    """Uniform points inside a closed mesh by bounding-box rejection.

    ``max_trials`` caps the rejection loop; ``None`` retries forever.
    """

    def __init__(self, solid: SolidIndex, max_trials: Optional[int] = None):
        self.solid = solid
        self.max_trials = max_trials

    def random_point(self, mc: MCGenerator) -> Point:
        lo, hi = self.solid.bbox_min, self.solid.bbox_max
        trials = 0
        while self.max_trials is None or trials < self.max_trials:
            trials += 1
            p = (
                mc.uniform_dist(lo[0], hi[0]),
                mc.uniform_dist(lo[1], hi[1]),
                mc.uniform_dist(lo[2], hi[2]),
            )
            if self.solid.in_solid(p):
                return p
        raise SamplingExhaustedError(
            f"No point inside the source solid after {self.max_trials} trials"
        )


# =============================================================================
# Surface restrictions
# =============================================================================

def _restrict_surface(mesh: MeshGeometry, inside: np.ndarray, label: str) -> EmittingSurface:
    """Keep triangles whose three vertices are all inside; report the area."""
    mask = inside.all(axis=1)
    surface = EmittingSurface.from_mesh(mesh.subset(mask))
    print(f"[info] Source area: {surface.total_area:g} m^2")
    if surface.total_area <= 0.0:
        raise SourceConfigError(f"Source '{label}' has no emitting area")
    return surface


def in_cylindrical_sector(points: np.ndarray, r_min: float, r_max: float,
                          phi_min: float, phi_max: float,
                          z_min: float, z_max: float) -> np.ndarray:
    """Membership of points (..., 3) in a cylinder sector, phi in (-π, π]."""
    points = np.asarray(points, dtype=float)
    r = np.hypot(points[..., 0], points[..., 1])
    phi = np.arctan2(points[..., 1], points[..., 0])
    z = points[..., 2]
    return ((r >= r_min) & (r <= r_max)
            & (phi >= phi_min) & (phi <= phi_max)
            & (z >= z_min) & (z <= z_max))


def cylindrical_surface(mesh: MeshGeometry, r_min: float, r_max: float,
                        phi_min: float, phi_max: float,
                        z_min: float, z_max: float) -> EmittingSurface:
    """Triangles of ``mesh`` lying completely inside a cylinder sector."""
    inside = in_cylindrical_sector(mesh.vertices, r_min, r_max, phi_min, phi_max, z_min, z_max)
    return _restrict_surface(mesh, inside, "cylsurface")


def solid_surface(mesh: MeshGeometry, solid: SolidIndex) -> EmittingSurface:
    """Triangles of ``mesh`` lying completely inside another closed mesh."""
    corners = mesh.vertices
    inside = np.array([[solid.in_solid(vertex) for vertex in triangle] for triangle in corners],
                      dtype=bool).reshape(len(mesh), 3)
    return _restrict_surface(mesh, inside, "STLsurface")
