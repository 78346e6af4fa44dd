"""
Mesh preparation, point-in-solid queries and frame rotations.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .constants import DEBUG
from .data_classes import MeshGeometry
from .stl_utils import load_stl_mesh


def prepare_mesh_geometry(mesh: np.ndarray) -> MeshGeometry:
    """Precompute edge vectors, unit normals and areas for an STL mesh.

    Parameters
    ----------
    mesh : np.ndarray
        Mesh data with shape (n_facets, 4, 3) where each facet contains
        [normal, v0, v1, v2], or (n_facets, 3, 3) with just vertices.
        Facet normals stored in the file win over the vertex winding; zero
        normals are recomputed from the winding.
    """
    triangles = np.asarray(mesh, dtype=float)
    if triangles.ndim != 3 or triangles.shape[1] not in (3, 4) or triangles.shape[2] != 3:
        raise ValueError(f"Expected mesh of shape (n, 3, 3) or (n, 4, 3), got {triangles.shape}")

    corners = triangles[:, -3:, :]
    v0 = corners[:, 0, :]
    edge1 = corners[:, 1, :] - v0
    edge2 = corners[:, 2, :] - v0
    winding = np.cross(edge1, edge2)
    winding_norm = np.linalg.norm(winding, axis=1)

    if triangles.shape[1] == 4:
        normals = triangles[:, 0, :].copy()
        missing = np.linalg.norm(normals, axis=1) == 0.0
        normals[missing] = winding[missing]
    else:
        normals = winding.copy()

    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    norms = np.where(norms > 0, norms, 1.0)
    normals = normals / norms

    return MeshGeometry(
        vertices0=v0,
        edge1=edge1,
        edge2=edge2,
        normals=normals,
        areas=0.5 * winding_norm,
    )


def merge_mesh_geometries(meshes: Sequence[MeshGeometry]) -> MeshGeometry:
    """Concatenate prepared meshes, keeping their triangle order."""
    if not meshes:
        empty = np.zeros((0, 3))
        return MeshGeometry(empty, empty, empty, empty, np.zeros(0))
    return MeshGeometry(
        vertices0=np.concatenate([m.vertices0 for m in meshes]),
        edge1=np.concatenate([m.edge1 for m in meshes]),
        edge2=np.concatenate([m.edge2 for m in meshes]),
        normals=np.concatenate([m.normals for m in meshes]),
        areas=np.concatenate([m.areas for m in meshes]),
    )


def build_orthonormal_frame(axis: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Build an orthonormal coordinate frame from a given axis."""
    axis = np.array(axis, dtype=float)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        raise ValueError("Axis vector must be non-zero")
    axis /= norm
    up = np.array([0.0, 0.0, 1.0])
    if abs(np.dot(axis, up)) > 0.99:
        up = np.array([1.0, 0.0, 0.0])
    u = np.cross(up, axis)
    u /= np.linalg.norm(u)
    v = np.cross(axis, u)
    return axis, u, v


def rotate_to_normal(vector: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Rotate ``vector`` from a frame whose z-axis is ``normal`` into the global frame.

    The rotation turns the global z-axis onto ``normal`` about the axis
    z × normal (Rodrigues). A normal pointing along -z is handled as a
    half turn about the x-axis.
    """
    v = np.asarray(vector, dtype=float)
    n = np.asarray(normal, dtype=float)
    cos_alpha = float(n[2])
    sin_alpha = float(np.sqrt(max(0.0, 1.0 - cos_alpha * cos_alpha)))
    if sin_alpha <= 1e-30:
        if cos_alpha < 0.0:
            return np.array([v[0], -v[1], -v[2]])
        return v.copy()

    a0 = -n[1] / sin_alpha
    a1 = n[0] / sin_alpha
    c1 = 1.0 - cos_alpha
    return np.array([
        (cos_alpha + a0 * a0 * c1) * v[0] + a0 * a1 * c1 * v[1] + a1 * sin_alpha * v[2],
        a1 * a0 * c1 * v[0] + (cos_alpha + a1 * a1 * c1) * v[1] - a0 * sin_alpha * v[2],
        -a1 * sin_alpha * v[0] + a0 * sin_alpha * v[1] + cos_alpha * v[2],
    ])


def direction_to_angles(direction: np.ndarray) -> Tuple[float, float]:
    """Return (phi, theta) of a direction vector."""
    d = np.asarray(direction, dtype=float)
    d = d / np.linalg.norm(d)
    phi = float(np.arctan2(d[1], d[0]))
    theta = float(np.arccos(np.clip(d[2], -1.0, 1.0)))
    return phi, theta


def ray_crossing_distances(
    origin: np.ndarray,
    direction: np.ndarray,
    geometry: MeshGeometry,
    indices: Optional[np.ndarray] = None,
    epsilon: float = 1e-12,
) -> np.ndarray:
    """Distances along the ray to every triangle it crosses (Möller–Trumbore)."""
    if indices is None:
        v0, edge1, edge2 = geometry.vertices0, geometry.edge1, geometry.edge2
    else:
        v0, edge1, edge2 = geometry.vertices0[indices], geometry.edge1[indices], geometry.edge2[indices]

    pvec = np.cross(direction[np.newaxis, :], edge2)
    det = np.einsum("ij,ij->i", edge1, pvec)
    mask = np.abs(det) > epsilon
    inv_det = np.zeros_like(det)
    inv_det[mask] = 1.0 / det[mask]

    tvec = origin[np.newaxis, :] - v0
    u = np.einsum("ij,ij->i", tvec, pvec) * inv_det
    mask &= (u >= 0.0) & (u <= 1.0)

    qvec = np.cross(tvec, edge1)
    v = (qvec @ direction) * inv_det
    mask &= (v >= 0.0) & (u + v <= 1.0)

    t = np.einsum("ij,ij->i", edge2, qvec) * inv_det
    mask &= t > 0.0
    return t[mask]


class SolidIndex:
    """Point-in-solid queries for a closed triangle mesh.

    A ray is cast from the query point along a fixed skew direction and its
    crossings with the surface are counted; an odd count means inside.
    Triangles are binned on a regular grid in the plane perpendicular to
    the ray, so each query only tests the triangles whose projection
    overlaps the cell of the query point.
    """

    # skew so rays do not graze edges and faces of axis-aligned meshes
    RAY_DIRECTION = (0.3183098861837907, 0.5772156649015329, 1.0)

    def __init__(self, mesh: MeshGeometry, cells_per_axis: Optional[int] = None):
        if len(mesh) == 0:
            raise ValueError("Cannot build a solid index for an empty mesh")
        self.mesh = mesh
        self.bbox_min = mesh.bbox_min
        self.bbox_max = mesh.bbox_max
        self.direction, self._u, self._v = build_orthonormal_frame(np.array(self.RAY_DIRECTION))

        corners = mesh.vertices
        proj_u = corners @ self._u
        proj_v = corners @ self._v
        self._origin = np.array([proj_u.min(), proj_v.min()])
        self._n_cells = cells_per_axis or max(1, int(np.sqrt(len(mesh))))
        span = np.array([proj_u.max(), proj_v.max()]) - self._origin
        self._cell_size = np.maximum(span, 1e-12) / self._n_cells

        lo_u = self._cell_index(proj_u.min(axis=1), 0)
        hi_u = self._cell_index(proj_u.max(axis=1), 0)
        lo_v = self._cell_index(proj_v.min(axis=1), 1)
        hi_v = self._cell_index(proj_v.max(axis=1), 1)
        cells: Dict[Tuple[int, int], List[int]] = {}
        for k in range(len(mesh)):
            for i in range(lo_u[k], hi_u[k] + 1):
                for j in range(lo_v[k], hi_v[k] + 1):
                    cells.setdefault((i, j), []).append(k)
        self._cells = {key: np.asarray(idx, dtype=int) for key, idx in cells.items()}

        if DEBUG:
            sizes = [len(idx) for idx in self._cells.values()]
            print(f"[debug] Solid index: {len(mesh)} triangles in {len(sizes)} cells, "
                  f"max {max(sizes)} per cell")

    def _cell_index(self, values, axis: int):
        cell = np.floor((np.asarray(values) - self._origin[axis]) / self._cell_size[axis]).astype(int)
        return np.clip(cell, 0, self._n_cells - 1)

    def in_solid(self, point) -> bool:
        """Return True if ``point`` lies inside the closed mesh."""
        p = np.asarray(point, dtype=float)
        if np.any(p < self.bbox_min) or np.any(p > self.bbox_max):
            return False
        key = (int(self._cell_index(p @ self._u, 0)), int(self._cell_index(p @ self._v, 1)))
        candidates = self._cells.get(key)
        if candidates is None:
            return False
        hits = ray_crossing_distances(p, self.direction, self.mesh, candidates)
        return hits.size % 2 == 1


def load_solid(file_path: Union[str, os.PathLike], scale: float = 1.0) -> SolidIndex:
    """Load an STL file and index it for point-in-solid queries."""
    return SolidIndex(prepare_mesh_geometry(load_stl_mesh(file_path, scale=scale)))


@dataclass
class Geometry:
    """Triangulated surfaces of the experiment.

    ``mesh`` holds all triangles of all listed STL files in file order.
    """

    mesh: MeshGeometry
    files: List[Path] = field(default_factory=list)

    @classmethod
    def from_meshes(cls, meshes: Iterable[np.ndarray]) -> "Geometry":
        return cls(mesh=merge_mesh_geometries([prepare_mesh_geometry(m) for m in meshes]))


def load_geometry(stl_files: Iterable[Union[str, os.PathLike]], scale: float = 1.0) -> Geometry:
    """Load and merge the STL files making up the experiment geometry."""
    paths = [Path(p) for p in stl_files]
    meshes = []
    for path in paths:
        print(f"[info] Loading geometry STL: {path.name}")
        meshes.append(prepare_mesh_geometry(load_stl_mesh(path, scale=scale)))
    geometry = Geometry(mesh=merge_mesh_geometries(meshes), files=paths)
    print(f"[info] Geometry contains {len(geometry.mesh)} triangles")
    return geometry
