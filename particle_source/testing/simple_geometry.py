"""
Simple Geometry Generators for Testing and Debugging
=====================================================

Closed analytic meshes (box, cylinder, sphere) in the same array format as
``load_stl_mesh()``: shape (n_facets, 4, 3) with [normal, v0, v1, v2] and
normals pointing out of the solid. They can stand in for STL files when
checking sources and point-in-solid queries.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def _facets_from_faces(vertices: np.ndarray, faces: Sequence[Sequence[int]]) -> np.ndarray:
    """Assemble [normal, v0, v1, v2] facets; normals follow the winding."""
    corners = vertices[np.asarray(faces, dtype=int)]
    normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    normals = normals / np.where(norms > 0, norms, 1.0)
    return np.concatenate([normals[:, np.newaxis, :], corners], axis=1)


def create_simple_box(
    center: tuple[float, float, float] = (0.0, 0.0, 0.0),
    size: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> np.ndarray:
    """Create an axis-aligned box mesh.

    Parameters
    ----------
    center : tuple[float, float, float], optional
        Box center (x, y, z) in metres, by default (0, 0, 0)
    size : tuple[float, float, float], optional
        Edge lengths along x, y and z in metres, by default (1, 1, 1)

    Returns
    -------
    np.ndarray, shape (12, 4, 3)
        Mesh with 2 triangles per box face
    """
    c = np.asarray(center, dtype=float)
    h = np.asarray(size, dtype=float) / 2.0
    signs = np.array([
        [-1, -1, -1], [1, -1, -1], [1, 1, -1], [-1, 1, -1],
        [-1, -1, 1], [1, -1, 1], [1, 1, 1], [-1, 1, 1],
    ], dtype=float)
    vertices = c + signs * h
    faces = [
        [0, 3, 2], [0, 2, 1],  # z-
        [4, 5, 6], [4, 6, 7],  # z+
        [0, 1, 5], [0, 5, 4],  # y-
        [3, 7, 6], [3, 6, 2],  # y+
        [0, 4, 7], [0, 7, 3],  # x-
        [1, 2, 6], [1, 6, 5],  # x+
    ]
    return _facets_from_faces(vertices, faces)


def create_simple_cylinder(
    radius: float = 1.0,
    z_min: float = 0.0,
    z_max: float = 1.0,
    n_segments: int = 32,
) -> np.ndarray:
    """Create a closed cylinder around the z-axis.

    The mantle is made of ``2 * n_segments`` triangles whose vertices all
    lie at ``radius``; both caps are triangle fans around the axis.
    """
    if z_max <= z_min:
        raise ValueError("z_max must be larger than z_min")
    angles = np.linspace(0.0, 2.0 * np.pi, n_segments, endpoint=False)
    ring = np.column_stack([radius * np.cos(angles), radius * np.sin(angles)])
    vertices = np.vstack([
        [[0.0, 0.0, z_min], [0.0, 0.0, z_max]],
        np.column_stack([ring, np.full(n_segments, z_min)]),
        np.column_stack([ring, np.full(n_segments, z_max)]),
    ])

    faces = []
    for i in range(n_segments):
        j = (i + 1) % n_segments
        b_i, b_j = 2 + i, 2 + j
        t_i, t_j = 2 + n_segments + i, 2 + n_segments + j
        faces.append([b_i, b_j, t_j])
        faces.append([b_i, t_j, t_i])
    for i in range(n_segments):
        j = (i + 1) % n_segments
        faces.append([0, 2 + j, 2 + i])
        faces.append([1, 2 + n_segments + i, 2 + n_segments + j])
    return _facets_from_faces(vertices, faces)


def create_simple_sphere(
    center: tuple[float, float, float] = (0.0, 0.0, 0.0),
    radius: float = 1.0,
    subdivisions: int = 2,
) -> np.ndarray:
    """Create a sphere mesh by icosahedron subdivision.

    Parameters
    ----------
    center : tuple[float, float, float], optional
        Sphere center in metres
    radius : float, optional
        Sphere radius in metres
    subdivisions : int, optional
        Number of subdivision steps, each multiplies the facet count by 4
        (0: 20 faces, 2: 320 faces)
    """
    phi = (1.0 + np.sqrt(5.0)) / 2.0
    vertices = [np.array(v, dtype=float) for v in [
        [-1, phi, 0], [1, phi, 0], [-1, -phi, 0], [1, -phi, 0],
        [0, -1, phi], [0, 1, phi], [0, -1, -phi], [0, 1, -phi],
        [phi, 0, -1], [phi, 0, 1], [-phi, 0, -1], [-phi, 0, 1],
    ]]
    vertices = [v / np.linalg.norm(v) for v in vertices]
    faces = [
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
    ]

    for _ in range(subdivisions):
        midpoints = {}

        def midpoint(i: int, j: int) -> int:
            key = (min(i, j), max(i, j))
            if key not in midpoints:
                mid = vertices[i] + vertices[j]
                vertices.append(mid / np.linalg.norm(mid))
                midpoints[key] = len(vertices) - 1
            return midpoints[key]

        refined = []
        for v0, v1, v2 in faces:
            a, b, c = midpoint(v0, v1), midpoint(v1, v2), midpoint(v2, v0)
            refined.extend([[v0, a, c], [v1, b, a], [v2, c, b], [a, b, c]])
        faces = refined

    unit = np.array(vertices)
    # orient every face outward
    corners = unit[np.asarray(faces)]
    winding = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    inward = np.einsum("ij,ij->i", winding, corners.mean(axis=1)) < 0.0
    faces = [[f[0], f[2], f[1]] if flip else f for f, flip in zip(faces, inward)]

    return _facets_from_faces(unit * radius + np.asarray(center, dtype=float), faces)
