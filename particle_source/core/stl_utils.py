"""
STL file loading and export utilities.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

PathLike = Union[str, os.PathLike]

_BINARY_RECORD = struct.Struct('<12fH')
_BINARY_HEADER_SIZE = 84


def _read_binary_facets(file_path: PathLike, triangle_count: int) -> Optional[np.ndarray]:
    """Read ``triangle_count`` 50-byte facet records after the header."""
    facets: List[np.ndarray] = []
    with open(file_path, 'rb') as bf:
        bf.seek(_BINARY_HEADER_SIZE)
        for _ in range(triangle_count):
            chunk = bf.read(_BINARY_RECORD.size)
            if len(chunk) != _BINARY_RECORD.size:
                return None
            values = _BINARY_RECORD.unpack(chunk)
            facets.append(np.asarray(values[0:12], dtype=float).reshape(4, 3))
    if not facets:
        return None
    return np.stack(facets, axis=0)


def _read_ascii_facets(file_path: PathLike) -> Optional[np.ndarray]:
    """Parse ``facet normal``/``vertex``/``endfacet`` records of an ASCII STL."""
    facets: List[np.ndarray] = []
    normal: Optional[np.ndarray] = None
    corners: List[List[float]] = []
    with open(file_path, 'r', encoding='utf-8', errors='ignore') as af:
        for line in af:
            tokens = line.split()
            if not tokens:
                continue
            keyword = tokens[0].lower()
            if keyword == 'facet' and len(tokens) >= 5 and tokens[1].lower() == 'normal':
                normal = np.array([float(t) for t in tokens[2:5]])
                corners = []
            elif keyword == 'vertex' and len(tokens) >= 4:
                corners.append([float(t) for t in tokens[1:4]])
            elif keyword == 'endfacet':
                if len(corners) >= 3:
                    # a zero normal is recomputed from the winding in prepare_mesh_geometry
                    n = normal if normal is not None else np.zeros(3)
                    facets.append(np.vstack([n, np.asarray(corners[:3], dtype=float)]))
                normal = None
                corners = []
    if not facets:
        return None
    return np.stack(facets, axis=0)


def load_stl_mesh(file_path: PathLike, scale: float = 1.0) -> np.ndarray:
    """Load a mesh from an ASCII or binary STL file.

    The format is detected from the file size announced in the binary
    header; files starting with ``solid`` whose size does not match are read
    as ASCII first.

    Parameters
    ----------
    file_path : str or Path
        Path to the STL file on disk.
    scale : float, optional
        Factor applied to the vertex coordinates (e.g. mm -> m).

    Returns
    -------
    np.ndarray, shape (n_facets, 4, 3)
        Facets as [normal, v0, v1, v2].
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"STL file '{file_path}' does not exist")

    file_size = os.path.getsize(file_path)
    with open(file_path, 'rb') as f:
        header = f.read(80)
        count_bytes = f.read(4)
    triangle_count = int.from_bytes(count_bytes, byteorder='little') if len(count_bytes) == 4 else 0
    binary_size_matches = (
        triangle_count > 0
        and _BINARY_HEADER_SIZE + triangle_count * _BINARY_RECORD.size == file_size
    )

    if binary_size_matches:
        facets = _read_binary_facets(file_path, triangle_count)
    elif header.decode(errors='ignore').strip().lower().startswith('solid'):
        facets = _read_ascii_facets(file_path)
    else:
        facets = None

    if facets is None:
        raise ValueError(f"No facets were found in '{file_path}' - the file may be corrupt")

    facets[:, 1:4, :] *= scale
    return facets


def export_stl_mesh(mesh: np.ndarray, file_path: PathLike, name: str = "mesh") -> Path:
    """Write a (n_facets, 4, 3) or (n_facets, 3, 3) mesh as ASCII STL."""
    triangles = np.asarray(mesh, dtype=float)
    if triangles.shape[1] == 3:
        normals = np.cross(triangles[:, 1] - triangles[:, 0], triangles[:, 2] - triangles[:, 0])
        triangles = np.concatenate([normals[:, np.newaxis, :], triangles], axis=1)

    output_path = Path(file_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(f"solid {name}\n")
        for facet in triangles:
            f.write("  facet normal {:.9e} {:.9e} {:.9e}\n".format(*facet[0]))
            f.write("    outer loop\n")
            for vertex in facet[1:4]:
                f.write("      vertex {:.9e} {:.9e} {:.9e}\n".format(*vertex))
            f.write("    endloop\n")
            f.write("  endfacet\n")
        f.write(f"endsolid {name}\n")
    return output_path
