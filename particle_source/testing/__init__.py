"""
Testing subpackage for the particle source.

Simple analytic meshes for exercising surface and solid sources without
STL files from a real experiment.

Example usage:
    from particle_source.testing import create_simple_box
    from particle_source import export_stl_mesh

    export_stl_mesh(create_simple_box(size=(0.2, 0.2, 0.5)), "box.stl")
"""

from .simple_geometry import (
    create_simple_box,
    create_simple_cylinder,
    create_simple_sphere,
)

__all__ = [
    "create_simple_box",
    "create_simple_cylinder",
    "create_simple_sphere",
]
