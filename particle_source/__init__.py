"""
Particle Source Package
=======================

Initial-state generation for Monte-Carlo transport of neutrons, protons
and electrons through an experiment described by STL meshes.

A run builds exactly one source from the SOURCE entry of a ``geometry.in``
style configuration and asks it for one particle per history:

    from particle_source import ExperimentConfig, MCGenerator

    cfg = ExperimentConfig.from_file("geometry.in")
    geometry = cfg.load_geometry()
    field = cfg.field_manager()
    source = cfg.build_source(geometry)
    mc = MCGenerator(seed=42)
    particle = source.create_particle(mc, geometry, field)

Modules:
--------
- config: Configurable defaults
- core.geometry: Mesh processing and point-in-solid queries
- core.mc: Random sampling
- core.sources: Surface and volume sources
- core.source_config: Configuration file and source dispatcher
- plotting: Spawn distribution figures
- testing: Simple analytic meshes
- runner: Command-line driver
"""

from . import config
from .core import *
from .core import __all__ as _core_all

__version__ = "1.0.0"
__all__ = ["config"] + list(_core_all)
