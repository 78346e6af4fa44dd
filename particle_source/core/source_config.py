"""
Source configuration: the ``geometry.in`` reader and the source dispatcher.

A configuration file is split into ``[SECTION]`` blocks with one entry per
line and ``#`` comments::

    [GEOMETRY]
    1  walls.stl  steel

    [SOURCE]
    neutron  boxvolume  -0.1 0.1  -0.1 0.1  0 0.5  100  1

    [FIELDS]
    gravity  on

The first token of the SOURCE entry is the particle type, the second the
mode; the remaining fields depend on the mode (see ``SOURCE_MODES``). Only
the first SOURCE entry is used.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .. import config
from .data_classes import SourceEntry
from .errors import SourceConfigError
from .fields import FieldManager, UniformElectricField, UniformMagneticField
from .geometry import Geometry, load_geometry, load_solid
from .mc import MCGenerator
from .particles import Particle, particle_class
from .samplers import (
    CuboidSampler,
    CylindricalSectorSampler,
    SolidSampler,
    cylindrical_surface,
    solid_surface,
)
from .sources import ParticleSource, SurfaceSource, VolumeSource

PathLike = Union[str, os.PathLike]

CYLINDER_FIELDS = ("r_min", "r_max", "phi_min", "phi_max", "z_min", "z_max")
BOX_FIELDS = ("x_min", "x_max", "y_min", "y_max", "z_min", "z_max")


@dataclass
class SourceOptions:
    """Unit conventions and trial caps applied when building a source."""

    angle_unit: float = config.ANGLE_UNIT
    stl_scale: float = config.STL_UNIT_SCALE
    max_trials: int = config.MAX_DICE_ROLL
    stl_max_trials: Optional[int] = config.STL_VOLUME_MAX_TRIALS
    base_dir: Optional[Path] = None

    def resolve(self, file_name: str) -> Path:
        path = Path(file_name)
        if not path.is_absolute() and self.base_dir is not None:
            path = Path(self.base_dir) / path
        return path


@dataclass
class Source:
    """The single particle source of a run, built from the SOURCE entry."""

    mode: str
    source: ParticleSource

    @property
    def particle_name(self) -> str:
        return self.source.particle_name

    def create_particle(self, mc: MCGenerator, geometry: Optional[Geometry] = None,
                        field: Optional[FieldManager] = None) -> Particle:
        return self.source.create_particle(mc, geometry, field)


# =============================================================================
# Field parsing
# =============================================================================

def _parse_fields(mode: str, names: Sequence[str], tokens: Sequence[str]) -> Dict[str, object]:
    if len(tokens) != len(names):
        raise SourceConfigError(
            f"Could not load source '{mode}'! Expected {len(names)} parameters "
            f"({' '.join(names)}), got {len(tokens)}"
        )
    values: Dict[str, object] = {}
    for name, token in zip(names, tokens):
        if name == "source_file":
            values[name] = token
        elif name == "phase_space_weighting":
            if token not in ("0", "1"):
                raise SourceConfigError(
                    f"Could not load source '{mode}'! phase_space_weighting must be 0 or 1, got '{token}'"
                )
            values[name] = token == "1"
        else:
            try:
                values[name] = float(token)
            except ValueError:
                raise SourceConfigError(
                    f"Could not load source '{mode}'! Invalid value '{token}' for {name}"
                ) from None
    return values


def _cylinder_bounds(values: Dict[str, object], options: SourceOptions) -> Tuple[float, ...]:
    # angles are converted to radians here and nowhere else
    return (
        values["r_min"], values["r_max"],
        values["phi_min"] * options.angle_unit, values["phi_max"] * options.angle_unit,
        values["z_min"], values["z_max"],
    )


def _load_source_solid(mode: str, values: Dict[str, object], options: SourceOptions):
    path = options.resolve(values["source_file"])
    try:
        return load_solid(path, scale=options.stl_scale)
    except (FileNotFoundError, ValueError) as exc:
        raise SourceConfigError(f"Could not load source '{mode}'! {exc}") from exc


def _require_geometry(mode: str, geometry: Optional[Geometry]) -> Geometry:
    if geometry is None or len(geometry.mesh) == 0:
        raise SourceConfigError(f"Could not load source '{mode}'! Surface sources need a geometry")
    return geometry


# =============================================================================
# Builders, one per mode
# =============================================================================

def _build_box_volume(particle, values, geometry, options):
    sampler = CuboidSampler(*(values[name] for name in BOX_FIELDS))
    return VolumeSource(particle, values["active_time"], sampler,
                        values["phase_space_weighting"], max_trials=options.max_trials)


def _build_cyl_volume(particle, values, geometry, options):
    sampler = CylindricalSectorSampler(*_cylinder_bounds(values, options))
    return VolumeSource(particle, values["active_time"], sampler,
                        values["phase_space_weighting"], max_trials=options.max_trials)


def _build_stl_volume(particle, values, geometry, options):
    solid = _load_source_solid("STLvolume", values, options)
    sampler = SolidSampler(solid, max_trials=options.stl_max_trials)
    return VolumeSource(particle, values["active_time"], sampler,
                        values["phase_space_weighting"], max_trials=options.max_trials)


def _build_cyl_surface(particle, values, geometry, options):
    geometry = _require_geometry("cylsurface", geometry)
    surface = cylindrical_surface(geometry.mesh, *_cylinder_bounds(values, options))
    return SurfaceSource(particle, values["active_time"], surface, values["E_normal"])


def _build_stl_surface(particle, values, geometry, options):
    geometry = _require_geometry("STLsurface", geometry)
    solid = _load_source_solid("STLsurface", values, options)
    surface = solid_surface(geometry.mesh, solid)
    return SurfaceSource(particle, values["active_time"], surface, values["E_normal"])


Builder = Callable[[str, Dict[str, object], Optional[Geometry], SourceOptions], ParticleSource]

SOURCE_MODES: Dict[str, Tuple[Tuple[str, ...], Builder]] = {
    "boxvolume": (BOX_FIELDS + ("active_time", "phase_space_weighting"), _build_box_volume),
    "cylvolume": (CYLINDER_FIELDS + ("active_time", "phase_space_weighting"), _build_cyl_volume),
    "STLvolume": (("source_file", "active_time", "phase_space_weighting"), _build_stl_volume),
    "cylsurface": (CYLINDER_FIELDS + ("active_time", "E_normal"), _build_cyl_surface),
    "STLsurface": (("source_file", "active_time", "E_normal"), _build_stl_surface),
}


def parse_source_line(line: str) -> SourceEntry:
    """Split a SOURCE entry into particle name, mode and mode fields."""
    tokens = line.split()
    if len(tokens) < 2:
        raise SourceConfigError(f"Could not load source '{line.strip()}'! Expected 'particle mode ...'")
    return SourceEntry(particle_name=tokens[0], mode=tokens[1], fields=tokens[2:])


def build_source(
    entry: Union[str, SourceEntry],
    geometry: Optional[Geometry] = None,
    options: Optional[SourceOptions] = None,
) -> Source:
    """Instantiate the source described by one SOURCE entry.

    Raises
    ------
    SourceConfigError
        Unknown mode, malformed fields, unreadable source STL or an empty
        emitting surface.
    UnknownParticleError
        Particle name outside neutron/proton/electron.
    """
    if isinstance(entry, str):
        entry = parse_source_line(entry)
    options = options or SourceOptions()

    if entry.mode not in SOURCE_MODES:
        raise SourceConfigError(f"Could not load source '{entry.mode}'! Unknown source mode")
    particle_class(entry.particle_name)

    names, builder = SOURCE_MODES[entry.mode]
    values = _parse_fields(entry.mode, names, entry.fields)
    source = builder(entry.particle_name, values, geometry, options)
    print(f"[info] Created {entry.mode} source for {entry.particle_name}s")
    return Source(mode=entry.mode, source=source)


# =============================================================================
# Configuration file
# =============================================================================

def read_config(file_path: PathLike) -> Dict[str, List[str]]:
    """Read a ``geometry.in`` style file into {SECTION: [entry lines]}."""
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file '{path}' does not exist")
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.split('#', 1)[0].strip()
            if not line:
                continue
            if line.startswith('[') and line.endswith(']'):
                current = line[1:-1].strip().upper()
                sections.setdefault(current, [])
            elif current is None:
                raise SourceConfigError(f"{path.name}:{lineno}: entry outside of a [SECTION]")
            else:
                sections[current].append(line)
    return sections


@dataclass
class ExperimentConfig:
    """Parsed configuration file plus the directory its paths are relative to."""

    sections: Dict[str, List[str]]
    base_dir: Path

    @classmethod
    def from_file(cls, file_path: PathLike) -> "ExperimentConfig":
        path = Path(file_path)
        return cls(sections=read_config(path), base_dir=path.resolve().parent)

    def source_entry(self) -> SourceEntry:
        lines = self.sections.get("SOURCE", [])
        if not lines:
            raise SourceConfigError("Could not load source! No [SOURCE] entry found")
        if len(lines) > 1:
            print(f"[warning] {len(lines)} SOURCE entries found, only the first one is used")
        return parse_source_line(lines[0])

    def geometry_files(self) -> List[Path]:
        files = []
        for line in self.sections.get("GEOMETRY", []):
            tokens = line.split()
            name = tokens[1] if len(tokens) > 1 else tokens[0]
            path = Path(name)
            files.append(path if path.is_absolute() else self.base_dir / path)
        return files

    def load_geometry(self, scale: float = config.STL_UNIT_SCALE) -> Geometry:
        return load_geometry(self.geometry_files(), scale=scale)

    def field_manager(self, gravity: bool = True) -> FieldManager:
        fields = FieldManager(gravity=gravity)
        for line in self.sections.get("FIELDS", []):
            tokens = line.split()
            kind, args = tokens[0].lower(), tokens[1:]
            try:
                if kind == "gravity" and len(args) == 1 and args[0].lower() in ("on", "off", "1", "0"):
                    fields.gravity = args[0].lower() in ("on", "1")
                elif kind == "uniform_b" and len(args) == 3:
                    fields.magnetic.append(UniformMagneticField([float(a) for a in args]))
                elif kind == "uniform_e" and len(args) == 3:
                    fields.electric.append(UniformElectricField([float(a) for a in args]))
                else:
                    raise ValueError(line)
            except ValueError:
                raise SourceConfigError(f"Could not parse FIELDS entry '{line}'") from None
        return fields

    def build_source(self, geometry: Optional[Geometry] = None,
                     options: Optional[SourceOptions] = None) -> Source:
        if options is None:
            options = SourceOptions(base_dir=self.base_dir)
        elif options.base_dir is None:
            options = replace(options, base_dir=self.base_dir)
        return build_source(self.source_entry(), geometry, options)
