"""
Particle types created by the sources.
"""

from __future__ import annotations

import math
from typing import Dict, Type

import numpy as np

from .constants import (
    ELECTRON_MAGNETIC_MOMENT,
    ELECTRON_MASS_KG,
    ELEMENTARY_CHARGE,
    GRAVITY_ACCELERATION,
    NAME_ELECTRON,
    NAME_NEUTRON,
    NAME_PROTON,
    NEUTRON_MAGNETIC_MOMENT,
    NEUTRON_MASS_KG,
    PROTON_MAGNETIC_MOMENT,
    PROTON_MASS_KG,
    STATUS_INITIAL,
)
from .data_classes import SpawnRecord
from .errors import UnknownParticleError


class Particle:
    """A particle at its spawn point.

    The total energy ``h_start`` (kinetic + potential, eV) is evaluated in
    the given field when the particle is created. ``status`` starts as
    ``"initial"``; sources set it to ``"initial_not_found"`` when no valid
    start point could be found, and such particles must not be transported.
    """

    name = "particle"
    mass_kg = 0.0
    charge = 0.0  # in units of e
    magnetic_moment = 0.0  # J/T

    def __init__(
        self,
        particle_id: int,
        t: float,
        position,
        energy: float,
        phi: float,
        theta: float,
        polarisation: int,
        geometry=None,
        field=None,
    ):
        self.id = particle_id
        self.status = STATUS_INITIAL
        self.t_start = float(t)
        self.position = np.asarray(position, dtype=float)
        self.e_start = float(energy)
        self.phi_start = float(phi)
        self.theta_start = float(theta)
        self.polarisation = int(polarisation)
        self.geometry = geometry
        self.field = field
        self.h_start = self.e_start + self.potential_energy(self.position, self.t_start, field)

    def potential_energy(self, position: np.ndarray, t: float, field=None) -> float:
        """Potential energy (eV) at ``position``: gravity, electric and magnetic terms."""
        if field is None:
            return 0.0
        energy = 0.0
        if field.gravity:
            energy += self.mass_kg * GRAVITY_ACCELERATION * position[2] / ELEMENTARY_CHARGE
        if self.charge != 0.0:
            energy += self.charge * field.e_potential(position, t)
        if self.magnetic_moment != 0.0 and field.magnetic:
            b_abs = float(np.linalg.norm(field.b_field(position, t)))
            energy -= self.polarisation * self.magnetic_moment * b_abs / ELEMENTARY_CHARGE
        return energy

    @property
    def direction(self) -> np.ndarray:
        sin_theta = math.sin(self.theta_start)
        return np.array([
            math.cos(self.phi_start) * sin_theta,
            math.sin(self.phi_start) * sin_theta,
            math.cos(self.theta_start),
        ])

    def spawn_record(self) -> SpawnRecord:
        return SpawnRecord(
            id=self.id,
            status=self.status,
            spawn_time=self.t_start,
            position=tuple(float(c) for c in self.position),
            kinetic_energy=self.e_start,
            phi=self.phi_start,
            theta=self.theta_start,
            polarisation=self.polarisation,
            h_start=self.h_start,
        )

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self.id}, status={self.status!r}, "
                f"t={self.t_start:g}, position={self.position.tolist()}, E={self.e_start:g})")


class Neutron(Particle):
    name = NAME_NEUTRON
    mass_kg = NEUTRON_MASS_KG
    magnetic_moment = NEUTRON_MAGNETIC_MOMENT


class Proton(Particle):
    name = NAME_PROTON
    mass_kg = PROTON_MASS_KG
    charge = 1.0
    magnetic_moment = PROTON_MAGNETIC_MOMENT


class Electron(Particle):
    name = NAME_ELECTRON
    mass_kg = ELECTRON_MASS_KG
    charge = -1.0
    magnetic_moment = ELECTRON_MAGNETIC_MOMENT


PARTICLE_TYPES: Dict[str, Type[Particle]] = {
    NAME_NEUTRON: Neutron,
    NAME_PROTON: Proton,
    NAME_ELECTRON: Electron,
}


def particle_class(name: str) -> Type[Particle]:
    """Look up the particle type registered under ``name``."""
    try:
        return PARTICLE_TYPES[name]
    except KeyError:
        raise UnknownParticleError(name) from None


def make_particle(name: str, particle_id: int, *args, **kwargs) -> Particle:
    """Instantiate the particle type ``name``; see :class:`Particle` for the arguments."""
    return particle_class(name)(particle_id, *args, **kwargs)
