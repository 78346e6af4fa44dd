"""
Particle sources: surface emission and volume emission.

Both source kinds draw their random numbers from one :class:`MCGenerator`
in a fixed order, so a seeded run is reproducible:

- surface: time, triangle, point on triangle, energy, azimuth, polar angle,
  polarisation
- volume: time, energy, direction, polarisation, position(s)
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .. import config
from .constants import STATUS_INITIAL_NOT_FOUND
from .data_classes import EmittingSurface
from .errors import SourceConfigError
from .geometry import direction_to_angles, rotate_to_normal
from .mc import MCGenerator
from .particles import Particle, particle_class


def phase_space_weight(total_energy: float, potential: float) -> float:
    """Acceptance probability sqrt(E_kin/H) of a start point with potential V.

    Returns 0 where the particle cannot exist (H <= 0 or V >= H).
    """
    if total_energy <= 0.0:
        return 0.0
    kinetic = total_energy - potential
    if kinetic <= 0.0:
        return 0.0
    return math.sqrt(kinetic / total_energy)


class ParticleSource:
    """Base class owning the particle type, activity window and id counter."""

    def __init__(self, particle_name: str, active_time: float):
        self._particle_type = particle_class(particle_name)
        self.particle_name = particle_name
        self.active_time = active_time
        self.particle_counter = 0

    def spawn(self, t: float, position, energy: float, phi: float, theta: float,
              polarisation: int, geometry=None, field=None) -> Particle:
        """Create a particle with the next id (ids start at 1)."""
        self.particle_counter += 1
        return self._particle_type(self.particle_counter, t, position, energy, phi, theta,
                                   polarisation, geometry=geometry, field=field)

    def create_particle(self, mc: MCGenerator, geometry=None, field=None) -> Particle:
        raise NotImplementedError


class SurfaceSource(ParticleSource):
    """Emits particles from triangles with Lambert's cosine law.

    Parameters
    ----------
    particle_name : str
        Particle type to create.
    active_time : float
        Spawn times are uniform in [0, active_time).
    surface : EmittingSurface
        Emitting triangles; a triangle is chosen with probability
        proportional to its area.
    e_normal : float
        Energy (eV) added to the velocity component normal to the surface,
        e.g. by an accelerating field. Ignored unless positive.
    """

    def __init__(self, particle_name: str, active_time: float, surface: EmittingSurface,
                 e_normal: float = 0.0, reflect_tolerance: float = config.REFLECT_TOLERANCE):
        super().__init__(particle_name, active_time)
        if surface.total_area <= 0.0:
            raise SourceConfigError(f"Surface source for {particle_name} has no emitting area")
        self.surface = surface
        self.e_normal = e_normal
        self.reflect_tolerance = reflect_tolerance

    def select_triangle(self, rand_area: float) -> int:
        """Index of the first triangle whose cumulative area reaches ``rand_area``."""
        index = int(np.searchsorted(self.surface.cumulative_area, rand_area, side="left"))
        return min(index, len(self.surface) - 1)

    def create_particle(self, mc: MCGenerator, geometry=None, field=None) -> Particle:
        t = mc.uniform_dist(0.0, self.active_time)
        index = self.select_triangle(mc.uniform_dist(0.0, self.surface.total_area))

        # random point on triangle (Numerical Recipes 3rd ed., p. 1114)
        a = mc.uniform_dist(0.0, 1.0)
        b = mc.uniform_dist(0.0, 1.0)
        if a + b > 1.0:
            a, b = 1.0 - a, 1.0 - b
        triangles = self.surface.triangles
        normal = triangles.normals[index]
        position = (triangles.vertices0[index] + a * triangles.edge1[index]
                    + b * triangles.edge2[index] + normal * self.reflect_tolerance)

        e_kin = mc.spectrum(self.particle_name)
        phi_v = mc.uniform_dist(0.0, 2.0 * math.pi)
        theta_v = mc.sin_cos_dist(0.0, 0.5 * math.pi)  # Lambert's law
        if self.e_normal > 0.0:
            v_normal = math.sqrt(e_kin * math.cos(theta_v) ** 2 + self.e_normal)
            v_tangential = math.sqrt(e_kin) * math.sin(theta_v)
            theta_v = math.atan2(v_tangential, v_normal)
            e_kin = v_normal * v_normal + v_tangential * v_tangential

        local = np.array([
            math.cos(phi_v) * math.sin(theta_v),
            math.sin(phi_v) * math.sin(theta_v),
            math.cos(theta_v),
        ])
        phi_v, theta_v = direction_to_angles(rotate_to_normal(local, normal))
        polarisation = mc.dice_polarisation(self.particle_name)

        return self.spawn(t, position, e_kin, phi_v, theta_v, polarisation, geometry, field)


class VolumeSource(ParticleSource):
    """Emits particles from random points of a volume sampler.

    With ``phase_space_weighting`` the drawn energy is taken as total energy
    H and start points are accepted with probability sqrt(E_kin/H), so the
    spatial density follows the phase space available at fixed H. If no
    point is accepted within ``max_trials`` the last probe particle is
    returned with status ``"initial_not_found"``.
    """

    def __init__(self, particle_name: str, active_time: float, sampler,
                 phase_space_weighting: bool = False,
                 max_trials: int = config.MAX_DICE_ROLL,
                 progress_interval: int = config.PROGRESS_INTERVAL):
        super().__init__(particle_name, active_time)
        if max_trials < 1:
            raise ValueError("max_trials must be at least 1")
        self.sampler = sampler
        self.phase_space_weighting = phase_space_weighting
        self.max_trials = max_trials
        self.progress_interval = progress_interval

    def create_particle(self, mc: MCGenerator, geometry=None, field=None) -> Particle:
        t = mc.uniform_dist(0.0, self.active_time)
        energy = mc.spectrum(self.particle_name)
        phi_v, theta_v = mc.angular_dist(self.particle_name)
        polarisation = mc.dice_polarisation(self.particle_name)
        position = self.sampler.random_point(mc)
        if not self.phase_space_weighting:
            return self.spawn(t, position, energy, phi_v, theta_v, polarisation, geometry, field)

        # the spectrum determines the total energy H
        h = energy
        print(f"Trying to find starting position for {self.particle_name} "
              f"with total energy = {h * 1e9:g} neV ", end="", flush=True)
        probe: Optional[Particle] = None
        for trial in range(self.max_trials):
            if trial % self.progress_interval == 0:
                print(".", end="", flush=True)
            probe = self.spawn(t, position, h, phi_v, theta_v, polarisation, geometry, field)
            self.particle_counter -= 1
            # the probe has E_kin = H, so its total energy is H + V
            potential = probe.h_start - h
            if mc.uniform_dist(0.0, 1.0) < phase_space_weight(h, potential):
                energy = h - potential
                if energy > 0.0:
                    print()
                    return self.spawn(t, position, energy, phi_v, theta_v, polarisation,
                                      geometry, field)
            if trial + 1 < self.max_trials:
                position = self.sampler.random_point(mc)

        probe.status = STATUS_INITIAL_NOT_FOUND
        print(f"\nABORT: Failed {self.max_trials} times to find a compatible spot!! "
              f"NO particle will be simulated!!\n")
        return probe
