"""
Random number generation for particle emission.

All draws of a run come from one :class:`MCGenerator` in a fixed order, so a
seeded generator reproduces every spawn state bit for bit.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple, Union

import numpy as np

from .data_classes import ParticleSettings
from .errors import UnknownParticleError

# grid resolution used to bound user-supplied spectrum weights
_SPECTRUM_GRID_POINTS = 1001


class MCGenerator:
    """Seeded random source with the distributions used by the particle sources.

    Parameters
    ----------
    seed : int, optional
        Seed for ``numpy.random.default_rng``.
    particle_settings : mapping, optional
        Per-particle :class:`ParticleSettings` (or keyword dictionaries for
        it). Defaults to ``config.DEFAULT_PARTICLE_SETTINGS``.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        particle_settings: Optional[Mapping[str, Union[ParticleSettings, dict]]] = None,
    ):
        if particle_settings is None:
            from .. import config
            particle_settings = config.DEFAULT_PARTICLE_SETTINGS
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.settings: Dict[str, ParticleSettings] = {
            name: s if isinstance(s, ParticleSettings) else ParticleSettings(**s)
            for name, s in particle_settings.items()
        }
        self._spectrum_max: Dict[str, float] = {}

    def _settings(self, particle_name: str) -> ParticleSettings:
        try:
            return self.settings[particle_name]
        except KeyError:
            raise UnknownParticleError(particle_name) from None

    def uniform_dist(self, lo: float, hi: float) -> float:
        """Uniform on [lo, hi)."""
        return lo + (hi - lo) * self.rng.random()

    def linear_dist(self, lo: float, hi: float) -> float:
        """Density proportional to x on [lo, hi]."""
        return math.sqrt(self.rng.random() * (hi * hi - lo * lo) + lo * lo)

    def sin_dist(self, lo: float, hi: float) -> float:
        """Density proportional to sin(x) on [lo, hi] ⊂ [0, π]."""
        cos_lo = math.cos(lo)
        return math.acos(cos_lo - self.rng.random() * (cos_lo - math.cos(hi)))

    def sin_cos_dist(self, lo: float, hi: float) -> float:
        """Density proportional to sin(x)·cos(x) on [lo, hi] ⊂ [0, π/2] (Lambert's law)."""
        s_lo = math.sin(lo) ** 2
        s_hi = math.sin(hi) ** 2
        return math.asin(math.sqrt(s_lo + self.rng.random() * (s_hi - s_lo)))

    def spectrum(self, particle_name: str) -> float:
        """Draw a kinetic energy (eV) from the particle's spectrum."""
        s = self._settings(particle_name)
        shape = s.spectrum
        if shape == "uniform":
            return self.uniform_dist(s.e_min, s.e_max)
        if shape == "linear":
            return self.linear_dist(s.e_min, s.e_max)
        if shape == "sqrt":
            # inverse CDF of density ∝ E^(1/2)
            lo, hi = s.e_min ** 1.5, s.e_max ** 1.5
            return (lo + self.rng.random() * (hi - lo)) ** (2.0 / 3.0)
        if callable(shape):
            return self._rejection_spectrum(particle_name, s)
        raise ValueError(f"Unknown spectrum shape '{shape}' for {particle_name}")

    def _rejection_spectrum(self, particle_name: str, s: ParticleSettings) -> float:
        weight_max = self._spectrum_max.get(particle_name)
        if weight_max is None:
            grid = np.linspace(s.e_min, s.e_max, _SPECTRUM_GRID_POINTS)
            weight_max = max(float(s.spectrum(e)) for e in grid)
            if weight_max <= 0.0:
                raise ValueError(f"Spectrum of {particle_name} is not positive anywhere")
            self._spectrum_max[particle_name] = weight_max
        while True:
            energy = self.uniform_dist(s.e_min, s.e_max)
            if self.uniform_dist(0.0, weight_max) <= s.spectrum(energy):
                return energy

    def angular_dist(self, particle_name: str) -> Tuple[float, float]:
        """Draw (phi, theta) isotropically within the particle's direction ranges."""
        s = self._settings(particle_name)
        phi = self.uniform_dist(s.phi_min, s.phi_max)
        theta = self.sin_dist(s.theta_min, s.theta_max)
        return phi, theta

    def dice_polarisation(self, particle_name: str) -> int:
        """Return the configured polarisation, or ±1 with equal probability."""
        s = self._settings(particle_name)
        if s.polarisation is not None:
            return int(s.polarisation)
        return 1 if self.rng.random() < 0.5 else -1
