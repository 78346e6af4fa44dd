"""
Static field contributions used to evaluate a particle's potential energy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np


@dataclass
class UniformMagneticField:
    """Homogeneous magnetic field (T)."""

    b: Sequence[float]

    def b_field(self, position: np.ndarray, t: float) -> np.ndarray:
        return np.asarray(self.b, dtype=float)


@dataclass
class UniformElectricField:
    """Homogeneous electric field (V/m), zero potential at the origin."""

    e: Sequence[float]

    def e_potential(self, position: np.ndarray, t: float) -> float:
        return -float(np.dot(self.e, position))


@dataclass
class FieldManager:
    """Sum of all fields acting on particles, plus the gravity switch.

    Magnetic contributions must provide ``b_field(position, t)``, electric
    ones ``e_potential(position, t)``.
    """

    gravity: bool = True
    magnetic: List[object] = field(default_factory=list)
    electric: List[object] = field(default_factory=list)

    def b_field(self, position: np.ndarray, t: float) -> np.ndarray:
        total = np.zeros(3)
        for contribution in self.magnetic:
            total += contribution.b_field(position, t)
        return total

    def e_potential(self, position: np.ndarray, t: float) -> float:
        return float(sum(c.e_potential(position, t) for c in self.electric))
