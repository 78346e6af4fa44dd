"""
Tests for the random sampling helpers of MCGenerator.
"""

import math

import numpy as np
import pytest
from scipy import stats

from particle_source import MCGenerator, ParticleSettings, SourceConfigError, UnknownParticleError


class TestDistributions:

    def test_uniform_bounds(self, mc):
        samples = np.array([mc.uniform_dist(-2.0, 3.0) for _ in range(2000)])
        assert samples.min() >= -2.0
        assert samples.max() < 3.0
        assert stats.kstest(samples, stats.uniform(loc=-2.0, scale=5.0).cdf).pvalue > 1e-3

    def test_linear_dist_density_proportional_to_x(self, mc):
        """r in [0, 2] has CDF r^2/4"""
        samples = np.array([mc.linear_dist(0.0, 2.0) for _ in range(4000)])
        assert stats.kstest(samples, lambda r: np.clip(r, 0, 2) ** 2 / 4.0).pvalue > 1e-3
        # clearly not uniform
        assert stats.kstest(samples, stats.uniform(loc=0.0, scale=2.0).cdf).pvalue < 1e-6

    def test_sin_cos_dist_is_lambert(self, mc):
        samples = np.array([mc.sin_cos_dist(0.0, 0.5 * math.pi) for _ in range(4000)])
        assert samples.min() >= 0.0
        assert samples.max() <= 0.5 * math.pi
        assert stats.kstest(samples, lambda x: np.sin(x) ** 2).pvalue > 1e-3

    def test_sin_dist_is_isotropic(self, mc):
        samples = np.array([mc.sin_dist(0.0, math.pi) for _ in range(4000)])
        assert stats.kstest(samples, lambda x: (1.0 - np.cos(x)) / 2.0).pvalue > 1e-3

    def test_sub_range(self, mc):
        samples = np.array([mc.sin_dist(0.2, 0.4) for _ in range(500)])
        assert samples.min() >= 0.2
        assert samples.max() <= 0.4


class TestSpectrum:

    def test_default_neutron_spectrum(self, mc):
        """Default neutron spectrum: density ∝ sqrt(E) up to 300 neV"""
        e_max = 300.0e-9
        samples = np.array([mc.spectrum("neutron") for _ in range(4000)])
        assert samples.min() >= 0.0
        assert samples.max() <= e_max
        assert stats.kstest(samples, lambda e: (np.clip(e, 0, e_max) / e_max) ** 1.5).pvalue > 1e-3

    @pytest.mark.parametrize("name,e_max", [("proton", 750.0), ("electron", 782.0e3)])
    def test_default_charged_spectra_are_uniform(self, mc, name, e_max):
        samples = np.array([mc.spectrum(name) for _ in range(2000)])
        assert samples.min() >= 0.0
        assert samples.max() <= e_max

    def test_linear_spectrum(self):
        mc = MCGenerator(seed=3, particle_settings={"proton": {"e_min": 1.0, "e_max": 2.0,
                                                               "spectrum": "linear"}})
        samples = np.array([mc.spectrum("proton") for _ in range(3000)])
        cdf = lambda e: (np.clip(e, 1.0, 2.0) ** 2 - 1.0) / 3.0  # noqa: E731
        assert stats.kstest(samples, cdf).pvalue > 1e-3

    def test_callable_spectrum(self):
        settings = {"electron": ParticleSettings(e_min=0.0, e_max=1.0, spectrum=lambda e: e * e)}
        mc = MCGenerator(seed=11, particle_settings=settings)
        samples = np.array([mc.spectrum("electron") for _ in range(3000)])
        assert stats.kstest(samples, lambda e: np.clip(e, 0, 1) ** 3).pvalue > 1e-3

    def test_unknown_shape(self):
        mc = MCGenerator(particle_settings={"neutron": {"e_min": 0.0, "e_max": 1.0,
                                                        "spectrum": "cubic"}})
        with pytest.raises(ValueError):
            mc.spectrum("neutron")

    def test_callable_without_weight(self):
        mc = MCGenerator(particle_settings={"neutron": ParticleSettings(0.0, 1.0, spectrum=lambda e: 0.0)})
        with pytest.raises(ValueError):
            mc.spectrum("neutron")

    def test_unknown_particle(self, mc):
        with pytest.raises(UnknownParticleError) as excinfo:
            mc.spectrum("muon")
        assert "muon" in str(excinfo.value)
        assert isinstance(excinfo.value, SourceConfigError)


class TestDirectionAndPolarisation:

    def test_angular_ranges(self):
        settings = {"neutron": ParticleSettings(0.0, 1.0, phi_min=0.0, phi_max=1.0,
                                                theta_min=0.5, theta_max=1.0)}
        mc = MCGenerator(seed=1, particle_settings=settings)
        for _ in range(500):
            phi, theta = mc.angular_dist("neutron")
            assert 0.0 <= phi < 1.0
            assert 0.5 <= theta <= 1.0

    def test_random_polarisation(self, mc):
        values = [mc.dice_polarisation("neutron") for _ in range(2000)]
        assert set(values) == {-1, 1}
        assert abs(sum(values)) < 200

    def test_fixed_polarisation_uses_no_draw(self):
        settings = {"neutron": ParticleSettings(0.0, 1.0, polarisation=-1)}
        fixed = MCGenerator(seed=8, particle_settings=settings)
        reference = MCGenerator(seed=8, particle_settings=settings)
        assert fixed.dice_polarisation("neutron") == -1
        assert fixed.uniform_dist(0.0, 1.0) == reference.uniform_dist(0.0, 1.0)


def test_same_seed_same_sequence():
    a = MCGenerator(seed=99)
    b = MCGenerator(seed=99)
    draws_a = [a.spectrum("proton"), a.angular_dist("electron"), a.dice_polarisation("neutron")]
    draws_b = [b.spectrum("proton"), b.angular_dist("electron"), b.dice_polarisation("neutron")]
    assert draws_a == draws_b
