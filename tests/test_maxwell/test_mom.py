"""Tests for the thin-wire method of moments."""
import pytest
import numpy as np

from antenna_em.maxwell import mom
from antenna_em.maxwell.mom import (
    build_excitation_vector, build_impedance_matrix, forced_odd,
    resonance_heuristic_impedance, solve_mom,
)


class TestAssembly:
    """Tests for matrix and source construction."""

    @pytest.mark.parametrize("n,expected", [(20, 21), (21, 21), (0, 1), (1, 1), (2, 3)])
    def test_forced_odd(self, n, expected):
        """Segment counts are odd so a center segment exists."""
        assert forced_odd(n) == expected

    def test_excitation(self):
        """Exactly one unit source on the center segment."""
        v = build_excitation_vector(21)
        assert np.count_nonzero(v) == 1
        assert v[10] == 1.0

    def test_matrix(self):
        """Z is symmetric with the radius on the diagonal."""
        wavelength = 0.125
        k = 2 * np.pi / wavelength
        z = build_impedance_matrix(0.5 * wavelength, 0.005 * wavelength, k, 11)
        assert z.shape == (11, 11)
        np.testing.assert_allclose(z, z.T)
        radius = 0.005 * wavelength
        assert z[0, 0] == pytest.approx(np.exp(-1j * k * radius) / radius)
        dz = 0.5 * wavelength / 11
        assert z[0, 2] == pytest.approx(np.exp(-1j * k * 2 * dz) / (2 * dz))


class TestHeuristic:
    """Tests for the resonance impedance estimate."""

    def test_resonant(self):
        """Half-wave wire is 73 Ω."""
        assert resonance_heuristic_impedance(0.5, 1.0) == 73 + 0j

    def test_long_is_inductive(self):
        """Longer than λ/2 adds +j40."""
        assert resonance_heuristic_impedance(0.7, 1.0) == 73 + 40j

    def test_short_is_capacitive(self):
        """Shorter than λ/2 adds -j40."""
        assert resonance_heuristic_impedance(0.3, 1.0) == 73 - 40j


class TestSolveMoM:
    """Tests for solve_mom."""

    def test_dipole(self, dipole_geometry):
        """Half-wave dipole solves to a finite current distribution."""
        result = solve_mom(dipole_geometry, 2.4, 20)
        assert result.converged
        assert result.iterations_taken == 1
        assert result.max_field_strength == 1.0
        assert len(result.current_distribution) == 21
        np.testing.assert_allclose(result.current_distribution, np.abs(result.currents))
        assert result.input_impedance == pytest.approx(1 / result.currents[10])

    def test_heuristic_model(self, dipole_geometry, long_dipole_geometry):
        """The heuristic model reports the resonance estimate."""
        assert solve_mom(dipole_geometry, 2.4, 21, "heuristic").input_impedance == 73 + 0j
        assert solve_mom(long_dipole_geometry, 2.4, 21, "heuristic").input_impedance == 73 + 40j

    def test_empty_geometry_defaults(self, dipole_geometry):
        """Missing geometry is a 0.5λ wire of radius 0.005λ."""
        default = solve_mom([], 2.4, 21)
        explicit = solve_mom(dipole_geometry, 2.4, 21)
        np.testing.assert_allclose(default.currents, explicit.currents)

    def test_frequency_scaling(self, dipole_geometry):
        """Electrical size fixes the solution up to a length scale."""
        low = solve_mom(dipole_geometry, 1.0, 21)
        high = solve_mom(dipole_geometry, 2.0, 21)
        np.testing.assert_allclose(high.currents, 0.5 * low.currents, rtol=1e-9)

    def test_bad_frequency(self, dipole_geometry):
        """Non-positive frequency is reported, not raised."""
        result = solve_mom(dipole_geometry, 0.0, 21)
        assert not result.converged
        assert result.current_distribution is None

    def test_ill_conditioned(self, dipole_geometry, monkeypatch):
        """Condition numbers above 1e12 fail the solve."""
        monkeypatch.setattr(mom.np.linalg, "cond", lambda z: 1e13)
        result = solve_mom(dipole_geometry, 2.4, 21)
        assert not result.converged
        assert "ill-conditioned" in result.message
