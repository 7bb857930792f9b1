"""Tests for reflection-coefficient transforms."""
import pytest
import numpy as np

from antenna_em.interfaces import SParameterPoint
from antenna_em.network.smith import (
    OPEN_CIRCUIT_SENTINEL, db_to_magnitude, denormalize, gamma_to_impedance,
    impedance_to_gamma, polar_to_rectangular, s_params_to_smith, vswr_from_gamma,
)


class TestSmith:
    """Tests for the Smith chart helpers."""

    def test_db_to_magnitude(self):
        """-20 dB is a tenth."""
        assert db_to_magnitude(-20.0) == pytest.approx(0.1)

    def test_polar(self):
        """90° is the positive imaginary axis."""
        g = polar_to_rectangular(0.5, 90.0)
        assert g.real == pytest.approx(0.0, abs=1e-12)
        assert g.imag == pytest.approx(0.5)

    def test_matched_load_at_center(self):
        """Γ = 0 maps to z = 1."""
        assert gamma_to_impedance(0j) == 1 + 0j

    def test_short_circuit(self):
        """Γ = -1 maps to z = 0."""
        assert gamma_to_impedance(-1 + 0j) == 0j

    def test_open_circuit_sentinel(self):
        """Γ = 1 returns the sentinel instead of dividing by zero."""
        assert gamma_to_impedance(1 + 0j) == OPEN_CIRCUIT_SENTINEL

    @pytest.mark.parametrize("gamma", [0.3 + 0.4j, -0.2 + 0.1j, 0.5j, -0.7 - 0.1j])
    def test_round_trip(self, gamma):
        """Γ → z → Γ recovers the input inside the unit disc."""
        assert impedance_to_gamma(gamma_to_impedance(gamma)) == pytest.approx(gamma)

    def test_impedance_to_gamma_pole(self):
        """z = -1 is mapped to Γ = -1."""
        assert impedance_to_gamma(-1 + 0j) == -1 + 0j

    def test_denormalize(self):
        """z is scaled by the reference impedance."""
        assert denormalize(1.46 + 0j) == pytest.approx(73.0)
        assert denormalize(1 + 1j, 75.0) == 75 + 75j

    def test_vswr(self):
        """VSWR from |Γ|, infinite at total reflection."""
        assert vswr_from_gamma(0.5 + 0j) == pytest.approx(3.0)
        assert vswr_from_gamma(1j) == float("inf")

    def test_sweep_stays_in_unit_disc(self, dipole_sweep):
        """Passive sweeps map inside |Γ| < 1."""
        gammas = np.array(s_params_to_smith(dipole_sweep))
        assert len(gammas) == len(dipole_sweep)
        assert np.all(np.abs(gammas) < 1.0)

    def test_point_conversion(self):
        """A single point converts with its dB magnitude and phase."""
        point = SParameterPoint(freq_ghz=1.0, s11_mag_db=-6.0206, s11_phase_deg=180.0, vswr=3.0)
        assert s_params_to_smith([point])[0] == pytest.approx(-0.5 + 0j, abs=1e-4)
