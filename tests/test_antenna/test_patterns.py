"""Tests for far-field presets and sampling."""
import pytest
import numpy as np

from antenna_em.antenna.array_factor import ArrayConfig
from antenna_em.antenna.patterns import (
    ANTENNA_PRESETS, FALLBACK_MAGNITUDE, get_pattern_function, sample_far_field,
    extract_principal_cuts, extract_beamwidths,
)
from antenna_em.interfaces import AntennaType


class TestPresets:
    """Tests for built-in pattern presets."""

    def test_every_family_has_preset(self):
        """All antenna types have a preset."""
        assert set(ANTENNA_PRESETS) == set(AntennaType)

    @pytest.mark.parametrize("antenna_type,gain", [
        (AntennaType.DIPOLE, 2.15), (AntennaType.YAGI, 10), (AntennaType.HORN, 15),
        (AntennaType.PARABOLIC, 25), (AntennaType.MICROSTRIP, 5), (AntennaType.CUSTOM, 1),
    ])
    def test_default_gains(self, antenna_type, gain):
        """Default gains match the catalogue."""
        assert ANTENNA_PRESETS[antenna_type].default_gain_dbi == gain

    def test_dipole_values(self, dipole_pattern):
        """Dipole is |sin θ|: null on axis, peak broadside."""
        assert dipole_pattern(0.0, 0.0) == pytest.approx(0.0, abs=1e-12)
        assert dipole_pattern(np.pi / 2, 0.0) == pytest.approx(1.0)

    def test_parabolic_cutoff(self):
        """Parabolic pattern is zero beyond theta = 1.5."""
        f = get_pattern_function(AntennaType.PARABOLIC)
        assert f(0.0) == pytest.approx(1.0)
        assert f(1.6) == 0.0

    def test_horn_gaussian(self):
        """Horn is exp(-2θ²)."""
        f = get_pattern_function(AntennaType.HORN)
        assert f(0.5) == pytest.approx(np.exp(-0.5))


class TestPatternFunction:
    """Tests for get_pattern_function behaviour."""

    def test_non_negative(self):
        """Magnitudes are returned even where the formula is negative."""
        f = get_pattern_function(AntennaType.MICROSTRIP)
        assert f(np.pi) == pytest.approx(1.0)

    def test_custom_formula_used(self):
        """Custom type evaluates the supplied formula."""
        f = get_pattern_function(AntennaType.CUSTOM, "cos(phi)^2")
        assert f(0.3, 0.0) == pytest.approx(1.0)
        assert f(0.3, np.pi / 2) == pytest.approx(0.0, abs=1e-12)

    def test_custom_formula_ignored_for_presets(self):
        """Preset families ignore the custom formula."""
        f = get_pattern_function(AntennaType.DIPOLE, "42")
        assert f(np.pi / 2) == pytest.approx(1.0)

    def test_empty_custom_is_isotropic(self):
        """An empty custom formula means isotropic."""
        assert get_pattern_function(AntennaType.CUSTOM, "")(1.0, 2.0) == 1.0

    def test_invalid_formula_fallback(self, caplog):
        """Invalid formulas fall back to 0.1 and log a warning."""
        f = get_pattern_function(AntennaType.CUSTOM, "sin(theta")
        assert f(0.2, 0.4) == FALLBACK_MAGNITUDE
        grid = f(np.zeros((2, 3)), np.zeros((2, 3)))
        assert grid.shape == (2, 3)
        assert np.all(grid == FALLBACK_MAGNITUDE)
        assert "Invalid pattern formula" in caplog.text

    def test_deeply_nested_formula_fallback(self, caplog):
        """Formulas nested past the token limit fall back instead of raising."""
        f = get_pattern_function(AntennaType.CUSTOM, "-" * 3000 + "theta")
        assert f(0.2, 0.4) == FALLBACK_MAGNITUDE
        assert "Invalid pattern formula" in caplog.text

    def test_non_finite_becomes_zero(self):
        """Infinities and NaNs evaluate to 0."""
        f = get_pattern_function(AntennaType.CUSTOM, "1/theta")
        assert f(0.0) == 0.0
        out = f(np.array([0.0, 0.5]))
        np.testing.assert_allclose(out, [0.0, 2.0])


class TestSampling:
    """Tests for sample_far_field."""

    def test_grid_shape_and_axes(self, dipole_pattern):
        """Pattern is sampled on resolution² points over the sphere."""
        pattern = sample_far_field(dipole_pattern, resolution=19, frequency_ghz=2.4)
        assert pattern.magnitude.shape == (19, 19)
        assert pattern.theta_deg[0] == 0 and pattern.theta_deg[-1] == pytest.approx(180)
        assert pattern.phi_deg[-1] == pytest.approx(360)
        assert pattern.frequency_ghz == 2.4

    def test_writes_into_buffer(self, dipole_pattern):
        """A caller buffer is filled and reused."""
        buf = np.full((10, 10), -1.0)
        pattern = sample_far_field(dipole_pattern, resolution=10, out=buf)
        assert pattern.magnitude is buf
        assert np.all(buf >= 0)

    def test_array_factor_applied(self, isotropic_pattern):
        """Active arrays shape an isotropic element into a beam."""
        array = ArrayConfig(n_elements=8, spacing_lambda=0.5)
        pattern = sample_far_field(isotropic_pattern, resolution=91, array=array)
        broadside = np.argmin(np.abs(pattern.theta_deg - 90))
        assert pattern.magnitude[broadside, 0] == pytest.approx(1.0)
        assert pattern.magnitude[0, 0] < 0.5

    def test_inactive_array_ignored(self, isotropic_pattern):
        """Disabled arrays leave the element pattern unchanged."""
        array = ArrayConfig(n_elements=8, enabled=False)
        pattern = sample_far_field(isotropic_pattern, resolution=11, array=array)
        assert np.all(pattern.magnitude == 1.0)


class TestCuts:
    """Tests for principal cuts and beamwidths."""

    def test_dipole_cuts(self, sampled_dipole):
        """Dipole peak is broadside at 0 dB."""
        cuts = extract_principal_cuts(sampled_dipole)
        assert cuts['peak_theta_deg'] == pytest.approx(90.0)
        assert cuts['peak_db'] == pytest.approx(0.0, abs=1e-9)
        assert len(cuts['e_plane']['magnitude_db']) == len(sampled_dipole.theta_deg)

    def test_dipole_beamwidth(self, sampled_dipole):
        """|sin θ| is above -3 dB from 45° to 135°."""
        bw = extract_beamwidths(sampled_dipole)
        assert bw['vertical_deg'] == pytest.approx(90.0, abs=2.5)
        assert bw['horizontal_deg'] == pytest.approx(360.0)
