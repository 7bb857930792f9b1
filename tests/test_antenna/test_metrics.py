"""Tests for closed-form antenna metrics and near field."""
import pytest
import numpy as np

from antenna_em.antenna.metrics import calculate_antenna_metrics
from antenna_em.antenna.near_field import (
    FieldQuantity, FieldRegion, dipole_near_field, field_region,
)


class TestAntennaMetrics:
    """Tests for calculate_antenna_metrics."""

    def test_full_efficiency(self):
        """At 100% efficiency directivity equals gain."""
        m = calculate_antenna_metrics(15.0, 1.0, 10.0)
        assert m.directivity_dbi == pytest.approx(15.0)

    def test_half_efficiency(self):
        """50% efficiency adds ~3 dB of directivity."""
        m = calculate_antenna_metrics(10.0, 0.5, 2.4)
        assert m.directivity_dbi == pytest.approx(13.01, abs=0.01)

    def test_efficiency_clamped(self):
        """Efficiency is clamped to [0.001, 1]."""
        assert calculate_antenna_metrics(0.0, 0.0, 1.0).efficiency == 0.001
        assert calculate_antenna_metrics(0.0, 2.0, 1.0).efficiency == 1.0

    def test_kraus_beamwidth(self):
        """20 dBi: HPBW = sqrt(41253/100) ≈ 20.3°."""
        m = calculate_antenna_metrics(20.0, 1.0, 10.0)
        assert m.hpbw_deg == pytest.approx(20.31, abs=0.01)

    def test_low_directivity_beamwidth(self):
        """Dipole-like antennas report 78°."""
        assert calculate_antenna_metrics(2.0, 1.0, 2.4).hpbw_deg == 78.0

    def test_front_to_back(self):
        """F/B estimate is G + 15, never negative."""
        assert calculate_antenna_metrics(10.0, 1.0, 2.4).front_to_back_db == 25.0
        assert calculate_antenna_metrics(-20.0, 1.0, 2.4).front_to_back_db == 0.0

    def test_effective_area_isotropic(self):
        """0 dBi aperture is λ²/4π."""
        m = calculate_antenna_metrics(0.0, 1.0, 3.0)
        assert m.effective_area_m2 == pytest.approx(0.1 ** 2 / (4 * np.pi))


class TestNearField:
    """Tests for the Hertzian dipole near field."""

    def test_h_null_on_axis(self):
        """H vanishes along the dipole axis."""
        assert dipole_near_field(0.5, 0.0, FieldQuantity.H) == pytest.approx(0.0, abs=1e-12)

    def test_e_radial_on_axis(self):
        """On axis E is purely radial: 2(t1 + t2)."""
        kr = 2 * np.pi * 0.5
        expected = 2 * (1 / (kr ** 3 + 0.001) + 1 / (kr ** 2 + 0.001))
        assert dipole_near_field(0.5, 0.0, FieldQuantity.E) == pytest.approx(expected)

    def test_decays_with_distance(self):
        """All quantities fall off with range."""
        r = np.array([0.1, 0.5, 2.0, 10.0])
        for field in FieldQuantity:
            values = dipole_near_field(r, np.pi / 2, field)
            assert np.all(np.diff(values) < 0)

    def test_poynting_is_product(self):
        """Poynting magnitude is |E|·|H|."""
        e = dipole_near_field(0.3, 1.0, "E")
        h = dipole_near_field(0.3, 1.0, "H")
        assert dipole_near_field(0.3, 1.0, "Poynting") == pytest.approx(e * h)

    def test_finite_at_origin(self):
        """Regularisation keeps r = 0 finite."""
        assert np.isfinite(dipole_near_field(0.0, np.pi / 2))

    def test_regions(self):
        """Region boundaries at kr = 1 and one wavelength."""
        assert field_region(0.1) is FieldRegion.REACTIVE
        assert field_region(0.5) is FieldRegion.INTERMEDIATE
        assert field_region(3.0) is FieldRegion.RADIATING
