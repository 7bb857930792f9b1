"""Tests for the linear array factor."""
import pytest
import numpy as np

from antenna_em.antenna.array_factor import (
    ArrayConfig, calculate_array_factor, steered_mainlobe_theta, calculate_mimo_gain,
)
from antenna_em.interfaces import BeamformingType


THETA = np.linspace(0, np.pi, 721)


class TestArrayFactor:
    """Tests for calculate_array_factor."""

    @pytest.mark.parametrize("steer", [-30.0, 0.0, 20.0, 45.0])
    def test_unity_at_steered_mainlobe(self, steer):
        """AF is 1 in the steered direction."""
        theta = steered_mainlobe_theta(steer)
        assert calculate_array_factor(theta, 8, 0.5, steer) == pytest.approx(1.0)

    @pytest.mark.parametrize("beamforming", list(BeamformingType))
    def test_bounded(self, beamforming):
        """AF never exceeds 1."""
        af = calculate_array_factor(THETA, 6, 0.5, 15.0, beamforming)
        assert np.all(af <= 1.0 + 1e-12)
        assert np.all(af >= 0.0)

    def test_single_element_degenerates(self):
        """N = 1 gives AF ≡ 1."""
        assert calculate_array_factor(0.3, 1, 0.5, 0.0) == 1.0
        np.testing.assert_array_equal(calculate_array_factor(THETA, 1, 0.5, 10.0), np.ones_like(THETA))

    def test_broadside_null(self):
        """4 elements at λ/2: first null where psi = 2π/4, theta = 60°."""
        af = calculate_array_factor(np.deg2rad(60.0), 4, 0.5, 0.0)
        assert af == pytest.approx(0.0, abs=1e-9)

    def test_beamforming_exponents(self):
        """ZF squares and MMSE raises to 1.5 the MRT factor."""
        theta = np.deg2rad(75.0)
        mrt = calculate_array_factor(theta, 4, 0.5, 0.0, BeamformingType.MRT)
        zf = calculate_array_factor(theta, 4, 0.5, 0.0, BeamformingType.ZF)
        mmse = calculate_array_factor(theta, 4, 0.5, 0.0, BeamformingType.MMSE)
        assert zf == pytest.approx(mrt ** 2)
        assert mmse == pytest.approx(mrt ** 1.5)
        assert zf < mmse < mrt

    def test_scalar_returns_float(self):
        """Scalar input gives a Python float."""
        assert isinstance(calculate_array_factor(1.0, 4, 0.5, 0.0), float)


class TestArrayConfig:
    """Tests for ArrayConfig."""

    def test_disabled_factor_is_one(self):
        """A disabled array contributes nothing."""
        array = ArrayConfig(n_elements=8, enabled=False)
        assert not array.is_active
        assert array.factor(0.2) == 1.0

    def test_factor_matches_function(self):
        """factor() delegates to calculate_array_factor."""
        array = ArrayConfig(n_elements=5, spacing_lambda=0.6, steering_angle_deg=10)
        assert array.factor(1.2) == calculate_array_factor(1.2, 5, 0.6, 10)


class TestMimoGain:
    """Tests for calculate_mimo_gain."""

    def test_gain(self):
        """4 transmit chains add 6 dB."""
        assert calculate_mimo_gain(4, 4) == pytest.approx(6.0206, abs=1e-4)

    def test_floor(self):
        """Zero or one transmitter gives 0 dB."""
        assert calculate_mimo_gain(0, 2) == 0.0
        assert calculate_mimo_gain(1, 2) == 0.0
