"""Reflection-coefficient (Smith chart) transforms."""
from typing import List, Sequence
import numpy as np

from ..interfaces import SParameterPoint

# Returned for Γ = 1, where the normalised impedance is infinite
OPEN_CIRCUIT_SENTINEL = complex(9999, 9999)


def db_to_magnitude(db: float) -> float:
    return 10 ** (db / 20)


def polar_to_rectangular(magnitude: float, phase_deg: float) -> complex:
    phase = np.deg2rad(phase_deg)
    return complex(magnitude * np.cos(phase), magnitude * np.sin(phase))


def s_params_to_smith(points: Sequence[SParameterPoint]) -> List[complex]:
    """Map S11 points to reflection coefficients on the Γ plane."""
    return [
        polar_to_rectangular(db_to_magnitude(p.s11_mag_db), p.s11_phase_deg)
        for p in points
    ]


def gamma_to_impedance(gamma: complex) -> complex:
    """
    Normalised impedance z = (1 + Γ) / (1 - Γ).

    Returns OPEN_CIRCUIT_SENTINEL when |1 - Γ|² is exactly zero.
    """
    gr, gi = gamma.real, gamma.imag
    den = (1 - gr) ** 2 + gi ** 2
    if den == 0:
        return OPEN_CIRCUIT_SENTINEL

    return complex((1 - gr * gr - gi * gi) / den, 2 * gi / den)


def impedance_to_gamma(z: complex) -> complex:
    """Reflection coefficient Γ = (z - 1) / (z + 1) of a normalised impedance."""
    den = z + 1
    if den == 0:
        return complex(-1.0, 0.0)
    return (z - 1) / den


def denormalize(z: complex, z0: float = 50.0) -> complex:
    """Scale a normalised impedance to ohms."""
    return z * z0


def vswr_from_gamma(gamma: complex) -> float:
    """VSWR from a reflection coefficient, inf at total reflection."""
    mag = abs(gamma)
    if mag >= 1:
        return float("inf")
    return (1 + mag) / (1 - mag)
