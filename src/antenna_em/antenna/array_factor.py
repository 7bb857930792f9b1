"""Uniform linear array factor with beamforming weighting."""
from dataclasses import dataclass
from typing import Union
import numpy as np

from ..interfaces import BeamformingType

# Below this |sin(psi/2)| the Dirichlet kernel is replaced by its limit
DIRICHLET_EPS = 1e-6


def calculate_array_factor(
    theta: Union[float, np.ndarray],
    n_elements: int,
    spacing_lambda: float,
    steering_angle_deg: float,
    beamforming: BeamformingType = BeamformingType.MRT
) -> Union[float, np.ndarray]:
    """
    Normalised array factor of an N-element uniform linear array.

    The array axis is z, so theta = 90° is broadside. A steering angle of 0°
    points the beam broadside.

    Args:
        theta: Observation angle(s) in radians
        n_elements: Number of elements N
        spacing_lambda: Element spacing in wavelengths
        steering_angle_deg: Beam steering angle in degrees
        beamforming: Weighting applied to the normalised factor

    Returns:
        Array factor in [0, 1], same shape as theta
    """
    if n_elements <= 1:
        if np.ndim(theta) == 0:
            return 1.0
        return np.ones_like(np.asarray(theta, dtype=np.float64))

    kd = 2 * np.pi * spacing_lambda
    steer_rad = np.deg2rad(90.0 - steering_angle_deg)
    beta = -kd * np.cos(steer_rad)
    psi = kd * np.cos(theta) + beta

    sin_half = np.sin(psi / 2)
    small = np.abs(sin_half) < DIRICHLET_EPS
    safe = np.where(small, 1.0, sin_half)
    af = np.where(small, 1.0, np.abs(np.sin(n_elements * psi / 2) / (n_elements * safe)))

    beamforming = BeamformingType(beamforming)
    if beamforming is BeamformingType.ZF:
        af = af ** 2
    elif beamforming is BeamformingType.MMSE:
        af = af ** 1.5

    if np.ndim(af) == 0:
        return float(af)
    return af


@dataclass(frozen=True)
class ArrayConfig:
    """Uniform linear array settings.

    Attributes:
        n_elements: Number of elements N
        spacing_lambda: Element spacing in wavelengths
        steering_angle_deg: Beam steering angle (0 = broadside)
        beamforming: Beamforming weighting
        enabled: Array switched on
    """
    n_elements: int = 4
    spacing_lambda: float = 0.5
    steering_angle_deg: float = 0.0
    beamforming: BeamformingType = BeamformingType.MRT
    enabled: bool = True

    @property
    def is_active(self) -> bool:
        return self.enabled and self.n_elements > 1

    def factor(self, theta: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Array factor at theta (radians), 1 when the array is inactive."""
        n = self.n_elements if self.enabled else 1
        return calculate_array_factor(
            theta, n, self.spacing_lambda, self.steering_angle_deg, self.beamforming
        )


def steered_mainlobe_theta(steering_angle_deg: float) -> float:
    """Polar angle (radians) of the steered main lobe."""
    return float(np.deg2rad(90.0 - steering_angle_deg))


def calculate_mimo_gain(tx: int, rx: int) -> float:
    """Beamforming gain offset in dB, 10·log10(N_tx)."""
    return float(10 * np.log10(max(1, tx)))
