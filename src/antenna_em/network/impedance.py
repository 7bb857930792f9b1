"""Series-RLC resonance model for antenna feed mismatch."""
from dataclasses import dataclass
import numpy as np

# Reflection magnitude is kept away from a perfect match and a perfect mismatch
GAMMA_MIN = 0.001
GAMMA_MAX = 0.999


@dataclass
class ImpedanceResult:
    """Mismatch figures at one frequency.

    Attributes:
        gamma: Reflection coefficient magnitude, clamped to [0.001, 0.999]
        vswr: Voltage standing wave ratio (1 + |Γ|) / (1 - |Γ|)
        return_loss_db: 20·log10|Γ|, always negative
    """
    gamma: float
    vswr: float
    return_loss_db: float


def detuning(freq: float, center_freq: float, q: float) -> float:
    """Normalised detuning Q·(f/f0 - f0/f) of a series RLC resonator."""
    return q * (freq / center_freq - center_freq / freq)


def calculate_impedance(freq: float, center_freq: float, q: float) -> ImpedanceResult:
    """
    Mismatch of a resonant antenna away from its centre frequency.

    |Γ| = |δ| / √(1 + δ²), zero at resonance and approaching one far from it.

    Args:
        freq: Frequency (same unit as center_freq, > 0)
        center_freq: Resonant frequency (> 0)
        q: Quality factor

    Returns:
        ImpedanceResult
    """
    delta = detuning(freq, center_freq, q)
    gamma = abs(delta) / np.sqrt(1 + delta * delta)
    gamma = float(max(GAMMA_MIN, min(GAMMA_MAX, gamma)))

    return ImpedanceResult(
        gamma=gamma,
        vswr=(1 + gamma) / (1 - gamma),
        return_loss_db=float(20 * np.log10(gamma))
    )
