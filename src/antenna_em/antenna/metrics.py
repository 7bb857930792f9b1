"""Closed-form antenna figures of merit derived from gain."""
from dataclasses import dataclass
import numpy as np

# Speed of light used for the aperture estimate
C = 3e8

# Kraus approximation D ≈ 41253 / (θ_hp·φ_hp) with deg² per steradian sphere
KRAUS_CONSTANT = 41253.0

# Beamwidth reported for low-directivity (dipole-like) antennas
DIPOLE_HPBW_DEG = 78.0


@dataclass
class AntennaMetrics:
    """Figures of merit for one antenna.

    Attributes:
        gain_dbi: Realised gain
        efficiency: Radiation efficiency used (clamped to 0.001-1)
        directivity_dbi: Directivity implied by gain and efficiency
        hpbw_deg: Half-power beamwidth, circular-beam estimate
        front_to_back_db: Front-to-back ratio estimate
        effective_area_m2: Effective aperture
    """
    gain_dbi: float
    efficiency: float
    directivity_dbi: float
    hpbw_deg: float
    front_to_back_db: float
    effective_area_m2: float


def calculate_antenna_metrics(
    gain_dbi: float,
    efficiency: float,
    freq_ghz: float
) -> AntennaMetrics:
    """
    Estimate directivity, beamwidth and aperture from gain.

    Args:
        gain_dbi: Antenna gain
        efficiency: Radiation efficiency (0-1)
        freq_ghz: Operating frequency

    Returns:
        AntennaMetrics
    """
    eff = max(0.001, min(1.0, efficiency))
    directivity_dbi = gain_dbi - 10 * np.log10(eff)

    if directivity_dbi > 2:
        d_linear = 10 ** (directivity_dbi / 10)
        hpbw = np.sqrt(KRAUS_CONSTANT / d_linear)
    else:
        hpbw = DIPOLE_HPBW_DEG

    if freq_ghz > 0:
        wavelength = C / (freq_ghz * 1e9)
        effective_area = wavelength ** 2 / (4 * np.pi) * 10 ** (gain_dbi / 10)
    else:
        effective_area = 0.0

    return AntennaMetrics(
        gain_dbi=gain_dbi,
        efficiency=eff,
        directivity_dbi=float(directivity_dbi),
        hpbw_deg=float(hpbw),
        front_to_back_db=max(0.0, gain_dbi + 15),
        effective_area_m2=float(effective_area)
    )
