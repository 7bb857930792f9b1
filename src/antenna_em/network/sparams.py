"""S11 sweep generation from the resonance model."""
from typing import Dict, List
import numpy as np

from ..interfaces import AntennaType, SParameterPoint
from .impedance import calculate_impedance, detuning

Q_FACTORS: Dict[AntennaType, float] = {
    AntennaType.YAGI: 30.0,        # narrow band
    AntennaType.MICROSTRIP: 25.0,
    AntennaType.DIPOLE: 10.0,
    AntennaType.PARABOLIC: 5.0,
    AntennaType.HORN: 2.0,         # wide band
}
DEFAULT_Q = 10.0


def q_factor(antenna_type: AntennaType) -> float:
    """Quality factor used for an antenna family."""
    return Q_FACTORS.get(AntennaType(antenna_type), DEFAULT_Q)


def generate_s_parameters(
    start_ghz: float,
    end_ghz: float,
    center_ghz: float,
    steps: int,
    antenna_type: AntennaType
) -> List[SParameterPoint]:
    """
    Sweep S11 over a frequency range.

    Points are taken at start + i·(end - start)/steps for i = 0..steps
    inclusive; non-positive frequencies are skipped. With steps <= 0 the
    sweep collapses to the single start frequency.

    Args:
        start_ghz: Sweep start
        end_ghz: Sweep end
        center_ghz: Resonant frequency
        steps: Number of intervals
        antenna_type: Antenna family selecting Q

    Returns:
        List of SParameterPoint in sweep order
    """
    q = q_factor(antenna_type)
    if steps <= 0:
        steps, step_size = 0, 0.0
    else:
        step_size = (end_ghz - start_ghz) / steps

    points = []
    for i in range(steps + 1):
        f = start_ghz + i * step_size
        if f <= 0:
            continue

        impedance = calculate_impedance(f, center_ghz, q)
        phase = np.degrees(np.arctan(-detuning(f, center_ghz, q)))

        points.append(SParameterPoint(
            freq_ghz=round(f, 3),
            s11_mag_db=impedance.return_loss_db,
            s11_phase_deg=float(phase),
            vswr=impedance.vswr
        ))

    return points


def nearest_point(points: List[SParameterPoint], freq_ghz: float) -> SParameterPoint:
    """Sweep point closest to a frequency (readout at the operating point)."""
    if not points:
        raise ValueError("Empty S-parameter sweep")
    return min(points, key=lambda p: abs(p.freq_ghz - freq_ghz))
