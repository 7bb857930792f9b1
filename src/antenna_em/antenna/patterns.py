"""Far-field pattern presets, evaluation and grid sampling."""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union
import logging
import numpy as np

from ..interfaces import AntennaPattern, AntennaType
from .array_factor import ArrayConfig
from .formula import FormulaError, compile_formula

logger = logging.getLogger(__name__)

PatternFunction = Callable[..., Union[float, np.ndarray]]

# Magnitude returned everywhere when a formula cannot be compiled
FALLBACK_MAGNITUDE = 0.1


@dataclass(frozen=True)
class PatternPreset:
    """Built-in radiation pattern for an antenna family."""
    name: AntennaType
    formula: str
    description: str
    default_gain_dbi: float


ANTENNA_PRESETS: Dict[AntennaType, PatternPreset] = {
    AntennaType.DIPOLE: PatternPreset(
        AntennaType.DIPOLE, "abs(sin(theta))",
        "Half-wave dipole. Omnidirectional in the H-plane.", 2.15
    ),
    AntennaType.YAGI: PatternPreset(
        AntennaType.YAGI, "abs(sin(theta)*cos(3*theta))",
        "Directive Yagi-Uda array with visible side lobes.", 10.0
    ),
    AntennaType.HORN: PatternPreset(
        AntennaType.HORN, "exp(-2*theta^2)",
        "Horn antenna. Narrow Gaussian-like beam, high gain.", 15.0
    ),
    AntennaType.PARABOLIC: PatternPreset(
        AntennaType.PARABOLIC, "cos(theta)^8 * (theta < 1.5)",
        "Parabolic dish. Pencil beam.", 25.0
    ),
    AntennaType.MICROSTRIP: PatternPreset(
        AntennaType.MICROSTRIP, "cos(theta)",
        "Microstrip patch. Broad hemispherical beam.", 5.0
    ),
    AntennaType.CUSTOM: PatternPreset(
        AntennaType.CUSTOM, "1",
        "User formula in theta and phi.", 1.0
    ),
}


def _constant(value: float) -> PatternFunction:
    def pattern(theta, phi=0.0):
        shape = np.broadcast(theta, phi).shape
        if not shape:
            return value
        return np.full(shape, value)
    return pattern


def get_pattern_function(
    antenna_type: AntennaType,
    custom_formula: str = "1"
) -> PatternFunction:
    """
    Build the (theta, phi) -> magnitude function for an antenna.

    Custom formulas that fail to compile are logged and replaced by a
    constant 0.1 pattern, so the returned callable never raises.

    Args:
        antenna_type: Antenna family
        custom_formula: Formula used when antenna_type is CUSTOM

    Returns:
        Callable accepting scalars or arrays in radians, returning |F| ≥ 0
    """
    antenna_type = AntennaType(antenna_type)
    if antenna_type is AntennaType.CUSTOM:
        source = custom_formula or "1"
    else:
        source = ANTENNA_PRESETS[antenna_type].formula

    try:
        compiled = compile_formula(source)
    except FormulaError as e:
        logger.warning("Invalid pattern formula %r: %s", source, e)
        return _constant(FALLBACK_MAGNITUDE)

    def pattern(theta, phi=0.0):
        value = compiled(theta, phi)
        if np.ndim(value) == 0:
            return abs(value) if np.isfinite(value) else 0.0
        return np.abs(np.nan_to_num(value, nan=0.0, posinf=0.0, neginf=0.0))

    pattern.source = source
    return pattern


def sample_far_field(
    pattern: PatternFunction,
    resolution: int = 64,
    array: Optional[ArrayConfig] = None,
    out: Optional[np.ndarray] = None,
    frequency_ghz: float = 0.0
) -> AntennaPattern:
    """
    Sample a pattern on a regular theta × phi grid.

    Args:
        pattern: Element pattern function
        resolution: Samples per axis (theta over [0, π], phi over [0, 2π])
        array: Array configuration multiplied in when active
        out: Optional (resolution, resolution) buffer reused for the result
        frequency_ghz: Frequency recorded on the result

    Returns:
        AntennaPattern with linear magnitude
    """
    resolution = max(2, int(resolution))
    theta = np.linspace(0, np.pi, resolution)
    phi = np.linspace(0, 2 * np.pi, resolution)
    theta_grid, phi_grid = np.meshgrid(theta, phi, indexing='ij')

    magnitude = np.asarray(pattern(theta_grid, phi_grid), dtype=np.float64)
    if array is not None and array.is_active:
        magnitude = magnitude * array.factor(theta_grid)

    if out is not None:
        out[...] = magnitude
        magnitude = out

    return AntennaPattern(
        frequency_ghz=frequency_ghz,
        theta_deg=np.rad2deg(theta),
        phi_deg=np.rad2deg(phi),
        magnitude=magnitude
    )


def _to_db(magnitude: np.ndarray) -> np.ndarray:
    return 20 * np.log10(magnitude + 1e-20)


def extract_principal_cuts(pattern: AntennaPattern) -> dict:
    """
    Extract principal plane cuts from a sampled pattern.

    Returns:
        Dict with E-plane (phi = 0°, theta varies) and H-plane (theta at
        the peak, phi varies) cuts in dB
    """
    peak_idx = np.unravel_index(np.argmax(pattern.magnitude), pattern.magnitude.shape)
    peak_theta_idx, peak_phi_idx = peak_idx

    phi_zero_idx = np.argmin(np.abs(pattern.phi_deg))
    e_plane = {
        'theta_deg': pattern.theta_deg,
        'magnitude_db': _to_db(pattern.magnitude[:, phi_zero_idx]),
        'phi_deg': pattern.phi_deg[phi_zero_idx]
    }

    h_plane = {
        'phi_deg': pattern.phi_deg,
        'magnitude_db': _to_db(pattern.magnitude[peak_theta_idx, :]),
        'theta_deg': pattern.theta_deg[peak_theta_idx]
    }

    return {
        'e_plane': e_plane,
        'h_plane': h_plane,
        'peak_db': pattern.peak_db(),
        'peak_theta_deg': pattern.theta_deg[peak_theta_idx],
        'peak_phi_deg': pattern.phi_deg[peak_phi_idx]
    }


def extract_beamwidths(pattern: AntennaPattern) -> dict:
    """
    Extract 3 dB beamwidths from a sampled pattern.

    Returns:
        Dict with 'horizontal_deg' (phi cut) and 'vertical_deg' (theta cut)
    """
    peak_idx = np.unravel_index(np.argmax(pattern.magnitude), pattern.magnitude.shape)
    peak = pattern.magnitude[peak_idx]
    half_power = peak / np.sqrt(2)  # field magnitude at -3 dB

    h_cut = pattern.magnitude[peak_idx[0], :]
    h_above = np.where(h_cut >= half_power)[0]
    if len(h_above) > 1:
        h_beamwidth = pattern.phi_deg[h_above[-1]] - pattern.phi_deg[h_above[0]]
    else:
        h_beamwidth = 0.0

    v_cut = pattern.magnitude[:, peak_idx[1]]
    v_above = np.where(v_cut >= half_power)[0]
    if len(v_above) > 1:
        v_beamwidth = pattern.theta_deg[v_above[-1]] - pattern.theta_deg[v_above[0]]
    else:
        v_beamwidth = 0.0

    return {
        'horizontal_deg': float(abs(h_beamwidth)),
        'vertical_deg': float(abs(v_beamwidth)),
        'peak_db': pattern.peak_db()
    }
