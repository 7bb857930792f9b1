"""Thin-wire method of moments for a center-fed linear element."""
from typing import Optional, Sequence
import logging
import numpy as np
from scipy.linalg import lu_factor, lu_solve

from ..geometry import GeometryPrimitive
from ..interfaces import MaxwellResult

logger = logging.getLogger(__name__)

# Wavelength in metres is 0.3 / f_GHz
LIGHT_SPEED_M_PER_NS = 0.3

DEFAULT_LENGTH_LAMBDA = 0.5
DEFAULT_RADIUS_LAMBDA = 0.005

MIN_KERNEL_DISTANCE = 1e-6
MAX_CONDITION_NUMBER = 1e12

# Resonance heuristic: within this fraction of λ from λ/2 the element is resonant
RESONANCE_TOLERANCE_LAMBDA = 0.05
RADIATION_RESISTANCE = 73.0
DETUNED_REACTANCE = 40.0


def forced_odd(n: int) -> int:
    """Segment count with a center segment for the feed."""
    n = max(1, int(n))
    return n + 1 if n % 2 == 0 else n


def build_impedance_matrix(wire_length: float, radius: float, k: float, n: int) -> np.ndarray:
    """
    Fill Z_mn = exp(-jk·r_mn) / max(r_mn, 1e-6).

    Segment separation is r_mn = |m - n|·dz off the diagonal and the wire
    radius on it.

    Args:
        wire_length: Wire length in metres
        radius: Wire radius in metres
        k: Wavenumber (rad/m)
        n: Number of segments

    Returns:
        Complex (n, n) matrix
    """
    dz = wire_length / n
    idx = np.arange(n)
    r = np.abs(idx[:, None] - idx[None, :]) * dz
    np.fill_diagonal(r, radius)
    return np.exp(-1j * k * r) / np.maximum(r, MIN_KERNEL_DISTANCE)


def build_excitation_vector(n: int) -> np.ndarray:
    """Delta-gap source: 1 V on the center segment, zero elsewhere."""
    v = np.zeros(n, dtype=np.complex128)
    v[n // 2] = 1.0
    return v


def resonance_heuristic_impedance(wire_length: float, wavelength: float) -> complex:
    """
    Closed-form dipole impedance estimate.

    73 Ω resistive within 0.05λ of a half wave, otherwise ±j40 Ω reactance
    (inductive when long, capacitive when short).
    """
    if abs(wire_length - wavelength / 2) < RESONANCE_TOLERANCE_LAMBDA * wavelength:
        return complex(RADIATION_RESISTANCE, 0.0)
    sign = 1.0 if wire_length > wavelength / 2 else -1.0
    return complex(RADIATION_RESISTANCE, sign * DETUNED_REACTANCE)


def _failed(message: str) -> MaxwellResult:
    logger.warning("MoM solve failed: %s", message)
    return MaxwellResult(converged=False, iterations_taken=0, message=message)


def solve_mom(
    geometry: Optional[Sequence[GeometryPrimitive]],
    freq_ghz: float,
    segments: int,
    impedance_model: str = "solved"
) -> MaxwellResult:
    """
    Solve Z·I = V for the first wire of a geometry.

    Length and radius come from the first primitive (0.5λ and 0.005λ when
    missing). The system is LU factorised; singular or ill-conditioned
    systems are reported through ``converged`` rather than raised.

    Args:
        geometry: Antenna primitives
        freq_ghz: Frequency in GHz
        segments: Requested segment count (forced odd)
        impedance_model: "solved" for V_feed / I_feed, "heuristic" for the
            half-wave resonance estimate

    Returns:
        MaxwellResult with |I| per segment and the feed impedance
    """
    if freq_ghz <= 0:
        return _failed(f"frequency must be positive, got {freq_ghz} GHz")

    wavelength = LIGHT_SPEED_M_PER_NS / freq_ghz
    k = 2 * np.pi / wavelength

    dims = geometry[0].dimensions if geometry else None
    length_lambda = (dims.length_lambda if dims else None) or DEFAULT_LENGTH_LAMBDA
    radius_lambda = (dims.radius_lambda if dims else None) or DEFAULT_RADIUS_LAMBDA
    wire_length = length_lambda * wavelength
    radius = radius_lambda * wavelength

    n = forced_odd(segments)
    z = build_impedance_matrix(wire_length, radius, k, n)
    v = build_excitation_vector(n)

    cond = np.linalg.cond(z)
    if not np.isfinite(cond) or cond > MAX_CONDITION_NUMBER:
        return _failed(f"impedance matrix is ill-conditioned (cond = {cond:.3g})")

    currents = lu_solve(lu_factor(z), v)
    if not np.all(np.isfinite(currents)):
        return _failed("solution contains non-finite currents")

    feed_current = currents[n // 2]
    if impedance_model == "heuristic":
        z_in = resonance_heuristic_impedance(wire_length, wavelength)
    elif abs(feed_current) > 0:
        z_in = complex(v[n // 2] / feed_current)
    else:
        return _failed("feed current is zero")

    logger.debug("MoM: N=%d, cond=%.3g, Zin=%s", n, cond, z_in)

    return MaxwellResult(
        converged=True,
        iterations_taken=1,
        input_impedance=z_in,
        current_distribution=np.abs(currents),
        max_field_strength=1.0,
        currents=currents
    )
