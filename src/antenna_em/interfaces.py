"""Shared interface dataclasses for inter-module communication."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import numpy as np
from numpy.typing import NDArray


class AntennaType(str, Enum):
    """Antenna families with a built-in radiation pattern."""
    DIPOLE = "Dipole"
    YAGI = "Yagi-Uda"
    HORN = "Horn"
    PARABOLIC = "Parabolic"
    MICROSTRIP = "Microstrip"
    CUSTOM = "Custom Formula"


class BeamformingType(str, Enum):
    """Beamforming weighting applied on top of the array factor."""
    MRT = "MRT (Max Ratio)"
    ZF = "ZF (Zero Forcing)"
    MMSE = "MMSE"


class TerrainType(str, Enum):
    """Ground model used by the multipath tracer."""
    NONE = "Void"
    FLAT = "Flat Ground"
    CITY = "Urban Canyon"


@dataclass
class AntennaPattern:
    """Sampled far-field magnitude (evaluator output → plot/ray input).

    Attributes:
        frequency_ghz: Operating frequency
        theta_deg: Polar angles array (N_theta,)
        phi_deg: Azimuth angles array (N_phi,)
        magnitude: Field magnitude (N_theta, N_phi), linear
    """
    frequency_ghz: float
    theta_deg: NDArray[np.float64]
    phi_deg: NDArray[np.float64]
    magnitude: NDArray[np.float64]

    def magnitude_at(self, theta: float, phi: float) -> float:
        """Interpolate magnitude at given angles.

        Args:
            theta: Polar angle in degrees
            phi: Azimuth angle in degrees

        Returns:
            Interpolated magnitude (linear), 0 outside the sampled grid
        """
        from scipy.interpolate import RegularGridInterpolator
        interp = RegularGridInterpolator(
            (self.theta_deg, self.phi_deg),
            self.magnitude,
            bounds_error=False,
            fill_value=0.0
        )
        return float(interp([[theta, phi]])[0])

    def peak_db(self) -> float:
        """Return peak magnitude in dB (field quantity, 20·log10)."""
        peak = np.max(self.magnitude)
        if peak <= 0:
            return -100.0
        return float(20 * np.log10(peak))


@dataclass
class SParameterPoint:
    """One point of an S11 sweep.

    Attributes:
        freq_ghz: Frequency in GHz
        s11_mag_db: Return loss as S11 magnitude in dB (≤ 0)
        s11_phase_deg: S11 phase in degrees
        vswr: Voltage standing wave ratio (≥ 1)
    """
    freq_ghz: float
    s11_mag_db: float
    s11_phase_deg: float
    vswr: float


@dataclass
class RaySegment:
    """One straight leg of a traced ray.

    Attributes:
        start: Segment start point (3,)
        end: Segment end point (3,)
        power: Relative power carried along the segment
        path_length: Path length accumulated before this segment
        bounce: Number of reflections before this segment
    """
    start: NDArray[np.float64]
    end: NDArray[np.float64]
    power: float
    path_length: float
    bounce: int

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))


@dataclass
class MultipathMetrics:
    """Channel statistics at the reference receiver.

    Attributes:
        delay_spread_ns: RMS delay spread
        coherence_bandwidth_mhz: Approximate coherence bandwidth 1/(5·σ_τ)
        received_power_db: Aggregate received power (dB, relative)
        num_paths: Number of paths that reached the receiver
        mean_delay_ns: Power-weighted mean delay
    """
    delay_spread_ns: float = 0.0
    coherence_bandwidth_mhz: float = 0.0
    received_power_db: float = -90.0
    num_paths: int = 0
    mean_delay_ns: float = 0.0


@dataclass
class MaxwellResult:
    """Full-wave solver output (solver → plot/UI).

    Attributes:
        converged: False when the solve failed or the field diverged
        iterations_taken: Time steps (FDTD) or solves (MoM) actually run
        input_impedance: Feed impedance in ohms, None when not extractable
        current_distribution: |I| per wire segment (MoM)
        field_map: Flattened Ez snapshot (FDTD)
        max_field_strength: Peak |Ez| (FDTD) or normalised 1.0 (MoM)
        message: Human-readable note on truncation or failure
    """
    converged: bool
    iterations_taken: int
    input_impedance: Optional[complex] = None
    current_distribution: Optional[NDArray[np.float64]] = None
    field_map: Optional[NDArray[np.float64]] = None
    max_field_strength: float = 0.0
    message: str = ""
    probe_history: Optional[NDArray[np.float64]] = None
    currents: Optional[NDArray[np.complex128]] = None
