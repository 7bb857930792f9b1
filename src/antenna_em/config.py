"""Solver and simulation configuration management."""
from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from typing import Any, List, Literal, Union
from pathlib import Path
import logging
import math
import yaml

from .antenna.array_factor import ArrayConfig
from .interfaces import AntennaType, BeamformingType, TerrainType

logger = logging.getLogger(__name__)

# Largest Courant number for which the 2D Yee scheme is stable (dx = dy)
COURANT_LIMIT_2D = 1 / math.sqrt(2)


class MaxwellMethod(str, Enum):
    """Full-wave solution method."""
    FDTD = "FDTD (Finite Difference Time Domain)"
    MOM = "MoM (Method of Moments)"
    FEM = "FEM (Finite Element Method)"


@dataclass
class MaxwellConfig:
    """Configuration for the full-wave solver.

    Attributes:
        method: Solution method
        grid_size: FDTD grid cells per side
        segments: MoM wire segments (forced odd at solve time)
        iterations: Requested FDTD time steps (capped by the solver)
        courant: FDTD Courant number c·dt/dx
        gpu_acceleration: Carried so saved scenarios round-trip; the
            solvers always run on the CPU and never read it
        adaptive_mesh: Carried so saved scenarios round-trip; meshes are
            always uniform and the solvers never read it
        impedance_model: MoM feed impedance from the solved current or
            from the half-wave resonance heuristic
    """
    method: MaxwellMethod = MaxwellMethod.FDTD
    grid_size: int = 64
    segments: int = 21
    iterations: int = 500
    courant: float = 0.5
    gpu_acceleration: bool = False
    adaptive_mesh: bool = False
    impedance_model: Literal["solved", "heuristic"] = "solved"

    def __post_init__(self):
        self.method = MaxwellMethod(self.method)

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not (3 <= self.grid_size <= 1000):
            errors.append("grid_size must be 3-1000 cells")

        if not (1 <= self.segments <= 2001):
            errors.append("segments must be 1-2001")

        if self.iterations < 0:
            errors.append("iterations must be non-negative")

        if not (0 < self.courant <= COURANT_LIMIT_2D):
            errors.append(f"courant must be 0-{COURANT_LIMIT_2D:.4f} for a stable 2D run")

        if self.impedance_model not in ("solved", "heuristic"):
            errors.append("impedance_model must be 'solved' or 'heuristic'")

        return errors


@dataclass
class SimulationConfig:
    """Parameter snapshot consumed by every engine on each update tick.

    Attributes:
        antenna_type: Antenna family selecting the far-field preset
        custom_formula: Pattern expression used when antenna_type is CUSTOM
        frequency_ghz: Operating frequency
        array_enabled: Whether the linear array factor applies
        array_elements: Number of array elements N
        element_spacing_lambda: Element spacing d
        steering_angle_deg: Beam steering angle (0 = broadside)
        beamforming: Beamforming weighting
        tx_power_dbm: Transmit power
        tx_gain_dbi: Transmit antenna gain
        rx_gain_dbi: Receive antenna gain
        rx_sensitivity_dbm: Receiver sensitivity
        losses_db: Other system losses
        distance_km: Link distance
        max_reflections: Multipath bounce limit
        terrain: Ground model for the tracer
        sweep_start_ghz: S-parameter sweep start
        sweep_end_ghz: S-parameter sweep end
        sweep_steps: S-parameter sweep step count
        maxwell: Full-wave solver settings
    """

    # Antenna
    antenna_type: AntennaType = AntennaType.DIPOLE
    custom_formula: str = "1"
    frequency_ghz: float = 2.4

    # Array
    array_enabled: bool = False
    array_elements: int = 4
    element_spacing_lambda: float = 0.5
    steering_angle_deg: float = 0.0
    beamforming: BeamformingType = BeamformingType.MRT

    # Link budget
    tx_power_dbm: float = 20.0
    tx_gain_dbi: float = 2.15
    rx_gain_dbi: float = 2.15
    rx_sensitivity_dbm: float = -90.0
    losses_db: float = 3.0
    distance_km: float = 1.0

    # Multipath
    max_reflections: int = 3
    terrain: TerrainType = TerrainType.FLAT

    # S-parameter sweep
    sweep_start_ghz: float = 1.0
    sweep_end_ghz: float = 4.0
    sweep_steps: int = 100

    maxwell: MaxwellConfig = field(default_factory=MaxwellConfig)

    def __post_init__(self):
        self.antenna_type = AntennaType(self.antenna_type)
        self.beamforming = BeamformingType(self.beamforming)
        self.terrain = TerrainType(self.terrain)
        if isinstance(self.maxwell, dict):
            self.maxwell = MaxwellConfig(**self.maxwell)

    @property
    def wavelength_m(self) -> float:
        """Compute wavelength from frequency."""
        return 299792458.0 / (self.frequency_ghz * 1e9)

    @property
    def active_elements(self) -> int:
        """Element count seen by the array factor (1 when the array is off)."""
        return self.array_elements if self.array_enabled else 1

    def array_config(self) -> ArrayConfig:
        """Array settings as consumed by the far-field sampler."""
        return ArrayConfig(
            n_elements=self.array_elements,
            spacing_lambda=self.element_spacing_lambda,
            steering_angle_deg=self.steering_angle_deg,
            beamforming=self.beamforming,
            enabled=self.array_enabled
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SimulationConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump(_plain(asdict(self)), f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not (0 < self.frequency_ghz <= 300):
            errors.append("frequency_ghz must be 0-300 GHz")

        if self.array_elements < 1:
            errors.append("array_elements must be at least 1")

        if self.element_spacing_lambda <= 0:
            errors.append("element_spacing_lambda must be positive")

        if not (-90 <= self.steering_angle_deg <= 90):
            errors.append("steering_angle_deg must be -90-90°")

        if self.distance_km <= 0:
            errors.append("distance_km must be positive")

        if self.max_reflections < 0:
            errors.append("max_reflections must be non-negative")

        if not (0 < self.sweep_start_ghz < self.sweep_end_ghz):
            errors.append("sweep range must satisfy 0 < start < end")

        if self.sweep_steps < 1:
            errors.append("sweep_steps must be at least 1")

        errors.extend(f"maxwell.{e}" for e in self.maxwell.validate())
        return errors


def _plain(value: Any) -> Any:
    """Strip enums so YAML stays portable."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
