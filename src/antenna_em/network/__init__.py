"""Feed impedance, S-parameter sweeps, Smith chart and Touchstone I/O."""
from .impedance import ImpedanceResult, calculate_impedance, detuning
from .sparams import Q_FACTORS, q_factor, generate_s_parameters, nearest_point
from .smith import (
    db_to_magnitude, polar_to_rectangular, s_params_to_smith,
    gamma_to_impedance, impedance_to_gamma, denormalize, vswr_from_gamma,
)
from .touchstone import format_touchstone, write_touchstone, read_touchstone

__all__ = [
    'ImpedanceResult', 'calculate_impedance', 'detuning',
    'Q_FACTORS', 'q_factor', 'generate_s_parameters', 'nearest_point',
    'db_to_magnitude', 'polar_to_rectangular', 's_params_to_smith',
    'gamma_to_impedance', 'impedance_to_gamma', 'denormalize', 'vswr_from_gamma',
    'format_touchstone', 'write_touchstone', 'read_touchstone',
]
