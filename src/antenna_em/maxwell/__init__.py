"""Full-wave FDTD and MoM solvers."""
from .fdtd import FDTDSolver, MAX_FDTD_STEPS, solve_fdtd
from .mom import (
    build_impedance_matrix, build_excitation_vector, forced_odd,
    resonance_heuristic_impedance, solve_mom,
)
from .solver import MaxwellSolver

__all__ = [
    'FDTDSolver', 'MAX_FDTD_STEPS', 'solve_fdtd',
    'build_impedance_matrix', 'build_excitation_vector', 'forced_odd',
    'resonance_heuristic_impedance', 'solve_mom',
    'MaxwellSolver',
]
