"""Far-field patterns, array factor and closed-form antenna models."""
from .formula import FormulaError, compile_formula, validate_formula, prettify_formula, normalize_formula
from .array_factor import ArrayConfig, calculate_array_factor, steered_mainlobe_theta, calculate_mimo_gain
from .patterns import (
    ANTENNA_PRESETS, PatternPreset, get_pattern_function, sample_far_field,
    extract_principal_cuts, extract_beamwidths,
)
from .metrics import AntennaMetrics, calculate_antenna_metrics
from .near_field import FieldQuantity, FieldRegion, dipole_near_field, field_region

__all__ = [
    'FormulaError', 'compile_formula', 'validate_formula', 'prettify_formula', 'normalize_formula',
    'ArrayConfig', 'calculate_array_factor', 'steered_mainlobe_theta', 'calculate_mimo_gain',
    'ANTENNA_PRESETS', 'PatternPreset', 'get_pattern_function', 'sample_far_field',
    'extract_principal_cuts', 'extract_beamwidths',
    'AntennaMetrics', 'calculate_antenna_metrics',
    'FieldQuantity', 'FieldRegion', 'dipole_near_field', 'field_region',
]
