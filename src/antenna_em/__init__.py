"""Electromagnetic solver core for antenna visualisation."""
from .config import SimulationConfig, MaxwellConfig, MaxwellMethod
from .interfaces import (
    AntennaType, BeamformingType, TerrainType,
    AntennaPattern, SParameterPoint, RaySegment, MultipathMetrics, MaxwellResult,
)
from .geometry import GeometryPrimitive, Dimensions, Obstacle, create_default_geometry
from .materials import MaterialType, DIELECTRIC_MATERIALS, reflection_coefficient

__all__ = [
    "SimulationConfig",
    "MaxwellConfig",
    "MaxwellMethod",
    "AntennaType",
    "BeamformingType",
    "TerrainType",
    "AntennaPattern",
    "SParameterPoint",
    "RaySegment",
    "MultipathMetrics",
    "MaxwellResult",
    "GeometryPrimitive",
    "Dimensions",
    "Obstacle",
    "create_default_geometry",
    "MaterialType",
    "DIELECTRIC_MATERIALS",
    "reflection_coefficient",
]
