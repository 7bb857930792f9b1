"""Dielectric material table for substrates and scene obstacles."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union
import numpy as np


class MaterialType(str, Enum):
    """Materials known to the editor and the ray tracer."""
    AIR = "Air"
    FR4 = "FR4"
    ROGERS = "Rogers 4003C"
    GLASS = "Glass"
    CONCRETE = "Concrete"
    METAL = "Metal (Perfect)"


@dataclass(frozen=True)
class DielectricDefinition:
    """Electrical and display properties of a material.

    Attributes:
        name: Material identifier
        epsilon_r: Relative permittivity (≥ 1 for dielectrics, placeholder for metal)
        loss_tangent: Dielectric loss tangent
        color: Display color (hex)
        roughness: Surface roughness 0-1, also drives diffuse scatter
        metalness: Display metalness 0-1
        opacity: Display opacity 0-1
    """
    name: MaterialType
    epsilon_r: float
    loss_tangent: float
    color: str
    roughness: float
    metalness: float
    opacity: float

    @property
    def is_conductor(self) -> bool:
        return self.name is MaterialType.METAL


DIELECTRIC_MATERIALS: Dict[MaterialType, DielectricDefinition] = {
    MaterialType.AIR: DielectricDefinition(
        name=MaterialType.AIR, epsilon_r=1.0006, loss_tangent=0.0,
        color="#87ceeb", roughness=0.0, metalness=0.0, opacity=0.1
    ),
    MaterialType.FR4: DielectricDefinition(
        name=MaterialType.FR4, epsilon_r=4.4, loss_tangent=0.02,
        color="#16a34a", roughness=0.3, metalness=0.1, opacity=0.9
    ),
    MaterialType.ROGERS: DielectricDefinition(
        name=MaterialType.ROGERS, epsilon_r=3.55, loss_tangent=0.0027,
        color="#f8fafc", roughness=0.1, metalness=0.05, opacity=1.0
    ),
    MaterialType.GLASS: DielectricDefinition(
        name=MaterialType.GLASS, epsilon_r=6.5, loss_tangent=0.005,
        color="#a5f3fc", roughness=0.0, metalness=0.1, opacity=0.3
    ),
    MaterialType.CONCRETE: DielectricDefinition(
        name=MaterialType.CONCRETE, epsilon_r=5.0, loss_tangent=0.03,
        color="#64748b", roughness=0.9, metalness=0.0, opacity=1.0
    ),
    # Perfect conductor: epsilon_r is not used by the reflection model
    MaterialType.METAL: DielectricDefinition(
        name=MaterialType.METAL, epsilon_r=1.0, loss_tangent=0.0,
        color="#94a3b8", roughness=0.2, metalness=1.0, opacity=1.0
    ),
}

# Used when an obstacle references a material missing from the table
DEFAULT_REFLECTION_COEFFICIENT = 0.5


def get_material(material: Union[MaterialType, str]) -> Optional[DielectricDefinition]:
    """Look up a material by enum or display name, None when unknown."""
    try:
        return DIELECTRIC_MATERIALS[MaterialType(material)]
    except ValueError:
        return None


def reflection_coefficient(material: Union[MaterialType, str, None]) -> float:
    """
    Normal-incidence reflection magnitude for a material.

    |Γ| = |(1 - √εr) / (1 + √εr)|, with perfect conductors reflecting fully.

    Args:
        material: Material enum or display name

    Returns:
        Reflection coefficient magnitude in [0, 1]
    """
    props = get_material(material) if material is not None else None
    if props is None:
        return DEFAULT_REFLECTION_COEFFICIENT
    if props.is_conductor:
        return 1.0

    sqrt_eps = np.sqrt(props.epsilon_r)
    return float(abs((1 - sqrt_eps) / (1 + sqrt_eps)))
