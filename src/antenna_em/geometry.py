"""Antenna geometry primitives and scene obstacles."""
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple
import numpy as np
from scipy.spatial.transform import Rotation

from .interfaces import AntennaType
from .materials import MaterialType


Shape = Literal["cylinder", "box", "paraboloid", "cone", "plane"]


@dataclass(frozen=True)
class Dimensions:
    """Primitive dimensions, all in wavelengths."""
    length_lambda: Optional[float] = None
    radius_lambda: Optional[float] = None
    width_lambda: Optional[float] = None
    height_lambda: Optional[float] = None
    diameter_lambda: Optional[float] = None
    spacing_lambda: Optional[float] = None


@dataclass(frozen=True)
class GeometryPrimitive:
    """Immutable building block of an antenna model.

    Solvers receive a list of these and never mutate it; an edit replaces
    the whole primitive.
    """
    shape: Shape
    count: int = 1
    dimensions: Dimensions = field(default_factory=Dimensions)
    orientation: str = "vertical"
    material: Optional[MaterialType] = None
    feed_point: Optional[Tuple[float, float, float]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GeometryPrimitive":
        """Build a primitive from a plain mapping (e.g. parsed YAML)."""
        data = dict(data)
        dims = Dimensions(**(data.pop("dimensions", None) or {}))
        material = data.pop("material", None)
        feed = data.pop("feed_point", None)
        return cls(
            dimensions=dims,
            material=MaterialType(material) if material is not None else None,
            feed_point=tuple(feed) if feed is not None else None,
            **data
        )


@dataclass(frozen=True)
class Obstacle:
    """Box obstacle placed in the propagation scene.

    Attributes:
        id: Obstacle identifier
        position: Box center (x, y, z)
        rotation: Euler angles (x, y, z) in radians, XYZ order
        scale: Box edge lengths (x, y, z)
        material: Surface material
    """
    id: str
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    material: MaterialType = MaterialType.CONCRETE

    def rotation_matrix(self) -> np.ndarray:
        """Local-to-world rotation (3, 3)."""
        return Rotation.from_euler("XYZ", self.rotation).as_matrix()

    def half_extents(self) -> np.ndarray:
        return 0.5 * np.abs(np.asarray(self.scale, dtype=np.float64))


def create_default_geometry(antenna_type: AntennaType) -> List[GeometryPrimitive]:
    """
    Create the starting geometry for an antenna family.

    Args:
        antenna_type: Antenna family

    Returns:
        List of primitives (empty for custom patterns)
    """
    if antenna_type is AntennaType.DIPOLE:
        return [GeometryPrimitive(
            shape="cylinder",
            dimensions=Dimensions(length_lambda=0.5, radius_lambda=0.005),
            orientation="vertical"
        )]
    if antenna_type is AntennaType.YAGI:
        return [GeometryPrimitive(
            shape="cylinder",
            count=5,
            dimensions=Dimensions(length_lambda=0.45, radius_lambda=0.005, spacing_lambda=0.2),
            orientation="parallel"
        )]
    if antenna_type is AntennaType.HORN:
        return [GeometryPrimitive(
            shape="cone",
            dimensions=Dimensions(length_lambda=1.0, radius_lambda=0.4),
            orientation="horizontal"
        )]
    if antenna_type is AntennaType.PARABOLIC:
        return [GeometryPrimitive(
            shape="paraboloid",
            dimensions=Dimensions(diameter_lambda=2.0),
            orientation="horizontal"
        )]
    if antenna_type is AntennaType.MICROSTRIP:
        return [GeometryPrimitive(
            shape="box",
            dimensions=Dimensions(width_lambda=0.5, height_lambda=0.01, length_lambda=0.5),
            orientation="horizontal"
        )]
    return []
