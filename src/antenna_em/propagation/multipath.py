"""Multipath ray tracing in a horizontal slice around the antenna.

Rays are launched from the origin in the theta = 90° plane, bounce off box
obstacles and an optional ground plane, and are collected by a spherical
reference receiver. The collected paths give the channel delay statistics.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import numpy as np

from ..geometry import Obstacle
from ..interfaces import MultipathMetrics, RaySegment, TerrainType
from ..materials import MaterialType, get_material, reflection_coefficient
from .raytrace import (
    closest_point_on_segment, ray_box_intersect, ray_plane_intersect, reflect,
)

logger = logging.getLogger(__name__)

DEFAULT_RAY_COUNT = 60
DEFAULT_RECEIVER = (10.0, 0.0, 10.0)
DEFAULT_RECEIVER_RADIUS = 3.0

GROUND_PLANE_Y = -2.0
GROUND_MATERIAL = MaterialType.CONCRETE

MISS_LENGTH = 50.0          # segment length drawn for rays that hit nothing
MIN_LAUNCH_GAIN = 0.1       # pattern magnitude below which no ray is launched
MIN_RAY_POWER = 0.01        # rays weaker than this are dropped after a bounce
SURFACE_OFFSET = 0.01       # reflected origin is lifted off the surface
LIGHT_SPEED_M_PER_NS = 0.3

SCATTER_ROUGHNESS = 0.5     # materials rougher than this may scatter
SCATTER_PROBABILITY = 0.3


@dataclass
class MultipathResult:
    """Traced rays plus receiver statistics."""
    rays: List[RaySegment] = field(default_factory=list)
    metrics: MultipathMetrics = field(default_factory=MultipathMetrics)
    path_delays_ns: np.ndarray = field(default_factory=lambda: np.zeros(0))
    path_powers: np.ndarray = field(default_factory=lambda: np.zeros(0))


def _nearest_hit(
    origin: np.ndarray,
    direction: np.ndarray,
    boxes: Sequence[Tuple[Obstacle, np.ndarray, np.ndarray, np.ndarray]],
    terrain: TerrainType
) -> Tuple[float, Optional[np.ndarray], Optional[MaterialType]]:
    """Closest obstacle or ground hit: (t, normal, material), t = inf on miss."""
    closest_t = np.inf
    closest_normal = None
    material = None

    for obstacle, center, rotation, half in boxes:
        t, normal = ray_box_intersect(origin, direction, center, rotation, half)
        if 0 < t < closest_t:
            closest_t = t
            closest_normal = normal
            material = obstacle.material

    if terrain is not TerrainType.NONE:
        t = ray_plane_intersect(origin, direction, GROUND_PLANE_Y)
        if 0 < t < closest_t:
            closest_t = t
            closest_normal = np.array([0.0, 1.0, 0.0])
            material = GROUND_MATERIAL

    return closest_t, closest_normal, material


def compute_channel_metrics(delays_ns: np.ndarray, powers: np.ndarray) -> MultipathMetrics:
    """
    Power-delay profile statistics.

    Args:
        delays_ns: Path delays
        powers: Linear path powers

    Returns:
        MultipathMetrics (zeros and -90 dB when there are no paths)
    """
    delays_ns = np.asarray(delays_ns, dtype=np.float64)
    powers = np.asarray(powers, dtype=np.float64)
    if len(powers) == 0:
        return MultipathMetrics()

    total = float(np.sum(powers))
    if total > 0:
        mean_delay = float(np.sum(powers * delays_ns) / total)
        rms_delay = float(np.sqrt(np.sum(powers * (delays_ns - mean_delay) ** 2) / total))
    else:
        mean_delay = 0.0
        rms_delay = 0.0

    coherence_bw = 0.0
    if rms_delay > 0.001:
        coherence_bw = 1 / (5 * rms_delay * 1e-9) / 1e6

    return MultipathMetrics(
        delay_spread_ns=rms_delay,
        coherence_bandwidth_mhz=coherence_bw,
        received_power_db=float(10 * np.log10(total or 1e-9)),
        num_paths=len(powers),
        mean_delay_ns=mean_delay
    )


def compute_multipath(
    obstacles: Sequence[Obstacle],
    terrain: TerrainType,
    max_reflections: int,
    pattern: Callable,
    rng: Optional[np.random.Generator] = None,
    ray_count: int = DEFAULT_RAY_COUNT,
    receiver: Tuple[float, float, float] = DEFAULT_RECEIVER,
    receiver_radius: float = DEFAULT_RECEIVER_RADIUS
) -> MultipathResult:
    """
    Trace rays from the origin and collect paths at the receiver.

    Args:
        obstacles: Box obstacles in the scene
        terrain: Ground model; anything but NONE adds the y = -2 plane
        max_reflections: Bounces per ray (segments per ray ≤ max_reflections + 1)
        pattern: Antenna pattern function (theta, phi) -> magnitude
        rng: Random generator for rough-surface scatter (seed it for
            reproducible output)
        ray_count: Rays launched uniformly in azimuth
        receiver: Reference receiver position
        receiver_radius: Capture radius around the receiver

    Returns:
        MultipathResult with drawn segments and channel metrics
    """
    if rng is None:
        rng = np.random.default_rng()
    terrain = TerrainType(terrain)
    rx = np.asarray(receiver, dtype=np.float64)

    # Rotations are fixed for the whole trace
    boxes = [
        (obs, np.asarray(obs.position, dtype=np.float64), obs.rotation_matrix(), obs.half_extents())
        for obs in obstacles
    ]

    rays = []
    delays = []
    powers = []

    for i in range(ray_count):
        phi = 2 * np.pi * i / ray_count
        gain = abs(float(pattern(np.pi / 2, phi)))
        if not np.isfinite(gain) or gain < MIN_LAUNCH_GAIN:
            continue

        origin = np.zeros(3)
        direction = np.array([np.sin(phi), 0.0, np.cos(phi)])
        power = 1.0
        path_length = 0.0

        for bounce in range(max_reflections + 1):
            t, normal, material = _nearest_hit(origin, direction, boxes, terrain)
            hit = np.isfinite(t)
            end = origin + (t if hit else MISS_LENGTH) * direction

            nearest = closest_point_on_segment(origin, end, rx)
            if np.linalg.norm(nearest - rx) < receiver_radius:
                rx_path = path_length + np.linalg.norm(nearest - origin)
                if rx_path > 0:
                    delays.append(rx_path / LIGHT_SPEED_M_PER_NS)
                    powers.append(power * gain / rx_path ** 2)

            rays.append(RaySegment(
                start=origin, end=end, power=power,
                path_length=path_length, bounce=bounce
            ))
            path_length += float(np.linalg.norm(end - origin))

            if not hit or bounce >= max_reflections:
                break

            props = get_material(material)
            if props is not None and props.roughness > SCATTER_ROUGHNESS \
                    and rng.random() < SCATTER_PROBABILITY:
                normal = normal + (rng.random(3) - 0.5) * props.roughness
                normal = normal / np.linalg.norm(normal)

            power *= reflection_coefficient(material)
            direction = reflect(direction, normal)
            origin = end + SURFACE_OFFSET * normal

            if power < MIN_RAY_POWER:
                break

    metrics = compute_channel_metrics(np.array(delays), np.array(powers))
    logger.debug("Traced %d segments, %d paths reach the receiver", len(rays), metrics.num_paths)

    return MultipathResult(
        rays=rays,
        metrics=metrics,
        path_delays_ns=np.array(delays),
        path_powers=np.array(powers)
    )
