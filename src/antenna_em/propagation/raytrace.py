"""Ray/box and ray/plane intersection kernels for the multipath tracer."""
from typing import Tuple
import numpy as np

# Hits closer than this to the ray origin are ignored (self-intersection)
MIN_HIT_DISTANCE = 0.1

# Distance tolerance when matching a hit point to a box face
FACE_EPSILON = 0.001

_PARALLEL_EPSILON = 1e-12

# Face normals in the order they are tested: -x, +x, -y, +y, -z, +z
_FACE_NORMALS = np.array([
    [-1.0, 0.0, 0.0], [1.0, 0.0, 0.0],
    [0.0, -1.0, 0.0], [0.0, 1.0, 0.0],
    [0.0, 0.0, -1.0], [0.0, 0.0, 1.0],
])


def ray_box_intersect(
    origin: np.ndarray,
    direction: np.ndarray,
    center: np.ndarray,
    rotation: np.ndarray,
    half_extents: np.ndarray
) -> Tuple[float, np.ndarray]:
    """
    Single ray against an oriented box using the slab method.

    The ray is moved into the box frame, where the box is axis aligned,
    and the entry face normal is rotated back to world coordinates.

    Args:
        origin: Ray origin (3,)
        direction: Unit ray direction (3,)
        center: Box center (3,)
        rotation: Box local-to-world rotation matrix (3, 3)
        half_extents: Half edge lengths (3,)

    Returns:
        (t, normal): distance along the ray and world face normal,
        or (-1, zeros) if the box is missed or the entry lies within
        MIN_HIT_DISTANCE of the origin
    """
    miss = (-1.0, np.zeros(3))

    local_origin = rotation.T @ (origin - center)
    local_dir = rotation.T @ direction
    box_min = -half_extents
    box_max = half_extents

    t_near = -np.inf
    t_far = np.inf
    for axis in range(3):
        d = local_dir[axis]
        o = local_origin[axis]
        if abs(d) < _PARALLEL_EPSILON:
            if o < box_min[axis] or o > box_max[axis]:
                return miss
            continue
        t1 = (box_min[axis] - o) / d
        t2 = (box_max[axis] - o) / d
        t_near = max(t_near, min(t1, t2))
        t_far = min(t_far, max(t1, t2))

    if not (t_far >= t_near and t_near > MIN_HIT_DISTANCE):
        return miss

    local_hit = local_origin + t_near * local_dir
    normal = np.zeros(3)
    candidates = np.stack([box_min, box_max], axis=1).ravel()  # -x, +x, -y, +y, -z, +z
    for face in range(6):
        if abs(local_hit[face // 2] - candidates[face]) < FACE_EPSILON:
            normal = rotation @ _FACE_NORMALS[face]
            break

    norm = np.linalg.norm(normal)
    if norm > 0:
        normal = normal / norm
    return float(t_near), normal


def ray_plane_intersect(
    origin: np.ndarray,
    direction: np.ndarray,
    plane_y: float
) -> float:
    """
    Ray against the horizontal plane y = plane_y, approached from above.

    Returns:
        t parameter, or -1 if the ray does not travel downward or the hit
        lies within MIN_HIT_DISTANCE of the origin
    """
    if direction[1] >= 0:
        return -1.0
    t = (plane_y - origin[1]) / direction[1]
    return float(t) if t > MIN_HIT_DISTANCE else -1.0


def closest_point_on_segment(
    start: np.ndarray,
    end: np.ndarray,
    point: np.ndarray
) -> np.ndarray:
    """Point of the segment [start, end] nearest to point."""
    seg = end - start
    length_sq = np.dot(seg, seg)
    if length_sq == 0:
        return start.copy()
    s = np.clip(np.dot(point - start, seg) / length_sq, 0.0, 1.0)
    return start + s * seg


def reflect(direction: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Mirror a direction about a unit normal and renormalise."""
    out = direction - 2 * np.dot(direction, normal) * normal
    return out / np.linalg.norm(out)
