"""Link budget and multipath propagation."""
from .link_budget import (
    LinkBudgetParams, LinkBudgetResult, calculate_fspl, calculate_link_budget,
    calculate_max_range_km,
)
from .raytrace import ray_box_intersect, ray_plane_intersect, closest_point_on_segment, reflect
from .multipath import MultipathResult, compute_multipath, compute_channel_metrics

__all__ = [
    'LinkBudgetParams', 'LinkBudgetResult', 'calculate_fspl', 'calculate_link_budget',
    'calculate_max_range_km',
    'ray_box_intersect', 'ray_plane_intersect', 'closest_point_on_segment', 'reflect',
    'MultipathResult', 'compute_multipath', 'compute_channel_metrics',
]
