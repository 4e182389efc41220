"""
Utility functions for the straight skeleton engine.
"""

from .math_utils import (
    orientation_sign,
    segments_intersect,
    point_to_segment_distance,
    clamp,
)
from .polygon_utils import (
    open_ring,
    polygon_signed_area,
    point_in_polygon,
    distinct_points,
    is_finite_ring,
)

__all__ = [
    'orientation_sign',
    'segments_intersect',
    'point_to_segment_distance',
    'clamp',
    'open_ring',
    'polygon_signed_area',
    'point_in_polygon',
    'distinct_points',
    'is_finite_ring',
]
