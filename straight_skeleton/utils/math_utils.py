"""
Mathematical utilities for the straight skeleton engine.

Orientation predicates and point/segment distances on Vector points.
"""

from ..models.geometry import Vector


def orientation_sign(a: Vector, b: Vector, c: Vector) -> int:
    """
    Orientation of the triangle (a, b, c).

    Returns:
        1 for a counter-clockwise turn, -1 for clockwise, 0 if collinear
    """
    value = (b - a).cross(c - a)
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def segments_intersect(p1: Vector, p2: Vector, p3: Vector, p4: Vector) -> bool:
    """
    Test whether segment p1-p2 crosses segment p3-p4.

    Uses the four orientation signs: the segments intersect when each
    segment's endpoints lie on different sides of the other's line.

    Args:
        p1, p2: First segment endpoints
        p3, p4: Second segment endpoints

    Returns:
        True if the segments intersect
    """
    o1 = orientation_sign(p1, p2, p3)
    o2 = orientation_sign(p1, p2, p4)
    o3 = orientation_sign(p3, p4, p1)
    o4 = orientation_sign(p3, p4, p2)
    return o1 != o2 and o3 != o4


def point_to_segment_distance(point: Vector, seg_p1: Vector, seg_p2: Vector) -> float:
    """
    Compute minimum distance from point to line segment.

    Args:
        point: The point
        seg_p1, seg_p2: Segment endpoints

    Returns:
        Distance from point to nearest point on segment
    """
    d = seg_p2 - seg_p1

    length_sq = d.dot(d)
    if length_sq < 1e-20:
        return point.distance_to(seg_p1)

    # Project point onto line, clamped to [0, 1]
    t = clamp((point - seg_p1).dot(d) / length_sq, 0.0, 1.0)

    return point.distance_to(seg_p1 + d * t)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))
