"""
Polygon ring utilities for the straight skeleton engine.

Rings are open lists of Vector points (the closing point is implicit).
"""

from typing import List, Sequence
import math

from ..models.geometry import Vector


def open_ring(points: Sequence[Vector], tolerance: float = 1e-10) -> List[Vector]:
    """
    Drop a repeated closing point from a ring.

    Args:
        points: Ring points, closed (first == last) or open
        tolerance: Distance under which first and last count as equal

    Returns:
        Open ring as a new list
    """
    ring = list(points)
    if len(ring) > 1 and ring[0].distance_to(ring[-1]) <= tolerance:
        ring.pop()
    return ring


def polygon_signed_area(ring: Sequence[Vector]) -> float:
    """
    Calculate signed area of polygon ring using the shoelace formula.

    Args:
        ring: List of polygon vertices

    Returns:
        Signed area (positive = CCW, negative = CW)
    """
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].x * ring[j].y
        area -= ring[j].x * ring[i].y

    return area / 2.0


def point_in_polygon(point: Vector, ring: Sequence[Vector], tolerance: float = 1e-6) -> bool:
    """
    Test if point is inside a polygon ring using ray casting algorithm.

    Args:
        point: Point to test
        ring: List of polygon vertices
        tolerance: Points this close to the boundary count as inside

    Returns:
        True if point is inside or on edge
    """
    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1

    for i in range(n):
        xi, yi = ring[i].x, ring[i].y
        xj, yj = ring[j].x, ring[j].y

        if _point_on_segment(point, ring[i], ring[j], tolerance):
            return True

        # Ray casting
        if ((yi > point.y) != (yj > point.y)) and \
           (point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def distinct_points(points: Sequence[Vector], tolerance: float) -> List[Vector]:
    """
    Collapse points that lie within tolerance of an earlier point.

    Args:
        points: Input points in order
        tolerance: Merge distance

    Returns:
        First representative of each cluster, in input order
    """
    result: List[Vector] = []
    for p in points:
        if not any(p.distance_to(q) <= tolerance for q in result):
            result.append(p)
    return result


def _point_on_segment(p: Vector, a: Vector, b: Vector, tolerance: float) -> bool:
    """Check if point is on line segment (within tolerance)."""
    ab = b - a
    ap = p - a

    ab_len = ab.length()
    if ab_len < 1e-10:
        return p.distance_to(a) < tolerance

    # Distance from line
    if abs(ab.cross(ap)) / ab_len > tolerance:
        return False

    # Projection must fall within the segment
    t = ap.dot(ab) / (ab_len * ab_len)
    return -tolerance <= t <= 1 + tolerance


def is_finite_ring(ring: Sequence[Vector]) -> bool:
    """True if every coordinate of the ring is finite."""
    return all(math.isfinite(p.x) and math.isfinite(p.y) for p in ring)
