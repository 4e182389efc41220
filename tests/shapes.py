"""
Shape helpers shared by the test modules.
"""

import math
import random
from typing import List, Sequence, Tuple

from straight_skeleton.models.geometry import Vector


def random_star(seed: int) -> List[Tuple[float, float]]:
    """
    Simple CCW star polygon with 5 to 16 vertices.

    Angles increase around the origin with jitter smaller than half a step,
    so the ring never crosses itself; radii fall in [3, 10].
    """
    rng = random.Random(seed)
    n = rng.randint(5, 16)
    points = []
    for k in range(n):
        angle = 2 * math.pi * (k + rng.uniform(-0.3, 0.3)) / n
        radius = rng.uniform(3.0, 10.0)
        points.append((radius * math.cos(angle), radius * math.sin(angle)))
    return points


def convex_hull(points: Sequence[Vector]) -> List[Vector]:
    """Monotone chain hull in CCW order."""
    ordered = sorted(points, key=lambda p: (p.x, p.y))
    if len(ordered) < 3:
        return ordered

    def chain(pts):
        result = []
        for p in pts:
            while len(result) >= 2 and (result[-1] - result[-2]).cross(p - result[-2]) <= 0:
                result.pop()
            result.append(p)
        return result

    lower = chain(ordered)
    upper = chain(reversed(ordered))
    return lower[:-1] + upper[:-1]
