"""
Data models for the straight skeleton engine.
"""

from .geometry import Vector, Angle
from .topology import Vertex, Edge, Polygon
from .skeleton import Segment, WavefrontSnapshot, SkeletonStats

__all__ = [
    'Vector', 'Angle',
    'Vertex', 'Edge', 'Polygon',
    'Segment', 'WavefrontSnapshot', 'SkeletonStats',
]
