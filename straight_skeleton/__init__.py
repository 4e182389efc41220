"""
Straight Skeleton

Computes the straight skeleton of a simple polygon by propagating its
boundary inward at unit speed and processing the edge and split events
that change the wavefront topology.

Can be used as:
- Library: straight_skeleton.build(points)
- CLI tool: python -m straight_skeleton.main polygon.json
"""

__version__ = "0.1.0"
__author__ = "Straight Skeleton Team"

from .models import Vector, Angle, Polygon, Segment, WavefrontSnapshot
from .processing import Skeleton, build
from .config import SkeletonConfig
from .errors import (
    SkeletonError,
    ConstructionError,
    InvariantViolation,
    EventApplicationError,
    SnapshotNotFoundError,
)

__all__ = [
    'Vector', 'Angle', 'Polygon', 'Segment', 'WavefrontSnapshot',
    'Skeleton', 'build', 'SkeletonConfig',
    'SkeletonError', 'ConstructionError', 'InvariantViolation',
    'EventApplicationError', 'SnapshotNotFoundError',
]
