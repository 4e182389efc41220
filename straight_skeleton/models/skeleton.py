"""
Output value types produced by the wavefront engine.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .geometry import Vector
from .topology import Polygon


@dataclass(frozen=True, slots=True)
class Segment:
    """Finished straight skeleton segment (or debug ray)."""
    start: Vector
    end: Vector

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def to_list(self) -> List[List[float]]:
        return [[self.start.x, self.start.y], [self.end.x, self.end.y]]


@dataclass
class WavefrontSnapshot:
    """
    Wavefront state at one instant.

    Holds every disconnected component alive at `time`. Before the first
    split there is exactly one polygon; after full collapse there are none.
    """
    time: float
    polygons: List[Polygon] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.polygons

    @property
    def vertex_count(self) -> int:
        return sum(p.vertex_count for p in self.polygons)

    def copy(self) -> 'WavefrontSnapshot':
        """Deep copy; mutating the result never touches engine state."""
        return WavefrontSnapshot(self.time, [p.clone() for p in self.polygons])

    def to_dict(self) -> Dict:
        return {
            'time': self.time,
            'polygons': [p.to_list() for p in self.polygons],
        }


@dataclass
class SkeletonStats:
    """Counters collected while the engine runs."""
    input_vertices: int = 0
    reflex_vertices: int = 0
    events_processed: int = 0
    edge_events: int = 0
    split_events: int = 0
    settlements: int = 0
    events_stale: int = 0
    events_failed: int = 0
    queue_rebuilds: int = 0
    candidates_found: int = 0
    candidates_discarded: Dict[str, int] = field(default_factory=dict)
    segments: int = 0
    snapshots: int = 0
