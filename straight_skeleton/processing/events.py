"""
Event model for wavefront propagation.

Two kinds of event change the wavefront topology:

- EdgeEvent: an edge shrinks to zero length as its endpoints meet.
- SplitEvent: a reflex vertex runs into a non-adjacent edge and cuts the
  wavefront in two.

Events reference live topology objects, so they are only meaningful
against the polygon they were computed from. The engine revalidates each
event immediately before applying it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Union
import heapq
import itertools
import logging
import math

from ..config import BISECTOR_VELOCITY, INTERSECTION_MATCH_TOLERANCE, NUMERICAL_TOLERANCE
from ..errors import InvalidEventError
from ..models.geometry import Angle, Vector
from ..models.topology import Edge, Polygon, Vertex

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Tag distinguishing the event variants."""
    EDGE = "edge"
    SPLIT = "split"


class DiscardReason(Enum):
    """Why a candidate event was not produced."""
    REFLEX_ENDPOINT = "reflex_endpoint"
    DEGENERATE_ANGLE = "degenerate_angle"
    NOT_CONVERGING = "not_converging"
    NON_POSITIVE_TIME = "non_positive_time"
    BEHIND_EDGE = "behind_edge"
    PARALLEL = "parallel"
    OUTSIDE_EDGE = "outside_edge"


def _validate_time(time: float) -> None:
    if not math.isfinite(time) or time < 0:
        raise InvalidEventError(f"Event time must be finite and non-negative, got {time}")


# =============================================================================
# EVENT TYPES
# =============================================================================

@dataclass(frozen=True, eq=False)
class EdgeEvent:
    """
    Edge collapse at absolute time `time`.

    Raises:
        InvalidEventError: If the time is invalid or an endpoint is reflex
    """
    time: float
    edge: Edge

    kind: ClassVar[EventKind] = EventKind.EDGE

    def __post_init__(self):
        _validate_time(self.time)
        if self.edge.has_reflex_endpoint():
            raise InvalidEventError(f"Edge event on {self.edge!r} with a reflex endpoint")

    def is_still_valid(self, polygon: Polygon, now: float) -> bool:
        """True if the edge still belongs to polygon and both endpoints are convex."""
        if self.time < now:
            return False
        if polygon.index_of_edge(self.edge) is None:
            return False
        return not self.edge.has_reflex_endpoint()


@dataclass(frozen=True, eq=False)
class SplitEvent:
    """
    Reflex vertex `vertex` reaching `edge` at `intersection` at time `time`.

    Raises:
        InvalidEventError: If the time is invalid, the vertex is not reflex,
            or the edge is adjacent to the vertex
    """
    time: float
    vertex: Vertex
    edge: Edge
    intersection: Vector

    kind: ClassVar[EventKind] = EventKind.SPLIT

    def __post_init__(self):
        _validate_time(self.time)
        if not self.vertex.is_reflex():
            raise InvalidEventError(f"Split event at non-reflex {self.vertex!r}")
        if self.edge.is_adjacent(self.vertex):
            raise InvalidEventError(f"Split event of {self.vertex!r} against adjacent {self.edge!r}")

    def is_still_valid(self, polygon: Polygon, now: float,
                       tolerance: float = NUMERICAL_TOLERANCE,
                       match_tolerance: float = INTERSECTION_MATCH_TOLERANCE) -> bool:
        """
        True if the vertex and edge still belong to polygon, the vertex is
        still reflex and non-adjacent, and recomputing the intersection
        reproduces the recorded point.
        """
        if self.time < now:
            return False
        if polygon.index_of_vertex(self.vertex) is None or polygon.index_of_edge(self.edge) is None:
            return False
        if not self.vertex.is_reflex() or self.edge.is_adjacent(self.vertex):
            return False

        candidate = split_candidate(self.vertex, self.edge, tolerance)
        if candidate is None:
            return False
        _, point = candidate
        return point.distance_to(self.intersection) <= match_tolerance


Event = Union[EdgeEvent, SplitEvent]


@dataclass(frozen=True, eq=False)
class CollapseBound:
    """
    Time at which an edge with a reflex endpoint shrinks to zero length.

    Not an event: no EdgeEvent may involve a reflex vertex. The engine
    advances the wavefront to this time and merges the two endpoints while
    settling.

    Raises:
        InvalidEventError: If the time is invalid
    """
    time: float
    edge: Edge

    def __post_init__(self):
        _validate_time(self.time)


# =============================================================================
# CANDIDATE COMPUTATION
# =============================================================================

def _edge_collapse(edge: Edge, tolerance: float) -> Tuple[Optional[float], Optional[DiscardReason]]:
    direction = edge.direction()
    theta1 = Angle.between(direction, edge.v1.bisector)
    theta2 = Angle.between(direction, edge.v2.bisector)

    sin1, sin2 = theta1.sin(), theta2.sin()
    if abs(sin1) < tolerance or abs(sin2) < tolerance:
        return None, DiscardReason.DEGENERATE_ANGLE

    # Endpoint drift along the edge per unit of normal advance
    closing = theta1.cos() / sin1 - theta2.cos() / sin2
    if closing <= tolerance:
        return None, DiscardReason.NOT_CONVERGING

    interval = edge.length() / closing
    if not math.isfinite(interval) or interval <= tolerance:
        return None, DiscardReason.NON_POSITIVE_TIME
    return interval, None


def edge_collapse_interval(edge: Edge, tolerance: float = NUMERICAL_TOLERANCE) -> Optional[float]:
    """
    Time until edge shrinks to zero length.

    The edge advances at unit normal speed while each endpoint slides
    along its bisector. With theta the angle from the edge direction to an
    endpoint's bisector, that endpoint drifts along the edge at cot(theta),
    so the edge shortens at cot(theta1) - cot(theta2).

    Args:
        edge: Edge whose endpoints have current bisectors
        tolerance: Sines and closing rates below this count as zero

    Returns:
        Positive interval, or None if the edge never collapses
    """
    interval, _ = _edge_collapse(edge, tolerance)
    return interval


def _split(vertex: Vertex, edge: Edge,
           tolerance: float) -> Tuple[Optional[Tuple[float, Vector]], Optional[DiscardReason]]:
    normal = edge.inward_normal()
    start = edge.v1.position

    distance = normal.dot(vertex.position - start)
    if distance <= tolerance:
        return None, DiscardReason.BEHIND_EDGE

    velocity = vertex.velocity()
    # The edge line advances at unit normal speed toward the vertex
    closing = BISECTOR_VELOCITY - normal.dot(velocity)
    if closing < tolerance:
        return None, DiscardReason.PARALLEL

    interval = distance / closing
    if not math.isfinite(interval) or interval <= tolerance:
        return None, DiscardReason.NON_POSITIVE_TIME

    point = vertex.position + velocity * interval

    # The hit must land on the edge as it stands at that moment
    a = edge.v1.position_at(interval)
    b = edge.v2.position_at(interval)
    span = b - a
    span_sq = span.dot(span)
    if span_sq < tolerance:
        return None, DiscardReason.OUTSIDE_EDGE

    t = (point - a).dot(span) / span_sq
    if t < -tolerance or t > 1.0 + tolerance:
        return None, DiscardReason.OUTSIDE_EDGE

    return (interval, point), None


def split_candidate(vertex: Vertex, edge: Edge,
                    tolerance: float = NUMERICAL_TOLERANCE) -> Optional[Tuple[float, Vector]]:
    """
    Where and when a reflex vertex meets the supporting line of edge.

    The vertex travels along its bisector ray while the edge line moves
    inward at unit normal speed, so the gap closes at 1 - n.w for inward
    normal n and vertex velocity w.

    Args:
        vertex: Reflex vertex
        edge: Non-adjacent edge of the same polygon
        tolerance: Closing rates and distances below this count as zero

    Returns:
        (interval, intersection point), or None if the vertex never
        reaches the edge within its extent
    """
    candidate, _ = _split(vertex, edge, tolerance)
    return candidate


@dataclass
class CandidateScan:
    """Candidate events found in one polygon, plus reflex-edge collapse bounds."""
    edge_events: List[EdgeEvent] = field(default_factory=list)
    split_events: List[SplitEvent] = field(default_factory=list)
    collapse_bounds: List[CollapseBound] = field(default_factory=list)
    discarded: Dict[str, int] = field(default_factory=dict)

    def events(self) -> List[Event]:
        """Edge events first, then split events."""
        return list(self.edge_events) + list(self.split_events)

    def discard(self, reason: DiscardReason) -> None:
        self.discarded[reason.value] = self.discarded.get(reason.value, 0) + 1


def scan_polygon(polygon: Polygon, now: float,
                 tolerance: float = NUMERICAL_TOLERANCE,
                 debug: bool = False) -> CandidateScan:
    """
    Compute every candidate event of polygon.

    Args:
        polygon: Current wavefront component
        now: Absolute time of the current wavefront
        tolerance: Numerical tolerance for degeneracy checks
        debug: Log every candidate and discard

    Edges with a reflex endpoint never yield an EdgeEvent, but when they
    shrink their collapse time is recorded as a CollapseBound.

    Returns:
        CandidateScan with absolute event times
    """
    scan = CandidateScan()

    for edge in polygon.edges:
        if edge.has_reflex_endpoint():
            scan.discard(DiscardReason.REFLEX_ENDPOINT)
            interval = edge_collapse_interval(edge, tolerance)
            if interval is not None:
                scan.collapse_bounds.append(CollapseBound(now + interval, edge))
                if debug:
                    logger.debug(f"Reflex edge {edge!r} collapses at t={now + interval:.6f}")
            continue
        interval, reason = _edge_collapse(edge, tolerance)
        if interval is None:
            scan.discard(reason)
            if debug:
                logger.debug(f"No edge event for {edge!r}: {reason.value}")
            continue
        scan.edge_events.append(EdgeEvent(now + interval, edge))
        if debug:
            logger.debug(f"Edge event candidate {edge!r} at t={now + interval:.6f}")

    for vertex in polygon.vertices:
        if not vertex.is_reflex():
            continue
        for edge in polygon.edges:
            if edge.is_adjacent(vertex):
                continue
            candidate, reason = _split(vertex, edge, tolerance)
            if candidate is None:
                scan.discard(reason)
                if debug:
                    logger.debug(f"No split of {vertex!r} by {edge!r}: {reason.value}")
                continue
            interval, point = candidate
            scan.split_events.append(SplitEvent(now + interval, vertex, edge, point))
            if debug:
                logger.debug(
                    f"Split event candidate {vertex!r} on {edge!r} "
                    f"at ({point.x:.6f}, {point.y:.6f}) t={now + interval:.6f}"
                )

    return scan


# =============================================================================
# EVENT QUEUE
# =============================================================================

class EventQueue:
    """
    Pending events ordered by time, ties in insertion order.

    Backed by a binary heap keyed on (time, insertion sequence).
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, Event]] = []
        self._sequence = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def add(self, event: Event) -> None:
        heapq.heappush(self._heap, (event.time, next(self._sequence), event))

    def poll(self) -> Optional[Event]:
        """Remove and return the earliest event, or None if empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[Event]:
        """Earliest event without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0][2]

    def is_empty(self) -> bool:
        return not self._heap

    def size(self) -> int:
        return len(self._heap)

    def clear(self) -> None:
        self._heap.clear()
