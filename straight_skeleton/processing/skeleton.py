"""
Straight skeleton engine.

Builds the wavefront from caller points and drives the event loop:
pop the earliest candidate, revalidate it, apply it, record the finished
segments, then discard the queue and rebuild it from the new topology.
Edges with a reflex endpoint never become events; when one of them
collapses before the next queued event the wavefront is advanced to that
time and the edge is merged away instead. The loop ends when neither an
event nor such a collapse remains.

Failure policy: an error while applying an event is logged, recorded in
the diagnostic trace, and the event is skipped. The same event is not
proposed again until the topology changes.
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Set, Tuple, Union
import logging

from ..config import DEFAULT_CONFIG, SkeletonConfig
from ..errors import ConstructionError, InvariantViolation, ZeroVectorError
from ..models.geometry import Vector
from ..models.skeleton import Segment, SkeletonStats, WavefrontSnapshot
from ..models.topology import Polygon
from ..utils.polygon_utils import is_finite_ring, open_ring
from .events import CollapseBound, Event, EventKind, EventQueue, scan_polygon
from .wavefront import Wavefront

logger = logging.getLogger(__name__)

PointLike = Union[Vector, Sequence[float]]

# Identifies an event or collapse by its place in one topology:
# (kind, component, vertex, edge)
EventKey = Tuple[str, int, int, int]

SETTLE_KIND = "settle"


def build_input_polygon(points: Sequence[PointLike], tolerance: float) -> Polygon:
    """
    Validate caller points and build the input polygon.

    Args:
        points: Counter-clockwise boundary as Vectors or (x, y) pairs; a
            repeated closing point is dropped
        tolerance: Areas at or below this count as degenerate

    Returns:
        Linked, simple, counter-clockwise Polygon

    Raises:
        ConstructionError: If the points cannot form such a polygon
    """
    try:
        ring = [Vector.coerce(p) for p in points]
    except (TypeError, ValueError) as e:
        raise ConstructionError(f"Invalid point: {e}") from e

    ring = open_ring(ring, tolerance)
    if len(ring) < 3:
        raise ConstructionError(f"Need at least 3 distinct points, got {len(ring)}")
    if not is_finite_ring(ring):
        raise ConstructionError("Point coordinates must be finite")

    try:
        polygon = Polygon(ring)
    except ZeroVectorError as e:
        raise ConstructionError(f"Duplicate or collinear consecutive points: {e}") from e

    if polygon.area() <= tolerance:
        raise ConstructionError("Polygon has zero area")
    if not polygon.is_simple():
        raise ConstructionError("Polygon self-intersects")
    if polygon.is_clockwise():
        raise ConstructionError("Polygon must be counter-clockwise")
    if not polygon.is_linked():
        raise ConstructionError("Polygon topology is not linked")

    for vertex in polygon.vertices:
        try:
            vertex.speed()
        except InvariantViolation as e:
            raise ConstructionError(f"Degenerate corner: {e}") from e

    return polygon


class Skeleton:
    """
    Straight skeleton of a simple counter-clockwise polygon.

    Construction validates the input and seeds the wavefront but
    processes no event; call run() (or use build()) to compute.

    Args:
        points: Counter-clockwise boundary as Vectors or (x, y) pairs
        config: Runtime configuration (defaults to DEFAULT_CONFIG)

    Raises:
        ConstructionError: If the input is not a valid simple CCW polygon
    """

    def __init__(self, points: Sequence[PointLike], config: Optional[SkeletonConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._trace: List[str] = []
        self._segments: List[Segment] = []
        self._rejected: Set[EventKey] = set()
        self._queue = EventQueue()
        self._bounds: List[CollapseBound] = []
        self._completed = False

        try:
            self._input = build_input_polygon(points, self.config.tolerance)
        except ConstructionError as e:
            logger.error(f"Invalid input polygon: {e}")
            raise

        self._wavefront = Wavefront(self._input.clone(), self.config)
        self._wavefront.require_valid()

        reflex = sum(1 for v in self._input.vertices if v.is_reflex())
        self._stats = SkeletonStats(
            input_vertices=self._input.vertex_count,
            reflex_vertices=reflex,
            snapshots=1,
        )
        self._log(
            logging.INFO,
            f"Input polygon: {self._input.vertex_count} vertices "
            f"({reflex} reflex), area {self._input.area():.6g}"
        )
        self._rebuild_queue()

    @classmethod
    def prepare(cls, points: Sequence[PointLike],
                config: Optional[SkeletonConfig] = None) -> 'Skeleton':
        """Validated engine with no event processed yet."""
        return cls(points, config)

    @classmethod
    def build(cls, points: Sequence[PointLike],
              config: Optional[SkeletonConfig] = None) -> 'Skeleton':
        """Validate points and run the event loop to completion (or config.max_events)."""
        skeleton = cls(points, config)
        skeleton.run(skeleton.config.max_events)
        return skeleton

    # =========================================================================
    # EVENT LOOP
    # =========================================================================

    @property
    def time(self) -> float:
        """Time of the current wavefront."""
        return self._wavefront.time

    @property
    def is_finished(self) -> bool:
        return self._queue.is_empty() and not self._bounds

    @property
    def pending_events(self) -> int:
        """Queued events (reflex-edge collapses are not events and not counted)."""
        return self._queue.size()

    def step(self) -> bool:
        """
        Process the earliest pending event or reflex-edge collapse.

        A collapse bound strictly earlier than the next event is settled
        first; on a tie the event goes first and its settling merges the
        edge anyway.

        Returns:
            False if nothing was pending, True otherwise (including when
            the event was stale or failed and was skipped)
        """
        event = self._queue.peek()
        bound = self._bounds[0] if self._bounds else None

        if bound is not None and (event is None or bound.time < event.time):
            self._settle(bound)
        elif event is not None:
            self._queue.poll()
            self._process(event)
        else:
            self._complete()
            return False

        self._rebuild_queue()
        return True

    def run(self, max_events: Optional[int] = None) -> int:
        """
        Process until nothing remains or max_events steps have been taken.

        Returns:
            Number of steps taken (events and reflex-edge collapses)
        """
        taken = 0
        while max_events is None or taken < max_events:
            if not self.step():
                break
            taken += 1

        if self.is_finished:
            self._complete()
        return taken

    def _complete(self) -> None:
        if self._completed:
            return
        self._completed = True
        components = len(self._wavefront.polygons)
        self._log(
            logging.INFO,
            f"Skeleton complete at t={self.time:.6f}: {len(self._segments)} segments, "
            f"{self._stats.events_processed} events, {components} components remaining"
        )

    def _process(self, event: Event) -> None:
        label = f"{event.kind.value} event at t={event.time:.6f}"
        key = self._event_key(event)
        location = self._wavefront.locate_edge(event.edge)

        if key is None or location is None:
            valid = False
        else:
            polygon = self._wavefront.polygons[location[0]]
            if event.kind is EventKind.EDGE:
                valid = event.is_still_valid(polygon, self.time)
            else:
                valid = event.is_still_valid(
                    polygon, self.time,
                    self.config.tolerance, self.config.intersection_tolerance
                )

        if not valid:
            self._stats.events_stale += 1
            if key is not None:
                self._rejected.add(key)
            self._log(logging.DEBUG, f"Dropped stale {label}")
            return

        try:
            if event.kind is EventKind.EDGE:
                update = self._wavefront.collapse_edge(event)
            else:
                update = self._wavefront.split_edge(event)
            self._wavefront.commit(update)
        except Exception as e:
            self._stats.events_failed += 1
            self._rejected.add(key)
            self._log(logging.WARNING, f"Skipped {label}: {e}")
            return

        self._record(update.segments)
        self._stats.events_processed += 1
        if event.kind is EventKind.EDGE:
            self._stats.edge_events += 1
        else:
            self._stats.split_events += 1

        self._log(
            logging.DEBUG,
            f"Applied {label}: {len(update.segments)} segments, "
            f"{len(update.polygons)} components"
        )

    def _settle(self, bound: CollapseBound) -> None:
        """Advance to a reflex-edge collapse and merge the edge away."""
        label = f"reflex edge collapse at t={bound.time:.6f}"
        location = self._wavefront.locate_edge(bound.edge)
        if location is None:
            self._bounds.pop(0)
            self._log(logging.DEBUG, f"Dropped stale {label}")
            return
        key = (SETTLE_KIND, location[0], -1, location[1])

        try:
            update = self._wavefront.settle_collapse(bound)
            self._wavefront.commit(update)
        except Exception as e:
            self._stats.events_failed += 1
            self._rejected.add(key)
            self._log(logging.WARNING, f"Skipped {label}: {e}")
            return

        self._record(update.segments)
        self._stats.settlements += 1
        self._log(
            logging.DEBUG,
            f"Settled {label}: {len(update.segments)} segments, "
            f"{len(update.polygons)} components"
        )

    def _record(self, segments: List[Segment]) -> None:
        """Keep the segments of a committed update and reopen rejected candidates."""
        self._segments.extend(segments)
        self._rejected.clear()
        self._stats.segments = len(self._segments)
        self._stats.snapshots = self._wavefront.snapshot_count

    def _event_key(self, event: Event) -> Optional[EventKey]:
        location = self._wavefront.locate_edge(event.edge)
        if location is None:
            return None
        component, edge_index = location

        vertex_index = -1
        if event.kind is EventKind.SPLIT:
            vertex_location = self._wavefront.locate_vertex(event.vertex)
            if vertex_location is None:
                return None
            vertex_index = vertex_location[1]
        return (event.kind.value, component, vertex_index, edge_index)

    def _rebuild_queue(self) -> None:
        """Discard every pending event and rescan the current topology."""
        now = self.time
        scans = [
            scan_polygon(polygon, now, self.config.tolerance, self.config.debug)
            for polygon in self._wavefront.polygons
        ]

        queue = EventQueue()
        candidates = [e for scan in scans for e in scan.edge_events]
        candidates += [e for scan in scans for e in scan.split_events]
        for event in candidates:
            if self._rejected and self._event_key(event) in self._rejected:
                self._discard("previously_rejected")
                continue
            queue.add(event)

        bounds = []
        for component, scan in enumerate(scans):
            polygon = self._wavefront.polygons[component]
            for bound in scan.collapse_bounds:
                key = (SETTLE_KIND, component, -1, polygon.index_of_edge(bound.edge))
                if key in self._rejected:
                    self._discard("previously_rejected")
                    continue
                bounds.append(bound)

        for scan in scans:
            for reason, count in scan.discarded.items():
                self._discard(reason, count)

        self._queue = queue
        self._bounds = sorted(bounds, key=lambda b: b.time)
        self._stats.queue_rebuilds += 1
        self._stats.candidates_found += len(candidates)

        if self.config.debug:
            self._log(
                logging.DEBUG,
                f"Queue rebuilt at t={now:.6f}: {queue.size()} pending, "
                f"{len(self._bounds)} reflex edge collapses"
            )

    def _discard(self, reason: str, count: int = 1) -> None:
        discarded = self._stats.candidates_discarded
        discarded[reason] = discarded.get(reason, 0) + count

    def _log(self, level: int, message: str) -> None:
        """Log and append to the diagnostic trace."""
        logger.log(level, message)
        self._trace.append(f"[{logging.getLevelName(level)}] {message}")

    # =========================================================================
    # QUERIES (all results are copies)
    # =========================================================================

    @property
    def stats(self) -> SkeletonStats:
        return replace(self._stats, candidates_discarded=dict(self._stats.candidates_discarded))

    def input_polygon(self) -> Polygon:
        return self._input.clone()

    def wavefront_snapshots(self) -> List[WavefrontSnapshot]:
        """Every recorded wavefront snapshot, oldest first."""
        return self._wavefront.snapshots()

    def wavefront_at_time(self, time: float) -> WavefrontSnapshot:
        """
        Latest wavefront snapshot at or before time.

        Raises:
            SnapshotNotFoundError: If time precedes the first snapshot
        """
        return self._wavefront.at_time(time)

    def angle_bisector_rays(self) -> List[Segment]:
        """Fixed-length ray along each input vertex bisector."""
        length = self.config.bisector_ray_length
        return [Segment(v.position, v.position + v.bisector * length) for v in self._input.vertices]

    def skeleton_segments(self) -> List[Segment]:
        """Finished skeleton segments in the order they were produced."""
        return list(self._segments)

    def debug_trace(self) -> List[str]:
        return list(self._trace)

    def validate_state(self) -> List[str]:
        return self._wavefront.validate_state()


def build(points: Sequence[PointLike], config: Optional[SkeletonConfig] = None) -> Skeleton:
    """
    Compute the straight skeleton of a simple counter-clockwise polygon.

    Args:
        points: Boundary as Vectors or (x, y) pairs
        config: Runtime configuration

    Returns:
        Skeleton with all events processed (or config.max_events)

    Raises:
        ConstructionError: If the input is not a valid simple CCW polygon
    """
    return Skeleton.build(points, config)
