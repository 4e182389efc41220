"""
Wavefront state and topology mutation.

The Wavefront keeps the append-only history of snapshots (strictly
increasing times, the first being the input polygon at time 0) and
applies events to the current snapshot. Application never touches the
live state: it advances copies of every component to the event time,
edits them as node rings, settles simultaneous degeneracies, and
rebuilds Polygons that must pass the health check before the result can
be committed.

An update is also rejected when any new point escapes the current
wavefront: that can only happen when an earlier event was skipped.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging

from ..config import DEFAULT_CONFIG, SkeletonConfig
from ..errors import (
    EventApplicationError,
    InvariantViolation,
    SkeletonError,
    SnapshotNotFoundError,
)
from ..models.skeleton import Segment, WavefrontSnapshot
from ..models.topology import Edge, Polygon, Vertex
from ..utils.polygon_utils import point_in_polygon
from .events import CollapseBound, EdgeEvent, SplitEvent
from .rings import Ring, RingSettler, WavefrontNode, collapse_pair, split_ring

logger = logging.getLogger(__name__)


@dataclass
class WavefrontUpdate:
    """Result of applying one event, ready to be committed."""
    time: float
    polygons: List[Polygon]
    segments: List[Segment] = field(default_factory=list)


class Wavefront:
    """
    History of wavefront snapshots plus the mutation operations.

    Args:
        polygon: Validated input polygon (becomes the snapshot at time 0)
        config: Tolerances used when settling and checking results
    """

    def __init__(self, polygon: Polygon, config: SkeletonConfig = DEFAULT_CONFIG):
        self.config = config
        self._history: List[WavefrontSnapshot] = [WavefrontSnapshot(0.0, [polygon])]

    @property
    def time(self) -> float:
        """Time of the current snapshot."""
        return self._history[-1].time

    @property
    def polygons(self) -> List[Polygon]:
        """Live components of the current snapshot (not copies)."""
        return self._history[-1].polygons

    @property
    def snapshot_count(self) -> int:
        return len(self._history)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def locate_edge(self, edge: Edge) -> Optional[Tuple[int, int]]:
        """(component, edge index) of a live edge, or None if it is gone."""
        for component, polygon in enumerate(self.polygons):
            index = polygon.index_of_edge(edge)
            if index is not None:
                return component, index
        return None

    def locate_vertex(self, vertex: Vertex) -> Optional[Tuple[int, int]]:
        """(component, vertex index) of a live vertex, or None if it is gone."""
        for component, polygon in enumerate(self.polygons):
            index = polygon.index_of_vertex(vertex)
            if index is not None:
                return component, index
        return None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def collapse_edge(self, event: EdgeEvent) -> WavefrontUpdate:
        """
        Apply an edge event.

        Both endpoints leave the wavefront and a single vertex takes their
        place at the collapse point (midpoint of the advanced endpoints).

        Raises:
            EventApplicationError: If the edge is gone or the result is invalid
        """
        return self._collapse(event.edge, event.time)

    def settle_collapse(self, bound: CollapseBound) -> WavefrontUpdate:
        """
        Advance to a reflex-edge collapse and merge the edge's endpoints.

        The merge is the same as for an edge event; the merged vertex takes
        whatever classification its new neighbours give it.

        Raises:
            EventApplicationError: If the edge is gone or the result is invalid
        """
        return self._collapse(bound.edge, bound.time)

    def split_edge(self, event: SplitEvent) -> WavefrontUpdate:
        """
        Apply a split event.

        The reflex vertex leaves the wavefront at the intersection and its
        component is cut into two closed loops there.

        Raises:
            EventApplicationError: If the vertex or edge is gone or the
                result is invalid
        """
        vertex_location = self.locate_vertex(event.vertex)
        edge_location = self.locate_edge(event.edge)
        if vertex_location is None or edge_location is None:
            raise EventApplicationError("Split event references a vertex or edge that is gone")
        component, vertex_index = vertex_location
        edge_component, edge_index = edge_location
        if component != edge_component:
            raise EventApplicationError("Split event spans two wavefront components")

        rings = self._advance(event.time)
        ring = rings[component]

        settler = self._settler()
        settler.finish(ring[vertex_index], event.intersection)
        first, second = split_ring(ring, vertex_index, edge_index, event.intersection)
        rings[component:component + 1] = [first, second]

        return self._update(event.time, rings, settler)

    def commit(self, update: WavefrontUpdate) -> None:
        """
        Append the update as the new current snapshot.

        Raises:
            EventApplicationError: If the update does not move time forward
        """
        if not update.time > self.time:
            raise EventApplicationError(
                f"Snapshot time {update.time} does not follow current time {self.time}"
            )
        self._history.append(WavefrontSnapshot(update.time, list(update.polygons)))

    def _collapse(self, edge: Edge, time: float) -> WavefrontUpdate:
        location = self.locate_edge(edge)
        if location is None:
            raise EventApplicationError(f"{edge!r} is not part of the wavefront")
        component, index = location

        rings = self._advance(time)
        ring = rings[component]
        a, b = ring[index], ring[(index + 1) % len(ring)]
        point = a.position.midpoint(b.position)

        settler = self._settler()
        settler.finish(a, point)
        settler.finish(b, point)
        rings[component] = collapse_pair(ring, index, point)

        return self._update(time, rings, settler)

    def _update(self, time: float, rings: List[Ring], settler: RingSettler) -> WavefrontUpdate:
        """Settle the edited rings and check the result before handing it out."""
        update = WavefrontUpdate(time, self._rebuild(settler.settle(rings)), settler.segments)
        self._require_contained(update)
        return update

    def _settler(self) -> RingSettler:
        return RingSettler(self.config.merge_tolerance, self.config.collinear_tolerance)

    def _advance(self, time: float) -> List[Ring]:
        """Every component advanced to time, as node rings."""
        interval = time - self.time
        return [
            [WavefrontNode(v.position_at(interval), v.origin) for v in polygon.vertices]
            for polygon in self.polygons
        ]

    def _rebuild(self, rings: Sequence[Ring]) -> List[Polygon]:
        """Turn settled rings back into Polygons, enforcing the health checks."""
        polygons = []
        for ring in rings:
            try:
                polygon = Polygon([n.position for n in ring], [n.origin for n in ring])
                for vertex in polygon.vertices:
                    vertex.speed()
            except SkeletonError as e:
                raise EventApplicationError(f"Degenerate wavefront component: {e}") from e

            if polygon.signed_area() <= 0:
                raise EventApplicationError(
                    f"Wavefront component inverted (area {polygon.signed_area():.3g})"
                )
            if not polygon.is_simple():
                raise EventApplicationError("Wavefront component self-intersects")
            polygons.append(polygon)
        return polygons

    def _require_contained(self, update: WavefrontUpdate) -> None:
        """
        The wavefront only shrinks: every new vertex and every segment end
        must lie inside the current wavefront.

        Raises:
            EventApplicationError: If a point escaped, which means an
                earlier collapse or split was missed
        """
        rings = [polygon.points() for polygon in self.polygons]
        points = [v.position for polygon in update.polygons for v in polygon.vertices]
        points += [segment.end for segment in update.segments]

        tolerance = self.config.containment_tolerance
        for point in points:
            if not any(point_in_polygon(point, ring, tolerance) for ring in rings):
                raise EventApplicationError(
                    f"Point ({point.x:.6g}, {point.y:.6g}) lies outside the wavefront "
                    f"at t={self.time:.6f}"
                )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def snapshots(self) -> List[WavefrontSnapshot]:
        """Deep copies of every snapshot, oldest first."""
        return [snapshot.copy() for snapshot in self._history]

    def at_time(self, time: float) -> WavefrontSnapshot:
        """
        Latest snapshot taken at or before time.

        Raises:
            SnapshotNotFoundError: If time precedes the first snapshot
        """
        found = None
        for snapshot in self._history:
            if snapshot.time > time:
                break
            found = snapshot
        if found is None:
            raise SnapshotNotFoundError(f"No wavefront snapshot at or before t={time}")
        return found.copy()

    def validate_state(self) -> List[str]:
        """
        Check history ordering and the structure of the current components.

        Returns:
            List of problems (empty if the state is consistent)
        """
        problems = []
        times = [snapshot.time for snapshot in self._history]
        for earlier, later in zip(times, times[1:]):
            if not later > earlier:
                problems.append(f"Snapshot times not increasing: {earlier} -> {later}")

        for i, polygon in enumerate(self.polygons):
            if not polygon.is_linked():
                problems.append(f"Component {i} has broken links")
            elif not polygon.is_simple():
                problems.append(f"Component {i} is not simple")
            elif polygon.signed_area() <= 0:
                problems.append(f"Component {i} is not counter-clockwise")

        for problem in problems:
            logger.warning(f"Wavefront state: {problem}")
        return problems

    def require_valid(self) -> None:
        """
        Raises:
            InvariantViolation: If validate_state() reports any problem
        """
        problems = self.validate_state()
        if problems:
            raise InvariantViolation("; ".join(problems))
