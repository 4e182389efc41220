"""
Node-ring operations used while applying an event.

Between events the wavefront is held as Polygons. While an event is
applied it is held as plain rings of WavefrontNode (position plus arc
origin): the event edits the rings, the settler cleans up whatever
simultaneous degeneracies the edit exposed, and the surviving rings are
rebuilt as Polygons.

Every node leaving the wavefront closes its arc into a finished segment.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import COLLINEAR_TOLERANCE, MERGE_TOLERANCE
from ..models.geometry import Vector
from ..models.skeleton import Segment
from ..utils.math_utils import point_to_segment_distance
from ..utils.polygon_utils import distinct_points


@dataclass(frozen=True, slots=True)
class WavefrontNode:
    """Vertex position and the origin of the arc it is tracing."""
    position: Vector
    origin: Vector

    @classmethod
    def fresh(cls, position: Vector) -> 'WavefrontNode':
        """Node starting a new arc at position."""
        return cls(position, position)


Ring = List[WavefrontNode]


def cyclic_slice(ring: Sequence[WavefrontNode], start: int, stop: int) -> Ring:
    """Nodes from start to stop inclusive, walking forward around the ring."""
    n = len(ring)
    i, stop = start % n, stop % n
    result = [ring[i]]
    while i != stop:
        i = (i + 1) % n
        result.append(ring[i])
    return result


def collapse_pair(ring: Sequence[WavefrontNode], index: int, point: Vector) -> Ring:
    """Replace nodes index and index + 1 (cyclic) by one fresh node at point."""
    n = len(ring)
    node = WavefrontNode.fresh(point)
    if index < n - 1:
        return list(ring[:index]) + [node] + list(ring[index + 2:])
    return list(ring[1:n - 1]) + [node]


def split_ring(ring: Sequence[WavefrontNode], vertex_index: int, edge_index: int,
               point: Vector) -> Tuple[Ring, Ring]:
    """
    Cut a ring where the node at vertex_index meets edge edge_index.

    The first ring runs from the node's successor to the edge start, the
    second from the edge end to the node's predecessor. Each is closed
    through its own fresh node at point.
    """
    first = [WavefrontNode.fresh(point)] + cyclic_slice(ring, vertex_index + 1, edge_index)
    second = [WavefrontNode.fresh(point)] + cyclic_slice(ring, edge_index + 1, vertex_index - 1)
    return first, second


class RingSettler:
    """
    Resolves degeneracies left in rings after an event.

    Repeats until nothing changes: merge coincident neighbours, drop
    straight vertices, cut back spike tips, and split rings where a vertex
    touches a non-incident edge. Rings reduced below three nodes dissolve,
    leaving a ridge when two distinct points remain.

    Attributes:
        segments: Finished segments emitted so far
    """

    def __init__(self, merge_tolerance: float = MERGE_TOLERANCE,
                 collinear_tolerance: float = COLLINEAR_TOLERANCE):
        self.merge_tolerance = merge_tolerance
        self.collinear_tolerance = collinear_tolerance
        self.segments: List[Segment] = []

    def finish(self, node: WavefrontNode, point: Vector) -> None:
        """Close node's arc at point."""
        self.ridge(node.origin, point)

    def ridge(self, start: Vector, end: Vector) -> None:
        if start.distance_to(end) > self.merge_tolerance:
            self.segments.append(Segment(start, end))

    def settle(self, rings: Sequence[Ring]) -> List[Ring]:
        """Settle every ring; returns the surviving rings in order."""
        result: List[Ring] = []
        for ring in rings:
            result.extend(self._settle_ring(list(ring)))
        return result

    def _settle_ring(self, ring: Ring) -> List[Ring]:
        while True:
            if len(ring) < 3:
                self._dissolve(ring)
                return []

            changed = self._merge_coincident(ring)
            if changed is None:
                changed = self._remove_degenerate_vertex(ring)
            if changed is not None:
                ring = changed
                continue

            parts = self._split_at_contact(ring)
            if parts is not None:
                return self.settle(parts)
            return [ring]

    def _merge_coincident(self, ring: Ring) -> Optional[Ring]:
        n = len(ring)
        for i in range(n):
            a, b = ring[i], ring[(i + 1) % n]
            if a.position.is_close(b.position, self.merge_tolerance):
                point = a.position.midpoint(b.position)
                self.finish(a, point)
                self.finish(b, point)
                return collapse_pair(ring, i, point)
        return None

    def _remove_degenerate_vertex(self, ring: Ring) -> Optional[Ring]:
        n = len(ring)
        for i in range(n):
            prev, node, nxt = ring[i - 1], ring[i], ring[(i + 1) % n]
            to_prev = prev.position - node.position
            to_next = nxt.position - node.position
            if abs(to_prev.normalize().cross(to_next.normalize())) > self.collinear_tolerance:
                continue

            self.finish(node, node.position)
            result = list(ring)

            if to_prev.dot(to_next) < 0:
                # Straight vertex: the neighbours keep their supporting lines
                del result[i]
                return result

            # Spike tip: the two sides of the spike met along its length
            near_index = i - 1 if to_prev.length() <= to_next.length() else (i + 1) % n
            near = ring[near_index]
            self.ridge(node.position, near.position)
            self.finish(near, near.position)
            result[near_index] = WavefrontNode.fresh(near.position)
            del result[i]
            return result
        return None

    def _split_at_contact(self, ring: Ring) -> Optional[Tuple[Ring, Ring]]:
        n = len(ring)
        for i in range(n):
            point = ring[i].position
            for j in range(n):
                # Skip the two edges incident to node i
                if j == i or j == (i - 1) % n:
                    continue
                a, b = ring[j].position, ring[(j + 1) % n].position
                if point_to_segment_distance(point, a, b) <= self.merge_tolerance:
                    self.finish(ring[i], point)
                    return split_ring(ring, i, j, point)
        return None

    def _dissolve(self, ring: Ring) -> None:
        for node in ring:
            self.finish(node, node.position)
        points = distinct_points([node.position for node in ring], self.merge_tolerance)
        if len(points) == 2:
            self.ridge(points[0], points[1])
