"""
Wavefront topology: Vertex, Edge and Polygon.

A Polygon owns an ordered cyclic sequence of Vertices and a derived list
of Edges, one per consecutive vertex pair. Vertex prev/next links and
Edge endpoints are non-owning references into the same Polygon and are
rebuilt wholesale by Polygon.initialize().

Orientation convention: counter-clockwise boundary in a y-up frame, so
the interior lies to the left of every edge.
"""

from typing import List, Optional, Sequence
import math

from .geometry import Angle, Vector
from ..config import BISECTOR_VELOCITY, NUMERICAL_TOLERANCE
from ..errors import ConstructionError, InvariantViolation, UnlinkedVertexError
from ..utils.math_utils import segments_intersect
from ..utils.polygon_utils import polygon_signed_area


class Vertex:
    """
    Wavefront vertex.

    Attributes:
        position: Current location
        origin: Start of the skeleton arc this vertex is tracing
        prev, next: Boundary neighbours (None until linked)
        bisector: Unit vector pointing into the polygon interior
    """

    def __init__(self, position: Vector, origin: Optional[Vector] = None):
        self.position = position
        self.origin = origin if origin is not None else position
        self.prev: Optional['Vertex'] = None
        self.next: Optional['Vertex'] = None
        self.bisector = Vector(0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vertex({self.position.x:.6g}, {self.position.y:.6g})"

    @property
    def is_linked(self) -> bool:
        return self.prev is not None and self.next is not None

    def _neighbours(self):
        if not self.is_linked:
            raise UnlinkedVertexError(f"{self!r} is not linked into a polygon")
        return self.prev, self.next

    def to_prev(self) -> Vector:
        prev, _ = self._neighbours()
        return prev.position - self.position

    def to_next(self) -> Vector:
        _, nxt = self._neighbours()
        return nxt.position - self.position

    def is_reflex(self) -> bool:
        """
        True if the interior angle exceeds 180 degrees.

        For a counter-clockwise boundary the interior is on the left, so a
        reflex corner turns clockwise: cross(toPrev, toNext) > 0.
        """
        return self.to_prev().cross(self.to_next()) > 0

    def interior_angle(self) -> Angle:
        """Counter-clockwise angle from the outgoing to the incoming edge, in (0, 2*pi)."""
        value = Angle.between(self.to_next(), self.to_prev()).radians()
        if value <= 0:
            value += 2.0 * math.pi
        return Angle(value)

    def compute_bisector(self) -> Vector:
        """
        Unit interior bisector from the current neighbours.

        Raises:
            ZeroVectorError: If an incident edge has zero length or the
                vertex is straight (incident edges antiparallel)
        """
        total = self.to_prev().normalize() + self.to_next().normalize()
        bisector = total.normalize()
        # The edge sum points outward at a reflex corner
        return -bisector if self.is_reflex() else bisector

    def speed(self) -> float:
        """
        Speed along the bisector that advances both incident edges at unit
        normal speed (1 / sin of half the interior angle).

        Raises:
            InvariantViolation: If the vertex is a spike with no finite speed
        """
        sine = self.to_next().normalize().cross(self.bisector)
        if sine < NUMERICAL_TOLERANCE:
            raise InvariantViolation(f"{self!r} has no finite speed (sin={sine:.3g})")
        return BISECTOR_VELOCITY / sine

    def velocity(self) -> Vector:
        return self.bisector * self.speed()

    def position_at(self, dt: float) -> Vector:
        """Position after the wavefront advances for dt."""
        return self.position + self.velocity() * dt


class Edge:
    """Directed wavefront edge from v1 to v2."""

    def __init__(self, v1: Vertex, v2: Vertex):
        if v1 is None or v2 is None:
            raise InvariantViolation("Edge endpoints must be vertices")
        self.v1 = v1
        self.v2 = v2

    def __repr__(self) -> str:
        return f"Edge({self.v1!r} -> {self.v2!r})"

    def vector(self) -> Vector:
        return self.v2.position - self.v1.position

    def length(self) -> float:
        return self.vector().length()

    def direction(self) -> Vector:
        return self.vector().normalize()

    def inward_normal(self) -> Vector:
        """Unit normal pointing into the polygon (left of the direction)."""
        return self.direction().perpendicular()

    def has_reflex_endpoint(self) -> bool:
        return self.v1.is_reflex() or self.v2.is_reflex()

    def is_adjacent(self, vertex: Vertex) -> bool:
        """True if vertex is an endpoint or a boundary neighbour of one."""
        candidates = (self.v1, self.v2, self.v1.prev, self.v1.next, self.v2.prev, self.v2.next)
        return any(vertex is c for c in candidates)


class Polygon:
    """
    Closed wavefront component.

    Args:
        points: Vertex positions in counter-clockwise order (at least 3)
        origins: Arc origin per vertex; defaults to the positions

    Raises:
        ConstructionError: If fewer than 3 points are given
        ZeroVectorError: If a bisector cannot be computed
    """

    def __init__(self, points: Sequence[Vector], origins: Optional[Sequence[Vector]] = None):
        if len(points) < 3:
            raise ConstructionError(f"Polygon needs at least 3 vertices, got {len(points)}")
        if origins is None:
            origins = points
        elif len(origins) != len(points):
            raise InvariantViolation("origins must match points one to one")

        self.vertices: List[Vertex] = [Vertex(p, o) for p, o in zip(points, origins)]
        self.edges: List[Edge] = []
        self.initialize()

    def __repr__(self) -> str:
        return f"Polygon({len(self.vertices)} vertices)"

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def initialize(self) -> None:
        """Relink neighbours, rebuild edges in sequence order and recompute bisectors."""
        n = len(self.vertices)
        for i, vertex in enumerate(self.vertices):
            vertex.prev = self.vertices[i - 1]
            vertex.next = self.vertices[(i + 1) % n]

        self.edges = [Edge(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]

        # Reflex tests read neighbour positions, so bisectors come last
        for vertex in self.vertices:
            vertex.bisector = vertex.compute_bisector()

    def points(self) -> List[Vector]:
        return [v.position for v in self.vertices]

    def origins(self) -> List[Vector]:
        return [v.origin for v in self.vertices]

    def signed_area(self) -> float:
        """Shoelace area, positive for counter-clockwise rings."""
        return polygon_signed_area(self.points())

    def area(self) -> float:
        return abs(self.signed_area())

    def is_clockwise(self) -> bool:
        return self.signed_area() < 0

    def is_simple(self) -> bool:
        """
        True if no two non-adjacent edges intersect.

        Pairwise four-orientation test, O(n^2).
        """
        n = len(self.edges)
        for i in range(n):
            for j in range(i + 2, n):
                # First and last edges share vertex 0
                if i == 0 and j == n - 1:
                    continue
                a, b = self.edges[i], self.edges[j]
                if segments_intersect(a.v1.position, a.v2.position, b.v1.position, b.v2.position):
                    return False
        return True

    def is_linked(self) -> bool:
        """True if every vertex is linked and every edge references member vertices."""
        members = {id(v) for v in self.vertices}
        if len(self.edges) != len(self.vertices):
            return False
        if not all(v.is_linked for v in self.vertices):
            return False
        return all(id(e.v1) in members and id(e.v2) in members and e.v1 is not e.v2
                   for e in self.edges)

    def index_of_vertex(self, vertex: Vertex) -> Optional[int]:
        for i, v in enumerate(self.vertices):
            if v is vertex:
                return i
        return None

    def index_of_edge(self, edge: Edge) -> Optional[int]:
        for i, e in enumerate(self.edges):
            if e is edge:
                return i
        return None

    def clone(self) -> 'Polygon':
        """Independent deep copy with fresh vertices, edges and bisectors."""
        return Polygon(self.points(), self.origins())

    def to_list(self) -> List[List[float]]:
        """Positions as [[x, y], ...] for serialization and comparison."""
        return [[p.x, p.y] for p in self.points()]
