"""
Tests for the event model and the event queue.

Checks construction-time validation of edge and split events, the
collapse-interval and split-intersection computations, candidate
scanning, revalidation against changed topology, and queue ordering.
"""

import math

import pytest

from straight_skeleton.errors import InvalidEventError
from straight_skeleton.models.geometry import Vector
from straight_skeleton.models.topology import Polygon
from straight_skeleton.processing.events import (
    CollapseBound,
    EdgeEvent,
    EventKind,
    EventQueue,
    SplitEvent,
    edge_collapse_interval,
    scan_polygon,
    split_candidate,
)


def rectangle() -> Polygon:
    return Polygon([Vector(0, 0), Vector(8, 0), Vector(8, 5), Vector(0, 5)])


def l_shape() -> Polygon:
    return Polygon([Vector(0, 0), Vector(2, 0), Vector(2, 1), Vector(1, 1), Vector(1, 2), Vector(0, 2)])


def v_notch() -> Polygon:
    """Rectangle with a V cut into its top side; the reflex tip is at (5, 2)."""
    return Polygon([Vector(0, 0), Vector(10, 0), Vector(10, 4), Vector(5, 2), Vector(0, 4)])


# =============================================================================
# EVENT CONSTRUCTION
# =============================================================================

def test_edge_event_rejects_reflex_endpoint() -> None:
    """Edges touching a reflex vertex never collapse as edge events."""
    polygon = l_shape()
    with pytest.raises(InvalidEventError):
        EdgeEvent(1.0, polygon.edges[2])


@pytest.mark.parametrize("time", [-0.5, math.inf, math.nan])
def test_event_time_must_be_finite_and_non_negative(time: float) -> None:
    with pytest.raises(InvalidEventError):
        EdgeEvent(time, rectangle().edges[0])


def test_split_event_rejects_convex_vertex() -> None:
    """Only reflex vertices can split the wavefront."""
    polygon = l_shape()
    with pytest.raises(InvalidEventError):
        SplitEvent(0.5, polygon.vertices[0], polygon.edges[3], Vector(0, 0))


def test_split_event_rejects_adjacent_edge() -> None:
    """A reflex vertex cannot split an edge next to it."""
    polygon = l_shape()
    notch = polygon.vertices[3]
    with pytest.raises(InvalidEventError):
        SplitEvent(0.5, notch, polygon.edges[1], Vector(1.5, 0.5))


def test_event_kinds() -> None:
    polygon = l_shape()
    assert EdgeEvent(0.5, polygon.edges[0]).kind is EventKind.EDGE
    assert SplitEvent(0.5, polygon.vertices[3], polygon.edges[0], Vector(0.5, 0.5)).kind is EventKind.SPLIT


# =============================================================================
# CANDIDATE COMPUTATION
# =============================================================================

def test_rectangle_collapse_intervals() -> None:
    """Short sides of the 8x5 rectangle collapse at 2.5, long sides at 4."""
    edges = rectangle().edges
    assert math.isclose(edge_collapse_interval(edges[0]), 4.0, abs_tol=1e-9)
    assert math.isclose(edge_collapse_interval(edges[1]), 2.5, abs_tol=1e-9)
    assert math.isclose(edge_collapse_interval(edges[2]), 4.0, abs_tol=1e-9)
    assert math.isclose(edge_collapse_interval(edges[3]), 2.5, abs_tol=1e-9)


def test_translating_edge_never_collapses() -> None:
    """Both endpoints of the L notch step slide in parallel, so the edge keeps its length."""
    assert edge_collapse_interval(l_shape().edges[2]) is None


def test_l_shape_split_candidate() -> None:
    """The notch of the L reaches the bottom edge at (0.5, 0.5) after 0.5."""
    polygon = l_shape()
    candidate = split_candidate(polygon.vertices[3], polygon.edges[0])
    assert candidate is not None
    interval, point = candidate
    assert math.isclose(interval, 0.5, abs_tol=1e-9)
    assert math.isclose(point.x, 0.5, abs_tol=1e-9)
    assert math.isclose(point.y, 0.5, abs_tol=1e-9)


def test_v_notch_split_candidate() -> None:
    """The V tip drops straight down and meets the rising bottom edge."""
    polygon = v_notch()
    speed = math.sqrt(29) / 5
    expected = 2.0 / (1.0 + speed)

    interval, point = split_candidate(polygon.vertices[3], polygon.edges[0])
    assert math.isclose(interval, expected, abs_tol=1e-9)
    assert math.isclose(point.x, 5.0, abs_tol=1e-9)
    assert math.isclose(point.y, expected, abs_tol=1e-9)


def test_split_candidate_on_edge_line() -> None:
    """A vertex lying on an edge's supporting line gets no candidate."""
    polygon = v_notch()
    assert split_candidate(polygon.vertices[3], polygon.edges[2]) is None


def test_scan_v_notch() -> None:
    """Three convex edges give edge events and the tip gives one split event."""
    scan = scan_polygon(v_notch(), now=0.0)
    assert len(scan.edge_events) == 3
    assert len(scan.split_events) == 1
    assert scan.discarded == {'reflex_endpoint': 2}

    events = scan.events()
    assert [e.kind for e in events] == [EventKind.EDGE] * 3 + [EventKind.SPLIT]
    split = scan.split_events[0]
    assert split.vertex.position == Vector(5, 2)
    assert split.edge.v1.position == Vector(0, 0)


def test_scan_times_are_absolute() -> None:
    """Candidate times are offset by the current wavefront time."""
    scan = scan_polygon(rectangle(), now=1.25)
    times = sorted(e.time for e in scan.edge_events)
    assert math.isclose(times[0], 3.75, abs_tol=1e-9)
    assert math.isclose(times[-1], 5.25, abs_tol=1e-9)


def test_scan_records_reflex_edge_collapse_bounds() -> None:
    """
    The two edges at the V tip shrink but cannot be edge events.

    Each closes at sqrt(29)/5 per unit time over its length sqrt(29), so
    both reach zero length 5 time units after the scan.
    """
    scan = scan_polygon(v_notch(), now=1.0)
    assert [b.time for b in scan.collapse_bounds] == pytest.approx([6.0, 6.0])
    assert all(b.edge.has_reflex_endpoint() for b in scan.collapse_bounds)


def test_translating_reflex_edges_have_no_bound() -> None:
    """The L notch edges keep their length, so nothing is recorded."""
    scan = scan_polygon(l_shape(), now=0.0)
    assert scan.collapse_bounds == []
    assert scan.discarded['reflex_endpoint'] == 2


def test_collapse_bound_time_validated() -> None:
    with pytest.raises(InvalidEventError):
        CollapseBound(-1.0, v_notch().edges[2])


# =============================================================================
# REVALIDATION
# =============================================================================

def test_split_event_still_valid_on_unchanged_polygon() -> None:
    polygon = v_notch()
    event = scan_polygon(polygon, now=0.0).split_events[0]
    assert event.is_still_valid(polygon, now=0.0)


def test_split_event_stale_after_reinitialize() -> None:
    """Reinitializing rebuilds the edge list, so events on old edges go stale."""
    polygon = v_notch()
    event = scan_polygon(polygon, now=0.0).split_events[0]
    polygon.vertices[0].position = Vector(0, -1)
    polygon.initialize()
    assert not event.is_still_valid(polygon, now=0.0)


def test_split_event_stale_on_intersection_mismatch() -> None:
    """A recorded intersection that no longer matches the recomputed one is stale."""
    polygon = v_notch()
    event = SplitEvent(0.9, polygon.vertices[3], polygon.edges[0], Vector(5.0, 0.5))
    assert not event.is_still_valid(polygon, now=0.0)


def test_events_stale_against_other_topology() -> None:
    """Events reference live objects, so a clone does not contain them."""
    polygon = v_notch()
    scan = scan_polygon(polygon, now=0.0)
    clone = polygon.clone()
    assert not scan.edge_events[0].is_still_valid(clone, now=0.0)
    assert not scan.split_events[0].is_still_valid(clone, now=0.0)


def test_event_in_the_past_is_stale() -> None:
    polygon = rectangle()
    event = EdgeEvent(1.0, polygon.edges[1])
    assert event.is_still_valid(polygon, now=0.5)
    assert not event.is_still_valid(polygon, now=2.0)


# =============================================================================
# QUEUE
# =============================================================================

def test_queue_orders_by_time() -> None:
    """Insertions at 5, 1, 3 poll as 1, 3, 5."""
    edges = rectangle().edges
    queue = EventQueue()
    for time, edge in zip([5.0, 1.0, 3.0], edges):
        queue.add(EdgeEvent(time, edge))

    assert queue.size() == 3
    assert [queue.poll().time for _ in range(3)] == [1.0, 3.0, 5.0]
    assert queue.is_empty()
    assert queue.poll() is None


def test_queue_ties_keep_insertion_order() -> None:
    edges = rectangle().edges
    first = EdgeEvent(2.0, edges[0])
    second = EdgeEvent(2.0, edges[1])
    queue = EventQueue()
    queue.add(first)
    queue.add(second)
    assert queue.poll() is first
    assert queue.poll() is second


def test_queue_peek_does_not_remove() -> None:
    edges = rectangle().edges
    queue = EventQueue()
    assert queue.peek() is None
    event = EdgeEvent(1.0, edges[0])
    queue.add(event)
    assert queue.peek() is event
    assert len(queue) == 1
    queue.clear()
    assert queue.is_empty()
