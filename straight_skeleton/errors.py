"""
Exception types for the straight skeleton engine.

Construction problems are fatal to a build. Invariant violations signal
programming errors and always propagate. Event application failures are
caught by the engine at the per-event boundary, logged, and the event is
skipped.
"""


class SkeletonError(Exception):
    """Base class for all straight skeleton errors."""
    pass


class ConstructionError(SkeletonError):
    """Input points cannot form a valid simple counter-clockwise polygon."""
    pass


class InvariantViolation(SkeletonError):
    """An operation was called in a state that should never occur."""
    pass


class ZeroVectorError(InvariantViolation):
    """Attempted to normalize a zero-length vector."""
    pass


class UnlinkedVertexError(InvariantViolation):
    """A vertex was queried before it was linked into a polygon."""
    pass


class InvalidEventError(InvariantViolation):
    """An event was constructed with arguments that violate its definition."""
    pass


class EventApplicationError(SkeletonError):
    """Applying an event would leave the wavefront in an invalid state."""
    pass


class SnapshotNotFoundError(SkeletonError, LookupError):
    """No wavefront snapshot exists at or before the requested time."""
    pass
