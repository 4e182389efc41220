"""
Processing modules for the straight skeleton engine.

Contains the event model and queue, the wavefront history with its
topology mutations, and the engine that drives the event loop.
"""

from .events import (
    EventKind,
    DiscardReason,
    EdgeEvent,
    SplitEvent,
    CollapseBound,
    EventQueue,
    CandidateScan,
    edge_collapse_interval,
    split_candidate,
    scan_polygon,
)
from .wavefront import Wavefront, WavefrontUpdate
from .skeleton import Skeleton, build, build_input_polygon

__all__ = [
    'EventKind',
    'DiscardReason',
    'EdgeEvent',
    'SplitEvent',
    'CollapseBound',
    'EventQueue',
    'CandidateScan',
    'edge_collapse_interval',
    'split_candidate',
    'scan_polygon',
    'Wavefront',
    'WavefrontUpdate',
    'Skeleton',
    'build',
    'build_input_polygon',
]
