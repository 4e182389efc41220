"""
Configuration constants for the straight skeleton engine.

Contains the numerical tolerances used by geometric predicates, the
diagnostic settings, and the runtime configuration dataclass.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================

# Threshold below which sines, determinants and closing rates count as zero
NUMERICAL_TOLERANCE = 1e-10

# A recomputed split intersection must land this close to the recorded one
INTERSECTION_MATCH_TOLERANCE = 1e-10

# Wavefront vertices closer than this are treated as coincident (world units)
MERGE_TOLERANCE = 1e-7

# |cross| of unit edge directions below this marks a straight or spike vertex
COLLINEAR_TOLERANCE = 1e-9

# New wavefront points may lie this far outside the previous wavefront
CONTAINMENT_TOLERANCE = 1e-6

# =============================================================================
# WAVEFRONT PROPAGATION
# =============================================================================

# Every vertex moves so that its incident edges advance at this normal speed
BISECTOR_VELOCITY = 1.0

# =============================================================================
# DIAGNOSTICS
# =============================================================================

# Length of the debug ray drawn along each input vertex bisector
BISECTOR_RAY_LENGTH = 10.0

# Log every candidate event and discard (very verbose)
DEBUG_EVENTS = False


# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

@dataclass
class SkeletonConfig:
    """
    Runtime configuration for a skeleton build.

    Defaults mirror the module-level constants; override per build when
    working at unusual coordinate scales.
    """

    # Predicates
    tolerance: float = NUMERICAL_TOLERANCE
    intersection_tolerance: float = INTERSECTION_MATCH_TOLERANCE

    # Wavefront cleanup after each event
    merge_tolerance: float = MERGE_TOLERANCE
    collinear_tolerance: float = COLLINEAR_TOLERANCE
    containment_tolerance: float = CONTAINMENT_TOLERANCE

    # Diagnostics
    bisector_ray_length: float = BISECTOR_RAY_LENGTH
    debug: bool = DEBUG_EVENTS

    # Stop after this many processed events (None = run until the queue empties)
    max_events: Optional[int] = None

    def __post_init__(self):
        """Validate configuration values."""
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")

        if self.intersection_tolerance <= 0:
            raise ValueError("intersection_tolerance must be positive")

        if self.merge_tolerance < self.tolerance:
            raise ValueError(
                f"merge_tolerance must be at least tolerance ({self.tolerance})"
            )

        if self.collinear_tolerance <= 0:
            raise ValueError("collinear_tolerance must be positive")

        if self.containment_tolerance <= 0:
            raise ValueError("containment_tolerance must be positive")

        if self.bisector_ray_length <= 0:
            raise ValueError("bisector_ray_length must be positive")

        if self.max_events is not None and self.max_events < 0:
            raise ValueError("max_events must be non-negative")


# Default configuration instance
DEFAULT_CONFIG = SkeletonConfig()
