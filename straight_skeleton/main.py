"""
Straight Skeleton - Main CLI

Computes the straight skeleton of a polygon read from a JSON file and
writes a JSON report with the skeleton segments, wavefront snapshots and
run statistics.

Input is either a list of [x, y] pairs or an object with a "points" key,
in counter-clockwise order.

Usage:
    python -m straight_skeleton.main <polygon.json> [--output report.json]

Example:
    python -m straight_skeleton.main ./examples/l_shape.json -o l_shape_skeleton.json
"""

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from . import __version__
from .config import SkeletonConfig, BISECTOR_RAY_LENGTH
from .errors import SkeletonError
from .processing.skeleton import Skeleton

logger = logging.getLogger(__name__)


@dataclass
class SkeletonReport:
    """Report from a skeleton run."""
    version: str
    success: bool
    input_points: List[List[float]] = field(default_factory=list)
    segments: List[List[List[float]]] = field(default_factory=list)
    snapshots: List[Dict[str, Any]] = field(default_factory=list)
    bisector_rays: List[List[List[float]]] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    processing_time_ms: int = 0
    errors: List[str] = field(default_factory=list)
    trace: List[str] = field(default_factory=list)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Console goes to stderr so stdout stays clean for the report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)


def load_points(path: str) -> List[List[float]]:
    """
    Read polygon points from a JSON file.

    Raises:
        ValueError: If the file does not hold a point list
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('points')
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of [x, y] points or an object with 'points'")
    return data


def run_skeleton(points: List, config: SkeletonConfig, include_trace: bool = False) -> SkeletonReport:
    """
    Build the skeleton and collect the report.

    Construction errors are reported, not raised.
    """
    start_time = time.time()
    report = SkeletonReport(version=__version__, success=False, input_points=points)

    try:
        skeleton = Skeleton.build(points, config)
    except SkeletonError as e:
        report.errors.append(str(e))
        report.processing_time_ms = int((time.time() - start_time) * 1000)
        return report

    report.success = True
    report.segments = [s.to_list() for s in skeleton.skeleton_segments()]
    report.snapshots = [s.to_dict() for s in skeleton.wavefront_snapshots()]
    report.bisector_rays = [r.to_list() for r in skeleton.angle_bisector_rays()]
    report.stats = asdict(skeleton.stats)
    if include_trace:
        report.trace = skeleton.debug_trace()

    if not skeleton.is_finished:
        report.errors.append(f"Stopped after {config.max_events} events with events pending")

    report.processing_time_ms = int((time.time() - start_time) * 1000)
    logger.info(
        f"Computed {len(report.segments)} segments and {len(report.snapshots)} snapshots "
        f"in {report.processing_time_ms} ms"
    )
    return report


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Straight Skeleton - Compute the straight skeleton of a simple polygon'
    )

    parser.add_argument(
        'input',
        help='JSON file with counter-clockwise polygon points'
    )

    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Write the JSON report here (default: stdout)'
    )

    parser.add_argument(
        '--max-events',
        type=int,
        default=None,
        help='Stop after this many events (default: run to completion)'
    )

    parser.add_argument(
        '--ray-length',
        type=float,
        default=BISECTOR_RAY_LENGTH,
        help=f'Length of the bisector debug rays (default: {BISECTOR_RAY_LENGTH})'
    )

    parser.add_argument(
        '--trace',
        action='store_true',
        help='Include the diagnostic trace in the report'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (DEBUG) logging'
    )

    parser.add_argument(
        '--log-file',
        default=None,
        help='Also write the log to this file'
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    try:
        points = load_points(args.input)
        config = SkeletonConfig(
            bisector_ray_length=args.ray_length,
            max_events=args.max_events,
            debug=args.verbose,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Cannot start: {e}")
        return 1

    report = run_skeleton(points, config, include_trace=args.trace)
    payload = json.dumps(asdict(report), indent=2)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(payload)
        logger.info(f"Report written to {args.output}")
    else:
        print(payload)

    if not report.success:
        for error in report.errors:
            logger.error(error)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
