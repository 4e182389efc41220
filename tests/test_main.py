"""
Tests for the command line entry point.

Runs main() on JSON files in a temporary directory and inspects the
written report.
"""

import json
import logging

import pytest

from straight_skeleton.main import load_points, main, run_skeleton
from straight_skeleton.config import SkeletonConfig


RECTANGLE = [[0, 0], [8, 0], [8, 5], [0, 5]]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_main_writes_report(tmp_path) -> None:
    source = tmp_path / "rect.json"
    source.write_text(json.dumps(RECTANGLE))
    target = tmp_path / "report.json"

    assert main([str(source), "-o", str(target)]) == 0

    report = json.loads(target.read_text())
    assert report["success"] is True
    assert len(report["segments"]) == 5
    assert [s["time"] for s in report["snapshots"]] == pytest.approx([0.0, 2.5])
    assert len(report["bisector_rays"]) == 4
    assert report["stats"]["edge_events"] == 1
    assert report["trace"] == []


def test_main_accepts_points_object_and_prints(tmp_path, capsys) -> None:
    source = tmp_path / "rect.json"
    source.write_text(json.dumps({"points": RECTANGLE}))

    assert main([str(source), "--trace"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["success"] is True
    assert report["trace"]


def test_main_reports_invalid_polygon(tmp_path) -> None:
    source = tmp_path / "cw.json"
    source.write_text(json.dumps(list(reversed(RECTANGLE))))
    target = tmp_path / "report.json"

    assert main([str(source), "-o", str(target)]) == 1

    report = json.loads(target.read_text())
    assert report["success"] is False
    assert report["errors"]


def test_main_rejects_unreadable_input(tmp_path) -> None:
    source = tmp_path / "bad.json"
    source.write_text(json.dumps({"shape": "square"}))
    assert main([str(source)]) == 1
    assert main([str(tmp_path / "missing.json")]) == 1


def test_load_points(tmp_path) -> None:
    source = tmp_path / "pts.json"
    source.write_text(json.dumps({"points": RECTANGLE}))
    assert load_points(str(source)) == RECTANGLE


def test_run_skeleton_with_budget() -> None:
    report = run_skeleton(RECTANGLE, SkeletonConfig(max_events=0))
    assert report.success is True
    assert report.segments == []
    assert report.errors
