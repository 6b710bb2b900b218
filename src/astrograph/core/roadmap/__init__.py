"""Roadmap models, planner and star chart projection."""

from astrograph.core.roadmap.chart import (
    CHART_EXTENT,
    FOCUS_SIZE,
    focus_window,
    project,
    scale,
    trajectory_path,
)
from astrograph.core.roadmap.models import (
    ASCENSION_PHASES,
    ROADMAP_LENGTH,
    AscensionStep,
    Roadmap,
)
from astrograph.core.roadmap.planner import RoadmapPlanner, step_from_wire

__all__ = [
    "ASCENSION_PHASES",
    "CHART_EXTENT",
    "FOCUS_SIZE",
    "ROADMAP_LENGTH",
    "AscensionStep",
    "Roadmap",
    "RoadmapPlanner",
    "focus_window",
    "project",
    "scale",
    "step_from_wire",
    "trajectory_path",
]
