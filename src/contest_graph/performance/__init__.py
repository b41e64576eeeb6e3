"""Graph-independent per-participant statistics."""

from contest_graph.performance.mean_mode import (
    MeanModeAccumulator,
    MeanModeMetrics,
    compute_mean_mode,
)
from contest_graph.performance.openings import (
    classify_by_opening,
    opening_summary,
)
from contest_graph.performance.tracker import (
    PerformanceRecord,
    PerformanceTracker,
    track_performance,
)

__all__ = [
    "MeanModeAccumulator",
    "MeanModeMetrics",
    "PerformanceRecord",
    "PerformanceTracker",
    "classify_by_opening",
    "compute_mean_mode",
    "opening_summary",
    "track_performance",
]
