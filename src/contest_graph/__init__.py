"""Contest-graph analytics for pairwise game records."""

from __future__ import annotations

# Core functionality - Main API
from contest_graph.centrality import (
    CentralityEngine,
    CentralityResults,
    compute_centrality,
)
from contest_graph.core import (
    AnalysisConfig,
    ContestGraph,
    ContestRecord,
    Outcome,
    ParsingProfile,
    build_graph,
    records_from_dataframe,
)
from contest_graph.core.errors import (
    ComputationFailure,
    ContestGraphError,
    ExportFailure,
    MalformedRecordError,
)
from contest_graph.performance import (
    MeanModeMetrics,
    PerformanceRecord,
    compute_mean_mode,
    track_performance,
)
from contest_graph.pipeline import AnalysisResult, analyze_batches, run_analysis
from contest_graph.report import build_report, write_report

__version__ = "0.1.0"

__all__ = [
    # Core API - Essential functions
    "run_analysis",
    "analyze_batches",
    "AnalysisResult",
    "AnalysisConfig",
    # Records and graph
    "ContestRecord",
    "Outcome",
    "ParsingProfile",
    "records_from_dataframe",
    "ContestGraph",
    "build_graph",
    # Centrality
    "CentralityEngine",
    "CentralityResults",
    "compute_centrality",
    # Performance
    "PerformanceRecord",
    "MeanModeMetrics",
    "track_performance",
    "compute_mean_mode",
    # Report
    "build_report",
    "write_report",
    # Errors
    "ContestGraphError",
    "MalformedRecordError",
    "ComputationFailure",
    "ExportFailure",
    # Version
    "__version__",
]
