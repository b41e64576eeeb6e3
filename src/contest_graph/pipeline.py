"""End-to-end analysis of one or more batches of contest records."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contest_graph.centrality.engine import CentralityEngine, CentralityResults
from contest_graph.core.config import AnalysisConfig
from contest_graph.core.graph import ContestGraph, build_graph
from contest_graph.core.logging import get_logger, log_timing
from contest_graph.performance.mean_mode import MeanModeMetrics, compute_mean_mode
from contest_graph.performance.tracker import PerformanceRecord, track_performance
from contest_graph.report.merge import build_report

if TYPE_CHECKING:
    from collections.abc import Sequence

    import polars as pl

    from contest_graph.core.records import ContestRecord

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    """Every intermediate result of one analysis run plus the merged report."""

    graph: ContestGraph
    centrality: CentralityResults
    performance: dict[str, PerformanceRecord]
    mean_mode: dict[str, MeanModeMetrics]
    report: pl.DataFrame


def run_analysis(
    records: Sequence[ContestRecord],
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Analyze one batch of validated contest records.

    Args:
        records: Records with two non-empty participant identities each.
        config: Analysis configuration. Defaults to AnalysisConfig().

    Returns:
        Analysis result including the normalized report.
    """
    config = config or AnalysisConfig()

    with log_timing(logger, f"analysis of {len(records)} records"):
        graph = build_graph(records)
        centrality = CentralityEngine(config=config).compute(graph)
        performance = track_performance(records)
        mean_mode = compute_mean_mode(records)
        report = build_report(graph, centrality, performance, mean_mode)

    if centrality.failures:
        logger.warning(
            f"Centrality metrics without results: {sorted(centrality.failures)}"
        )

    return AnalysisResult(
        graph=graph,
        centrality=centrality,
        performance=performance,
        mean_mode=mean_mode,
        report=report,
    )


def analyze_batches(
    batches: Sequence[Sequence[ContestRecord]],
    config: AnalysisConfig | None = None,
    parallel: bool = False,
    max_workers: int = 4,
) -> list[AnalysisResult]:
    """Analyze independent batches, each with its own graph and results.

    Args:
        batches: Record batches, e.g. one per input shard.
        config: Analysis configuration shared by every batch.
        parallel: Run batches on a thread pool. Defaults to False.
        max_workers: Maximum worker threads when parallel. Defaults to 4.

    Returns:
        One analysis result per batch, in input order.
    """
    if parallel and len(batches) > 1:
        with ThreadPoolExecutor(
            max_workers=min(max_workers, len(batches))
        ) as executor:
            futures = [
                executor.submit(run_analysis, batch, config)
                for batch in batches
            ]
            return [future.result() for future in futures]

    results = []
    for index, batch in enumerate(batches):
        logger.debug(f"Analyzing batch {index + 1}/{len(batches)}")
        results.append(run_analysis(batch, config))
    return results
