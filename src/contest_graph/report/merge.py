"""
Merge of centrality and performance results into one normalized table.

Every row carries the seven report columns as strings. Fields that do not
apply to a row's analysis type are empty strings, never zero, so "no data"
stays distinguishable from a zero value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import polars as pl

from contest_graph.core.constants import (
    ANALYSIS_BETWEENNESS,
    ANALYSIS_CLOSENESS,
    ANALYSIS_IN_DEGREE,
    ANALYSIS_MEAN_MODE,
    ANALYSIS_OUT_DEGREE,
    ANALYSIS_PAGERANK,
    ANALYSIS_PERFORMANCE,
    ANALYSIS_WEIGHTED_BETWEENNESS,
    ANALYSIS_WEIGHTED_CLOSENESS,
    REPORT_COLUMNS,
)
from contest_graph.core.logging import get_logger, log_dataframe_stats

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from contest_graph.centrality.engine import CentralityResults
    from contest_graph.core.graph import ContestGraph
    from contest_graph.performance.mean_mode import MeanModeMetrics
    from contest_graph.performance.tracker import PerformanceRecord

logger = get_logger(__name__)

REPORT_SCHEMA = {column: pl.Utf8 for column in REPORT_COLUMNS}


def format_float(value: float) -> str:
    """Shortest round-trippable text for a float."""
    return repr(float(value))


def format_count(value: float) -> str:
    return str(int(value))


def _row(
    analysis_type: str,
    player: str,
    score: str = "",
    win_rate: str = "",
    draws: str = "",
    mean_rating_diff: str = "",
    game_count: str = "",
) -> tuple[str, ...]:
    return (
        analysis_type,
        player,
        score,
        win_rate,
        draws,
        mean_rating_diff,
        game_count,
    )


def _score_rows(
    analysis_type: str,
    scores: Mapping[str, float],
    graph: ContestGraph,
    formatter: Callable[[float], str] = format_float,
) -> list[tuple[str, ...]]:
    return [
        _row(analysis_type, player, score=formatter(scores[player]))
        for player in sorted(scores)
        if player in graph.node_index
    ]


def build_report(
    graph: ContestGraph,
    centrality: CentralityResults,
    performance: Mapping[str, PerformanceRecord],
    mean_mode: Mapping[str, MeanModeMetrics],
) -> pl.DataFrame:
    """Build the normalized analysis report.

    Groups appear in a fixed order (PageRank, betweenness, closeness,
    performance, in-degree, out-degree, weighted betweenness, weighted
    closeness, mean/mode) and rows within a group are sorted by player
    identity, so identical inputs always give identical tables.

    Args:
        graph: Contest graph the centrality results were computed on.
        centrality: Centrality results keyed by participant.
        performance: Performance records keyed by participant.
        mean_mode: Mean/mode metrics keyed by participant.

    Returns:
        DataFrame with the seven report columns, all strings, no nulls.
    """
    rows: list[tuple[str, ...]] = []

    rows += _score_rows(ANALYSIS_PAGERANK, centrality.pagerank, graph)
    rows += _score_rows(ANALYSIS_BETWEENNESS, centrality.betweenness, graph)
    rows += _score_rows(ANALYSIS_CLOSENESS, centrality.closeness, graph)

    for player in sorted(performance):
        record = performance[player]
        rows.append(
            _row(
                ANALYSIS_PERFORMANCE,
                player,
                win_rate=format_float(record.win_rate),
                draws=format_count(record.games_drawn),
                mean_rating_diff=format_float(record.total_rating_change),
                game_count=format_count(record.games_played),
            )
        )

    rows += _score_rows(
        ANALYSIS_IN_DEGREE, centrality.in_degree, graph, format_count
    )
    rows += _score_rows(
        ANALYSIS_OUT_DEGREE, centrality.out_degree, graph, format_count
    )
    rows += _score_rows(
        ANALYSIS_WEIGHTED_BETWEENNESS, centrality.weighted_betweenness, graph
    )
    rows += _score_rows(
        ANALYSIS_WEIGHTED_CLOSENESS, centrality.weighted_closeness, graph
    )

    for player in sorted(mean_mode):
        metrics = mean_mode[player]
        rows.append(
            _row(
                ANALYSIS_MEAN_MODE,
                player,
                win_rate=format_float(metrics.win_rate),
                draws=format_float(metrics.draw_credit),
                mean_rating_diff=format_float(metrics.mean_rating_diff),
                game_count=format_count(metrics.game_count),
            )
        )

    report = pl.DataFrame(rows, schema=REPORT_SCHEMA, orient="row")
    log_dataframe_stats(logger, report, "analysis report")
    return report
