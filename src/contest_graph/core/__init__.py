"""Core components: records, graph, configuration and PageRank."""

from contest_graph.core.config import (
    AnalysisConfig,
    BetweennessConfig,
    ClosenessConfig,
    PageRankConfig,
)
from contest_graph.core.graph import ContestGraph, build_graph
from contest_graph.core.pagerank import PageRankSolution, pagerank_sparse
from contest_graph.core.records import (
    ContestRecord,
    Outcome,
    ParsingProfile,
    records_from_dataframe,
)

__all__ = [
    # Config
    "AnalysisConfig",
    "BetweennessConfig",
    "ClosenessConfig",
    "PageRankConfig",
    # Graph
    "ContestGraph",
    "build_graph",
    # PageRank
    "PageRankSolution",
    "pagerank_sparse",
    # Records
    "ContestRecord",
    "Outcome",
    "ParsingProfile",
    "records_from_dataframe",
]
