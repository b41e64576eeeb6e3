"""Centrality metrics over contest graphs."""

from contest_graph.centrality.engine import (
    CentralityEngine,
    CentralityResults,
    compute_centrality,
    get_backend,
)
from contest_graph.centrality.networkx_backend import NetworkXBackend
from contest_graph.centrality.protocols import CentralityBackend
from contest_graph.centrality.sparse import SparseBackend

__all__ = [
    "CentralityBackend",
    "CentralityEngine",
    "CentralityResults",
    "NetworkXBackend",
    "SparseBackend",
    "compute_centrality",
    "get_backend",
]
