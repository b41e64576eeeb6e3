"""Centrality engine running every metric over one contest graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable

from contest_graph.centrality.networkx_backend import NetworkXBackend
from contest_graph.centrality.sparse import SparseBackend
from contest_graph.core.config import AnalysisConfig
from contest_graph.core.constants import BACKEND_NETWORKX, BACKEND_SPARSE
from contest_graph.core.logging import get_logger, log_timing

if TYPE_CHECKING:
    from typing import Any

    from contest_graph.centrality.protocols import CentralityBackend
    from contest_graph.core.graph import ContestGraph

_BACKENDS: dict[str, Callable[[], CentralityBackend]] = {
    BACKEND_SPARSE: SparseBackend,
    BACKEND_NETWORKX: NetworkXBackend,
}


def get_backend(name: str) -> CentralityBackend:
    """Instantiate a centrality backend by name.

    Args:
        name: "sparse" or "networkx".

    Returns:
        Backend instance.
    """
    try:
        return _BACKENDS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown centrality backend: {name!r} (expected one of {sorted(_BACKENDS)})"
        ) from None


@dataclass
class CentralityResults:
    """One identity-keyed mapping per centrality metric."""

    pagerank: dict[str, float] = field(default_factory=dict)
    betweenness: dict[str, float] = field(default_factory=dict)
    closeness: dict[str, float] = field(default_factory=dict)
    degree: dict[str, tuple[int, int]] = field(default_factory=dict)
    weighted_betweenness: dict[str, float] = field(default_factory=dict)
    weighted_closeness: dict[str, float] = field(default_factory=dict)

    # metric name -> error message for metrics that failed
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def in_degree(self) -> dict[str, int]:
        return {node: counts[0] for node, counts in self.degree.items()}

    @property
    def out_degree(self) -> dict[str, int]:
        return {node: counts[1] for node, counts in self.degree.items()}


class CentralityEngine:
    """
    Runs PageRank, betweenness, closeness, degree and the weighted
    betweenness/closeness variants through a pluggable backend.

    Metrics are independent: a metric that raises is logged, recorded in
    ``CentralityResults.failures`` and left as an empty mapping, while the
    remaining metrics still run.
    """

    def __init__(
        self,
        backend: CentralityBackend | None = None,
        config: AnalysisConfig | None = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.backend = backend or get_backend(self.config.backend)
        self.logger = get_logger(self.__class__.__name__)

    def compute(self, graph: ContestGraph) -> CentralityResults:
        """Compute every centrality metric over ``graph``.

        Args:
            graph: Contest graph to analyze.

        Returns:
            Results with one mapping per metric; all empty for an empty graph.
        """
        results = CentralityResults()
        if graph.is_empty():
            self.logger.info("Empty graph, skipping centrality computation")
            return results

        config = self.config
        betweenness_config = config.betweenness
        if config.verbose:
            betweenness_config = replace(betweenness_config, show_progress=True)

        metrics: list[tuple[str, Callable[[], Any]]] = [
            (
                "pagerank",
                lambda: self.backend.pagerank(graph, config.pagerank),
            ),
            (
                "betweenness",
                lambda: self.backend.betweenness(
                    graph, betweenness_config, weighted=False
                ),
            ),
            (
                "closeness",
                lambda: self.backend.closeness(
                    graph, config.closeness, weighted=False
                ),
            ),
            ("degree", lambda: self.backend.degree(graph)),
            (
                "weighted_betweenness",
                lambda: self.backend.betweenness(
                    graph, betweenness_config, weighted=True
                ),
            ),
            (
                "weighted_closeness",
                lambda: self.backend.closeness(
                    graph, config.closeness, weighted=True
                ),
            ),
        ]

        for metric, compute_metric in metrics:
            try:
                with log_timing(
                    self.logger,
                    f"{metric} on {graph.num_nodes} nodes ({self.backend.name})",
                    level=logging.DEBUG,
                    failure_level=None,
                ):
                    setattr(results, metric, compute_metric())
            except Exception as exception:
                self.logger.warning(
                    f"{metric} failed, leaving its result empty: {exception}"
                )
                results.failures[metric] = str(exception)

        return results


def compute_centrality(
    graph: ContestGraph, config: AnalysisConfig | None = None
) -> CentralityResults:
    """Convenience wrapper around :class:`CentralityEngine`."""
    return CentralityEngine(config=config).compute(graph)
