"""Protocol definitions for pluggable centrality backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contest_graph.core.config import (
        BetweennessConfig,
        ClosenessConfig,
        PageRankConfig,
    )
    from contest_graph.core.graph import ContestGraph


@runtime_checkable
class CentralityBackend(Protocol):
    """Protocol for centrality computation backends.

    This allows the centrality engine to run on different graph libraries
    (numpy/scipy, networkx, ...) while the report merger only ever sees
    mappings keyed by participant identity.
    """

    name: str

    def pagerank(
        self, graph: ContestGraph, config: PageRankConfig
    ) -> dict[str, float]:
        """PageRank score per participant; scores sum to 1.

        Hitting ``config.max_iter`` returns the last iterate, or raises
        ComputationFailure when ``config.strict`` is set.
        """
        ...

    def betweenness(
        self,
        graph: ContestGraph,
        config: BetweennessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        """Betweenness centrality per participant."""
        ...

    def closeness(
        self,
        graph: ContestGraph,
        config: ClosenessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        """Outgoing closeness centrality per participant."""
        ...

    def degree(self, graph: ContestGraph) -> dict[str, tuple[int, int]]:
        """Exact ``(in_degree, out_degree)`` per participant."""
        ...
