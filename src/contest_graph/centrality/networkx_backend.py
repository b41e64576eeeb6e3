"""Centrality backend delegating to networkx."""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from contest_graph.core.errors import ComputationFailure
from contest_graph.core.logging import get_logger
from contest_graph.core.pagerank import pagerank_sparse

if TYPE_CHECKING:
    from contest_graph.core.config import (
        BetweennessConfig,
        ClosenessConfig,
        PageRankConfig,
    )
    from contest_graph.core.graph import ContestGraph


def to_networkx(graph: ContestGraph) -> nx.MultiDiGraph:
    """Convert a contest graph into a networkx multigraph.

    Node insertion order follows the contest graph, and every record edge
    becomes its own parallel edge carrying a ``weight`` attribute.
    """
    multigraph = nx.MultiDiGraph()
    multigraph.add_nodes_from(graph.nodes)
    multigraph.add_weighted_edges_from(
        (graph.nodes[source], graph.nodes[target], weight)
        for source, target, weight in zip(
            graph.sources.tolist(),
            graph.targets.tolist(),
            graph.weights.tolist(),
        )
    )
    return multigraph


class NetworkXBackend:
    """Centrality backend using networkx algorithms."""

    name = "networkx"

    def __init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__)

    def pagerank(
        self, graph: ContestGraph, config: PageRankConfig
    ) -> dict[str, float]:
        if graph.is_empty():
            return {}

        try:
            return nx.pagerank(
                to_networkx(graph),
                alpha=config.alpha,
                max_iter=config.max_iter,
                tol=config.tol,
                weight="weight",
            )
        except nx.PowerIterationFailedConvergence as exception:
            if config.strict:
                raise ComputationFailure(
                    "pagerank", str(exception)
                ) from exception

            # networkx keeps no iterate on failure; rerun the sparse solver,
            # which returns its last iterate
            self.logger.warning(
                f"networkx PageRank did not converge in {config.max_iter} "
                "iterations, using the last sparse iterate"
            )
            solution = pagerank_sparse(graph.adjacency(), config)
            return dict(zip(graph.nodes, solution.scores.tolist()))

    def betweenness(
        self,
        graph: ContestGraph,
        config: BetweennessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        if graph.is_empty():
            return {}

        k = config.k if config.k is not None and config.k < graph.num_nodes else None
        return nx.betweenness_centrality(
            to_networkx(graph),
            k=k,
            normalized=config.normalized,
            weight="weight" if weighted else None,
            seed=config.seed if k is not None else None,
        )

    def closeness(
        self,
        graph: ContestGraph,
        config: ClosenessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        if graph.is_empty():
            return {}

        # networkx measures incoming distance on directed graphs
        reversed_graph = to_networkx(graph).reverse(copy=True)
        return nx.closeness_centrality(
            reversed_graph,
            distance="weight" if weighted else None,
            wf_improved=config.wf_improved,
        )

    def degree(self, graph: ContestGraph) -> dict[str, tuple[int, int]]:
        multigraph = to_networkx(graph)
        return {
            node: (multigraph.in_degree(node), multigraph.out_degree(node))
            for node in graph.nodes
        }
