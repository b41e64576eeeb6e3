"""Centrality backend built on numpy and scipy.sparse."""

from __future__ import annotations

import heapq
from collections import deque
from typing import TYPE_CHECKING

import numpy as np
from scipy.sparse.csgraph import shortest_path
from tqdm import tqdm

from contest_graph.core.logging import get_logger
from contest_graph.core.pagerank import pagerank_sparse

if TYPE_CHECKING:
    from contest_graph.core.config import (
        BetweennessConfig,
        ClosenessConfig,
        PageRankConfig,
    )
    from contest_graph.core.graph import ContestGraph

# Source rows per csgraph call when computing closeness
CLOSENESS_CHUNK_ROWS = 256


def _shortest_paths_unweighted(
    indptr: list[int], indices: list[int], source: int, num_nodes: int
) -> tuple[list[int], list[list[int]], list[float]]:
    """BFS from ``source`` collecting visit order, predecessors and path counts."""
    stack: list[int] = []
    predecessors: list[list[int]] = [[] for _ in range(num_nodes)]
    sigma = [0.0] * num_nodes
    sigma[source] = 1.0
    distance = [-1] * num_nodes
    distance[source] = 0

    queue = deque([source])
    while queue:
        node = queue.popleft()
        stack.append(node)
        next_distance = distance[node] + 1
        for neighbor in indices[indptr[node] : indptr[node + 1]]:
            if distance[neighbor] < 0:
                distance[neighbor] = next_distance
                queue.append(neighbor)
            if distance[neighbor] == next_distance:
                sigma[neighbor] += sigma[node]
                predecessors[neighbor].append(node)

    return stack, predecessors, sigma


def _shortest_paths_weighted(
    indptr: list[int],
    indices: list[int],
    weights: list[float],
    source: int,
    num_nodes: int,
) -> tuple[list[int], list[list[int]], list[float]]:
    """Dijkstra from ``source`` collecting settle order, predecessors and path counts."""
    stack: list[int] = []
    predecessors: list[list[int]] = [[] for _ in range(num_nodes)]
    sigma = [0.0] * num_nodes
    sigma[source] = 1.0
    settled: dict[int, float] = {}
    seen: dict[int, float] = {source: 0.0}

    # (distance, tie-breaker, predecessor, node); -1 marks the source
    heap = [(0.0, 0, -1, source)]
    counter = 1
    while heap:
        dist, _, predecessor, node = heapq.heappop(heap)
        if node in settled:
            continue
        if predecessor >= 0:
            sigma[node] += sigma[predecessor]
        stack.append(node)
        settled[node] = dist

        for position in range(indptr[node], indptr[node + 1]):
            neighbor = indices[position]
            candidate = dist + weights[position]
            if neighbor not in settled and (
                neighbor not in seen or candidate < seen[neighbor]
            ):
                seen[neighbor] = candidate
                heapq.heappush(heap, (candidate, counter, node, neighbor))
                counter += 1
                sigma[neighbor] = 0.0
                predecessors[neighbor] = [node]
            elif candidate == seen.get(neighbor):
                sigma[neighbor] += sigma[node]
                predecessors[neighbor].append(node)

    return stack, predecessors, sigma


class SparseBackend:
    """
    Centrality backend on numpy/scipy.

    PageRank uses the sparse power iteration, betweenness is Brandes'
    algorithm over the collapsed adjacency (BFS or Dijkstra), and
    closeness reads distances from ``scipy.sparse.csgraph`` in blocks of
    source rows.
    """

    name = "sparse"

    def __init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__)

    def pagerank(
        self, graph: ContestGraph, config: PageRankConfig
    ) -> dict[str, float]:
        if graph.is_empty():
            return {}

        solution = pagerank_sparse(graph.adjacency(), config)
        return dict(zip(graph.nodes, solution.scores.tolist()))

    def betweenness(
        self,
        graph: ContestGraph,
        config: BetweennessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        num_nodes = graph.num_nodes
        if num_nodes == 0:
            return {}

        adjacency = graph.shortest_path_adjacency(weighted)
        indptr = adjacency.indptr.tolist()
        indices = adjacency.indices.tolist()
        weights = adjacency.data.tolist()

        if config.k is None or config.k >= num_nodes:
            sources = list(range(num_nodes))
        else:
            rng = np.random.default_rng(config.seed)
            sources = sorted(
                rng.choice(num_nodes, size=config.k, replace=False).tolist()
            )

        iterator = sources
        if config.show_progress:
            iterator = tqdm(
                sources,
                desc="Weighted betweenness" if weighted else "Betweenness",
            )

        betweenness = np.zeros(num_nodes)
        for source in iterator:
            if weighted:
                stack, predecessors, sigma = _shortest_paths_weighted(
                    indptr, indices, weights, source, num_nodes
                )
            else:
                stack, predecessors, sigma = _shortest_paths_unweighted(
                    indptr, indices, source, num_nodes
                )

            dependency = [0.0] * num_nodes
            while stack:
                node = stack.pop()
                coefficient = (1.0 + dependency[node]) / sigma[node]
                for predecessor in predecessors[node]:
                    dependency[predecessor] += sigma[predecessor] * coefficient
                if node != source:
                    betweenness[node] += dependency[node]

        scale = 1.0
        if config.normalized and num_nodes > 2:
            scale = 1.0 / ((num_nodes - 1) * (num_nodes - 2))
        if len(sources) < num_nodes:
            scale *= num_nodes / len(sources)
            self.logger.debug(
                f"Estimated betweenness from {len(sources)} of {num_nodes} sources"
            )

        return dict(zip(graph.nodes, (betweenness * scale).tolist()))

    def closeness(
        self,
        graph: ContestGraph,
        config: ClosenessConfig,
        weighted: bool = False,
    ) -> dict[str, float]:
        num_nodes = graph.num_nodes
        if num_nodes == 0:
            return {}

        adjacency = graph.shortest_path_adjacency(weighted)
        scores = np.zeros(num_nodes)

        # One block of sources at a time: peak memory is CLOSENESS_CHUNK_ROWS x n
        for start in range(0, num_nodes, CLOSENESS_CHUNK_ROWS):
            rows = np.arange(start, min(start + CLOSENESS_CHUNK_ROWS, num_nodes))
            distances = shortest_path(
                adjacency,
                method="D",
                directed=True,
                unweighted=not weighted,
                indices=rows,
            )
            distances[np.arange(rows.size), rows] = np.inf

            reachable = np.isfinite(distances)
            reached = reachable.sum(axis=1)
            distances[~reachable] = 0.0
            total_distance = distances.sum(axis=1)
            del distances, reachable

            valid = (reached > 0) & (total_distance > 0.0)
            block = np.zeros(rows.size)
            block[valid] = reached[valid] / total_distance[valid]
            if config.wf_improved and num_nodes > 1:
                block *= reached / (num_nodes - 1)
            scores[rows] = block

        return dict(zip(graph.nodes, scores.tolist()))

    def degree(self, graph: ContestGraph) -> dict[str, tuple[int, int]]:
        in_degree = graph.in_degree().tolist()
        out_degree = graph.out_degree().tolist()
        return {
            node: (in_degree[index], out_degree[index])
            for index, node in enumerate(graph.nodes)
        }
