"""Directed contest multigraph and its builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import polars as pl
import scipy.sparse as sp

from contest_graph.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contest_graph.core.records import ContestRecord

logger = get_logger(__name__)


def _readonly(values: np.ndarray) -> np.ndarray:
    values.setflags(write=False)
    return values


@dataclass(frozen=True, eq=False)
class ContestGraph:
    """Directed multigraph of participants.

    Nodes are participant identities indexed in first-seen order. Each
    record contributes one edge ``participant_a -> participant_b``;
    parallel edges are kept as separate entries of the edge arrays.
    """

    nodes: tuple[str, ...]
    sources: np.ndarray
    targets: np.ndarray
    weights: np.ndarray
    node_index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not (len(self.sources) == len(self.targets) == len(self.weights)):
            raise ValueError("Edge arrays must have equal length")
        object.__setattr__(
            self,
            "node_index",
            {node: index for index, node in enumerate(self.nodes)},
        )
        object.__setattr__(
            self, "sources", _readonly(np.array(self.sources, dtype=np.int64))
        )
        object.__setattr__(
            self, "targets", _readonly(np.array(self.targets, dtype=np.int64))
        )
        object.__setattr__(
            self,
            "weights",
            _readonly(np.array(self.weights, dtype=np.float64)),
        )

    @classmethod
    def empty(cls) -> "ContestGraph":
        return cls(
            nodes=(),
            sources=np.array([], dtype=np.int64),
            targets=np.array([], dtype=np.int64),
            weights=np.array([], dtype=np.float64),
        )

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return len(self.sources)

    def is_empty(self) -> bool:
        return self.num_nodes == 0

    def adjacency(self) -> sp.csr_matrix:
        """Weighted adjacency with parallel edges summed.

        Returns:
            CSR matrix where entry (i, j) is the total weight of i -> j edges.
        """
        return sp.csr_matrix(
            (self.weights, (self.sources, self.targets)),
            shape=(self.num_nodes, self.num_nodes),
        )

    def shortest_path_adjacency(self, weighted: bool) -> sp.csr_matrix:
        """Adjacency for path searches with parallel edges collapsed.

        Collapsed pairs keep the lightest edge weight; every weight is 1.0
        when ``weighted`` is False. Self-loops are dropped since they never
        lie on a shortest path.

        Args:
            weighted: Whether to honour edge weights.

        Returns:
            CSR matrix with one explicit entry per connected ordered pair.
        """
        mask = self.sources != self.targets
        sources = self.sources[mask]
        targets = self.targets[mask]
        weights = self.weights[mask] if weighted else np.ones(len(sources))

        if len(sources) == 0:
            return sp.csr_matrix((self.num_nodes, self.num_nodes))

        pairs = pl.DataFrame(
            {"source": sources, "target": targets, "weight": weights}
        )
        collapsed = pairs.group_by(["source", "target"]).agg(
            pl.col("weight").min()
        )
        return sp.csr_matrix(
            (
                collapsed["weight"].to_numpy(),
                (
                    collapsed["source"].to_numpy(),
                    collapsed["target"].to_numpy(),
                ),
            ),
            shape=(self.num_nodes, self.num_nodes),
        )

    def in_degree(self) -> np.ndarray:
        return np.bincount(self.targets, minlength=self.num_nodes)

    def out_degree(self) -> np.ndarray:
        return np.bincount(self.sources, minlength=self.num_nodes)

    def edges_dataframe(self) -> pl.DataFrame:
        """Edge list with participant identities.

        Returns:
            DataFrame with columns: source, target, weight.
        """
        node_series = pl.Series("node", list(self.nodes), dtype=pl.Utf8)
        return pl.DataFrame(
            {
                "source": node_series.gather(self.sources),
                "target": node_series.gather(self.targets),
                "weight": self.weights,
            },
            schema={"source": pl.Utf8, "target": pl.Utf8, "weight": pl.Float64},
        )


def build_graph(records: Sequence[ContestRecord]) -> ContestGraph:
    """Build the directed contest multigraph from a batch of records.

    Args:
        records: Validated contest records.

    Returns:
        Graph with one node per distinct participant and one weight-1 edge
        per record, from participant A to participant B.
    """
    node_index: dict[str, int] = {}
    nodes: list[str] = []
    sources: list[int] = []
    targets: list[int] = []

    for record in records:
        for participant in (record.participant_a, record.participant_b):
            if participant not in node_index:
                node_index[participant] = len(nodes)
                nodes.append(participant)
        sources.append(node_index[record.participant_a])
        targets.append(node_index[record.participant_b])

    logger.debug(f"Built graph with {len(nodes)} nodes and {len(sources)} edges")

    return ContestGraph(
        nodes=tuple(nodes),
        sources=np.array(sources, dtype=np.int64),
        targets=np.array(targets, dtype=np.int64),
        weights=np.ones(len(sources), dtype=np.float64),
    )
