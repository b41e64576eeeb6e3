"""Sparse power-iteration PageRank solver."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

from contest_graph.core.config import PageRankConfig
from contest_graph.core.errors import ComputationFailure
from contest_graph.core.logging import get_logger, log_algorithm_convergence

logger = get_logger(__name__)


@dataclass
class PageRankSolution:
    """Scores and convergence diagnostics of one PageRank run."""

    scores: np.ndarray
    iterations: int
    converged: bool
    final_delta: float


def pagerank_sparse(
    adjacency: sp.csr_matrix,
    cfg: PageRankConfig,
    teleport: np.ndarray | None = None,
) -> PageRankSolution:
    """Row-stochastic PageRank on a sparse adjacency matrix.

    Entry (i, j) is the total weight of links i -> j; each row is
    normalized into transition probabilities. Mass sitting on dangling
    nodes (no outgoing links) is spread through the teleport vector, and
    the iterate is renormalized every step so the scores sum to 1.

    Args:
        adjacency: Square weighted adjacency matrix.
        cfg: PageRank configuration.
        teleport: Teleport probability vector. Defaults to uniform.

    Returns:
        PageRank solution whose scores sum to 1.

    Raises:
        ComputationFailure: If ``cfg.strict`` is set and the iteration cap
            is reached before the L1 change drops below ``cfg.tol``.
    """
    num_nodes = adjacency.shape[0]
    if num_nodes == 0:
        return PageRankSolution(
            scores=np.zeros(0), iterations=0, converged=True, final_delta=0.0
        )

    if teleport is None:
        teleport = np.full(num_nodes, 1.0 / num_nodes)
    else:
        teleport = teleport / teleport.sum()

    out_weight = np.asarray(adjacency.sum(axis=1)).ravel()
    inverse_out_weight = np.zeros_like(out_weight)
    nonzero_mask = out_weight > 0
    inverse_out_weight[nonzero_mask] = 1.0 / out_weight[nonzero_mask]

    transposed = adjacency.T.tocsr()
    rank_vector = teleport.copy()
    alpha = cfg.alpha
    delta = float("inf")

    for iteration in range(1, cfg.max_iter + 1):
        link_mass = transposed.dot(rank_vector * inverse_out_weight)

        dangling_mass = (
            alpha * rank_vector[~nonzero_mask].sum()
            if cfg.redistribute_dangling
            else 0.0
        )

        new_rank = (
            alpha * link_mass
            + (1 - alpha) * teleport
            + dangling_mass * teleport
        )
        new_rank /= new_rank.sum()

        delta = float(np.linalg.norm(new_rank - rank_vector, 1))
        rank_vector = new_rank
        if delta < cfg.tol:
            log_algorithm_convergence(
                logger, iteration, delta, cfg.tol, algorithm="PageRank"
            )
            return PageRankSolution(
                scores=rank_vector,
                iterations=iteration,
                converged=True,
                final_delta=delta,
            )

    log_algorithm_convergence(
        logger, cfg.max_iter, delta, cfg.tol, algorithm="PageRank"
    )
    if cfg.strict:
        raise ComputationFailure(
            "pagerank",
            f"no convergence after {cfg.max_iter} iterations (delta={delta:.2e})",
        )

    return PageRankSolution(
        scores=rank_vector,
        iterations=cfg.max_iter,
        converged=False,
        final_delta=delta,
    )
