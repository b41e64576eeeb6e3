"""Configuration dataclasses for contest-graph analytics."""

from dataclasses import dataclass, field
from typing import Optional

from contest_graph.core.constants import (
    BACKEND_SPARSE,
    DEFAULT_BETWEENNESS_SAMPLES,
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PAGERANK_TOLERANCE,
    DEFAULT_SAMPLING_SEED,
    DEFAULT_WF_IMPROVED,
)


@dataclass(frozen=True)
class PageRankConfig:
    """Configuration for PageRank algorithm."""

    alpha: float = DEFAULT_DAMPING_FACTOR
    tol: float = DEFAULT_PAGERANK_TOLERANCE
    max_iter: int = DEFAULT_MAX_ITERATIONS
    redistribute_dangling: bool = True
    # Raise ComputationFailure instead of returning the last iterate
    strict: bool = False


@dataclass(frozen=True)
class BetweennessConfig:
    """Configuration for betweenness centrality."""

    normalized: bool = True
    # Number of sampled sources; None means exact (every node is a source)
    k: Optional[int] = DEFAULT_BETWEENNESS_SAMPLES
    seed: int = DEFAULT_SAMPLING_SEED
    show_progress: bool = False

    def __post_init__(self) -> None:
        if self.k is not None and self.k < 1:
            raise ValueError(
                f"Betweenness sample size must be at least 1, got {self.k}"
            )


@dataclass(frozen=True)
class ClosenessConfig:
    """Configuration for closeness centrality."""

    wf_improved: bool = DEFAULT_WF_IMPROVED


@dataclass
class AnalysisConfig:
    """Configuration for a full analysis run."""

    pagerank: PageRankConfig = field(default_factory=PageRankConfig)
    betweenness: BetweennessConfig = field(default_factory=BetweennessConfig)
    closeness: ClosenessConfig = field(default_factory=ClosenessConfig)

    # "sparse" (numpy/scipy) or "networkx"
    backend: str = BACKEND_SPARSE

    # Show tqdm progress for every betweenness pass
    verbose: bool = False
