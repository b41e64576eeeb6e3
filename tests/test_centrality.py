"""Tests for the centrality backends and engine."""

import logging
import tracemalloc

import numpy as np
import pytest

from contest_graph.centrality import sparse as sparse_module
from contest_graph.centrality import (
    CentralityBackend,
    CentralityEngine,
    NetworkXBackend,
    SparseBackend,
    get_backend,
)
from contest_graph.core.config import (
    AnalysisConfig,
    BetweennessConfig,
    ClosenessConfig,
    PageRankConfig,
)
from contest_graph.core.errors import ComputationFailure
from contest_graph.core.graph import ContestGraph, build_graph
from contest_graph.core.records import ContestRecord, Outcome

BACKENDS = [SparseBackend(), NetworkXBackend()]


def _record(game_id, white, black, result=Outcome.A_WIN):
    return ContestRecord(
        id=game_id, participant_a=white, participant_b=black, outcome=result
    )


@pytest.fixture
def chain_graph():
    return build_graph(
        [_record("1", "P1", "P2"), _record("2", "P2", "P3", Outcome.B_WIN)]
    )


@pytest.fixture
def shortcut_graph():
    # A -> B -> C is lighter than the direct A -> C edge
    return ContestGraph(
        nodes=("A", "B", "C"),
        sources=np.array([0, 1, 0]),
        targets=np.array([1, 2, 2]),
        weights=np.array([1.0, 1.0, 3.0]),
    )


@pytest.fixture
def mixed_graph():
    records = [
        _record("1", "a", "b"),
        _record("2", "b", "c"),
        _record("3", "c", "a"),
        _record("4", "c", "d"),
        _record("5", "d", "e"),
        _record("6", "e", "c"),
        _record("7", "a", "b"),
        _record("8", "f", "a"),
        _record("9", "b", "e"),
    ]
    return build_graph(records)


@pytest.mark.parametrize("backend", BACKENDS, ids=lambda b: b.name)
class TestBackendContract:
    def test_is_centrality_backend(self, backend):
        assert isinstance(backend, CentralityBackend)

    def test_pagerank_chain(self, backend, chain_graph):
        scores = backend.pagerank(chain_graph, PageRankConfig())
        assert set(scores) == {"P1", "P2", "P3"}
        assert sum(scores.values()) == pytest.approx(1.0)
        assert all(score >= 0 for score in scores.values())
        assert scores["P3"] > scores["P2"] > scores["P1"]

    def test_betweenness_chain(self, backend, chain_graph):
        scores = backend.betweenness(chain_graph, BetweennessConfig())
        assert scores == pytest.approx({"P1": 0.0, "P2": 0.5, "P3": 0.0})

    def test_closeness_chain(self, backend, chain_graph):
        scores = backend.closeness(chain_graph, ClosenessConfig())
        assert scores == pytest.approx({"P1": 2 / 3, "P2": 0.5, "P3": 0.0})

    def test_closeness_without_reachable_fraction(self, backend, chain_graph):
        scores = backend.closeness(
            chain_graph, ClosenessConfig(wf_improved=False)
        )
        assert scores == pytest.approx({"P1": 2 / 3, "P2": 1.0, "P3": 0.0})

    def test_closeness_isolated_pair_scores_zero(self, backend):
        graph = build_graph([_record("1", "X", "Y")])
        scores = backend.closeness(graph, ClosenessConfig())
        # Y reaches nobody: defined zero rather than infinite distance
        assert scores["Y"] == 0.0
        assert scores["X"] == pytest.approx(1.0)

    def test_degree_chain(self, backend, chain_graph):
        assert backend.degree(chain_graph) == {
            "P1": (0, 1),
            "P2": (1, 1),
            "P3": (1, 0),
        }

    def test_parallel_edges_do_not_multiply_paths(self, backend):
        graph = build_graph(
            [
                _record("1", "P1", "P2"),
                _record("2", "P1", "P2"),
                _record("3", "P2", "P3"),
            ]
        )
        scores = backend.betweenness(graph, BetweennessConfig())
        assert scores["P2"] == pytest.approx(0.5)
        assert backend.degree(graph)["P1"] == (0, 2)

    def test_weighted_variants_honour_weights(self, backend, shortcut_graph):
        unweighted = backend.betweenness(shortcut_graph, BetweennessConfig())
        weighted = backend.betweenness(
            shortcut_graph, BetweennessConfig(), weighted=True
        )
        assert unweighted["B"] == pytest.approx(0.0)
        assert weighted["B"] == pytest.approx(0.5)

        unweighted = backend.closeness(shortcut_graph, ClosenessConfig())
        weighted = backend.closeness(
            shortcut_graph, ClosenessConfig(), weighted=True
        )
        assert unweighted["A"] == pytest.approx(1.0)
        assert weighted["A"] == pytest.approx(2 / 3)

    def test_weighted_variants_match_unit_weights(self, backend, mixed_graph):
        assert backend.betweenness(
            mixed_graph, BetweennessConfig(), weighted=True
        ) == pytest.approx(backend.betweenness(mixed_graph, BetweennessConfig()))
        assert backend.closeness(
            mixed_graph, ClosenessConfig(), weighted=True
        ) == pytest.approx(backend.closeness(mixed_graph, ClosenessConfig()))

    def test_empty_graph(self, backend):
        graph = build_graph([])
        assert backend.pagerank(graph, PageRankConfig()) == {}
        assert backend.betweenness(graph, BetweennessConfig()) == {}
        assert backend.closeness(graph, ClosenessConfig()) == {}
        assert backend.degree(graph) == {}


def test_backends_agree(mixed_graph):
    sparse, networkx = SparseBackend(), NetworkXBackend()

    assert sparse.pagerank(mixed_graph, PageRankConfig()) == pytest.approx(
        networkx.pagerank(mixed_graph, PageRankConfig()), abs=1e-6
    )
    for weighted in (False, True):
        assert sparse.betweenness(
            mixed_graph, BetweennessConfig(), weighted
        ) == pytest.approx(
            networkx.betweenness(mixed_graph, BetweennessConfig(), weighted)
        )
        assert sparse.closeness(
            mixed_graph, ClosenessConfig(), weighted
        ) == pytest.approx(
            networkx.closeness(mixed_graph, ClosenessConfig(), weighted)
        )
    assert sparse.degree(mixed_graph) == networkx.degree(mixed_graph)


def test_sampled_betweenness(mixed_graph):
    backend = SparseBackend()
    exact = backend.betweenness(mixed_graph, BetweennessConfig())

    # Sample size at or above the node count is exact
    assert backend.betweenness(
        mixed_graph, BetweennessConfig(k=mixed_graph.num_nodes)
    ) == pytest.approx(exact)

    estimate = backend.betweenness(mixed_graph, BetweennessConfig(k=3, seed=7))
    assert set(estimate) == set(exact)
    assert all(score >= 0 for score in estimate.values())
    assert estimate == backend.betweenness(
        mixed_graph, BetweennessConfig(k=3, seed=7)
    )


def test_betweenness_with_progress(mixed_graph):
    backend = SparseBackend()
    assert backend.betweenness(
        mixed_graph, BetweennessConfig(show_progress=True)
    ) == pytest.approx(backend.betweenness(mixed_graph, BetweennessConfig()))


def test_get_backend():
    assert isinstance(get_backend("sparse"), SparseBackend)
    assert isinstance(get_backend("networkx"), NetworkXBackend)
    with pytest.raises(ValueError, match="Unknown centrality backend"):
        get_backend("igraph")


class TestCentralityEngine:
    def test_compute_fills_every_metric(self, chain_graph):
        results = CentralityEngine().compute(chain_graph)

        assert set(results.pagerank) == {"P1", "P2", "P3"}
        assert results.betweenness["P2"] == pytest.approx(0.5)
        assert results.closeness["P3"] == 0.0
        assert results.in_degree == {"P1": 0, "P2": 1, "P3": 1}
        assert results.out_degree == {"P1": 1, "P2": 1, "P3": 0}
        assert results.weighted_betweenness == pytest.approx(results.betweenness)
        assert results.weighted_closeness == pytest.approx(results.closeness)
        assert results.failures == {}

    def test_empty_graph_yields_empty_results(self):
        results = CentralityEngine().compute(build_graph([]))
        assert results.pagerank == {}
        assert results.betweenness == {}
        assert results.closeness == {}
        assert results.degree == {}
        assert results.weighted_betweenness == {}
        assert results.weighted_closeness == {}
        assert results.failures == {}

    def test_failing_metric_does_not_abort_others(self, chain_graph):
        class BrokenBetweenness(SparseBackend):
            def betweenness(self, graph, config, weighted=False):
                raise RuntimeError("numerical trouble")

        results = CentralityEngine(backend=BrokenBetweenness()).compute(
            chain_graph
        )

        assert results.betweenness == {}
        assert results.weighted_betweenness == {}
        assert set(results.failures) == {"betweenness", "weighted_betweenness"}
        assert "numerical trouble" in results.failures["betweenness"]
        assert set(results.pagerank) == {"P1", "P2", "P3"}
        assert set(results.closeness) == {"P1", "P2", "P3"}

    def test_pagerank_non_convergence_is_a_computation_failure(
        self, chain_graph
    ):
        config = AnalysisConfig(pagerank=PageRankConfig(max_iter=1, strict=True))
        results = CentralityEngine(config=config).compute(chain_graph)

        assert results.pagerank == {}
        assert "pagerank" in results.failures
        assert results.degree["P2"] == (1, 1)

    def test_networkx_backend_from_config(self, chain_graph):
        engine = CentralityEngine(config=AnalysisConfig(backend="networkx"))
        assert isinstance(engine.backend, NetworkXBackend)
        results = engine.compute(chain_graph)
        assert results.betweenness["P2"] == pytest.approx(0.5)

    def test_verbose_turns_on_betweenness_progress(self, chain_graph):
        seen = []

        class RecordingBackend(SparseBackend):
            def betweenness(self, graph, config, weighted=False):
                seen.append(config.show_progress)
                return super().betweenness(graph, config, weighted)

        quiet = CentralityEngine(backend=RecordingBackend())
        quiet.compute(chain_graph)
        assert seen == [False, False]

        seen.clear()
        verbose = CentralityEngine(
            backend=RecordingBackend(), config=AnalysisConfig(verbose=True)
        )
        results = verbose.compute(chain_graph)
        assert seen == [True, True]
        assert results.betweenness["P2"] == pytest.approx(0.5)

    def test_failing_metric_is_logged_once_as_warning(
        self, chain_graph, caplog
    ):
        class BrokenCloseness(SparseBackend):
            def closeness(self, graph, config, weighted=False):
                raise RuntimeError("no distances")

        caplog.set_level(logging.DEBUG, logger="contest_graph")
        CentralityEngine(backend=BrokenCloseness()).compute(chain_graph)

        problems = [
            record for record in caplog.records if record.levelno >= logging.WARNING
        ]
        assert [record.levelno for record in problems] == [logging.WARNING] * 2
        assert all("no distances" in record.getMessage() for record in problems)


def _long_chain(num_nodes):
    return ContestGraph(
        nodes=tuple(f"P{index}" for index in range(num_nodes)),
        sources=np.arange(num_nodes - 1),
        targets=np.arange(1, num_nodes),
        weights=np.ones(num_nodes - 1),
    )


def test_closeness_long_chain_stays_within_blocks():
    num_nodes = 3000
    graph = _long_chain(num_nodes)

    tracemalloc.start()
    try:
        scores = SparseBackend().closeness(graph, ClosenessConfig())
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    # A full distance matrix would need num_nodes**2 float64 values
    assert peak < num_nodes * num_nodes * 8 // 4

    # Node i reaches r = n-1-i nodes at distances 1..r
    for index in (0, 1, 255, 256, 257, 1500, num_nodes - 2):
        reached = num_nodes - 1 - index
        expected = 2 * reached / ((reached + 1) * (num_nodes - 1))
        assert scores[f"P{index}"] == pytest.approx(expected)
    assert scores[f"P{num_nodes - 1}"] == 0.0


@pytest.mark.parametrize("weighted", [False, True])
def test_closeness_block_size_does_not_change_scores(
    mixed_graph, monkeypatch, weighted
):
    backend = SparseBackend()
    expected = backend.closeness(mixed_graph, ClosenessConfig(), weighted)

    monkeypatch.setattr(sparse_module, "CLOSENESS_CHUNK_ROWS", 2)
    assert backend.closeness(
        mixed_graph, ClosenessConfig(), weighted
    ) == pytest.approx(expected)


@pytest.mark.parametrize("k", [0, -3])
def test_betweenness_sample_size_must_be_positive(k):
    with pytest.raises(ValueError, match="at least 1"):
        BetweennessConfig(k=k)


class TestPageRankNonConvergence:
    @pytest.mark.parametrize("backend", BACKENDS, ids=lambda b: b.name)
    def test_last_iterate_without_strict(self, backend, chain_graph):
        scores = backend.pagerank(chain_graph, PageRankConfig(max_iter=1))
        assert set(scores) == {"P1", "P2", "P3"}
        assert sum(scores.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("backend", BACKENDS, ids=lambda b: b.name)
    def test_strict_raises(self, backend, chain_graph):
        with pytest.raises(ComputationFailure) as excinfo:
            backend.pagerank(chain_graph, PageRankConfig(max_iter=1, strict=True))
        assert excinfo.value.metric == "pagerank"

    def test_backends_return_same_last_iterate(self, chain_graph):
        config = PageRankConfig(max_iter=1)
        assert NetworkXBackend().pagerank(
            chain_graph, config
        ) == pytest.approx(SparseBackend().pagerank(chain_graph, config))
