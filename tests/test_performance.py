import random

import pytest

from contest_graph.core.records import ContestRecord, Outcome
from contest_graph.performance import (
    MeanModeAccumulator,
    PerformanceRecord,
    PerformanceTracker,
    compute_mean_mode,
    track_performance,
)


def _record(game_id, white, black, result, delta_a=0.0, delta_b=0.0):
    return ContestRecord(
        id=game_id,
        participant_a=white,
        participant_b=black,
        outcome=result,
        rating_delta_a=delta_a,
        rating_delta_b=delta_b,
    )


class TestPerformanceRecord:
    def test_win_rate_refreshed_on_every_update(self):
        record = PerformanceRecord()
        assert record.win_rate == 0.0

        record.update("win", 5.0)
        assert record.win_rate == 1.0

        record.update("loss", -3.0)
        assert record.win_rate == 0.5
        assert record.total_rating_change == 2.0

        record.update("draw", 0.5)
        assert record.win_rate == pytest.approx(1 / 3)
        assert (record.games_won, record.games_lost, record.games_drawn) == (
            1,
            1,
            1,
        )


class TestTrackPerformance:
    def test_winner_as_second_participant(self):
        # P2 loses as participant B, then wins as participant B
        records = [
            _record("1", "P1", "P2", Outcome.A_WIN, 5, -5),
            _record("2", "P3", "P2", Outcome.B_WIN, -3, 3),
        ]

        performance = track_performance(records)

        p1 = performance["P1"]
        assert (p1.games_played, p1.games_won, p1.games_lost, p1.games_drawn) == (
            1,
            1,
            0,
            0,
        )
        assert p1.total_rating_change == 5.0
        assert p1.win_rate == 1.0

        p2 = performance["P2"]
        assert (p2.games_played, p2.games_won, p2.games_lost, p2.games_drawn) == (
            2,
            1,
            1,
            0,
        )
        assert p2.total_rating_change == -2.0
        assert p2.win_rate == 0.5

    def test_own_delta_is_used_for_each_side(self):
        records = [
            _record("1", "P1", "P2", Outcome.A_WIN, 5, -5),
            _record("2", "P2", "P3", Outcome.B_WIN, -3, 3),
        ]

        performance = track_performance(records)

        assert performance["P2"].games_lost == 2
        assert performance["P2"].total_rating_change == -8.0
        assert performance["P3"].games_won == 1
        assert performance["P3"].total_rating_change == 3.0

    def test_draw_counts_for_both(self):
        performance = track_performance(
            [_record("1", "A", "B", Outcome.DRAW, 1.5, -1.5)]
        )
        assert performance["A"].games_drawn == 1
        assert performance["B"].games_drawn == 1
        assert performance["A"].win_rate == 0.0

    def test_unknown_outcome_is_skipped_entirely(self):
        tracker = PerformanceTracker()
        tracker.add(_record("1", "A", "B", Outcome.UNKNOWN, 10, -10))
        tracker.add(_record("2", "A", "C", Outcome.A_WIN, 2, -2))

        assert "B" not in tracker.records
        assert tracker.records["A"].games_played == 1
        assert tracker.records["A"].total_rating_change == 2.0
        assert tracker.skipped == 1

    def test_empty_batch(self):
        assert track_performance([]) == {}

    def test_tallies_add_up(self):
        rng = random.Random(11)
        players = [f"p{index}" for index in range(8)]
        outcomes = [Outcome.A_WIN, Outcome.B_WIN, Outcome.DRAW]
        records = [
            _record(
                str(index),
                *rng.sample(players, 2),
                rng.choice(outcomes),
                rng.uniform(-10, 10),
                rng.uniform(-10, 10),
            )
            for index in range(200)
        ]

        for record in track_performance(records).values():
            assert (
                record.games_won + record.games_lost + record.games_drawn
                == record.games_played
            )
            assert 0.0 <= record.win_rate <= 1.0
            assert record.win_rate == pytest.approx(
                record.games_won / record.games_played
            )


class TestMeanMode:
    def test_draw_credit(self):
        metrics = compute_mean_mode(
            [_record("1", "A", "B", Outcome.DRAW, 1.0, -1.0)]
        )
        assert metrics["A"].draw_credit == 0.5
        assert metrics["B"].draw_credit == 0.5
        assert metrics["A"].win_rate == 0.0

    def test_every_game_counts(self):
        records = [
            _record("1", "A", "B", Outcome.A_WIN, 4.0, -4.0),
            _record("2", "B", "A", Outcome.UNKNOWN, 2.0, -2.0),
            _record("3", "A", "C", Outcome.DRAW, 1.0, -1.0),
        ]

        metrics = compute_mean_mode(records)

        a = metrics["A"]
        assert a.game_count == 3
        assert a.win_rate == pytest.approx(1 / 3)
        assert a.draw_credit == 0.5
        assert a.mean_rating_diff == pytest.approx((4.0 - 2.0 + 1.0) / 3)

        b = metrics["B"]
        assert b.game_count == 2
        assert b.win_rate == 0.0
        assert b.mean_rating_diff == pytest.approx((-4.0 + 2.0) / 2)

    def test_game_count_equals_appearances(self):
        rng = random.Random(3)
        players = [f"p{index}" for index in range(6)]
        records = [
            _record(str(index), *rng.sample(players, 2), Outcome.A_WIN)
            for index in range(50)
        ]

        metrics = compute_mean_mode(records)

        for player, player_metrics in metrics.items():
            appearances = sum(
                player in (record.participant_a, record.participant_b)
                for record in records
            )
            assert player_metrics.game_count == appearances

    def test_empty_accumulator_finalizes_to_nothing(self):
        assert MeanModeAccumulator().finalize() == {}
