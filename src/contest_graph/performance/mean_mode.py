"""Mean/mode metrics: win rate, draw credit and mean rating change."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from contest_graph.core.constants import DRAW_CREDIT
from contest_graph.core.records import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contest_graph.core.records import ContestRecord


@dataclass
class MeanModeMetrics:
    """Finalized mean/mode metrics for one participant."""

    win_rate: float
    draw_credit: float
    mean_rating_diff: float
    game_count: int


@dataclass
class _RunningTotals:
    wins: float = 0.0
    draw_credit: float = 0.0
    rating_sum: float = 0.0
    game_count: int = 0


class MeanModeAccumulator:
    """
    Accumulates per-participant totals over every appearance.

    Unlike the performance tracker, every game counts toward
    ``game_count`` and the rating sum whether or not its outcome was
    recognized; only wins and draw credit depend on the outcome.
    """

    def __init__(self) -> None:
        self._totals: dict[str, _RunningTotals] = {}

    def add(self, record: ContestRecord) -> None:
        self._add_side(
            record.participant_a,
            won=record.outcome is Outcome.A_WIN,
            drew=record.outcome is Outcome.DRAW,
            rating_delta=record.rating_delta_a,
        )
        self._add_side(
            record.participant_b,
            won=record.outcome is Outcome.B_WIN,
            drew=record.outcome is Outcome.DRAW,
            rating_delta=record.rating_delta_b,
        )

    def _add_side(
        self, participant: str, won: bool, drew: bool, rating_delta: float
    ) -> None:
        totals = self._totals.get(participant)
        if totals is None:
            totals = self._totals[participant] = _RunningTotals()
        if won:
            totals.wins += 1.0
        elif drew:
            totals.draw_credit += DRAW_CREDIT
        totals.game_count += 1
        totals.rating_sum += rating_delta

    def finalize(self) -> dict[str, MeanModeMetrics]:
        """Divide the running totals by each participant's game count."""
        return {
            participant: MeanModeMetrics(
                win_rate=totals.wins / totals.game_count,
                draw_credit=totals.draw_credit,
                mean_rating_diff=totals.rating_sum / totals.game_count,
                game_count=totals.game_count,
            )
            for participant, totals in self._totals.items()
            if totals.game_count > 0
        }


def compute_mean_mode(
    records: Iterable[ContestRecord],
) -> dict[str, MeanModeMetrics]:
    """Compute mean/mode metrics for every participant.

    Args:
        records: Contest records of one batch.

    Returns:
        Mapping from participant identity to its metrics.
    """
    accumulator = MeanModeAccumulator()
    for record in records:
        accumulator.add(record)
    return accumulator.finalize()
