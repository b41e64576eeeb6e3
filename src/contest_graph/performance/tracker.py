"""Per-participant win/loss/draw performance aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from contest_graph.core.logging import get_logger
from contest_graph.core.records import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contest_graph.core.records import ContestRecord

logger = get_logger(__name__)


class SideResult:
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


# Outcome -> (result for participant A, result for participant B)
_SIDE_RESULTS = {
    Outcome.A_WIN: (SideResult.WIN, SideResult.LOSS),
    Outcome.B_WIN: (SideResult.LOSS, SideResult.WIN),
    Outcome.DRAW: (SideResult.DRAW, SideResult.DRAW),
}


@dataclass
class PerformanceRecord:
    """Running win/loss/draw tallies for one participant."""

    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    games_drawn: int = 0
    total_rating_change: float = 0.0
    win_rate: float = 0.0

    def update(self, result: str, rating_change: float) -> None:
        """Fold one game into the tallies and refresh ``win_rate``."""
        self.games_played += 1
        self.total_rating_change += rating_change
        if result == SideResult.WIN:
            self.games_won += 1
        elif result == SideResult.LOSS:
            self.games_lost += 1
        elif result == SideResult.DRAW:
            self.games_drawn += 1
        self.win_rate = self._calculate_win_rate()

    def _calculate_win_rate(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played


class PerformanceTracker:
    """Accumulator owning the per-participant performance records."""

    def __init__(self) -> None:
        self.records: dict[str, PerformanceRecord] = {}
        self.skipped = 0

    def add(self, record: ContestRecord) -> None:
        """Update both participants of ``record``.

        Records with an unrecognized outcome are skipped entirely.
        """
        side_results = _SIDE_RESULTS.get(record.outcome)
        if side_results is None:
            self.skipped += 1
            return

        result_a, result_b = side_results
        self._record_for(record.participant_a).update(
            result_a, record.rating_delta_a
        )
        self._record_for(record.participant_b).update(
            result_b, record.rating_delta_b
        )

    def _record_for(self, participant: str) -> PerformanceRecord:
        if participant not in self.records:
            self.records[participant] = PerformanceRecord()
        return self.records[participant]


def track_performance(
    records: Iterable[ContestRecord],
) -> dict[str, PerformanceRecord]:
    """Compute performance records for every participant.

    Args:
        records: Contest records of one batch.

    Returns:
        Mapping from participant identity to its performance record.
    """
    tracker = PerformanceTracker()
    for record in records:
        tracker.add(record)

    if tracker.skipped:
        logger.debug(
            f"Skipped {tracker.skipped} records with unrecognized outcomes"
        )
    return tracker.records
