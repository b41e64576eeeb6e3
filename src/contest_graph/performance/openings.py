"""Opening (ECO code) classification of contest records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import polars as pl

from contest_graph.core.constants import UNKNOWN_OPENING
from contest_graph.core.records import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contest_graph.core.records import ContestRecord


def classify_by_opening(
    records: Iterable[ContestRecord],
) -> dict[str, list[ContestRecord]]:
    """Group records by opening code.

    Records without an opening code are grouped under ``"?"``.
    """
    openings: dict[str, list[ContestRecord]] = {}
    for record in records:
        code = record.opening_code or UNKNOWN_OPENING
        openings.setdefault(code, []).append(record)
    return openings


def opening_summary(records: Iterable[ContestRecord]) -> pl.DataFrame:
    """Summarize results per opening.

    Returns:
        DataFrame with columns: opening, games, a_wins, b_wins, draws,
        a_score_rate (points for participant A per recognized game, draws
        counting half), sorted by games descending then opening.
    """
    rows = [
        {
            "opening": record.opening_code or UNKNOWN_OPENING,
            "a_win": record.outcome is Outcome.A_WIN,
            "b_win": record.outcome is Outcome.B_WIN,
            "draw": record.outcome is Outcome.DRAW,
        }
        for record in records
    ]
    schema = {
        "opening": pl.Utf8,
        "a_win": pl.Boolean,
        "b_win": pl.Boolean,
        "draw": pl.Boolean,
    }
    games = pl.DataFrame(rows, schema=schema)

    summary = games.group_by("opening").agg(
        [
            pl.len().cast(pl.Int64).alias("games"),
            pl.col("a_win").sum().cast(pl.Int64).alias("a_wins"),
            pl.col("b_win").sum().cast(pl.Int64).alias("b_wins"),
            pl.col("draw").sum().cast(pl.Int64).alias("draws"),
        ]
    )

    decided = pl.col("a_wins") + pl.col("b_wins") + pl.col("draws")
    summary = summary.with_columns(
        pl.when(decided > 0)
        .then((pl.col("a_wins") + 0.5 * pl.col("draws")) / decided)
        .otherwise(None)
        .alias("a_score_rate")
    )

    return summary.sort(["games", "opening"], descending=[True, False])
