"""
Record model for pairwise contests.

A single :class:`ContestRecord` type covers both the minimal schema
(participants, result, rating deltas) and the metadata-rich schema
(opening, move count, time control, ...). Which source columns are read is
chosen by a :class:`ParsingProfile` when converting a polars DataFrame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

import polars as pl

from contest_graph.core.constants import (
    COLUMN_BLACK,
    COLUMN_BLACK_ELO,
    COLUMN_BLACK_RATING_DIFF,
    COLUMN_ECO,
    COLUMN_EVENT,
    COLUMN_GAME_ID,
    COLUMN_OPENING,
    COLUMN_RESULT,
    COLUMN_TIME_CONTROL,
    COLUMN_TOTAL_MOVES,
    COLUMN_WHITE,
    COLUMN_WHITE_ELO,
    COLUMN_WHITE_RATING_DIFF,
    RESULT_A_WIN,
    RESULT_B_WIN,
    RESULT_DRAW,
)
from contest_graph.core.errors import MalformedRecordError
from contest_graph.core.logging import get_logger, log_dataframe_stats

if TYPE_CHECKING:
    from typing import Any

logger = get_logger(__name__)


class Outcome(Enum):
    """Result of a contest from participant A's side."""

    A_WIN = "A_WIN"
    B_WIN = "B_WIN"
    DRAW = "DRAW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "Outcome":
        """Parse a result token; anything unrecognized becomes UNKNOWN.

        Accepts chess notation ("1-0", "0-1", "1/2-1/2") and the enum
        names themselves, case-insensitively.
        """
        if isinstance(value, Outcome):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        token = value.strip()
        if token in _RESULT_TOKENS:
            return _RESULT_TOKENS[token]
        try:
            return cls[token.upper()]
        except KeyError:
            return cls.UNKNOWN

    @property
    def is_recognized(self) -> bool:
        return self is not Outcome.UNKNOWN


_RESULT_TOKENS = {
    RESULT_A_WIN: Outcome.A_WIN,
    RESULT_B_WIN: Outcome.B_WIN,
    RESULT_DRAW: Outcome.DRAW,
}


@dataclass(frozen=True)
class ContestRecord:
    """One contest between participant A (white) and participant B (black)."""

    id: str
    participant_a: str
    participant_b: str
    outcome: Outcome = Outcome.UNKNOWN
    rating_delta_a: float = 0.0
    rating_delta_b: float = 0.0

    # Opaque metadata, only populated by the full parsing profile
    opening_code: Optional[str] = None
    opening_name: Optional[str] = None
    move_count: Optional[int] = None
    time_control: Optional[str] = None
    event: Optional[str] = None
    rating_a: Optional[float] = None
    rating_b: Optional[float] = None


class ParsingProfile(Enum):
    """Which source columns populate a ContestRecord."""

    MINIMAL = "minimal"
    FULL = "full"


# field name -> (source column, kind)
_MINIMAL_COLUMNS: dict[str, tuple[str, str]] = {
    "id": (COLUMN_GAME_ID, "text"),
    "participant_a": (COLUMN_WHITE, "identity"),
    "participant_b": (COLUMN_BLACK, "identity"),
    "outcome": (COLUMN_RESULT, "text"),
    "rating_delta_a": (COLUMN_WHITE_RATING_DIFF, "float"),
    "rating_delta_b": (COLUMN_BLACK_RATING_DIFF, "float"),
}

_FULL_COLUMNS: dict[str, tuple[str, str]] = {
    **_MINIMAL_COLUMNS,
    "opening_code": (COLUMN_ECO, "text"),
    "opening_name": (COLUMN_OPENING, "text"),
    "move_count": (COLUMN_TOTAL_MOVES, "int"),
    "time_control": (COLUMN_TIME_CONTROL, "text"),
    "event": (COLUMN_EVENT, "text"),
    "rating_a": (COLUMN_WHITE_ELO, "float"),
    "rating_b": (COLUMN_BLACK_ELO, "float"),
}

PROFILE_COLUMNS: dict[ParsingProfile, dict[str, tuple[str, str]]] = {
    ParsingProfile.MINIMAL: _MINIMAL_COLUMNS,
    ParsingProfile.FULL: _FULL_COLUMNS,
}

_KIND_DTYPES = {
    "identity": pl.Utf8,
    "text": pl.Utf8,
    "float": pl.Float64,
    "int": pl.Int64,
}


def _column_expression(
    dataframe: pl.DataFrame, field_name: str, column: str, kind: str
) -> pl.Expr:
    dtype = _KIND_DTYPES[kind]
    if column not in dataframe.columns:
        return pl.lit(None, dtype=dtype).alias(field_name)

    expression = pl.col(column).cast(dtype, strict=False)
    if kind == "identity":
        expression = expression.str.strip_chars()
    return expression.alias(field_name)


def records_from_dataframe(
    dataframe: pl.DataFrame,
    profile: ParsingProfile = ParsingProfile.FULL,
) -> list[ContestRecord]:
    """Convert a games DataFrame into contest records.

    Numeric columns are cast leniently: values that fail to parse become
    absent (rating deltas then default to 0.0). Identity columns are
    whitespace-trimmed and rows with a missing or empty identity are
    dropped. Rows without a game id receive a synthetic ``row-<n>`` id.

    Args:
        dataframe: Source games, one row per contest.
        profile: Parsing profile selecting the columns to read. Defaults to FULL.

    Returns:
        List of records in source row order.

    Raises:
        MalformedRecordError: If an identity column is missing entirely.
    """
    missing = [
        column
        for column in (COLUMN_WHITE, COLUMN_BLACK)
        if column not in dataframe.columns
    ]
    if missing:
        raise MalformedRecordError(
            f"Missing participant column(s): {', '.join(missing)}"
        )

    log_dataframe_stats(logger, dataframe, "source games")

    columns = PROFILE_COLUMNS[profile]
    normalized = dataframe.with_row_index("row_nr").select(
        [pl.col("row_nr")]
        + [
            _column_expression(dataframe, field_name, column, kind)
            for field_name, (column, kind) in columns.items()
        ]
    )

    valid = normalized.filter(
        pl.col("participant_a").is_not_null()
        & pl.col("participant_b").is_not_null()
        & (pl.col("participant_a").str.len_chars() > 0)
        & (pl.col("participant_b").str.len_chars() > 0)
    )
    dropped = normalized.height - valid.height
    if dropped:
        logger.info(
            f"Dropped {dropped} of {normalized.height} rows without two participants"
        )

    valid = valid.with_columns(
        pl.coalesce(
            [
                pl.col("id"),
                pl.concat_str(
                    [pl.lit("row-"), pl.col("row_nr").cast(pl.Utf8)]
                ),
            ]
        ).alias("id")
    )

    records = []
    for row in valid.drop("row_nr").iter_rows(named=True):
        row["outcome"] = Outcome.parse(row["outcome"])
        for delta_field in ("rating_delta_a", "rating_delta_b"):
            if row[delta_field] is None:
                row[delta_field] = 0.0
        records.append(ContestRecord(**row))

    return records
