"""CSV export of the normalized analysis report."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import polars as pl

from contest_graph.core.constants import REPORT_COLUMNS
from contest_graph.core.errors import ExportFailure
from contest_graph.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


def write_report(report: pl.DataFrame, path: str | Path) -> Path:
    """Write the report to ``path`` as CSV.

    Args:
        report: Normalized report from ``build_report``.
        path: Destination file.

    Returns:
        The destination path.

    Raises:
        ExportFailure: If the report does not have the report columns or the
            destination cannot be written.
    """
    path = Path(path)
    if report.columns != REPORT_COLUMNS:
        raise ExportFailure(
            f"Report columns {report.columns} do not match {REPORT_COLUMNS}"
        )

    try:
        report.write_csv(path)
    except (OSError, pl.exceptions.PolarsError) as exception:
        raise ExportFailure(
            f"Could not write report to {path}: {exception}"
        ) from exception

    logger.info(f"Wrote {report.height} report rows to {path}")
    return path


def write_reports(reports: Sequence[pl.DataFrame], path: str | Path) -> Path:
    """Write several reports to one destination, in the given order.

    Reports from independently analyzed batches are concatenated before
    the single write, so the destination is only ever written once.
    """
    if reports:
        combined = pl.concat(list(reports), how="vertical")
    else:
        combined = pl.DataFrame(
            schema={column: pl.Utf8 for column in REPORT_COLUMNS}
        )
    return write_report(combined, path)
