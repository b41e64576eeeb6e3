"""Normalized report building and export."""

from contest_graph.report.export import write_report, write_reports
from contest_graph.report.merge import REPORT_SCHEMA, build_report

__all__ = [
    "REPORT_SCHEMA",
    "build_report",
    "write_report",
    "write_reports",
]
