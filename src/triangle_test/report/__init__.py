"""
report — aggregation, verdict and rendering for triangle-test sessions.

Module layout
-------------
config.py       — Group labels, record columns, paths, report wording
records.py      — ResponseRecord and DataFrame conversion
aggregation.py  — Per-group statistics, session partitioning and ordering
verdict.py      — build_verdict (pass/fail with full traceability)
markdown.py     — Markdown report rendering
runner.py       — Load → verdict → export, CLI entry point

Public interface
----------------
    build_verdict(records, test_type, user_group_size)
    aggregate(records)
    render_markdown(verdict, test_name, sample_name)
    run_report()
"""

from .aggregation import (
    GroupStats,
    aggregate,
    group_stats_frame,
    partition_by_session,
    sessions_by_recency,
)
from .markdown import conclusion_text, render_markdown, report_status
from .records import ResponseRecord, records_from_frame, records_to_frame
from .runner import export_report, load_records, report_session, run_report, select_session
from .verdict import (
    EmptyInput,
    ReportVerdict,
    build_count_warning,
    build_verdict,
    compute_expected_total,
    effective_group_size,
)

__all__ = [
    # Records
    "ResponseRecord",
    "records_from_frame",
    "records_to_frame",
    # Aggregation
    "GroupStats",
    "aggregate",
    "group_stats_frame",
    "partition_by_session",
    "sessions_by_recency",
    # Verdict
    "EmptyInput",
    "ReportVerdict",
    "build_count_warning",
    "build_verdict",
    "compute_expected_total",
    "effective_group_size",
    # Rendering & export
    "conclusion_text",
    "render_markdown",
    "report_status",
    "export_report",
    "load_records",
    "report_session",
    "run_report",
    "select_session",
]
