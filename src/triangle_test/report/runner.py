"""
Report runner — loads response records, builds the verdict for one test
session, and exports the Markdown/JSON/CSV report.

Usage (from project root):
    python -m triangle_test.report.runner --records data/responses/response_records.csv

Or programmatically:
    from triangle_test.report.runner import run_report
    summary = run_report(session_id="Batch 2026-10-12")
"""

from __future__ import annotations

import argparse
import json
import re
from pathlib import Path

import pandas as pd

from ..significance.config import DEFAULT_TEST_TYPE
from .aggregation import group_stats_frame, partition_by_session, sessions_by_recency
from .config import RECORD_COLUMNS, RECORDS_CSV_PATH, RESULTS_DIR
from .markdown import render_markdown, report_status
from .records import ResponseRecord, records_from_frame
from .verdict import EmptyInput, ReportVerdict, build_verdict

_TEXT_COLUMNS = [c for c in RECORD_COLUMNS if c not in ("created_at", "updated_at")]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_records(records_path: Path = RECORDS_CSV_PATH) -> list[ResponseRecord]:
    """
    Load the records CSV written by the fetch client (or prepared by hand).

    Raises:
        FileNotFoundError: The CSV does not exist.
        ValueError: Required columns are missing or a group label is invalid.
    """
    if not records_path.exists():
        raise FileNotFoundError(
            f"Response records not found: {records_path}\n"
            "Fetch the questionnaire data first."
        )
    df = pd.read_csv(records_path, dtype={c: str for c in _TEXT_COLUMNS})
    records = records_from_frame(df)
    print(f"Loaded {len(records):,} response records from {records_path.name}")
    return records


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _file_stem(session_id: str) -> str:
    slug = re.sub(r"[^\w\-]+", "_", session_id).strip("_")
    return f"triangle_report_{slug or 'session'}"


def export_report(
    verdict: ReportVerdict,
    markdown: str,
    output_dir: Path = RESULTS_DIR,
    stem: str = "triangle_report",
) -> dict[str, str]:
    """
    Write the report as Markdown, the verdict as JSON, and the per-group
    table as CSV.

    Returns:
        Dict mapping ``markdown``/``json``/``groups`` to written file paths.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    md_path = output_dir / f"{stem}.md"
    json_path = output_dir / f"{stem}.json"
    groups_path = output_dir / f"{stem}_groups.csv"

    with md_path.open("w", encoding="utf-8") as fh:
        fh.write(markdown + "\n")

    with json_path.open("w", encoding="utf-8") as fh:
        json.dump(verdict.to_dict(), fh, indent=2, ensure_ascii=False)

    stats = {g.group: g for g in verdict.group_stats}
    group_stats_frame(stats).to_csv(groups_path, index=False)

    print(f"Report exported to {output_dir}")
    return {
        "markdown": str(md_path),
        "json": str(json_path),
        "groups": str(groups_path),
    }


# ---------------------------------------------------------------------------
# Session report
# ---------------------------------------------------------------------------

def select_session(records: list[ResponseRecord], session_id: str | None = None) -> str:
    """``session_id`` if given, else the most recently active session ("" if none)."""
    if session_id is not None:
        return session_id
    ordered = sessions_by_recency(records)
    session_id = ordered[0] if ordered else ""
    print(f"No session given, using most recent: {session_id or '(none)'}")
    return session_id


def report_session(
    records: list[ResponseRecord],
    session_id: str,
    test_type: str = DEFAULT_TEST_TYPE,
    group_size: int = 0,
    sample_name: str = "",
    output_dir: Path = RESULTS_DIR,
) -> dict:
    """
    Build, render and export the report for one session of ``records``.

    Returns:
        Dict with keys: session_id, status, error, passed, output_files,
        markdown. ``error`` is set (and nothing is exported) when the
        session has no records.
    """
    session_records = partition_by_session(records).get(session_id, [])
    print(f"Session '{session_id}': {len(session_records)} records, test type '{test_type}'")

    result = build_verdict(session_records, test_type, group_size)
    if isinstance(result, EmptyInput):
        print(f"ERROR: {result.message}")
        return {
            "session_id": session_id,
            "status": "",
            "error": result.message,
            "passed": None,
            "output_files": {},
            "markdown": "",
        }

    markdown = render_markdown(result, test_name=session_id, sample_name=sample_name)
    output_files = export_report(result, markdown, output_dir, stem=_file_stem(session_id))
    status = report_status(result)

    sep = "=" * 70
    print(f"\n{sep}")
    print(f"  Observed:   {result.observed_correct}/{result.observed_total} correct")
    print(f"  Threshold:  {result.threshold} (sample size {result.threshold_base})")
    print(f"  Expected:   {result.expected_total} questionnaires")
    print(f"  Verdict:    {'PASS' if result.passed else 'FAIL'}")
    print(f"  {status}")
    print(f"{sep}\n")

    return {
        "session_id": session_id,
        "status": status,
        "error": None,
        "passed": result.passed,
        "output_files": output_files,
        "markdown": markdown,
    }


# ---------------------------------------------------------------------------
# Master runner
# ---------------------------------------------------------------------------

def run_report(
    records_path: Path = RECORDS_CSV_PATH,
    session_id: str | None = None,
    test_type: str = DEFAULT_TEST_TYPE,
    group_size: int = 0,
    sample_name: str = "",
    output_dir: Path = RESULTS_DIR,
) -> dict:
    """
    Build and export the report for one test session of a records CSV.

    Args:
        records_path: Records CSV (see ``RECORD_COLUMNS``).
        session_id: Session to report on; defaults to the most recently
            active session in the file.
        test_type: ``"similarity test"`` or ``"difference test"``.
        group_size: Declared respondents per group (0 = rule minimum).
        sample_name: Name of the sample under test, shown in the report.
        output_dir: Directory for exported files.

    Returns:
        Summary dict from :func:`report_session`.
    """
    sep = "=" * 70
    print(f"\n{sep}")
    print("TRIANGLE TEST REPORT")
    print(f"  Records: {records_path}")
    print(f"{sep}\n")

    records = load_records(records_path)
    session_id = select_session(records, session_id)
    return report_session(records, session_id, test_type, group_size, sample_name, output_dir)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> dict:
    parser = argparse.ArgumentParser(description="Build a triangle test report.")
    parser.add_argument("--records", type=Path, default=RECORDS_CSV_PATH)
    parser.add_argument("--session", default=None)
    parser.add_argument("--test-type", default=DEFAULT_TEST_TYPE)
    parser.add_argument("--group-size", type=int, default=0)
    parser.add_argument("--sample-name", default="")
    parser.add_argument("--output-dir", type=Path, default=RESULTS_DIR)
    args = parser.parse_args(argv)

    return run_report(
        records_path=args.records,
        session_id=args.session,
        test_type=args.test_type,
        group_size=args.group_size,
        sample_name=args.sample_name,
        output_dir=args.output_dir,
    )


if __name__ == "__main__":
    main()
