"""
Bitable sync runner: fetch questionnaire records, report on the latest
session, and optionally write the report back to the test plan table.

Usage (from project root, with BITABLE_* credentials in the environment):
    python -m triangle_test.api_client.runner --time-range 1month --write-back

Or programmatically:
    from triangle_test.api_client.runner import run_sync
    summary = run_sync(write_back=True)
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..report.config import RESULTS_DIR
from ..report.runner import report_session, select_session
from .client import BitableClient, get_tenant_access_token
from .config import DEFAULT_TIME_RANGE, RECORDS_CSV_PATH, TIME_RANGE_DAYS
from .records import export_records_csv, fetch_response_records
from .writer import fetch_sample_name, write_report


def run_sync(
    client: BitableClient | None = None,
    time_range: str = DEFAULT_TIME_RANGE,
    session_id: str | None = None,
    test_type: str | None = None,
    group_size: int = 0,
    write_back: bool = False,
    record_id: str | None = None,
    records_path: Path = RECORDS_CSV_PATH,
    output_dir: Path = RESULTS_DIR,
    now_ms: int | None = None,
) -> dict:
    """
    Fetch → pick session → report → (optionally) write back.

    Args:
        client: Authenticated client; built from the environment if None.
        time_range: Creation-time window key (see TIME_RANGE_DAYS).
        session_id: Session to report on; defaults to the most recent one.
        test_type: Overrides the type detected from the sample type field.
        group_size: Declared respondents per group (0 = rule minimum).
        write_back: Write the report and conclusion to the plan record.
        record_id: Plan record to write to when no record matches the
            session name.
        records_path: Where the fetched records CSV is saved.
        output_dir: Directory for exported report files.
        now_ms: Reference time for the window (defaults to now).

    Returns:
        Summary dict from :func:`report_session` plus ``test_type``,
        ``sample_name`` and ``written_record_id`` (None unless written).
    """
    sep = "=" * 70
    print(f"\n{sep}")
    print("TRIANGLE TEST SYNC")
    print(f"  Time range: {time_range}")
    print(f"  Write back: {'yes' if write_back else 'no'}")
    print(f"{sep}\n")

    if client is None:
        client = BitableClient(get_tenant_access_token())

    records, detected_type = fetch_response_records(client, time_range=time_range, now_ms=now_ms)
    export_records_csv(records, records_path)

    session_id = select_session(records, session_id)
    sample_name = fetch_sample_name(client, session_id)
    test_type = test_type or detected_type

    summary = report_session(
        records,
        session_id,
        test_type=test_type,
        group_size=group_size,
        sample_name=sample_name,
        output_dir=output_dir,
    )
    summary["test_type"] = test_type
    summary["sample_name"] = sample_name
    summary["written_record_id"] = None

    if summary["error"]:
        return summary

    if write_back:
        summary["written_record_id"] = write_report(
            client,
            summary["markdown"],
            summary["passed"],
            test_name=session_id,
            record_id=record_id,
        )
    return summary


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> dict:
    parser = argparse.ArgumentParser(
        description="Fetch questionnaire records from Bitable and build a triangle test report."
    )
    parser.add_argument("--time-range", choices=list(TIME_RANGE_DAYS), default=DEFAULT_TIME_RANGE)
    parser.add_argument("--session", default=None)
    parser.add_argument("--test-type", default=None)
    parser.add_argument("--group-size", type=int, default=0)
    parser.add_argument("--write-back", action="store_true")
    parser.add_argument("--record-id", default=None)
    parser.add_argument("--records", type=Path, default=RECORDS_CSV_PATH)
    parser.add_argument("--output-dir", type=Path, default=RESULTS_DIR)
    args = parser.parse_args(argv)

    return run_sync(
        time_range=args.time_range,
        session_id=args.session,
        test_type=args.test_type,
        group_size=args.group_size,
        write_back=args.write_back,
        record_id=args.record_id,
        records_path=args.records,
        output_dir=args.output_dir,
    )


if __name__ == "__main__":
    main()
