"""
Questionnaire record fetching: raw Bitable items → ResponseRecord list.

The fetch layer owns everything the report builder assumes has already
happened: field value normalization, group label validation, creation-time
filtering and de-duplication. Test-type detection from the sample type
field also happens here.
"""

from __future__ import annotations

import time
from pathlib import Path

from ..report.config import GROUP_KEYS
from ..report.records import ResponseRecord, records_to_frame
from ..significance.rules import sample_type_to_test_type
from .client import BitableClient
from .config import (
    DAY_MS,
    DEFAULT_TIME_RANGE,
    RECORDS_CSV_PATH,
    STAT_FIELD_MAP,
    STAT_TABLE_ID,
    STAT_VIEW_ID,
    TIME_RANGE_DAYS,
)
from .parser import parse_select_option_name, parse_user_name, to_text, to_timestamp


def time_range_start(range_key: str = DEFAULT_TIME_RANGE, now_ms: int | None = None) -> int:
    """
    Earliest creation time (epoch ms) kept for a time range key.

    Raises:
        ValueError: Unknown range key (see TIME_RANGE_DAYS).
    """
    if range_key not in TIME_RANGE_DAYS:
        raise ValueError(
            f"Unknown time range '{range_key}'. Expected one of: {', '.join(TIME_RANGE_DAYS)}"
        )
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return now_ms - TIME_RANGE_DAYS[range_key] * DAY_MS


def build_response_record(item: dict, field_map: dict = STAT_FIELD_MAP) -> ResponseRecord | None:
    """
    Normalize one raw Bitable item into a ResponseRecord.

    The correct answer is read from the lookup field of the record's own
    group. Records whose group is not one of the six labels are dropped.

    Args:
        item: Raw item with ``record_id``, ``fields`` and optional
            ``created_time`` / ``last_modified_time``.
        field_map: Logical role → field name mapping.

    Returns:
        A record, or None when the group label is invalid.
    """
    fields = item.get("fields") or {}

    group = to_text(fields.get(field_map["group"])).strip().upper()
    if group not in GROUP_KEYS:
        return None

    correct_raw = fields.get(field_map["correct"][group])
    correct = parse_select_option_name(correct_raw) or to_text(correct_raw)

    created_at = to_timestamp(fields.get(field_map["created_at"])) or to_timestamp(
        item.get("created_time")
    )

    return ResponseRecord(
        record_id=str(item.get("record_id", "")),
        session_id=to_text(fields.get(field_map["session"])),
        group=group,
        submitted_answer=parse_select_option_name(fields.get(field_map["answer"])),
        correct_answer=correct,
        submitter=parse_user_name(fields.get(field_map["submitter"])),
        feedback=to_text(fields.get(field_map["feedback"])),
        created_at=created_at,
        updated_at=to_timestamp(item.get("last_modified_time")),
    )


def fetch_response_records(
    client: BitableClient,
    table_id: str = STAT_TABLE_ID,
    view_id: str | None = STAT_VIEW_ID,
    time_range: str = DEFAULT_TIME_RANGE,
    field_map: dict = STAT_FIELD_MAP,
    now_ms: int | None = None,
) -> tuple[list[ResponseRecord], str]:
    """
    Fetch, filter and normalize all questionnaire records of a view.

    Records created before the start of ``time_range`` are dropped (records
    without a creation time are kept), as are records with an invalid group
    label and repeated record ids (items without an id are never merged). A malformed record is skipped with a
    warning rather than aborting the fetch.

    Returns:
        Tuple of (records, test_type). ``test_type`` is derived from the
        first non-empty sample type seen in the kept records.
    """
    start = time_range_start(time_range, now_ms)
    items = client.list_records(table_id, view_id)
    print(f"Fetched {len(items):,} raw records from table {table_id} ({time_range})")

    records: list[ResponseRecord] = []
    seen: set[str] = set()
    sample_type = ""
    n_old = n_invalid = n_duplicate = 0

    for item in items:
        record_id = str(item.get("record_id", ""))
        try:
            record = build_response_record(item, field_map)
        except (KeyError, TypeError, ValueError) as exc:
            print(f"  WARNING: skipping record {record_id}: {exc}")
            n_invalid += 1
            continue

        if record is None:
            n_invalid += 1
            continue
        if record.created_at > 0 and record.created_at < start:
            n_old += 1
            continue
        if record.record_id:
            if record.record_id in seen:
                n_duplicate += 1
                continue
            seen.add(record.record_id)
        records.append(record)

        if not sample_type:
            fields = item.get("fields") or {}
            sample_type = to_text(fields.get(field_map.get("sample_type", ""))).strip()

    test_type = sample_type_to_test_type(sample_type)

    print(f"  Kept:              {len(records):,}")
    print(f"  Outside range:     {n_old}")
    print(f"  Invalid/malformed: {n_invalid}")
    print(f"  Duplicates:        {n_duplicate}")
    print(f"  Detected type:     {test_type}")

    return records, test_type


def export_records_csv(
    records: list[ResponseRecord],
    output_path: Path = RECORDS_CSV_PATH,
) -> Path:
    """Save fetched records to the CSV consumed by the report runner."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    records_to_frame(records).to_csv(output_path, index=False)
    print(f"Saved {len(records):,} records to {output_path}")
    return output_path
