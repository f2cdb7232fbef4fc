"""
Test plan lookups and report write-back.

The plan table holds one record per test session (matched by its primary
name field). The Markdown report goes into a text field and the pass/fail
outcome into a single-select conclusion field.
"""

from __future__ import annotations

import requests

from .client import BitableClient
from .config import (
    CONCLUSION_FAIL,
    CONCLUSION_PASS,
    PLAN_FIELD_MAP,
    PLAN_TABLE_ID,
    PLAN_VIEW_ID,
)
from .parser import to_text
from .retry import BitableError


def find_record_by_field_value(
    client: BitableClient,
    table_id: str,
    view_id: str | None,
    field_name: str,
    value: str,
) -> dict | None:
    """First record of the view whose ``field_name`` text equals ``value``."""
    for item in client.list_records(table_id, view_id):
        fields = item.get("fields") or {}
        if to_text(fields.get(field_name)) == value:
            return item
    return None


def fetch_sample_name(
    client: BitableClient,
    test_name: str,
    table_id: str = PLAN_TABLE_ID,
    view_id: str | None = PLAN_VIEW_ID,
    field_map: dict[str, str] = PLAN_FIELD_MAP,
) -> str:
    """Name of the sample under test for a session ("" when not found)."""
    if not test_name:
        return ""
    item = find_record_by_field_value(client, table_id, view_id, field_map["name"], test_name)
    if item is None:
        return ""
    return to_text((item.get("fields") or {}).get(field_map["sample_name"]))


def write_report(
    client: BitableClient,
    report_md: str,
    passed: bool,
    test_name: str = "",
    record_id: str | None = None,
    table_id: str = PLAN_TABLE_ID,
    view_id: str | None = PLAN_VIEW_ID,
    field_map: dict[str, str] = PLAN_FIELD_MAP,
) -> str:
    """
    Write the report and conclusion to the session's plan record.

    The target record is looked up by ``test_name`` in the plan table;
    ``record_id`` is used when the lookup finds nothing (or no name is
    given). A failure writing the conclusion is reported but does not undo
    or abort the report write.

    Returns:
        The record id written to.

    Raises:
        ValueError: No matching record and no explicit ``record_id``.
    """
    target = None
    if test_name:
        item = find_record_by_field_value(client, table_id, view_id, field_map["name"], test_name)
        if item is not None:
            target = item.get("record_id")
            print(f"Found plan record {target} for '{test_name}'")

    if not target:
        target = (record_id or "").strip()
        if not target:
            raise ValueError(
                f"No plan record found for '{test_name}'; provide the record id to write to."
            )
        print(f"No matching plan record, using record id {target}")

    client.update_record(table_id, target, {field_map["report"]: report_md})

    conclusion = CONCLUSION_PASS if passed else CONCLUSION_FAIL
    try:
        client.update_record(table_id, target, {field_map["conclusion"]: conclusion})
    except (requests.RequestException, BitableError) as exc:
        print(f"  WARNING: report written but conclusion update failed: {exc}")

    print(f"Report written to record {target} (conclusion: {conclusion})")
    return target
