"""
Shared pytest fixtures and record factories for triangle test checks.

Sessions are built group by group: ``make_session`` spreads ``total``
records over the six replicate groups (A1..B3, round robin) and marks the
first ``correct`` of them as correct answers.
"""

from __future__ import annotations

import pytest
import requests

from triangle_test.report.config import GROUP_KEYS
from triangle_test.report.records import ResponseRecord


# ---------------------------------------------------------------------------
# Factories (plain functions so test modules can import them directly)
# ---------------------------------------------------------------------------

def make_record(
    record_id: str = "rec001",
    group: str = "A1",
    submitted: str = "A",
    correct: str = "A",
    session_id: str = "Batch 01",
    submitter: str = "",
    feedback: str = "",
    created_at: int = 0,
    updated_at: int = 0,
) -> ResponseRecord:
    return ResponseRecord(
        record_id=record_id,
        session_id=session_id,
        group=group,
        submitted_answer=submitted,
        correct_answer=correct,
        submitter=submitter,
        feedback=feedback,
        created_at=created_at,
        updated_at=updated_at,
    )


def make_session(
    total: int,
    correct: int,
    session_id: str = "Batch 01",
    created_at: int = 0,
) -> list[ResponseRecord]:
    """
    ``total`` records for one session, ``correct`` of which are right.

    Correct records answer "A" (the odd sample); the rest answer "B".
    """
    records = []
    for i in range(total):
        records.append(make_record(
            record_id=f"{session_id}-{i:03d}",
            group=GROUP_KEYS[i % len(GROUP_KEYS)],
            submitted="A" if i < correct else "B",
            correct="A",
            session_id=session_id,
            submitter=f"assessor {i}",
            created_at=created_at + i,
        ))
    return records


# ---------------------------------------------------------------------------
# Raw Bitable payloads
# ---------------------------------------------------------------------------

NOW_MS = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000


def make_raw_item(
    record_id: str,
    group: str = "A1",
    answer: str = "A",
    correct: str = "A",
    session: str = "Batch 01",
    created_at: int | None = None,
    sample_type: str = "",
) -> dict:
    """One list-records item in the shapes the Bitable API returns them."""
    fields = {
        "Test name": [{"text": session, "type": "text"}],
        "Group": group,
        "Answer": answer,
        "Submitted by": [{"id": "ou_1", "name": f"user {record_id}"}],
        "Feedback": [{"text": "slightly sweeter", "type": "text"}],
        f"Correct answer {group.upper()}": [{"text": correct, "type": "text"}],
    }
    if created_at is not None:
        fields["Created at"] = created_at
    if sample_type:
        fields["Sample type"] = sample_type
    return {
        "record_id": record_id,
        "fields": fields,
        "last_modified_time": NOW_MS,
    }


class FakeBitableClient:
    """In-memory stand-in for BitableClient with call recording."""

    def __init__(self, tables: dict[str, list[dict]] | None = None, fail_fields=()):
        self.tables = tables or {}
        self.fail_fields = set(fail_fields)
        self.updates: list[tuple[str, str, dict]] = []

    def list_records(self, table_id, view_id=None):
        return list(self.tables.get(table_id, []))

    def update_record(self, table_id, record_id, fields):
        if self.fail_fields & set(fields):
            raise requests.ConnectionError("connection reset")
        self.updates.append((table_id, record_id, fields))
        return {"record_id": record_id, "fields": fields}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def difference_36_of_18():
    """36 responses, 18 correct: exactly at the difference-test threshold."""
    return make_session(36, 18)


@pytest.fixture
def similarity_42_quiet():
    """42 responses, 10 correct: well below the similarity threshold of 17."""
    return make_session(42, 10)


@pytest.fixture
def mixed_sessions():
    """Two sessions; "Batch 02" has the most recent activity."""
    return make_session(6, 2, session_id="Batch 01", created_at=1_000) + make_session(
        6, 3, session_id="Batch 02", created_at=5_000
    )
