"""
Response records: one assessor's answer for one group in one session.

Records are normalized by the fetch layer before they reach the report
builder; construction validates the group label so that aggregation can
rely on the fixed six-way partition.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import pandas as pd

from .config import GROUP_KEYS, RECORD_COLUMNS


@dataclass(frozen=True)
class ResponseRecord:
    """A single questionnaire answer. Timestamps are epoch milliseconds."""

    record_id: str
    session_id: str
    group: str
    submitted_answer: str
    correct_answer: str
    submitter: str = ""
    feedback: str = ""
    created_at: int = 0
    updated_at: int = 0

    def __post_init__(self) -> None:
        group = self.group.strip().upper()
        if group not in GROUP_KEYS:
            raise ValueError(
                f"Unknown group label {self.group!r} on record {self.record_id!r}; "
                f"expected one of {', '.join(GROUP_KEYS)}"
            )
        object.__setattr__(self, "group", group)

    @property
    def is_correct(self) -> bool:
        return self.submitted_answer == self.correct_answer

    @property
    def last_activity(self) -> int:
        """Most recent known timestamp (update time, else creation time)."""
        return self.updated_at or self.created_at


def _text(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def _millis(value) -> int:
    if value is None or pd.isna(value):
        return 0
    return int(value)


def records_from_frame(df: pd.DataFrame) -> list[ResponseRecord]:
    """
    Build records from a DataFrame with :data:`RECORD_COLUMNS`.

    Missing optional columns (submitter, feedback, timestamps) default to
    empty values; NaN cells read back from CSV become empty strings or 0.

    Raises:
        ValueError: A required column is absent or a group label is invalid.
    """
    required = {"record_id", "session_id", "group", "submitted_answer", "correct_answer"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Records table is missing columns: {sorted(missing)}")

    records: list[ResponseRecord] = []
    for row in df.to_dict(orient="records"):
        records.append(ResponseRecord(
            record_id=_text(row["record_id"]),
            session_id=_text(row["session_id"]),
            group=_text(row["group"]),
            submitted_answer=_text(row["submitted_answer"]),
            correct_answer=_text(row["correct_answer"]),
            submitter=_text(row.get("submitter")),
            feedback=_text(row.get("feedback")),
            created_at=_millis(row.get("created_at")),
            updated_at=_millis(row.get("updated_at")),
        ))
    return records


def records_to_frame(records: list[ResponseRecord]) -> pd.DataFrame:
    """Flatten records into a DataFrame with :data:`RECORD_COLUMNS`."""
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)
