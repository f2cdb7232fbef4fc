"""
Per-group aggregation of response records and session bookkeeping.

Every function here is a pure transformation over already-fetched records;
results are rebuilt on each call and never cached.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

import pandas as pd

from .config import EMPTY_ANSWER_LABEL, GROUP_KEYS
from .records import ResponseRecord


@dataclass(frozen=True)
class GroupStats:
    """Totals and answer distribution for one replicate group."""

    group: str
    total: int
    correct: int
    option_counts: tuple[tuple[str, int], ...] = ()

    @property
    def correct_rate(self) -> float | None:
        if not self.total:
            return None
        return self.correct / self.total

    def option_summary(self) -> str:
        """Render the histogram as ``"A(3), B(2)"``; empty string if no answers."""
        return ", ".join(f"{option}({count})" for option, count in self.option_counts)


# ---------------------------------------------------------------------------
# Group aggregation
# ---------------------------------------------------------------------------

def aggregate(records: list[ResponseRecord]) -> dict[str, GroupStats]:
    """
    Count totals, correct answers and selected options per group.

    All six groups are present in the result (in canonical order) even when
    a group received no answers. Option histograms are sorted by descending
    frequency; ties keep the order in which options were first seen.

    Args:
        records: Records of a single test session.

    Returns:
        Dict mapping group label to :class:`GroupStats`.
    """
    totals: dict[str, int] = {key: 0 for key in GROUP_KEYS}
    correct: dict[str, int] = {key: 0 for key in GROUP_KEYS}
    options: dict[str, Counter] = {key: Counter() for key in GROUP_KEYS}

    for record in records:
        totals[record.group] += 1
        if record.is_correct:
            correct[record.group] += 1
        options[record.group][record.submitted_answer or EMPTY_ANSWER_LABEL] += 1

    return {
        key: GroupStats(
            group=key,
            total=totals[key],
            correct=correct[key],
            # most_common() is a stable sort, so ties stay in insertion order
            option_counts=tuple(options[key].most_common()),
        )
        for key in GROUP_KEYS
    }


def group_stats_frame(stats: dict[str, GroupStats]) -> pd.DataFrame:
    """
    Tabulate group statistics for export.

    Returns:
        DataFrame with one row per group: group, total, correct,
        correct_rate (rounded to 4 places, NaN for empty groups),
        option_distribution.
    """
    rows: list[dict] = []
    for key in GROUP_KEYS:
        g = stats[key]
        rate = g.correct_rate
        rows.append({
            "group": g.group,
            "total": g.total,
            "correct": g.correct,
            "correct_rate": round(rate, 4) if rate is not None else None,
            "option_distribution": g.option_summary(),
        })
    return pd.DataFrame(rows)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def partition_by_session(records: list[ResponseRecord]) -> dict[str, list[ResponseRecord]]:
    """Split records by session id, preserving record order within each session."""
    sessions: dict[str, list[ResponseRecord]] = {}
    for record in records:
        sessions.setdefault(record.session_id, []).append(record)
    return sessions


def sessions_by_recency(records: list[ResponseRecord], search: str = "") -> list[str]:
    """
    Session ids ordered by their most recent record, newest first.

    Records without a session id are ignored. ``search`` keeps only sessions
    whose id contains it (case-insensitive).
    """
    latest: dict[str, int] = {}
    for record in records:
        if not record.session_id:
            continue
        ts = record.last_activity
        if record.session_id not in latest or ts > latest[record.session_id]:
            latest[record.session_id] = ts

    names = sorted(latest, key=lambda name: latest[name], reverse=True)

    keyword = search.strip().lower()
    if keyword:
        names = [name for name in names if keyword in name.lower()]
    return names
