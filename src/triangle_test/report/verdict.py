"""
Pass/fail verdict for one triangle-test session.

Decision rule
-------------
  expected_total = max(user group size, rule minimum) × 6
  threshold      = table threshold at clamp(max(expected, observed))
  significant    = observed_correct >= threshold
                   (only when observed_total >= threshold)
  pass           = no count shortage AND not significant

:func:`build_verdict` is a pure function of its three inputs. It never
raises for data problems: an empty record list returns :class:`EmptyInput`,
and sample-size shortfalls or mismatches are carried as fields on the
verdict so that a degraded report is still produced.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from ..significance.config import GROUPS_PER_SESSION
from ..significance.rules import TestTypeRule, resolve_test_type_rule
from ..significance.thresholds import clamp_sample_size, threshold_for_test_type
from .aggregation import GroupStats, aggregate
from .config import EMPTY_INPUT_MESSAGE
from .records import ResponseRecord


@dataclass(frozen=True)
class EmptyInput:
    """Returned instead of a verdict when the session has no records."""

    message: str = EMPTY_INPUT_MESSAGE


@dataclass(frozen=True)
class ReportVerdict:
    """
    Outcome of one report build.

    ``passed`` requires both a complete sample and no significant
    difference; ``count_warning`` and the two description strings carry the
    reasoning into the rendered report.
    """

    test_type: str
    rule_label: str
    passed: bool
    significant: bool
    insufficient_evidence: bool
    observed_total: int
    observed_correct: int
    threshold: int
    threshold_base: int
    sample_size_clamped: bool
    expected_per_group: int
    expected_total: int
    alpha: float
    count_shortage: bool
    count_mismatch: bool
    count_warning: str
    rule_description: str
    result_description: str
    group_stats: tuple[GroupStats, ...]
    correct_records: tuple[ResponseRecord, ...]

    def to_dict(self) -> dict:
        """JSON-ready representation (nested dataclasses become dicts)."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Sample size bookkeeping
# ---------------------------------------------------------------------------

def effective_group_size(user_group_size: int, rule: TestTypeRule) -> int:
    """Declared per-group size, raised to the rule's minimum if below it."""
    return max(user_group_size, rule.min_group_size)


def compute_expected_total(effective_size: int) -> int:
    """Expected responses across all six replicate groups."""
    return max(0, effective_size) * GROUPS_PER_SESSION


def build_count_warning(
    observed_total: int,
    expected_per_group: int,
    expected_total: int,
) -> str:
    """
    Warning text when the questionnaire count differs from the plan.

    Returns an empty string when the counts match (or nothing is expected).
    """
    if expected_total <= 0 or observed_total == expected_total:
        return ""

    base = (
        f"Questionnaire count {observed_total} does not match the planned sample size "
        f"({expected_per_group} per group × {GROUPS_PER_SESSION} groups = {expected_total})"
    )
    if observed_total < expected_total:
        return f"{base}. A short sample cannot pass; collect the missing questionnaires."
    return (
        f"{base}. If the sampling plan was changed, update the per-group size "
        "so the count check passes."
    )


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

def _rule_description(
    rule: TestTypeRule,
    expected_per_group: int,
    threshold: int,
    threshold_base: int,
    base_before_clamp: int,
) -> str:
    lo, hi = rule.min_sample_size, rule.max_sample_size
    range_desc = (
        f"table domain {lo}–{hi}: n ≤ {lo} uses the fixed threshold "
        f"{rule.base_value + rule.threshold_offset}, {lo + 1}–{hi} use table values"
    )
    if base_before_clamp != threshold_base:
        range_desc += (
            f"; sample size {base_before_clamp} lies outside the table domain "
            f"and was clamped to {threshold_base}"
        )
    return (
        f"{rule.label}: {expected_per_group} per group × {GROUPS_PER_SESSION} groups "
        f"(threshold computed for a sample size of {threshold_base}; {range_desc}), "
        f"α={rule.alpha:g}. Fewer than {threshold} correct answers means no significant "
        f"difference (pass); {threshold} or more indicates a significant difference"
    )


def _result_description(
    observed_total: int,
    observed_correct: int,
    expected_total: int,
    count_shortage: bool,
    count_mismatch: bool,
    insufficient_evidence: bool,
    passed: bool,
    rule_description: str,
) -> str:
    if count_shortage:
        return (
            f"{observed_total} valid records, below the expected sample size of "
            f"{expected_total}. The sample is insufficient and the rule cannot be "
            "applied; collect more questionnaires."
        )

    mismatch_note = (
        f" (differs from the expected {expected_total}; check the sampling)"
        if count_mismatch else ""
    )
    evidence_note = (
        " Fewer responses than the threshold; treated as not significant."
        if insufficient_evidence else ""
    )
    outcome = "meets the pass criterion" if passed else "does not meet the pass criterion"
    return (
        f"{observed_total} valid records{mismatch_note}, {observed_correct} correct. "
        f"Decision rule: {rule_description}.{evidence_note} Conclusion: {outcome}."
    )


# ---------------------------------------------------------------------------
# Verdict
# ---------------------------------------------------------------------------

def build_verdict(
    records: list[ResponseRecord],
    test_type: str,
    user_group_size: int = 0,
) -> ReportVerdict | EmptyInput:
    """
    Decide pass/fail for one session's records.

    Args:
        records: Records of a single test session (already filtered).
        test_type: ``"similarity test"`` or ``"difference test"``; other
            values use the default rule.
        user_group_size: Declared respondents per group; 0 or negative means
            unset and the rule minimum applies.

    Returns:
        :class:`ReportVerdict`, or :class:`EmptyInput` when ``records`` is
        empty.
    """
    records = list(records)
    if not records:
        return EmptyInput()

    rule = resolve_test_type_rule(test_type)

    observed_total = len(records)
    correct_records = tuple(r for r in records if r.is_correct)
    observed_correct = len(correct_records)

    expected_per_group = effective_group_size(user_group_size, rule)
    expected_total = compute_expected_total(expected_per_group)
    count_shortage = observed_total < expected_total
    count_mismatch = not count_shortage and observed_total != expected_total

    base_before_clamp = max(expected_total, observed_total)
    threshold_base = clamp_sample_size(
        base_before_clamp, rule.min_sample_size, rule.max_sample_size
    )
    threshold = threshold_for_test_type(rule.name, threshold_base)

    # Fewer responses than the threshold cannot reach it; kept as
    # "not significant" rather than indeterminate.
    insufficient_evidence = observed_total < threshold
    significant = not insufficient_evidence and observed_correct >= threshold
    passed = not count_shortage and not significant

    rule_description = _rule_description(
        rule, expected_per_group, threshold, threshold_base, base_before_clamp
    )
    result_description = _result_description(
        observed_total,
        observed_correct,
        expected_total,
        count_shortage,
        count_mismatch,
        insufficient_evidence,
        passed,
        rule_description,
    )

    stats = aggregate(records)

    return ReportVerdict(
        test_type=rule.name,
        rule_label=rule.label,
        passed=passed,
        significant=significant,
        insufficient_evidence=insufficient_evidence,
        observed_total=observed_total,
        observed_correct=observed_correct,
        threshold=threshold,
        threshold_base=threshold_base,
        sample_size_clamped=base_before_clamp != threshold_base,
        expected_per_group=expected_per_group,
        expected_total=expected_total,
        alpha=rule.alpha,
        count_shortage=count_shortage,
        count_mismatch=count_mismatch,
        count_warning=build_count_warning(observed_total, expected_per_group, expected_total),
        rule_description=rule_description,
        result_description=result_description,
        group_stats=tuple(stats.values()),
        correct_records=correct_records,
    )
