"""
Unit tests for triangle_test/report/verdict.py.

Covers:
- build_verdict worked scenarios (difference at threshold, shortage,
  quiet similarity session, empty input).
- Expected total / effective group size bookkeeping.
- Count shortage vs. mismatch and their warning texts.
- Threshold base clamping and its note in the rule description.
- Insufficient-evidence fallback, determinism, JSON-ready output.
"""

from __future__ import annotations

import json

import pytest

from conftest import make_record, make_session
from triangle_test.report.verdict import (
    EmptyInput,
    ReportVerdict,
    build_count_warning,
    build_verdict,
    compute_expected_total,
    effective_group_size,
)
from triangle_test.significance import rules
from triangle_test.significance.config import DIFFERENCE_TEST, SIMILARITY_TEST


# ---------------------------------------------------------------------------
# Class: worked scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_difference_at_threshold_is_significant(self, difference_36_of_18):
        """36 responses, 18 correct, difference test → significant, not passed."""
        verdict = build_verdict(difference_36_of_18, DIFFERENCE_TEST, 0)
        assert isinstance(verdict, ReportVerdict)
        assert verdict.expected_per_group == 6
        assert verdict.expected_total == 36
        assert verdict.threshold_base == 36
        assert verdict.threshold == 18
        assert verdict.significant is True
        assert verdict.passed is False
        assert verdict.count_shortage is False
        assert verdict.count_mismatch is False
        assert verdict.count_warning == ""

    def test_one_below_threshold_passes(self):
        verdict = build_verdict(make_session(36, 17), DIFFERENCE_TEST, 0)
        assert verdict.significant is False
        assert verdict.passed is True

    @pytest.mark.parametrize("correct", [0, 10, 18, 30])
    def test_shortage_cannot_pass(self, correct):
        """30 of 36 expected questionnaires → shortage, fails whatever the correct count."""
        verdict = build_verdict(make_session(30, correct), DIFFERENCE_TEST, 0)
        assert verdict.count_shortage is True
        assert verdict.count_mismatch is False
        assert verdict.passed is False
        assert verdict.threshold == 18
        assert "cannot pass" in verdict.count_warning
        assert "insufficient" in verdict.result_description

    def test_quiet_similarity_session_passes(self, similarity_42_quiet):
        verdict = build_verdict(similarity_42_quiet, SIMILARITY_TEST)
        assert verdict.expected_total == 42
        assert verdict.threshold == 17
        assert verdict.passed is True
        assert verdict.count_warning == ""
        assert "meets the pass criterion" in verdict.result_description

    def test_similarity_48_uses_table_plus_one(self):
        verdict = build_verdict(make_session(48, 21), SIMILARITY_TEST, 8)
        assert verdict.expected_total == 48
        assert verdict.threshold == 21
        assert verdict.significant is True
        assert verdict.passed is False

    def test_empty_records_return_empty_input(self):
        result = build_verdict([], DIFFERENCE_TEST, 6)
        assert isinstance(result, EmptyInput)
        assert "No records" in result.message


# ---------------------------------------------------------------------------
# Class: sample size bookkeeping
# ---------------------------------------------------------------------------

class TestSampleSize:

    @pytest.mark.parametrize("user_size,expected", [(0, 7), (-3, 7), (5, 7), (7, 7), (9, 9)])
    def test_effective_group_size_similarity(self, user_size, expected):
        assert effective_group_size(user_size, rules.SIMILARITY_RULE) == expected

    def test_effective_group_size_difference(self):
        assert effective_group_size(0, rules.DIFFERENCE_RULE) == 6
        assert effective_group_size(8, rules.DIFFERENCE_RULE) == 8

    def test_expected_total_is_six_groups(self):
        assert compute_expected_total(7) == 42
        assert compute_expected_total(0) == 0
        assert compute_expected_total(-2) == 0

    def test_user_group_size_below_minimum_is_raised(self):
        verdict = build_verdict(make_session(36, 0), DIFFERENCE_TEST, 4)
        assert verdict.expected_per_group == 6
        assert verdict.expected_total == 36

    def test_unknown_test_type_uses_similarity_rule(self):
        verdict = build_verdict(make_session(42, 0), "sensory test")
        assert verdict.test_type == SIMILARITY_TEST
        assert verdict.alpha == 0.05


# ---------------------------------------------------------------------------
# Class: count mismatch and warnings
# ---------------------------------------------------------------------------

class TestCountWarnings:

    def test_surplus_is_mismatch_not_shortage(self):
        """40 responses for 36 expected → threshold from 40, mismatch flagged."""
        verdict = build_verdict(make_session(40, 0), DIFFERENCE_TEST, 0)
        assert verdict.count_shortage is False
        assert verdict.count_mismatch is True
        assert verdict.threshold_base == 40
        assert verdict.threshold == 19
        assert verdict.passed is True
        assert "update the per-group size" in verdict.count_warning
        assert "differs from the expected 36" in verdict.result_description

    def test_warning_empty_when_counts_match(self):
        assert build_count_warning(36, 6, 36) == ""

    def test_warning_empty_when_nothing_expected(self):
        assert build_count_warning(10, 0, 0) == ""

    def test_shortage_warning_text(self):
        text = build_count_warning(30, 6, 36)
        assert "30" in text and "36" in text
        assert "collect the missing questionnaires" in text

    def test_surplus_warning_text(self):
        text = build_count_warning(44, 7, 42)
        assert "7 per group" in text
        assert "update the per-group size" in text


# ---------------------------------------------------------------------------
# Class: clamping and insufficient evidence
# ---------------------------------------------------------------------------

class TestClampingAndEvidence:

    def test_large_plan_is_clamped_to_table_maximum(self):
        verdict = build_verdict(make_session(60, 0), DIFFERENCE_TEST, 10)
        assert verdict.expected_total == 60
        assert verdict.threshold_base == 54
        assert verdict.threshold == 24
        assert verdict.sample_size_clamped is True
        assert "was clamped to 54" in verdict.rule_description

    def test_in_domain_base_is_not_clamped(self, difference_36_of_18):
        verdict = build_verdict(difference_36_of_18, DIFFERENCE_TEST)
        assert verdict.sample_size_clamped is False
        assert "clamped" not in verdict.rule_description

    def test_fewer_responses_than_threshold_is_not_significant(self):
        """10 unanimous answers cannot reach a threshold of 18."""
        verdict = build_verdict(make_session(10, 10), DIFFERENCE_TEST)
        assert verdict.insufficient_evidence is True
        assert verdict.significant is False
        assert verdict.passed is False  # still a shortage
        assert verdict.count_shortage is True


# ---------------------------------------------------------------------------
# Class: outputs
# ---------------------------------------------------------------------------

class TestVerdictOutput:

    def test_build_is_deterministic(self, difference_36_of_18):
        first = build_verdict(difference_36_of_18, DIFFERENCE_TEST, 6)
        second = build_verdict(difference_36_of_18, DIFFERENCE_TEST, 6)
        assert first == second

    def test_correct_records_listed_in_input_order(self):
        records = [
            make_record(record_id="1", group="B1", submitted="A"),
            make_record(record_id="2", group="A1", submitted="B"),
            make_record(record_id="3", group="A2", submitted="A"),
        ]
        verdict = build_verdict(records, DIFFERENCE_TEST)
        assert [r.record_id for r in verdict.correct_records] == ["1", "3"]
        assert verdict.observed_correct == 2

    def test_group_stats_cover_all_groups(self, difference_36_of_18):
        verdict = build_verdict(difference_36_of_18, DIFFERENCE_TEST)
        assert [g.group for g in verdict.group_stats] == ["A1", "A2", "A3", "B1", "B2", "B3"]

    def test_verdict_class_is_documented(self):
        # dataclass falls back to a generated signature when no docstring is written
        assert ReportVerdict.__doc__
        assert not ReportVerdict.__doc__.startswith("ReportVerdict(")

    def test_to_dict_is_json_serializable(self, difference_36_of_18):
        payload = build_verdict(difference_36_of_18, DIFFERENCE_TEST).to_dict()
        decoded = json.loads(json.dumps(payload, ensure_ascii=False))
        assert decoded["threshold"] == 18
        assert len(decoded["group_stats"]) == 6
        assert decoded["rule_label"] == "Difference test (α=0.1)"

    def test_rule_description_names_alpha_and_threshold(self, difference_36_of_18):
        verdict = build_verdict(difference_36_of_18, DIFFERENCE_TEST)
        assert "α=0.1" in verdict.rule_description
        assert "Fewer than 18 correct answers" in verdict.rule_description
