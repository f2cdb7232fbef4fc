"""
Test type rules: which statistical regime applies to a report.

Each rule bundles the standard's assumptions for one test type (minimum
group size, significance level, guess probability) with its sample-size
table. Exactly one rule is active per report; unknown names resolve to the
default rule.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import (
    DEFAULT_TEST_TYPE,
    DIFFERENCE_ALPHA,
    DIFFERENCE_BASE_THRESHOLD,
    DIFFERENCE_GUESS_PROBABILITY,
    DIFFERENCE_MAX_N,
    DIFFERENCE_MIN_GROUP_SIZE,
    DIFFERENCE_MIN_N,
    DIFFERENCE_SAMPLE_KEYWORDS,
    DIFFERENCE_TEST,
    DIFFERENCE_THRESHOLD_TABLE,
    SIMILARITY_ALPHA,
    SIMILARITY_BASE_MAX_ALLOWED,
    SIMILARITY_GUESS_PROBABILITY,
    SIMILARITY_MAX_ALLOWED_TABLE,
    SIMILARITY_MAX_N,
    SIMILARITY_MIN_GROUP_SIZE,
    SIMILARITY_MIN_N,
    SIMILARITY_TEST,
)


@dataclass(frozen=True)
class TestTypeRule:
    """
    Statistical regime for one test type.

    ``table`` maps total sample size to a table value; the significance
    threshold is ``value + threshold_offset``. At or below
    ``min_sample_size`` the fixed ``base_value`` applies.
    """

    name: str
    label: str
    min_group_size: int
    alpha: float
    guess_probability: float
    min_sample_size: int
    max_sample_size: int
    base_value: int
    table: tuple[tuple[int, int], ...]
    threshold_offset: int
    table_meaning: str

    def table_value(self, sample_size: int) -> int | None:
        """Return the tabulated value for ``sample_size``, or None if absent."""
        return dict(self.table).get(sample_size)


SIMILARITY_RULE = TestTypeRule(
    name=SIMILARITY_TEST,
    label=f"Similarity test (α={SIMILARITY_ALPHA:g})",
    min_group_size=SIMILARITY_MIN_GROUP_SIZE,
    alpha=SIMILARITY_ALPHA,
    guess_probability=SIMILARITY_GUESS_PROBABILITY,
    min_sample_size=SIMILARITY_MIN_N,
    max_sample_size=SIMILARITY_MAX_N,
    base_value=SIMILARITY_BASE_MAX_ALLOWED,
    table=SIMILARITY_MAX_ALLOWED_TABLE,
    threshold_offset=1,
    table_meaning="maximum correct answers without a perceptible difference",
)

DIFFERENCE_RULE = TestTypeRule(
    name=DIFFERENCE_TEST,
    label=f"Difference test (α={DIFFERENCE_ALPHA:g})",
    min_group_size=DIFFERENCE_MIN_GROUP_SIZE,
    alpha=DIFFERENCE_ALPHA,
    guess_probability=DIFFERENCE_GUESS_PROBABILITY,
    min_sample_size=DIFFERENCE_MIN_N,
    max_sample_size=DIFFERENCE_MAX_N,
    base_value=DIFFERENCE_BASE_THRESHOLD,
    table=DIFFERENCE_THRESHOLD_TABLE,
    threshold_offset=0,
    table_meaning="minimum correct answers to declare a perceptible difference",
)

TEST_TYPE_RULES: dict[str, TestTypeRule] = {
    SIMILARITY_TEST: SIMILARITY_RULE,
    DIFFERENCE_TEST: DIFFERENCE_RULE,
}


def resolve_test_type_rule(test_type: str | None) -> TestTypeRule:
    """
    Look up the rule for ``test_type``.

    Matching is exact and case-sensitive; anything else (including None or
    an empty string) resolves to the default rule.
    """
    return TEST_TYPE_RULES.get(test_type or "", TEST_TYPE_RULES[DEFAULT_TEST_TYPE])


def sample_type_to_test_type(sample_type: str | None) -> str:
    """
    Map the spreadsheet's free-text sample type onto a test type name.

    Factory samples are checked for a perceptible difference; every other
    non-empty sample type (alternative samples) is a similarity test.
    """
    text = (sample_type or "").strip()
    if not text:
        return DEFAULT_TEST_TYPE
    lowered = text.lower()
    if any(keyword in lowered for keyword in DIFFERENCE_SAMPLE_KEYWORDS):
        return DIFFERENCE_TEST
    return SIMILARITY_TEST