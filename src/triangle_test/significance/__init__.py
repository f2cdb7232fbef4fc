"""
significance — binomial significance thresholds for triangle tests.

Module layout
-------------
config.py      — Test type names, guess probabilities, published tables
rules.py       — TestTypeRule per test type, lookup and sample-type mapping
binomial.py    — Exact point/tail probabilities and threshold search
thresholds.py  — Table lookup with clamping, table-vs-exact audit

Public interface
----------------
    binomial_point_probability(n, k, p)
    binomial_tail_probability(n, k, p)
    significance_threshold(n, alpha, p)
    clamp_sample_size(n, min_n, max_n)
    threshold_for_test_type(test_type, sample_size)
"""

from .binomial import (
    binomial_point_probability,
    binomial_tail_probability,
    significance_threshold,
)
from .config import DEFAULT_TEST_TYPE, DIFFERENCE_TEST, SIMILARITY_TEST
from .rules import (
    TEST_TYPE_RULES,
    TestTypeRule,
    resolve_test_type_rule,
    sample_type_to_test_type,
)
from .thresholds import (
    audit_threshold_table,
    clamp_sample_size,
    threshold_for_test_type,
)

__all__ = [
    # Binomial model
    "binomial_point_probability",
    "binomial_tail_probability",
    "significance_threshold",
    # Rules
    "DEFAULT_TEST_TYPE",
    "DIFFERENCE_TEST",
    "SIMILARITY_TEST",
    "TEST_TYPE_RULES",
    "TestTypeRule",
    "resolve_test_type_rule",
    "sample_type_to_test_type",
    # Table lookup
    "audit_threshold_table",
    "clamp_sample_size",
    "threshold_for_test_type",
]
