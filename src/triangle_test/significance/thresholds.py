"""
Standard-table threshold lookup per test type.

Both tables are converted to a single meaning: reaching or exceeding the
returned threshold signals a statistically significant difference. The
similarity table lists the largest count still consistent with "no
difference", so its threshold is one above the table value.
"""

from __future__ import annotations

import pandas as pd

from .binomial import significance_threshold
from .rules import resolve_test_type_rule


def clamp_sample_size(n: int, min_n: int, max_n: int) -> int:
    """Clip ``n`` into ``[min_n, max_n]``."""
    if n <= min_n:
        return min_n
    if n >= max_n:
        return max_n
    return n


def threshold_for_test_type(test_type: str, sample_size: int) -> int:
    """
    Significance threshold for ``sample_size`` total responses.

    The sample size is clamped into the rule's table domain. At or below the
    domain minimum the fixed base value applies; otherwise the table value
    is used, falling back to the value at the domain maximum if the size is
    not tabulated.

    Args:
        test_type: Test type name; unknown names use the default rule.
        sample_size: Total number of responses across all six groups.

    Returns:
        Minimum number of correct answers that counts as significant.
    """
    rule = resolve_test_type_rule(test_type)
    n = clamp_sample_size(sample_size, rule.min_sample_size, rule.max_sample_size)

    if n <= rule.min_sample_size:
        value = rule.base_value
    else:
        value = rule.table_value(n)
        if value is None:
            value = rule.table_value(rule.max_sample_size)
        if value is None:
            value = rule.base_value

    return value + rule.threshold_offset


def audit_threshold_table(test_type: str) -> pd.DataFrame:
    """
    Compare the published table with the exact binomial model.

    For every sample size in the rule's domain, reports the table-derived
    threshold next to :func:`significance_threshold` evaluated at the rule's
    alpha and guess probability. Informational only: decisions always use
    the table.

    Returns:
        DataFrame with columns sample_size, table_threshold, exact_threshold,
        difference (table minus exact).
    """
    rule = resolve_test_type_rule(test_type)
    rows: list[dict] = []

    for n in range(rule.min_sample_size, rule.max_sample_size + 1):
        table_threshold = threshold_for_test_type(rule.name, n)
        exact_threshold = significance_threshold(n, rule.alpha, rule.guess_probability)
        rows.append({
            "sample_size": n,
            "table_threshold": table_threshold,
            "exact_threshold": exact_threshold,
            "difference": table_threshold - exact_threshold,
        })

    return pd.DataFrame(rows)
