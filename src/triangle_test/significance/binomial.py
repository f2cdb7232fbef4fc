"""
Exact binomial tail math for triangle-test significance.

Under the null hypothesis every assessor is guessing, so the number of
correct answers out of ``n`` follows Binomial(n, p) with p the guess
probability. The significance threshold is the smallest count whose upper
tail probability does not exceed alpha.

No I/O occurs here and nothing raises: degenerate inputs return the
sentinel values documented on each function.
"""

from __future__ import annotations

import numpy as np
from scipy.special import gammaln

from .config import DEFAULT_ALPHA, TRIANGLE_GUESS_PROBABILITY


def binomial_point_probability(n: int, k: int, p: float) -> float:
    """
    P(X = k) for X ~ Binomial(n, p).

    The binomial coefficient is evaluated in log space (``gammaln``) so that
    sample sizes in the hundreds do not overflow.

    Args:
        n: Number of trials.
        k: Number of successes.
        p: Success probability per trial.

    Returns:
        Probability in [0, 1]. ``k`` outside [0, n] gives 0; ``p <= 0`` puts
        all mass on k = 0 and ``p >= 1`` puts all mass on k = n.
    """
    if k < 0 or k > n:
        return 0.0
    if p <= 0:
        return 1.0 if k == 0 else 0.0
    if p >= 1:
        return 1.0 if k == n else 0.0

    log_comb = gammaln(n + 1) - gammaln(k + 1) - gammaln(n - k + 1)
    log_prob = log_comb + k * np.log(p) + (n - k) * np.log1p(-p)
    return float(np.exp(log_prob))


def binomial_tail_probability(n: int, k: int, p: float) -> float:
    """
    P(X >= k) for X ~ Binomial(n, p).

    Monotonically non-increasing in ``k``; ``k <= 0`` covers the whole
    distribution and ``k > n`` gives 0.
    """
    start = max(k, 0)
    if start > n:
        return 0.0
    return float(sum(binomial_point_probability(n, i, p) for i in range(start, n + 1)))


def significance_threshold(
    n: int,
    alpha: float = DEFAULT_ALPHA,
    p: float = TRIANGLE_GUESS_PROBABILITY,
) -> int:
    """
    Minimum number of correct answers out of ``n`` that rejects guessing.

    Accumulates the upper tail from k = n downwards and stops at the first
    count whose tail exceeds ``alpha``.

    Args:
        n: Total number of responses.
        alpha: Significance level.
        p: Probability of a correct guess under the null hypothesis.

    Returns:
        Smallest k with P(X >= k) <= alpha. ``n + 1`` when not even a
        unanimous result is significant; 0 when ``n <= 0``.
    """
    if n <= 0:
        return 0

    threshold = n + 1
    tail = 0.0
    for k in range(n, -1, -1):
        tail += binomial_point_probability(n, k, p)
        if tail > alpha:
            break
        threshold = k
    return threshold
