"""
Significance-layer configuration: test type names, guess probabilities,
and the published sample-size tables.

The tables are kept as ordered (sample_size, value) pairs so that they can
be checked row-by-row against the printed standard and extended without
touching calculator logic.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Test type names (exact, case-sensitive selectors)
# ---------------------------------------------------------------------------

SIMILARITY_TEST = "similarity test"
DIFFERENCE_TEST = "difference test"

DEFAULT_TEST_TYPE = SIMILARITY_TEST

# Sample-type keywords in the spreadsheet that mark a factory sample,
# which is evaluated as a difference test.
DIFFERENCE_SAMPLE_KEYWORDS: tuple[str, ...] = ("厂", "factory")

# ---------------------------------------------------------------------------
# Binomial model defaults
# ---------------------------------------------------------------------------

DEFAULT_ALPHA: float = 0.05

# Chance of picking the odd sample out of three by guessing.
TRIANGLE_GUESS_PROBABILITY: float = 1 / 3

# Number of replicate triangle arrangements per session (A1-A3, B1-B3).
GROUPS_PER_SESSION: int = 6

# ---------------------------------------------------------------------------
# Similarity test (alternative sample vs. standard)
# ---------------------------------------------------------------------------
# Table values are the MAXIMUM number of correct answers still consistent
# with "no perceptible difference" (Pd = 30%). Significance threshold is
# value + 1.

SIMILARITY_MIN_GROUP_SIZE: int = 7
SIMILARITY_ALPHA: float = 0.05
SIMILARITY_GUESS_PROBABILITY: float = 0.2
SIMILARITY_MIN_N: int = 42
SIMILARITY_MAX_N: int = 54
SIMILARITY_BASE_MAX_ALLOWED: int = 16   # n <= 42 → threshold 17

SIMILARITY_MAX_ALLOWED_TABLE: tuple[tuple[int, int], ...] = (
    (43, 17),
    (44, 18),
    (45, 18),
    (46, 19),
    (47, 19),
    (48, 20),
    (49, 20),
    (50, 20),
    (51, 21),
    (52, 21),
    (53, 22),
    (54, 22),
)

# ---------------------------------------------------------------------------
# Difference test (factory sample vs. standard)
# ---------------------------------------------------------------------------
# Table values are the MINIMUM number of correct answers needed to declare
# a perceptible difference.

DIFFERENCE_MIN_GROUP_SIZE: int = 6
DIFFERENCE_ALPHA: float = 0.10
DIFFERENCE_GUESS_PROBABILITY: float = TRIANGLE_GUESS_PROBABILITY
DIFFERENCE_MIN_N: int = 36
DIFFERENCE_MAX_N: int = 54
DIFFERENCE_BASE_THRESHOLD: int = 18     # n <= 36 → threshold 18

DIFFERENCE_THRESHOLD_TABLE: tuple[tuple[int, int], ...] = (
    (37, 18),
    (38, 18),
    (39, 18),
    (40, 19),
    (41, 19),
    (42, 20),
    (43, 20),
    (44, 20),
    (45, 21),
    (46, 21),
    (47, 21),
    (48, 22),
    (49, 22),
    (50, 23),
    (51, 23),
    (52, 23),
    (53, 24),
    (54, 24),
)
