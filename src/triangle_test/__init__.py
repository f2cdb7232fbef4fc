"""
triangle_test — statistics for triangle-test sensory evaluation.

Subpackages
-----------
significance  — exact binomial thresholds and the standard's lookup tables
report        — per-group aggregation, pass/fail verdict, Markdown report
api_client    — Bitable record fetch and report write-back
"""
