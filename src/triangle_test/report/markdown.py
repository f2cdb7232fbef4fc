"""
Markdown rendering of a session verdict.

The layout follows the paper report used by the sensory panel: batch,
method, principle, results and conclusion, followed by the per-group table
and the list of assessors who picked the odd sample correctly.
"""

from __future__ import annotations

from ..significance.config import GROUPS_PER_SESSION
from .config import GROUP_KEYS, STANDARD_REFERENCE
from .verdict import ReportVerdict


def _cell(text: str) -> str:
    """Make free text safe for a single Markdown table cell."""
    if not text:
        return "-"
    return text.replace("|", "\\|").replace("\r", " ").replace("\n", " ")


def conclusion_text(verdict: ReportVerdict, test_name: str = "") -> str:
    """One-sentence conclusion naming the sample under test."""
    subject = test_name or "The sample"
    if verdict.count_shortage:
        return (
            f"{subject}: sample size is insufficient and the rule cannot be applied; "
            "generate the report again once the sample is complete."
        )
    if verdict.passed:
        return f"{subject} satisfies the decision rule ({verdict.rule_description}). Test passed."
    return (
        f"{subject} does not satisfy the decision rule ({verdict.rule_description}). "
        "Investigate the source of the difference."
    )


def report_status(verdict: ReportVerdict) -> str:
    """Short status line shown after a report has been generated."""
    if verdict.count_warning:
        return f"{verdict.count_warning} Report generated."
    return "Report generated."


def render_markdown(
    verdict: ReportVerdict,
    test_name: str = "",
    sample_name: str = "",
) -> str:
    """
    Render the full report.

    Args:
        verdict: Output of :func:`verdict.build_verdict`.
        test_name: Test session / batch name shown in the header.
        sample_name: Name of the sample under test.

    Returns:
        Markdown document as a single string (no trailing newline).
    """
    stats = {g.group: g for g in verdict.group_stats}

    group_rows: list[str] = []
    for key in GROUP_KEYS:
        g = stats[key]
        rate = f"{g.correct_rate * 100:.1f}%" if g.correct_rate is not None else "-"
        group_rows.append(
            f"| {key} | {g.total} | {g.correct} | {rate} | {_cell(g.option_summary())} |"
        )

    if verdict.correct_records:
        correct_rows = [
            f"| {r.group} | {_cell(r.submitter)} | {_cell(r.feedback)} |"
            for r in verdict.correct_records
        ]
    else:
        correct_rows = ["(no correct responses)"]

    warning_lines = (
        [f"> ⚠️ **Sample size notice**: {verdict.count_warning}", ""]
        if verdict.count_warning else []
    )

    expected_desc = (
        f"Planned sample: **{verdict.expected_per_group}** per group × "
        f"{GROUPS_PER_SESSION} groups = "
        f"**{verdict.expected_total}** questionnaires; received "
        f"**{verdict.observed_total}**."
    )

    lines: list[str] = [
        "## 1. Test Batch",
        "",
        f"- **Test name**: {test_name or 'Test batch name not available'}",
        f"- **Test sample**: {sample_name or 'Not available'}",
        "",
        "## 2. Test Method",
        "",
        f"Triangle test carried out according to **{STANDARD_REFERENCE}**.",
        "",
        "## 3. Test Principle",
        "",
        f"- **Test type**: `{verdict.test_type}` (α={verdict.alpha:g})",
        f"- **Decision rule**: {verdict.rule_description}",
        f"- **Sample size**: {expected_desc}",
        "",
        "## 4. Test Results",
        "",
        *warning_lines,
        verdict.result_description,
        "",
        "## 5. Test Conclusion",
        "",
        f"**{conclusion_text(verdict, test_name)}**",
        "",
        "---",
        "",
        "### Table 1: Triangle test results per group",
        "",
        "| Group | Respondents | Correct | Correct rate | Option distribution |",
        "| :---: | :---: | :---: | :---: | :--- |",
        *group_rows,
        "",
        "### Table 2: Correct responses",
        "",
        "| Group | Submitted by | Feedback |",
        "| :---: | :---: | :--- |",
        *correct_rows,
        "",
        "---",
        "",
        "> 💡 **Note**: the option distribution counts questionnaire selections; "
        f"significance is judged automatically from the {verdict.rule_label} table "
        "of GB/T 12311.",
    ]
    return "\n".join(lines)
