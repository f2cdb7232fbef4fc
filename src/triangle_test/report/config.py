"""
Report-layer configuration: group labels, record columns, output paths,
and the wording constants shared by the verdict and Markdown renderer.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[3]

DATA_DIR = PROJECT_ROOT / "data"
RESPONSES_DIR = DATA_DIR / "responses"
RESULTS_DIR = PROJECT_ROOT / "results"

RECORDS_CSV_PATH = RESPONSES_DIR / "response_records.csv"

# ---------------------------------------------------------------------------
# Session layout
# ---------------------------------------------------------------------------

# Two disjoint triads of replicate arrangements; canonical display order.
GROUP_KEYS: tuple[str, ...] = ("A1", "A2", "A3", "B1", "B2", "B3")

# Answers left blank are counted under this label in option histograms.
EMPTY_ANSWER_LABEL = "-"

# Column order of the records CSV (and of records_to_frame output).
RECORD_COLUMNS: list[str] = [
    "record_id",
    "session_id",
    "group",
    "submitted_answer",
    "correct_answer",
    "submitter",
    "feedback",
    "created_at",
    "updated_at",
]

# ---------------------------------------------------------------------------
# Report wording
# ---------------------------------------------------------------------------

STANDARD_REFERENCE = "GB/T 12311-2012 Sensory analysis - Methodology - Triangle test (ISO 4120)"
EMPTY_INPUT_MESSAGE = (
    "No records for the selected test session. "
    "Fetch the data again or choose another session."
)
