"""
Bitable API configuration, default field mapping, and fetch constants.

Credentials are read from the environment at call time:
    BITABLE_APP_ID      — app id of the internal Lark/Feishu app
    BITABLE_APP_SECRET  — app secret of the same app
    BITABLE_APP_TOKEN   — token of the Base holding the questionnaire tables

Table and field identifiers below are the defaults of the panel's Base;
override them by passing a field map to the fetch/write functions.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/triangle_test/api_client/config.py → root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

DATA_DIR = PROJECT_ROOT / "data"
RESPONSES_DIR = DATA_DIR / "responses"
LOGS_DIR = PROJECT_ROOT / "logs"

RECORDS_CSV_PATH = RESPONSES_DIR / "response_records.csv"
FAILED_REQUESTS_LOG = LOGS_DIR / "failed_requests.jsonl"

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

OPEN_API_BASE = "https://open.feishu.cn/open-apis"
TENANT_TOKEN_URL = f"{OPEN_API_BASE}/auth/v3/tenant_access_token/internal"
RECORDS_URL = f"{OPEN_API_BASE}/bitable/v1/apps/{{app_token}}/tables/{{table_id}}/records"
RECORD_URL = f"{RECORDS_URL}/{{record_id}}"

APP_ID_ENV = "BITABLE_APP_ID"
APP_SECRET_ENV = "BITABLE_APP_SECRET"
APP_TOKEN_ENV = "BITABLE_APP_TOKEN"

REQUEST_TIMEOUT_SECONDS = 30

# ---------------------------------------------------------------------------
# Pagination and retry
# ---------------------------------------------------------------------------

PAGE_SIZE = 500          # API maximum per list call
MAX_ATTEMPTS = 3
BACKOFF_SCHEDULE: dict[int, int] = {1: 2, 2: 5, 3: 15}   # attempt → seconds

# ---------------------------------------------------------------------------
# Time range filter (by record creation time)
# ---------------------------------------------------------------------------

DAY_MS = 24 * 60 * 60 * 1000

TIME_RANGE_DAYS: dict[str, int] = {
    "2weeks": 14,
    "1month": 30,
    "2months": 60,
    "3months": 90,
}
DEFAULT_TIME_RANGE = "2weeks"

# ---------------------------------------------------------------------------
# Questionnaire (statistics) table
# ---------------------------------------------------------------------------

STAT_TABLE_ID = "tblnYJUgwh4EujFo"
STAT_VIEW_ID = "vewiJFIJP2"

# Logical role → field name in the questionnaire table. ``correct`` maps
# each group to the lookup field holding that group's correct answer.
STAT_FIELD_MAP: dict = {
    "session": "Test name",
    "group": "Group",
    "answer": "Answer",
    "feedback": "Feedback",
    "submitter": "Submitted by",
    "created_at": "Created at",
    "sample_type": "Sample type",
    "correct": {
        "A1": "Correct answer A1",
        "A2": "Correct answer A2",
        "A3": "Correct answer A3",
        "B1": "Correct answer B1",
        "B2": "Correct answer B2",
        "B3": "Correct answer B3",
    },
}

# ---------------------------------------------------------------------------
# Test plan table (report write-back)
# ---------------------------------------------------------------------------

PLAN_TABLE_ID = "tblZSyNrU9rdiX0R"
PLAN_VIEW_ID = "vewbZ8zNey"

PLAN_FIELD_MAP: dict[str, str] = {
    "name": "Test name",
    "sample_name": "Test sample",
    "report": "Statistics report",
    "conclusion": "Test conclusion",
}

CONCLUSION_PASS = "Passed"
CONCLUSION_FAIL = "Not passed"
