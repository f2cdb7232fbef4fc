"""
api_client — Bitable access for questionnaire records and report write-back.

Module layout
-------------
config.py   — Endpoints, env var names, table ids, field map, time ranges
parser.py   — Field value normalization (text, options, users, timestamps)
retry.py    — Error categorization, backoff, retry wrapper, failure log
client.py   — Tenant token, paginated record listing, record updates
records.py  — Raw items → ResponseRecord (filter, validate, de-duplicate)
writer.py   — Plan record lookup, sample name, report/conclusion write
runner.py   — Fetch → latest session → report → write-back, CLI entry point

Typical session:
    token = get_tenant_access_token()
    client = BitableClient(token)
    records, test_type = fetch_response_records(client, time_range="1month")
    export_records_csv(records)

or end to end:
    run_sync(time_range="1month", write_back=True)
"""

from .client import BitableClient, get_tenant_access_token
from .parser import (
    parse_options,
    parse_select_option_name,
    parse_user_name,
    to_text,
    to_timestamp,
)
from .records import (
    build_response_record,
    export_records_csv,
    fetch_response_records,
    time_range_start,
)
from .retry import BitableError, RequestError, request_with_retry
from .runner import run_sync
from .writer import fetch_sample_name, find_record_by_field_value, write_report

__all__ = [
    # Client
    "BitableClient",
    "get_tenant_access_token",
    "BitableError",
    "RequestError",
    "request_with_retry",
    # Parsing
    "parse_options",
    "parse_select_option_name",
    "parse_user_name",
    "to_text",
    "to_timestamp",
    # Records
    "build_response_record",
    "export_records_csv",
    "fetch_response_records",
    "time_range_start",
    # Write-back
    "fetch_sample_name",
    "find_record_by_field_value",
    "write_report",
    # End to end
    "run_sync",
]
