"""
Request error categorization, backoff, retry wrapper, and failure log.

Transient failures (timeouts, rate limits, 5xx) are retried on the
BACKOFF_SCHEDULE; permission and request errors fail immediately. Requests
that still fail are appended to a JSONL log before the error is re-raised.
"""

from __future__ import annotations

import json
import time
from datetime import datetime
from pathlib import Path

import requests

from .config import BACKOFF_SCHEDULE, FAILED_REQUESTS_LOG, MAX_ATTEMPTS, REQUEST_TIMEOUT_SECONDS


class BitableError(Exception):
    """The API answered with a non-zero ``code``."""

    def __init__(self, code: int, msg: str):
        super().__init__(f"Bitable API error {code}: {msg}")
        self.code = code
        self.msg = msg


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class RequestError:
    """
    Error category constants and classification logic for API failures.

    Categories drive retry decisions: transient errors are retried with
    backoff; permanent errors are logged and raised immediately.
    """

    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit_exceeded"
    SERVICE_UNAVAILABLE = "service_unavailable"
    PERMISSION = "permission_denied"
    API_ERROR = "api_error"
    OTHER = "other"

    RETRIABLE: frozenset[str] = frozenset({TIMEOUT, RATE_LIMIT, SERVICE_UNAVAILABLE})
    PERMANENT: frozenset[str] = frozenset({PERMISSION, API_ERROR})

    @staticmethod
    def categorize(error: Exception) -> tuple[str, str]:
        """
        Classify an exception into an (category, message) pair.

        HTTP errors are classified by status code; everything else by
        keywords in the message.
        """
        message = str(error)

        if isinstance(error, requests.Timeout):
            return RequestError.TIMEOUT, message
        if isinstance(error, requests.ConnectionError):
            return RequestError.SERVICE_UNAVAILABLE, message

        status = None
        if isinstance(error, requests.HTTPError) and error.response is not None:
            status = error.response.status_code
        if status == 429:
            return RequestError.RATE_LIMIT, message
        if status is not None and status >= 500:
            return RequestError.SERVICE_UNAVAILABLE, message
        if status in (401, 403):
            return RequestError.PERMISSION, message
        if status is not None:
            return RequestError.API_ERROR, message

        if isinstance(error, BitableError):
            return RequestError.API_ERROR, message

        lowered = message.lower()
        if "timeout" in lowered or "timed out" in lowered:
            return RequestError.TIMEOUT, message
        if "rate limit" in lowered or "too many requests" in lowered:
            return RequestError.RATE_LIMIT, message
        if "unavailable" in lowered or "connection" in lowered:
            return RequestError.SERVICE_UNAVAILABLE, message

        return RequestError.OTHER, message


# ---------------------------------------------------------------------------
# Backoff helpers
# ---------------------------------------------------------------------------

def exponential_backoff(attempt: int) -> int:
    """Seconds to wait after the given 1-based failed attempt."""
    return BACKOFF_SCHEDULE.get(attempt, max(BACKOFF_SCHEDULE.values()))


def should_retry(category: str, attempt: int, max_attempts: int = MAX_ATTEMPTS) -> bool:
    if attempt >= max_attempts:
        return False
    if category in RequestError.RETRIABLE:
        return True
    if category in RequestError.PERMANENT:
        return False
    # Unknown error: retry once only
    return attempt == 1


# ---------------------------------------------------------------------------
# Main retry wrapper
# ---------------------------------------------------------------------------

def request_with_retry(
    method: str,
    url: str,
    max_attempts: int = MAX_ATTEMPTS,
    log_path: Path = FAILED_REQUESTS_LOG,
    **kwargs,
) -> dict:
    """
    Send a JSON API request, retrying transient failures.

    Args:
        method: HTTP method (``"GET"``, ``"POST"``, ``"PUT"``).
        url: Full request URL.
        max_attempts: Total attempts allowed (initial call + retries).
        log_path: JSONL file receiving requests that ultimately fail.
        **kwargs: Passed through to :func:`requests.request`
            (``headers``, ``params``, ``json``).

    Returns:
        Decoded JSON body of the successful response (``code == 0``).

    Raises:
        requests.RequestException or BitableError: The last error once
        retries are exhausted or the error is permanent.
    """
    kwargs.setdefault("timeout", REQUEST_TIMEOUT_SECONDS)

    for attempt in range(1, max_attempts + 1):
        try:
            response = requests.request(method, url, **kwargs)
            response.raise_for_status()
            body = response.json()
            code = body.get("code", 0)
            if code != 0:
                raise BitableError(code, body.get("msg", ""))
            return body

        except (requests.RequestException, BitableError) as exc:
            category, message = RequestError.categorize(exc)
            print(
                f"  Attempt {attempt}/{max_attempts} failed "
                f"[{category}]: {message[:120]}"
            )
            if should_retry(category, attempt, max_attempts):
                time.sleep(exponential_backoff(attempt))
                continue

            log_failed_request(method, url, category, message, attempt, log_path)
            raise


def log_failed_request(
    method: str,
    url: str,
    category: str,
    message: str,
    attempts: int,
    log_path: Path = FAILED_REQUESTS_LOG,
) -> None:
    """Append one failed request to the JSONL failure log."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    entry = {
        "method": method,
        "url": url,
        "error_category": category,
        "error_message": message,
        "attempts": attempts,
        "timestamp": datetime.now().isoformat(),
    }
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, ensure_ascii=False) + "\n")

    print(f"  Logged failed request: {method} {url}")
