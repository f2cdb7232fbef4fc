"""
Thin Bitable REST client: authentication, paginated record listing, and
single-record updates. Every call goes through :func:`retry.request_with_retry`.
"""

from __future__ import annotations

import os

from .config import (
    APP_ID_ENV,
    APP_SECRET_ENV,
    APP_TOKEN_ENV,
    PAGE_SIZE,
    RECORD_URL,
    RECORDS_URL,
    TENANT_TOKEN_URL,
)
from .retry import request_with_retry


def _require_env(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        raise ValueError(f"Environment variable {name} is not set")
    return value


def get_tenant_access_token(app_id: str | None = None, app_secret: str | None = None) -> str:
    """
    Exchange the app credentials for a tenant access token.

    Credentials default to the BITABLE_APP_ID / BITABLE_APP_SECRET
    environment variables.

    Raises:
        ValueError: Credentials are missing.
    """
    payload = {
        "app_id": app_id or _require_env(APP_ID_ENV),
        "app_secret": app_secret or _require_env(APP_SECRET_ENV),
    }
    # Token is returned at the top level of the body, not under "data".
    body = request_with_retry("POST", TENANT_TOKEN_URL, json=payload)
    return body["tenant_access_token"]


class BitableClient:
    """Record access for one Base (identified by its app token)."""

    def __init__(self, access_token: str, app_token: str | None = None):
        self.access_token = access_token
        self.app_token = app_token or _require_env(APP_TOKEN_ENV)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json; charset=utf-8",
        }

    def list_records(self, table_id: str, view_id: str | None = None) -> list[dict]:
        """
        All records of a table (optionally restricted to a view).

        Follows ``page_token`` until ``has_more`` is false or no token is
        returned.

        Returns:
            Raw record items: dicts with ``record_id``, ``fields``,
            ``created_time`` and ``last_modified_time``.
        """
        url = RECORDS_URL.format(app_token=self.app_token, table_id=table_id)
        params: dict = {"page_size": PAGE_SIZE, "automatic_fields": "true"}
        if view_id:
            params["view_id"] = view_id

        items: list[dict] = []
        while True:
            body = request_with_retry("GET", url, headers=self.headers, params=dict(params))
            data = body.get("data") or {}
            items.extend(data.get("items") or [])
            page_token = data.get("page_token")
            if not data.get("has_more") or not page_token:
                break
            params["page_token"] = page_token
        return items

    def update_record(self, table_id: str, record_id: str, fields: dict) -> dict:
        """Overwrite the given fields of one record; returns the updated record."""
        url = RECORD_URL.format(
            app_token=self.app_token, table_id=table_id, record_id=record_id
        )
        body = request_with_retry("PUT", url, headers=self.headers, json={"fields": fields})
        return (body.get("data") or {}).get("record") or {}
