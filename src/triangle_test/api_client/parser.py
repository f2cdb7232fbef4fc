"""
Field value normalization for Bitable record payloads.

Bitable returns text, numbers, option names, user lists, lookup results
and formula results in different shapes. These helpers reduce them to
plain strings and timestamps. No I/O occurs here; all functions are pure.
"""

from __future__ import annotations

import math
import re

import pandas as pd


def to_text(value) -> str:
    """
    Plain text of a field value.

    Lists yield their first element (its ``text`` when it is a segment
    dict); dicts yield ``text`` then ``value``; anything else is ``str()``.
    None and empty lists give ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, list):
        if not value:
            return ""
        first = value[0]
        if isinstance(first, dict) and "text" in first:
            return str(first.get("text") or "")
        return to_text(first)
    if isinstance(value, dict):
        if "text" in value:
            return str(value.get("text") or "")
        if "value" in value:
            return to_text(value.get("value"))
        return ""
    return str(value)


def parse_options(value) -> list[str]:
    """Alphanumeric option codes in a text value, e.g. ``"123, 456"`` → ``["123", "456"]``."""
    text = to_text(value)
    if not text:
        return []
    return re.findall(r"[A-Za-z0-9]+", text)


def parse_select_option_name(value) -> str:
    """Name of a single-select option (plain string or ``{"name": ...}`` shapes)."""
    if value is None:
        return ""
    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, dict):
            return str(first.get("name") or first.get("text") or first.get("value") or "")
    if isinstance(value, dict) and "name" in value:
        return str(value.get("name") or "")
    return to_text(value)


def parse_user_name(value) -> str:
    """Display name from a user / person field (first user when several)."""
    if value is None:
        return ""

    def _pick(obj: dict) -> str:
        return str(
            obj.get("name") or obj.get("en_name") or obj.get("enName")
            or obj.get("text") or obj.get("value") or ""
        )

    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, dict):
            return _pick(first)
        return to_text(first)
    if isinstance(value, dict):
        return _pick(value) or to_text(value)
    return to_text(value)


def to_timestamp(value) -> int:
    """
    Epoch milliseconds of a date field.

    Numbers are taken as epoch milliseconds already; text is parsed as a
    date. Unparseable or empty values give 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    text = to_text(value)
    if not text:
        return 0
    if text.isdigit():
        return int(text)
    parsed = pd.to_datetime(text, errors="coerce", utc=True)
    if pd.isna(parsed):
        return 0
    return int(parsed.value // 1_000_000)
