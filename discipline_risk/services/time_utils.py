"""
Canonical time normalization for risk scoring.
All comparisons between a reference time and incident dates should go through these helpers.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional

from dateutil.parser import isoparse


def parse_to_utc_aware(ts: Any) -> datetime:
    """
    Convert a timestamp (string/datetime/date) to timezone-aware UTC datetime.
    - naive datetime -> assume UTC
    - bare date -> midnight UTC
    - iso string with tz -> convert to UTC
    """
    if isinstance(ts, datetime):
        return ts.astimezone(timezone.utc) if ts.tzinfo else ts.replace(tzinfo=timezone.utc)

    if isinstance(ts, date):
        return datetime.combine(ts, time.min, tzinfo=timezone.utc)

    dt = isoparse(str(ts).strip())
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_reference_time(reference_time: Optional[Any]) -> datetime:
    """Return the supplied reference time in UTC, or the current instant."""
    if reference_time is None:
        return utc_now()
    return parse_to_utc_aware(reference_time)
