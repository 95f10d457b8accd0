"""Averaging of durations and parsing of MM-DD-YYYY dates."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

DATE_FORMAT = "%m-%d-%Y"
_DATE_RE = re.compile(r"\d{2}-\d{2}-\d{4}")


def duration_avg(durations: Iterable[timedelta]) -> timedelta:
    """Return the mean of the given durations, or zero when there are none."""
    items = list(durations)
    if not items:
        return timedelta(0)
    total = sum(items, timedelta(0))
    return timedelta(seconds=total.total_seconds() / len(items))


def parse_date(text: str) -> datetime:
    """Parse a date written as MM-DD-YYYY into a UTC datetime at midnight."""
    if not _DATE_RE.fullmatch(text):
        raise ValueError(f"date {text!r} is not in the form MM-DD-YYYY")
    return datetime.strptime(text, DATE_FORMAT).replace(tzinfo=timezone.utc)