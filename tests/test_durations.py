from datetime import datetime, timedelta, timezone

import pytest

from bptools.durations import duration_avg, parse_date

HOUR = timedelta(hours=1)


@pytest.mark.parametrize(
    "durations, want",
    [
        ([HOUR], HOUR),
        ([HOUR, HOUR], HOUR),
        ([HOUR, 2 * HOUR, 2 * HOUR, 3 * HOUR], 2 * HOUR),
        ([], timedelta(0)),
    ],
    ids=["single", "multiple", "mixed", "empty"],
)
def test_duration_avg(durations, want):
    assert duration_avg(durations) == want


def test_duration_avg_accepts_generator():
    assert duration_avg(timedelta(seconds=s) for s in (1, 2, 3)) == timedelta(seconds=2)


def test_parse_date_valid():
    assert parse_date("03-15-2023") == datetime(2023, 3, 15, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", ["2023-03-15", "3-15-2023", "13-01-2023", "", "ab-cd-efgh"])
def test_parse_date_invalid(text):
    with pytest.raises(ValueError):
        parse_date(text)