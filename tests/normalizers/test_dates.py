"""Tests for date parsing and formatting."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from contentsync.normalizers.dates import LocalizedDateFormatter, is_upcoming, parse_date


def test_parse_date_distinguishes_days_and_timestamps() -> None:
    assert parse_date("2024-05-10") == date(2024, 5, 10)
    assert parse_date("2024-05-10T08:00:00Z") == datetime(2024, 5, 10, 8, 0, tzinfo=UTC)
    assert parse_date("not a date") is None
    assert parse_date("") is None
    assert parse_date(None) is None


def test_formatter_renders_in_its_time_zone() -> None:
    formatter = LocalizedDateFormatter("%d.%m.%Y", "Europe/Berlin")

    assert formatter.format_date(datetime(2024, 5, 9, 23, 30, tzinfo=UTC)) == "10.05.2024"
    assert formatter.format_date(date(2024, 5, 9)) == "09.05.2024"


def test_formatter_rejects_unknown_time_zone() -> None:
    with pytest.raises(ValueError):
        LocalizedDateFormatter(timezone="Mars/Olympus")


def test_day_dates_stay_upcoming_for_the_whole_day() -> None:
    late_evening = datetime(2024, 5, 10, 22, 30, tzinfo=UTC)
    berlin = LocalizedDateFormatter().timezone

    assert is_upcoming("2024-05-10", late_evening) is True
    # 22:30 UTC is already the next day in Berlin.
    assert is_upcoming("2024-05-10", late_evening, berlin) is False
    assert is_upcoming("2024-05-11", late_evening, berlin) is True
