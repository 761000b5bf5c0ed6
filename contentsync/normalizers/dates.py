"""Date parsing, locale-aware formatting and the upcoming-entity boundary."""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
from typing import Any, Optional, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DateValue = Union[date, datetime]

DEFAULT_DATE_PATTERN = "%d.%m.%Y"
DEFAULT_TIMEZONE = "Europe/Berlin"


class DateFormatter(Protocol):
    """Supplies locale-correct date text for subtitles."""

    def format_date(self, value: DateValue) -> str:
        ...

    @property
    def timezone(self) -> tzinfo:
        ...


class LocalizedDateFormatter:
    """Formats dates with a strftime pattern in a fixed time zone."""

    def __init__(
        self,
        pattern: str = DEFAULT_DATE_PATTERN,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        try:
            self._zone = ZoneInfo(timezone)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Invalid timezone: {timezone}") from exc
        self.pattern = pattern

    @property
    def timezone(self) -> tzinfo:
        return self._zone

    def format_date(self, value: DateValue) -> str:
        if isinstance(value, datetime):
            return to_aware(value).astimezone(self._zone).strftime(self.pattern)
        return value.strftime(self.pattern)


def to_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_date(value: Any) -> Optional[DateValue]:
    """Parse an API date field.

    ``"2024-05-10"`` yields a calendar date, full ISO-8601 timestamps yield an
    aware datetime. Anything else yields None.
    """
    if isinstance(value, datetime):
        return to_aware(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return to_aware(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def is_upcoming(value: Any, now: datetime, zone: tzinfo = UTC) -> bool:
    """Return True when ``value`` is at or after ``now``.

    Calendar dates compare by day in ``zone`` so an event listed for today
    stays upcoming for the whole day.
    """
    parsed = parse_date(value)
    if parsed is None:
        return False
    current = to_aware(now)
    if isinstance(parsed, datetime):
        return parsed >= current
    return parsed >= current.astimezone(zone).date()


__all__ = [
    "DEFAULT_DATE_PATTERN",
    "DEFAULT_TIMEZONE",
    "DateFormatter",
    "DateValue",
    "LocalizedDateFormatter",
    "is_upcoming",
    "parse_date",
    "to_aware",
]
