from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

# Locale independent, the backend keys time slots by English weekday names.
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class CalendarDay:
    date_iso: str
    day: int
    weekday: str  # short name, e.g. "Mon"
    is_today: bool


def parse_iso_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid date: {value!r}, expected YYYY-MM-DD") from None


def weekday_name(value: str | date) -> str:
    return WEEKDAY_NAMES[parse_iso_date(value).weekday()]


def calendar_days(today: date | None = None, count: int = 14) -> list[CalendarDay]:
    """Bookable days starting today."""
    start = today or date.today()
    days: list[CalendarDay] = []
    for offset in range(count):
        current = start + timedelta(days=offset)
        days.append(
            CalendarDay(
                date_iso=current.isoformat(),
                day=current.day,
                weekday=WEEKDAY_NAMES[current.weekday()][:3],
                is_today=offset == 0,
            )
        )
    return days
