"""Calendar helpers shared by the resolver, engine and batch loader."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ..errors import InvalidDate
from ..models.goal import DAYS_OF_WEEK, DayOfWeek

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _sunday_index(day: date) -> int:
    # date.weekday() is Monday=0; shift so Sunday=0
    return (day.weekday() + 1) % 7


def day_of_week(day: date) -> DayOfWeek:
    """Return the named weekday for ``day``."""

    return DAYS_OF_WEEK[_sunday_index(day)]


def week_start(day: date) -> date:
    """Return the Sunday on or before ``day``."""

    return day - timedelta(days=_sunday_index(day))


def week_dates(start: date) -> list[date]:
    """Return the 7 consecutive dates beginning at ``start``."""

    return [start + timedelta(days=offset) for offset in range(7)]


def format_date(day: date) -> str:
    return day.isoformat()


def parse_date(value: str | date | None, *, default: date | None = None) -> date:
    """Parse a ``YYYY-MM-DD`` value.

    Missing values resolve to ``default`` (today when not given). Anything
    that is not a strict ISO calendar date raises :class:`InvalidDate`.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        return default or date.today()

    raw = str(value).strip()
    if not _ISO_DATE.fullmatch(raw):
        raise InvalidDate(f"Invalid date {raw!r}; expected YYYY-MM-DD")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidDate(f"Invalid date {raw!r}; expected YYYY-MM-DD") from exc


__all__ = ["day_of_week", "format_date", "parse_date", "week_dates", "week_start"]
