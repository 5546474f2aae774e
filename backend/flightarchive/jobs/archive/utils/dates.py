import re
from datetime import date, datetime, timedelta

import pytz

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateError(ValueError):
    pass


def validate_date(value: str) -> str:
    """Accept only YYYY-MM-DD calendar dates."""
    v = (value or "").strip()
    if not _DATE_RE.match(v):
        raise InvalidDateError(f"Invalid date format {value!r}. Use YYYY-MM-DD.")
    try:
        date.fromisoformat(v)
    except ValueError:
        raise InvalidDateError(f"Invalid calendar date {value!r}") from None
    return v


def today_in(tz_name: str) -> date:
    return datetime.now(pytz.timezone(tz_name)).date()


def trailing_dates(today: date, days: int) -> list[str]:
    """D-1 .. D-days, most recent first."""
    return [(today - timedelta(days=i)).isoformat() for i in range(1, days + 1)]
