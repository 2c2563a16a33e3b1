"""Calendar-date helpers.

Transaction dates are plain ``YYYY-MM-DD`` strings. They are parsed straight
into ``datetime.date`` values so that no timezone ever shifts a trade onto a
neighbouring day.
"""

import re
from datetime import date, timedelta

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str | date | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string. Returns None when it is not a real date."""
    if isinstance(value, date):
        return value
    if not value or not ISO_DATE_RE.match(value):
        return None
    year, month, day = (int(part) for part in value.split("-"))
    try:
        return date(year, month, day)
    except ValueError:
        return None


def window(center: date, days: int) -> tuple[date, date]:
    """Inclusive ``[center - days, center + days]`` window."""
    return center - timedelta(days=days), center + timedelta(days=days)


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return d.replace(year=d.year + years, day=28)
