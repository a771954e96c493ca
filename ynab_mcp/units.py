"""Currency and date normalization between tool inputs and the YNAB API.

YNAB stores every amount as an integer number of milliunits (1/1000 of a
dollar). Tool inputs use dollars and relaxed date strings.
"""

from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from .errors import InvalidDateError

MILLIUNITS_PER_UNIT = 1000

Number = Union[int, float, Decimal, str]

# Tried in order after ISO parsing fails.
DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)

RELATIVE_DAYS = {
    "today": 0,
    "yesterday": -1,
    "tomorrow": 1,
}


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 1.005 stays 1.005 instead of its binary approximation
    return Decimal(str(value))


def to_milliunits(amount: Number) -> int:
    """Convert dollars to milliunits, rounding half away from zero."""
    scaled = _to_decimal(amount) * MILLIUNITS_PER_UNIT
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_milliunits(milliunits: int) -> Decimal:
    return Decimal(milliunits) / MILLIUNITS_PER_UNIT


def format_usd(milliunits: Optional[int]) -> str:
    """Render milliunits as a US dollar string, e.g. ``-$1,234.56``."""
    if milliunits is None:
        return "N/A"
    dollars = from_milliunits(milliunits).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def local_today(tz: Optional[tzinfo] = None) -> date:
    """Today's calendar date in ``tz``, or on the host clock when ``tz`` is None."""
    if tz is None:
        return date.today()
    return datetime.now(tz).date()


def parse_date(value: str, today: Optional[date] = None) -> str:
    """Resolve a relaxed date token to ``YYYY-MM-DD``.

    Accepts ``today``, ``yesterday`` and ``tomorrow`` (case-insensitive),
    ISO dates and date-times, and a handful of common written formats.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(f'Could not parse date: "{value}". Try formats like "today", "yesterday", "2024-01-15"')

    cleaned = value.strip()
    offset = RELATIVE_DAYS.get(cleaned.lower())
    if offset is not None:
        base = today or local_today()
        return (base + timedelta(days=offset)).isoformat()

    try:
        return datetime.fromisoformat(cleaned).date().isoformat()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue

    raise InvalidDateError(
        f'Could not parse date: "{value}". Try formats like "today", "yesterday", "2024-01-15"'
    )


def month_token(value: str, today: Optional[date] = None) -> str:
    """Return ``current`` unchanged, otherwise the first day of the given month."""
    if isinstance(value, str) and value.strip().lower() == "current":
        return "current"
    return parse_date(value, today=today)[:7] + "-01"
