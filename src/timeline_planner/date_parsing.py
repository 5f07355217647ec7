from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime

import pendulum
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Zero-based first and last month of each quarter.
QUARTER_MONTHS: dict[int, tuple[int, int]] = {1: (0, 2), 2: (3, 5), 3: (6, 8), 4: (9, 11)}

MONTH_NAMES: dict[str, int] = {
    "jan": 0,
    "january": 0,
    "feb": 1,
    "february": 1,
    "mar": 2,
    "march": 2,
    "apr": 3,
    "april": 3,
    "may": 4,
    "jun": 5,
    "june": 5,
    "jul": 6,
    "july": 6,
    "aug": 7,
    "august": 7,
    "sep": 8,
    "sept": 8,
    "september": 8,
    "oct": 9,
    "october": 9,
    "nov": 10,
    "november": 10,
    "dec": 11,
    "december": 11,
}

_ISO_RE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
_DMY_DASH_RE = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})")
_DMY_SLASH_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_YEAR_RE = re.compile(r"\d{4}")

# Month and day used when free-form text leaves them out.
_LENIENT_DEFAULT = datetime(2000, 1, 1)


def month_index(token: str) -> int | None:
    """Zero-based month for an English month name or abbreviation, case-insensitive."""
    return MONTH_NAMES.get(token.strip().lower())


def make_date(year: int, month: int, day: int) -> date | None:
    """Build a calendar date from a one-based month, or None when it does not exist."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def last_day_of_month(year: int, month_idx: int) -> date:
    """Last calendar day of the zero-based month `month_idx` in `year`."""
    return date(year, month_idx + 1, calendar.monthrange(year, month_idx + 1)[1])


def add_months(year: int, month_idx: int) -> tuple[int, int]:
    """Normalise a zero-based month that may overflow the year, e.g. (2024, 13) -> (2025, 1)."""
    extra_years, month_idx = divmod(month_idx, 12)
    return year + extra_years, month_idx


def month_span(start_idx: int, end_idx: int, year: int) -> tuple[date, date] | None:
    """First day of the start month to the last day of the end month, both in `year`."""
    try:
        return date(year, start_idx + 1, 1), last_day_of_month(year, end_idx)
    except ValueError:
        return None


def quarter_span(start_quarter: int, end_quarter: int, year: int) -> tuple[date, date] | None:
    """First day of the start quarter to the last day of the end quarter, both in `year`."""
    first_month = QUARTER_MONTHS[start_quarter][0]
    last_month = QUARTER_MONTHS[end_quarter][1]
    return month_span(first_month, last_month, year)


def parse_date_flexible(value: str | None) -> date | None:
    """
    Parse a single date written by a person.

    Accepts, in order, ISO `yyyy-m-d`, `d-m-yyyy` and `d/m/yyyy`. When one of
    those shapes matches but names no real day, the value is invalid. Anything
    else goes through pendulum (ISO 8601) or dateutil (free-form text, with a
    missing month or day taken as the first) and is truncated to its local
    calendar date. Returns None when nothing parses.
    """

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    iso = _ISO_RE.fullmatch(text)
    if iso:
        return make_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))

    dmy_dash = _DMY_DASH_RE.fullmatch(text)
    if dmy_dash:
        return make_date(int(dmy_dash.group(3)), int(dmy_dash.group(2)), int(dmy_dash.group(1)))

    dmy_slash = _DMY_SLASH_RE.fullmatch(text)
    if dmy_slash:
        return make_date(int(dmy_slash.group(3)), int(dmy_slash.group(2)), int(dmy_slash.group(1)))

    return _parse_lenient(text)


def _parse_lenient(text: str) -> date | None:
    # Without an explicit year the parsers would fill in today's.
    if not _YEAR_RE.search(text):
        return None
    try:
        parsed = _parse_datetime(text)
        if isinstance(parsed, datetime):
            if parsed.tzinfo is not None:
                parsed = pendulum.instance(parsed).in_tz("local")
            return date(parsed.year, parsed.month, parsed.day)
    except (ValueError, OverflowError) as exc:
        logger.debug(f"Lenient parse rejected {text!r}: {exc}")
        return None

    if isinstance(parsed, date):
        return date(parsed.year, parsed.month, parsed.day)
    # Times, durations and intervals carry no single calendar day.
    return None


def _parse_datetime(text: str) -> object:
    """ISO 8601 through pendulum, then free-form text through dateutil."""
    try:
        return pendulum.parse(text, tz="local")
    except ValueError:
        pass
    # Missing parts come from a fixed day, never from today.
    return date_parser.parse(text, default=_LENIENT_DEFAULT)


def format_date_iso(value: date) -> str:
    return value.isoformat()
