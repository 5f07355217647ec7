from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal

from .date_parsing import make_date, month_index, month_span, parse_date_flexible, quarter_span
from .timeline_models import ParsedSegment


RecognizerKind = Literal["quarter", "month_range", "compact", "csv", "iso_range"]
"""Input grammars understood by the segment parser, in priority order."""

MatchFn = Callable[[str, int], ParsedSegment | None]

# Separator between the two halves of a range: hyphen, en/em dash or "to".
_SEP = r"\s*[-–—to]+\s*"
_YEAR = r"(?:\s+(\d{4}))?"
_MONTH = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_ISO_DATE = r"(\d{4}-\d{1,2}-\d{1,2})"
_DAY_MONTH = r"(\d{1,2})/(\d{1,2})(?:/(\d{4}))?"

_QUARTER_RANGE_NAMED_RE = re.compile(rf"(.+?)\s+Q([1-4]){_SEP}Q([1-4]){_YEAR}\s*", re.IGNORECASE)
_QUARTER_RANGE_BARE_RE = re.compile(rf"Q([1-4]){_SEP}Q([1-4]){_YEAR}\s*", re.IGNORECASE)
_QUARTER_SINGLE_RE = re.compile(rf"(?:.+?\s+)?Q([1-4]){_YEAR}\s*", re.IGNORECASE)
_MONTH_RANGE_RE = re.compile(rf"(?:(.+?)\s+)?{_MONTH}{_SEP}{_MONTH}{_YEAR}\s*", re.IGNORECASE)
_COMPACT_RE = re.compile(rf"(?:(.+?)\s+)?{_DAY_MONTH}{_SEP}{_DAY_MONTH}\s*")
_ISO_RANGE_RE = re.compile(rf"(.+?)\s+{_ISO_DATE}{_SEP}{_ISO_DATE}\s*")


@dataclass(frozen=True)
class Recognizer:
    """One input grammar: `match(segment, reference_year)` returns a segment or None."""

    kind: RecognizerKind
    match: MatchFn

    def __call__(self, segment: str, reference_year: int) -> ParsedSegment | None:
        return self.match(segment, reference_year)


def _year_or(value: str | None, reference_year: int) -> int:
    return int(value) if value else reference_year


def _segment(name: str, span: tuple | None) -> ParsedSegment | None:
    if span is None:
        return None
    start, end = span
    return ParsedSegment(name=name, start_date=start, end_date=end)


def match_quarter(segment: str, reference_year: int) -> ParsedSegment | None:
    """
    Parse "Task Q1-Q3 2025", "Q1-Q3", "Q4 2025", "Launch Q2".

    Only a named quarter range keeps its prefix as the name; bare ranges and
    single quarters are named after the whole segment.
    """

    named = _QUARTER_RANGE_NAMED_RE.fullmatch(segment)
    if named:
        name, q1, q2, year = named.groups()
        span = quarter_span(int(q1), int(q2), _year_or(year, reference_year))
        return _segment(name.strip(), span)

    bare = _QUARTER_RANGE_BARE_RE.fullmatch(segment)
    if bare:
        q1, q2, year = bare.groups()
        span = quarter_span(int(q1), int(q2), _year_or(year, reference_year))
        return _segment(segment.strip(), span)

    single = _QUARTER_SINGLE_RE.fullmatch(segment)
    if single:
        quarter, year = single.groups()
        span = quarter_span(int(quarter), int(quarter), _year_or(year, reference_year))
        return _segment(segment.strip(), span)
    return None


def match_month_range(segment: str, reference_year: int) -> ParsedSegment | None:
    """Parse "Robin Jan-Sept", "Robin January to March 2026", "Jan-Mar"."""
    found = _MONTH_RANGE_RE.fullmatch(segment)
    if not found:
        return None
    name, start_token, end_token, year = found.groups()
    start_idx = month_index(start_token)
    end_idx = month_index(end_token)
    if start_idx is None or end_idx is None:
        return None
    span = month_span(start_idx, end_idx, _year_or(year, reference_year))
    return _segment(name.strip() if name else segment.strip(), span)


def match_compact(segment: str, reference_year: int) -> ParsedSegment | None:
    """Parse "Task 12/12-24/12", "Task 12/12/2024-24/12/2024", "1/3-15/3/2026"."""
    found = _COMPACT_RE.fullmatch(segment)
    if not found:
        return None
    name, d1, m1, y1, d2, m2, y2 = found.groups()
    start = make_date(_year_or(y1, reference_year), int(m1), int(d1))
    end = make_date(_year_or(y2, reference_year), int(m2), int(d2))
    if start is None or end is None:
        return None
    return ParsedSegment(name=name.strip() if name else segment.strip(), start_date=start, end_date=end)


def split_csv_triple(line: str) -> ParsedSegment | None:
    """Split "Name, 2025-01-15, 2025-03-31"; extra commas stay in the name."""
    parts = [part.strip() for part in line.split(",")]
    if len(parts) < 3:
        return None
    start = parse_date_flexible(parts[-2])
    end = parse_date_flexible(parts[-1])
    name = ", ".join(parts[:-2])
    if start is None or end is None or not name:
        return None
    return ParsedSegment(name=name, start_date=start, end_date=end)


def match_csv(segment: str, reference_year: int) -> ParsedSegment | None:
    return split_csv_triple(segment)


def match_iso_range(segment: str, reference_year: int) -> ParsedSegment | None:
    """Parse "Task 2025-01-15 to 2025-03-31"."""
    found = _ISO_RANGE_RE.fullmatch(segment)
    if not found:
        return None
    name, start_raw, end_raw = found.groups()
    start = parse_date_flexible(start_raw)
    end = parse_date_flexible(end_raw)
    name = name.strip()
    if start is None or end is None or not name:
        return None
    return ParsedSegment(name=name, start_date=start, end_date=end)


RECOGNIZERS: tuple[Recognizer, ...] = (
    Recognizer("quarter", match_quarter),
    Recognizer("month_range", match_month_range),
    Recognizer("compact", match_compact),
    Recognizer("csv", match_csv),
    Recognizer("iso_range", match_iso_range),
)
"""Default recognizers; the first one that matches a segment wins."""


def recognize(
    segment: str, reference_year: int, recognizers: tuple[Recognizer, ...] = RECOGNIZERS
) -> tuple[RecognizerKind, ParsedSegment] | None:
    """Run `recognizers` in order and return the first match with its kind."""
    for recognizer in recognizers:
        result = recognizer(segment, reference_year)
        if result is not None:
            return recognizer.kind, result
    return None
