from __future__ import annotations

import logging
import re
from typing import Callable

from .date_parsing import parse_date_flexible
from .recognizers import RECOGNIZERS, Recognizer, recognize, split_csv_triple
from .timeline_models import ParsedSegment

logger = logging.getLogger(__name__)

FallbackParser = Callable[[str, int], list[ParsedSegment]]
"""Alternate parser consulted when the local grammars recognise nothing."""

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def parse(
    text: str, reference_year: int, recognizers: tuple[Recognizer, ...] = RECOGNIZERS
) -> list[ParsedSegment]:
    """
    Turn free text into named date ranges.

    - `;`-separated segments are tried against each recognizer in order; the
      first match wins and unmatched segments are dropped.
    - Only when no segment matched, the text is read as a table of
      name/start/end lines (or one CSV triple per line).
    - `reference_year` fills in ranges written without a year.

    Never raises; an empty list means nothing was recognised.
    """

    if not text:
        return []

    segments = _parse_segments(text, reference_year, recognizers)
    if segments:
        return segments
    return _parse_table(text)


def parse_with_fallback(
    text: str, reference_year: int, fallback: FallbackParser | None = None
) -> list[ParsedSegment]:
    """Parse locally and hand the text to `fallback` only when that yields nothing."""
    parsed = parse(text, reference_year)
    if parsed or fallback is None:
        return parsed
    logger.debug("No local match, using fallback parser")
    return list(fallback(text, reference_year))


def _parse_segments(
    text: str, reference_year: int, recognizers: tuple[Recognizer, ...]
) -> list[ParsedSegment]:
    results: list[ParsedSegment] = []
    for raw in text.split(";"):
        segment = raw.strip()
        if not segment:
            continue
        found = recognize(segment, reference_year, recognizers)
        if found is None:
            logger.debug(f"Dropping unrecognised segment {segment!r}")
            continue
        kind, parsed = found
        logger.debug(f"Segment {segment!r} matched {kind}")
        results.append(parsed)
    return results


def _parse_table(text: str) -> list[ParsedSegment]:
    lines = [line.strip() for line in _LINE_SPLIT_RE.split(text)]
    lines = [line for line in lines if line]

    def date_at(idx: int):
        return parse_date_flexible(lines[idx]) if idx < len(lines) else None

    # Skip header lines that are not followed by two dates.
    idx = 0
    while idx < len(lines) and date_at(idx) is None:
        if date_at(idx + 1) is not None and date_at(idx + 2) is not None:
            break
        idx += 1

    results: list[ParsedSegment] = []
    while idx < len(lines):
        name = lines[idx]
        start = date_at(idx + 1)
        end = date_at(idx + 2)
        if name and start is not None and end is not None:
            results.append(ParsedSegment(name=name, start_date=start, end_date=end))
            idx += 3
            continue

        csv_row = split_csv_triple(name)
        if csv_row is not None:
            results.append(csv_row)
        idx += 1

    if results:
        logger.debug(f"Table fallback recognised {len(results)} rows")
    return results
