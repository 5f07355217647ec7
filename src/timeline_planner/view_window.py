from __future__ import annotations

from datetime import date

from .date_parsing import QUARTER_MONTHS, add_months, last_day_of_month
from .timeline_models import QuarterBand, ViewKind, ViewWindow

# Months of the previous year shown at the left edge of the year view.
YEAR_VIEW_LEAD_MONTHS = 2


def year_window(year: int, hidden_months_left: int = 0) -> ViewWindow:
    """
    Window of the year view: November of the previous year to 31 December.

    `hidden_months_left` zooms in by dropping whole months from the left edge.
    """

    start_year, start_month = add_months(year - 1, 12 - YEAR_VIEW_LEAD_MONTHS + hidden_months_left)
    return ViewWindow(start=date(start_year, start_month + 1, 1), end=date(year, 12, 31))


def quarter_window(year: int, quarter: int) -> ViewWindow:
    first_month, last_month = _quarter_months(quarter)
    return ViewWindow(start=date(year, first_month + 1, 1), end=last_day_of_month(year, last_month))


def view_window(view: ViewKind, year: int, quarter: int = 1, hidden_months_left: int = 0) -> ViewWindow:
    """Window shown for `view` at the given period."""
    if view == "year":
        return year_window(year, hidden_months_left)
    if view == "quarter":
        return quarter_window(year, quarter)
    raise ValueError(f"unknown view '{view}', expected 'year' or 'quarter'")


def quarter_of(day: date) -> int:
    return (day.month - 1) // 3 + 1


def navigate_period(view: ViewKind, year: int, quarter: int, direction: int) -> tuple[int, int]:
    """Step one period forward (direction > 0) or back; returns the new (year, quarter)."""
    step = 1 if direction > 0 else -1
    if view == "year":
        return year + step, quarter
    _quarter_months(quarter)
    quarter += step
    if quarter > 4:
        return year + 1, 1
    if quarter < 1:
        return year - 1, 4
    return year, quarter


def quarter_bands(window: ViewWindow) -> list[QuarterBand]:
    """Every calendar quarter intersecting `window`, clamped to it."""
    if window.total_days <= 0:
        return []

    bands: list[QuarterBand] = []
    for year in range(window.start.year, window.end.year + 1):
        for quarter in range(1, 5):
            first_month, last_month = QUARTER_MONTHS[quarter]
            q_start = date(year, first_month + 1, 1)
            q_end = last_day_of_month(year, last_month)
            if q_end < window.start or q_start > window.end:
                continue
            clamped_start = max(q_start, window.start)
            clamped_end = min(q_end, window.end)
            left = window.to_percent(clamped_start)
            bands.append(
                QuarterBand(
                    year=year,
                    quarter=quarter,
                    left_percent=left,
                    width_percent=window.to_percent(clamped_end) - left,
                )
            )
    return bands


def today_percent(window: ViewWindow, today: date) -> float | None:
    """Position of the today marker, or None when `today` is outside the window."""
    if window.total_days <= 0 or today < window.start or today > window.end:
        return None
    return min(max(window.to_percent(today), 0.0), 100.0)


def _quarter_months(quarter: int) -> tuple[int, int]:
    try:
        return QUARTER_MONTHS[quarter]
    except KeyError:
        raise ValueError(f"quarter must be between 1 and 4, got {quarter}") from None
