from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from .timeline_models import LayoutMode, ProjectRecord, RowAssignment, ViewWindow

logger = logging.getLogger(__name__)

# Layout tuning knobs, in percent of the window width.
MIN_WIDTH_PERCENT = 1.5  # keeps short bars and milestones clickable
ROW_BUFFER_PERCENT = 0.5  # gap required between neighbours sharing a row

LAYOUT_MODES: tuple[LayoutMode, ...] = ("autoSort", "manual")


@dataclass(frozen=True)
class _Placement:
    """Clipped extent of one visible record, before a row is chosen."""

    record: ProjectRecord
    effective_start: date
    effective_end: date
    left: float
    width: float
    is_milestone: bool

    @property
    def right(self) -> float:
        return self.left + self.width


def layout(
    records: Iterable[ProjectRecord],
    view_window: ViewWindow,
    mode: LayoutMode = "autoSort",
    *,
    min_width: float = MIN_WIDTH_PERCENT,
    buffer: float = ROW_BUFFER_PERCENT,
) -> list[RowAssignment]:
    """
    Assign a row and a horizontal extent to every record visible in `view_window`.

    - Records without dates, or whose range does not intersect the window, are
      left out.
    - Ranges are clipped to the window; a range that collapses after clipping
      is a milestone and is laid out as one day long.
    - `autoSort` packs records first-fit into the lowest row where they keep
      `buffer` percent clear of every neighbour; `manual` uses each record's
      `row_index` (0 when unset) without resolving overlaps.

    Records are only read. The result follows start/end order.
    """

    if mode not in LAYOUT_MODES:
        raise ValueError(f"unknown layout mode '{mode}', expected one of {list(LAYOUT_MODES)}")
    if view_window.total_days <= 0:
        return []

    placements = [p for p in (_place(record, view_window, min_width) for record in records) if p is not None]
    placements.sort(key=lambda p: (p.effective_start, p.effective_end))

    if mode == "manual":
        assignments = [_assign(p, _manual_row(p.record)) for p in placements]
    else:
        assignments = _pack_rows(placements, buffer)

    logger.debug(
        f"Laid out {len(assignments)} records in {row_count(assignments)} rows ({mode})"
    )
    return assignments


def _place(record: ProjectRecord, window: ViewWindow, min_width: float) -> _Placement | None:
    start, end = record.start_date, record.end_date
    if start is None or end is None:
        logger.debug(f"Skipping record {record.id!r}: missing dates")
        return None

    effective_start = max(start, window.start)
    effective_end = min(end, window.end)
    if effective_end < effective_start:
        # Outside the window, or inverted.
        return None

    # Zero length after clipping.
    is_milestone = effective_end == effective_start
    if is_milestone:
        effective_end = effective_end + timedelta(days=1)

    left = window.to_percent(effective_start)
    width = max(window.to_percent(effective_end) - left, min_width)
    # Bars near the right edge slide left so they end inside the window.
    left = max(min(left, 100.0 - width), 0.0)
    return _Placement(
        record=record,
        effective_start=effective_start,
        effective_end=effective_end,
        left=left,
        width=width,
        is_milestone=is_milestone,
    )


def _pack_rows(placements: list[_Placement], buffer: float) -> list[RowAssignment]:
    occupied: list[list[tuple[float, float]]] = []
    assignments: list[RowAssignment] = []

    for placement in placements:
        row = 0
        while True:
            if row == len(occupied):
                occupied.append([])
            if _fits(placement, occupied[row], buffer):
                occupied[row].append((placement.left, placement.right))
                break
            row += 1
        assignments.append(_assign(placement, row))

    return assignments


def _fits(placement: _Placement, intervals: list[tuple[float, float]], buffer: float) -> bool:
    return all(
        placement.right <= start - buffer or placement.left >= end + buffer for start, end in intervals
    )


def _manual_row(record: ProjectRecord) -> int:
    row = record.row_index
    if isinstance(row, int) and not isinstance(row, bool) and row >= 0:
        return row
    return 0


def _assign(placement: _Placement, row: int) -> RowAssignment:
    return RowAssignment(
        record=placement.record,
        row=row,
        left_percent=placement.left,
        width_percent=placement.width,
        is_milestone=placement.is_milestone,
    )


def row_count(assignments: Iterable[RowAssignment]) -> int:
    """Number of rows needed to draw `assignments` (highest row + 1)."""
    rows = [a.row for a in assignments]
    return max(rows) + 1 if rows else 0


def filter_records(records: Iterable[ProjectRecord], query: str | None) -> list[ProjectRecord]:
    """Records whose name or description contains `query`, ignoring case."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    return [
        record
        for record in records
        if needle in (record.name or "").lower() or needle in (record.description or "").lower()
    ]
