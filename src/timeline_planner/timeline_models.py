from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal


LayoutMode = Literal["autoSort", "manual"]
"""Row assignment modes: automatic overlap-avoiding packing, or caller-specified rows."""

ViewKind = Literal["year", "quarter"]
"""Zoom levels of the calendar view."""


@dataclass
class ParsedSegment:
    """Named date range recognised in free text; not yet a stored project."""

    name: str
    start_date: date
    end_date: date
    description: str | None = None


@dataclass
class ProjectRecord:
    """Named, dated item drawn as a timeline bar; owned by the caller."""

    id: str
    name: str
    start_date: date | None
    end_date: date | None
    row_index: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class ViewWindow:
    """Calendar bounds of the currently displayed period."""

    start: date
    end: date

    @property
    def total_days(self) -> int:
        """Window length used as the 100% reference for horizontal positions."""
        return (self.end - self.start).days

    def to_percent(self, day: date) -> float:
        """Horizontal position of `day` as a percentage of the window length."""
        return (day - self.start).days / self.total_days * 100


@dataclass
class RowAssignment:
    """
    Computed placement of one visible record.

    Recomputed on every layout call and never persisted. `record` is the
    caller's object, unchanged; positions are percentages of the window.
    """

    record: ProjectRecord
    row: int
    left_percent: float
    width_percent: float
    is_milestone: bool = False

    @property
    def right_percent(self) -> float:
        return self.left_percent + self.width_percent


@dataclass(frozen=True)
class QuarterBand:
    """Visible extent of one calendar quarter inside a view window."""

    year: int
    quarter: int
    left_percent: float
    width_percent: float
