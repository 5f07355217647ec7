from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List

from .date_parsing import format_date_iso
from .timeline_models import RowAssignment


@dataclass
class TimelineRow:
    """One horizontal lane of the timeline with its bars ordered left to right."""

    row: int
    bars: list[RowAssignment] = field(default_factory=list)


def to_render_rows(assignments: Iterable[RowAssignment]) -> list[TimelineRow]:
    """
    Group laid-out records into rows for renderers.

    Only occupied rows are emitted, in ascending order; a manual layout may
    leave gaps between row indices.
    """

    by_row: dict[int, List[RowAssignment]] = {}
    for assignment in assignments:
        by_row.setdefault(assignment.row, []).append(assignment)

    return [
        TimelineRow(row=row, bars=sorted(bars, key=lambda a: (a.left_percent, a.width_percent)))
        for row, bars in sorted(by_row.items())
    ]


def rows_to_dicts(rows: list[TimelineRow]) -> list[dict[str, Any]]:
    """Plain-data view of `rows` for YAML output."""
    return [
        {
            "row": timeline_row.row,
            "bars": [
                {
                    "id": bar.record.id,
                    "name": bar.record.name,
                    "start_date": format_date_iso(bar.record.start_date),
                    "end_date": format_date_iso(bar.record.end_date),
                    "left_percent": round(bar.left_percent, 3),
                    "width_percent": round(bar.width_percent, 3),
                    "milestone": bar.is_milestone,
                }
                for bar in timeline_row.bars
            ],
        }
        for timeline_row in rows
    ]

