import datetime as dt

import pytest

from timeline_planner.view_window import (
    navigate_period,
    quarter_bands,
    quarter_of,
    quarter_window,
    today_percent,
    view_window,
    year_window,
)


def test_year_window_starts_in_november_of_previous_year():
    window = year_window(2025)

    assert window.start == dt.date(2024, 11, 1)
    assert window.end == dt.date(2025, 12, 31)
    assert window.total_days == 425


def test_hidden_months_zoom_from_the_left():
    assert year_window(2025, hidden_months_left=1).start == dt.date(2024, 12, 1)
    assert year_window(2025, hidden_months_left=3).start == dt.date(2025, 2, 1)


@pytest.mark.parametrize(
    "quarter, start, end",
    [
        (1, dt.date(2025, 1, 1), dt.date(2025, 3, 31)),
        (2, dt.date(2025, 4, 1), dt.date(2025, 6, 30)),
        (3, dt.date(2025, 7, 1), dt.date(2025, 9, 30)),
        (4, dt.date(2025, 10, 1), dt.date(2025, 12, 31)),
    ],
)
def test_quarter_window(quarter, start, end):
    window = quarter_window(2025, quarter)

    assert (window.start, window.end) == (start, end)


def test_invalid_quarter_or_view_is_rejected():
    with pytest.raises(ValueError):
        quarter_window(2025, 5)
    with pytest.raises(ValueError):
        view_window("decade", 2025)


def test_view_window_dispatches_on_view():
    assert view_window("quarter", 2026, quarter=3) == quarter_window(2026, 3)
    assert view_window("year", 2026, hidden_months_left=2) == year_window(2026, 2)


def test_quarter_of():
    assert [quarter_of(dt.date(2025, m, 1)) for m in (1, 3, 4, 6, 7, 9, 10, 12)] == [1, 1, 2, 2, 3, 3, 4, 4]


def test_navigate_period_wraps_quarters_across_years():
    assert navigate_period("quarter", 2025, 4, 1) == (2026, 1)
    assert navigate_period("quarter", 2025, 1, -1) == (2024, 4)
    assert navigate_period("quarter", 2025, 2, 1) == (2025, 3)
    assert navigate_period("year", 2025, 2, -1) == (2024, 2)


def test_quarter_bands_cover_the_year_view():
    bands = quarter_bands(year_window(2025))

    assert [(b.year, b.quarter) for b in bands] == [(2024, 4), (2025, 1), (2025, 2), (2025, 3), (2025, 4)]
    assert bands[0].left_percent == pytest.approx(0.0)
    assert bands[-1].left_percent + bands[-1].width_percent == pytest.approx(100.0)


def test_quarter_bands_of_a_quarter_view_is_that_quarter():
    bands = quarter_bands(quarter_window(2025, 2))

    assert [(b.year, b.quarter) for b in bands] == [(2025, 2)]
    assert bands[0].width_percent == pytest.approx(100.0)


def test_today_percent():
    window = quarter_window(2025, 1)

    assert today_percent(window, dt.date(2025, 1, 1)) == pytest.approx(0.0)
    assert today_percent(window, dt.date(2025, 3, 31)) == pytest.approx(100.0)
    assert today_percent(window, dt.date(2025, 4, 1)) is None
    assert today_percent(window, dt.date(2024, 12, 31)) is None
