"""Unit tests for month grid generation."""
from datetime import date, datetime, timedelta

import pytest

from calm_calendar.core.grid import GRID_SIZE, month_grid
from calm_calendar.domain import CalendarEvent


def _event(event_id, start=None, created_at=datetime(2024, 1, 1, 12, 0)):
    return CalendarEvent(id=event_id, title=event_id, created_at=created_at, start=start)


class TestMonthGrid:
    """Test cases for the fixed 42-cell month layout."""

    @pytest.mark.parametrize("year", range(2019, 2031))
    def test_every_month_has_42_contiguous_cells(self, year):
        """Every month renders 6 full weeks starting on a Sunday."""
        for month in range(1, 13):
            cells = month_grid(date(year, month, 15))

            assert len(cells) == GRID_SIZE
            assert cells[0].day.weekday() == 6
            for previous, current in zip(cells, cells[1:]):
                assert current.day - previous.day == timedelta(days=1)

            flags = [cell.is_current_month for cell in cells]
            first = flags.index(True)
            last = len(flags) - 1 - flags[::-1].index(True)
            assert all(flags[first : last + 1])
            assert cells[first].day == date(year, month, 1)
            assert cells[last].day.month == month
            assert (cells[last].day + timedelta(days=1)).month != month
            assert not any(cell.is_current_month for cell in cells if cell.day.month != month)

    def test_leading_days_from_previous_month(self):
        # 2024-03-01 is a Friday
        cells = month_grid(date(2024, 3, 20))

        assert cells[0].day == date(2024, 2, 25)
        assert [cell.is_current_month for cell in cells[:5]] == [False] * 5
        assert cells[5].day == date(2024, 3, 1)
        assert cells[-1].day == date(2024, 4, 6)

    def test_month_starting_on_sunday(self):
        cells = month_grid(date(2024, 9, 1))

        assert cells[0].day == date(2024, 9, 1)
        assert cells[0].is_current_month

    def test_short_february_pads_two_weeks(self):
        # February 2015 starts on a Sunday and has 28 days
        cells = month_grid(date(2015, 2, 10))

        assert cells[0].day == date(2015, 2, 1)
        assert sum(1 for cell in cells if not cell.is_current_month) == 14

    def test_accepts_datetime_anchor(self):
        assert month_grid(datetime(2024, 3, 31, 23, 0))[5].day == date(2024, 3, 1)


class TestGridEvents:
    """Test cases for bucketing events into grid cells."""

    def test_events_land_on_their_day_sorted(self):
        late = _event("late", start=datetime(2024, 3, 6, 17, 0))
        early = _event("early", start=datetime(2024, 3, 6, 8, 0))
        spill = _event("spill", start=datetime(2024, 4, 2, 8, 0))

        cells = month_grid(date(2024, 3, 1), [late, early, spill])
        by_day = {cell.day: cell for cell in cells}

        assert [event.id for event in by_day[date(2024, 3, 6)].events] == ["early", "late"]
        assert [event.id for event in by_day[date(2024, 4, 2)].events] == ["spill"]

    def test_missing_start_uses_creation_time(self):
        undated = _event("undated", created_at=datetime(2024, 3, 12, 10, 0))

        cells = month_grid(date(2024, 3, 1), [undated])

        assert [cell.day for cell in cells if cell.events] == [date(2024, 3, 12)]

    def test_outside_grid_ignored(self):
        far = _event("far", start=datetime(2025, 1, 1, 9, 0))

        assert not any(cell.events for cell in month_grid(date(2024, 3, 1), [far]))

    def test_preview_and_overflow(self):
        events = [_event(f"e{index}", start=datetime(2024, 3, 6, 8 + index, 0)) for index in range(5)]
        cell = next(cell for cell in month_grid(date(2024, 3, 1), events) if cell.events)

        assert [event.id for event in cell.preview(3)] == ["e0", "e1", "e2"]
        assert cell.hidden_count(3) == 2
        assert cell.hidden_count(10) == 0
