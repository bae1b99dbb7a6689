"""
Data models for calendar events and layout results.

Input events stay TypedDicts, matching the records the event store hands over.
Layout results are frozen dataclasses, rebuilt on every layout call.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import NotRequired, TypedDict


class CalendarEvent(TypedDict):
    """Event record as supplied by the event store (already tenant-scoped)."""
    id: str
    title: str
    start_date: date | datetime | str
    end_date: date | datetime | str | None
    type: str
    color: NotRequired[str]


@dataclass(frozen=True)
class DayWindow:
    """Inclusive range of visible calendar days."""

    start: date
    end: date

    @classmethod
    def for_month(cls, year: int, month: int) -> "DayWindow":
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        if self.is_empty:
            return 0
        return (self.end - self.start).days + 1

    def day_number(self, day: date) -> int:
        """1-based position of `day` in the window (day of month for a month window)."""
        return (day - self.start).days + 1

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(len(self))]


@dataclass(frozen=True)
class EventLayout:
    """Lane assignment for one event, clamped to the visible window."""

    event_id: str
    start_day: int
    end_day: int
    occupied_days: frozenset[int]
    lane: int
    continues_before: bool = False  # starts before the window
    continues_after: bool = False   # ends after the window

    @property
    def is_multi_day(self) -> bool:
        return self.start_day != self.end_day


@dataclass(frozen=True)
class RenderPlan:
    """Ordered, truncated event list for a single day cell."""

    day: int
    date: date
    visible_events: tuple[str, ...]
    overflow_count: int

    @property
    def total(self) -> int:
        return len(self.visible_events) + self.overflow_count
