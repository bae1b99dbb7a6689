"""
Month calendar view: event parsing, month grid and navigation, layout bundling.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date

from core.config import (
    DEFAULT_MAX_VISIBLE,
    EVENT_TYPE_COLORS,
    EVENT_TYPE_KEYWORDS,
    UNTITLED_EVENT,
    UPCOMING_EVENTS_LIMIT,
    WEEK_STARTS_ON,
)
from core.dates import normalize_day, today
from core.layout import assign_lanes, build_render_plans, lane_count
from models.events import CalendarEvent, DayWindow, EventLayout, RenderPlan


@dataclass
class MonthView:
    """Everything the presentation layer needs to draw one month."""

    year: int
    month: int
    window: DayWindow
    grid: list[int | None]
    layouts: list[EventLayout] = field(default_factory=list)
    render_plans: list[RenderPlan] = field(default_factory=list)
    lane_count: int = 0
    upcoming: list[CalendarEvent] = field(default_factory=list)
    today: int | None = None  # day-number to highlight, None outside this month
    previous_month: tuple[int, int] | None = None
    next_month: tuple[int, int] | None = None


def infer_event_type(title: str) -> str:
    """Infer event type from title keywords (launch, sale, deadline, else event)."""
    lower = (title or "").lower()
    for event_type, keywords in EVENT_TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return event_type
    return "event"


def parse_event(row: dict) -> CalendarEvent:
    """Convert an event store record into our event format."""
    title = row.get("title") or UNTITLED_EVENT
    event_type = row.get("type") or infer_event_type(title)
    start_date = row.get("start_date")
    end_date = row.get("end_date") or start_date

    return {
        "id": str(row["id"]),
        "title": title,
        "start_date": start_date,
        "end_date": end_date,
        "type": event_type,
        "color": EVENT_TYPE_COLORS.get(event_type, EVENT_TYPE_COLORS["default"]),
    }


# =============================================================================
# MONTH NAVIGATION
# =============================================================================


def month_window(year: int, month: int) -> DayWindow:
    """Visible window covering the whole month."""
    return DayWindow.for_month(year, month)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months forward (negative for back). Returns (year, month)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int, first_weekday: int = WEEK_STARTS_ON) -> list[int | None]:
    """
    Day-numbers of the month with None padding before the first day.

    first_weekday uses datetime numbering (0 = Monday, 6 = Sunday).
    """
    first_day = date(year, month, 1)
    padding = (first_day.weekday() - first_weekday) % 7
    days_in_month = calendar.monthrange(year, month)[1]
    return [None] * padding + list(range(1, days_in_month + 1))


def is_today(day: int | None, year: int, month: int, current: date | None = None) -> bool:
    if day is None:
        return False
    current = current or today()
    return (current.year, current.month, current.day) == (year, month, day)


def upcoming_events(
    events: list[CalendarEvent],
    current: date | None = None,
    limit: int = UPCOMING_EVENTS_LIMIT,
) -> list[CalendarEvent]:
    """Events starting today or later, soonest first."""
    current = current or today()
    starting = [
        (normalize_day(event["start_date"]), position, event)
        for position, event in enumerate(events)
    ]
    upcoming = sorted(
        (item for item in starting if item[0] >= current),
        key=lambda item: (item[0], item[1]),
    )
    return [event for _, _, event in upcoming[:limit]]


# =============================================================================
# MONTH VIEW
# =============================================================================


def build_month_view(
    events: list[CalendarEvent],
    year: int,
    month: int,
    max_visible: int = DEFAULT_MAX_VISIBLE,
    current: date | None = None,
) -> MonthView:
    """Lay out a month: lanes, per-day render plans, today marker and upcoming events."""
    current = current or today()
    window = month_window(year, month)
    layouts = assign_lanes(events, window)
    grid = month_grid(year, month)

    return MonthView(
        year=year,
        month=month,
        window=window,
        grid=grid,
        layouts=layouts,
        render_plans=build_render_plans(events, layouts, window, max_visible),
        lane_count=lane_count(layouts),
        upcoming=upcoming_events(events, current),
        today=next((day for day in grid if is_today(day, year, month, current)), None),
        previous_month=shift_month(year, month, -1),
        next_month=shift_month(year, month, 1),
    )
