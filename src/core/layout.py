"""
Calendar event layout: day membership, lane assignment and per-day render plans.

Everything here is pure. Inputs are never mutated and each call returns fresh
results, so the same events and window always produce equal layouts.
"""

from collections import defaultdict
from datetime import date

from core.config import DEFAULT_MAX_VISIBLE
from core.dates import normalize_day
from models.events import CalendarEvent, DayWindow, EventLayout, RenderPlan


# =============================================================================
# DAY MEMBERSHIP
# =============================================================================


def event_range(event: CalendarEvent) -> tuple[date, date]:
    """
    Normalized (start, end) days of an event, end inclusive.

    A missing end date or an end before the start gives a single-day event
    on the start day.
    """
    start = normalize_day(event["start_date"])
    end_value = event.get("end_date")
    if end_value is None:
        return start, start

    end = normalize_day(end_value)
    if end < start:
        return start, start
    return start, end


def events_on_day(day: date, events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Events whose inclusive range covers `day`, in input order."""
    day = normalize_day(day)
    members = []
    for event in events:
        start, end = event_range(event)
        if start <= day <= end:
            members.append(event)
    return members


def events_starting_on_day(
    day: date, events: list[CalendarEvent], window: DayWindow
) -> list[CalendarEvent]:
    """Events that start on `day` and intersect the window (label is drawn here)."""
    day = normalize_day(day)
    starting = []
    for event in events:
        start, end = event_range(event)
        if start == day and start <= window.end and end >= window.start:
            starting.append(event)
    return starting


# =============================================================================
# LANE ASSIGNMENT
# =============================================================================


def _clamp(event: CalendarEvent, window: DayWindow) -> tuple[int, int, bool, bool] | None:
    """Clamp an event to the window as day-numbers; None if it falls outside."""
    start, end = event_range(event)
    if end < window.start or start > window.end:
        return None

    draw_start = max(start, window.start)
    draw_end = min(end, window.end)
    return (
        window.day_number(draw_start),
        window.day_number(draw_end),
        start < window.start,
        end > window.end,
    )


def _sort_key(item: tuple) -> tuple:
    position, event_id, start_day, end_day = item
    is_multi_day = start_day != end_day
    return (
        0 if is_multi_day else 1,
        start_day,
        -end_day if is_multi_day else 0,
        # id before input position so shuffled input packs identically
        event_id,
        position,
    )


def assign_lanes(events: list[CalendarEvent], window: DayWindow) -> list[EventLayout]:
    """
    Assign every event in the window to a display lane.

    Events sharing a day never share a lane. Multi-day events are packed
    first-fit into the lowest lanes; single-day events are packed first-fit
    starting below the last lane holding a multi-day event.

    Returns one EventLayout per event intersecting the window, in input order.
    """
    if not events or window.is_empty:
        return []

    clamped = {}
    for position, event in enumerate(events):
        bounds = _clamp(event, window)
        if bounds is not None:
            clamped[position] = bounds

    order = sorted(
        (
            (position, str(events[position]["id"]), bounds[0], bounds[1])
            for position, bounds in clamped.items()
        ),
        key=_sort_key,
    )

    # occupied day-numbers per lane, local to this call
    lanes: list[set[int]] = []
    multi_day_lane_count = 0
    assigned: dict[int, int] = {}

    for position, _event_id, start_day, end_day in order:
        occupied = set(range(start_day, end_day + 1))

        if start_day != end_day:
            # every multi-day event is sorted ahead of every single-day event
            assert multi_day_lane_count == len(lanes)
            first_lane = 0
            last_lane = multi_day_lane_count
        else:
            first_lane = multi_day_lane_count
            last_lane = len(lanes)

        lane = next(
            (i for i in range(first_lane, last_lane) if lanes[i].isdisjoint(occupied)),
            None,
        )
        if lane is None:
            lane = len(lanes)
            lanes.append(set())
            if start_day != end_day:
                multi_day_lane_count += 1

        lanes[lane].update(occupied)
        assigned[position] = lane

    layouts = []
    for position, (start_day, end_day, before, after) in clamped.items():
        layouts.append(
            EventLayout(
                event_id=str(events[position]["id"]),
                start_day=start_day,
                end_day=end_day,
                occupied_days=frozenset(range(start_day, end_day + 1)),
                lane=assigned[position],
                continues_before=before,
                continues_after=after,
            )
        )
    return layouts


def lane_count(layouts: list[EventLayout]) -> int:
    """Number of lanes in use (0 when nothing is laid out)."""
    return max((layout.lane for layout in layouts), default=-1) + 1


def layouts_by_id(layouts: list[EventLayout]) -> dict[str, list[EventLayout]]:
    """Group layouts by event id; duplicate ids keep their input order."""
    grouped: dict[str, list[EventLayout]] = defaultdict(list)
    for layout in layouts:
        grouped[layout.event_id].append(layout)
    return dict(grouped)


# =============================================================================
# RENDER PLANS
# =============================================================================


def build_render_plan(
    day: date,
    events: list[CalendarEvent],
    layouts: list[EventLayout],
    window: DayWindow,
    max_visible: int = DEFAULT_MAX_VISIBLE,
) -> RenderPlan:
    """
    Order and truncate the events covering `day`.

    Multi-day events come first, then single-day events, each group by lane,
    so an event keeps its row across every day it spans. Events without a
    layout (day outside the window) go last in input order.
    """
    if max_visible < 0:
        raise ValueError(f"max_visible must be >= 0, got {max_visible}")

    day = normalize_day(day)
    day_number = window.day_number(day)
    on_day = events_on_day(day, events)

    pending = layouts_by_id(layouts)
    ranked = []
    for position, event in enumerate(on_day):
        event_id = str(event["id"])
        candidates = pending.get(event_id, [])
        layout = next((c for c in candidates if day_number in c.occupied_days), None)
        if layout is None:
            ranked.append(((2, 0, position), event_id))
        else:
            candidates.remove(layout)
            group = 0 if layout.is_multi_day else 1
            ranked.append(((group, layout.lane, position), event_id))
    ranked.sort()

    ordered = [event_id for _, event_id in ranked]
    return RenderPlan(
        day=day_number,
        date=day,
        visible_events=tuple(ordered[:max_visible]),
        overflow_count=max(0, len(ordered) - max_visible),
    )


def build_render_plans(
    events: list[CalendarEvent],
    layouts: list[EventLayout],
    window: DayWindow,
    max_visible: int = DEFAULT_MAX_VISIBLE,
) -> list[RenderPlan]:
    """One render plan per day of the window."""
    return [
        build_render_plan(day, events, layouts, window, max_visible)
        for day in window.days()
    ]
