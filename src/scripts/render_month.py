#!/usr/bin/env python3
"""
Print the lane layout of a month for a JSON file of calendar events.

The file holds a list of event records with id, title, start_date,
end_date (optional) and type (optional).

Usage:
    uv run python src/scripts/render_month.py events.json --month 2025-11
"""

import argparse
import calendar
import json
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_MAX_VISIBLE
from core.dates import today
from core.layout import event_range
from services.calendar import MonthView, build_month_view, parse_event


def load_events(path: Path) -> list[dict]:
    """Read and parse event records from a JSON file."""
    with open(path) as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path} must contain a JSON list of events")
    return [parse_event(row) for row in rows]


def parse_month(month_str: str | None) -> tuple[int, int]:
    """Parse YYYY-MM, defaulting to the current month."""
    if not month_str:
        current = today()
        return current.year, current.month
    parsed = datetime.strptime(month_str, "%Y-%m")
    return parsed.year, parsed.month


def day_cells(view: MonthView, events: list[dict], day: int, visible_events) -> list[tuple[int, str]]:
    """
    (lane, title) for each visible event id of a day.

    Layouts follow the input order of the events inside the window, so each
    layout is paired with its own record even when ids repeat.
    """
    in_window = [
        event for event in events
        if event_range(event)[1] >= view.window.start and event_range(event)[0] <= view.window.end
    ]
    on_day = sorted(
        (pair for pair in zip(view.layouts, in_window) if day in pair[0].occupied_days),
        key=lambda pair: (not pair[0].is_multi_day, pair[0].lane),
    )

    cells = []
    for event_id in visible_events:
        layout, event = next(pair for pair in on_day if pair[0].event_id == event_id)
        on_day.remove((layout, event))
        cells.append((layout.lane, event["title"]))
    return cells


def print_month(events: list[dict], year: int, month: int, max_visible: int):
    """Print lanes and one line per day with visible events and overflow."""
    view = build_month_view(events, year, month, max_visible)

    print(f"{calendar.month_name[month]} {year}")
    print(f"Events in view: {len(view.layouts)}  Lanes: {view.lane_count}")
    print()

    for plan in view.render_plans:
        cells = [f"[{lane}] {title}" for lane, title in day_cells(view, events, plan.day, plan.visible_events)]
        if plan.overflow_count > 0:
            cells.append(f"+{plan.overflow_count} more")
        print(f"{plan.date.strftime('%a %d')}  " + "  ".join(cells))

    if view.upcoming:
        print("\nUpcoming:")
        for event in view.upcoming:
            print(f"  {event['start_date']}  {event['title']} ({event['type']})")


def main():
    parser = argparse.ArgumentParser(description="Print calendar lane layout for a month")
    parser.add_argument("events", type=Path, help="JSON file with a list of events")
    parser.add_argument("--month", help="Month to lay out (YYYY-MM). Defaults to the current month.")
    parser.add_argument(
        "--max-visible",
        type=int,
        default=DEFAULT_MAX_VISIBLE,
        help=f"Events shown per day before '+N more' (default {DEFAULT_MAX_VISIBLE})",
    )
    args = parser.parse_args()

    year, month = parse_month(args.month)
    events = load_events(args.events)
    print_month(events, year, month, args.max_visible)


if __name__ == "__main__":
    main()
