"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fixtures.generate_events import generate_events  # noqa: E402
from models.events import DayWindow  # noqa: E402


def make_event(event_id, start, end=None, title=None, type="event"):
    """Event record in the shape the event store supplies."""
    return {
        "id": event_id,
        "title": title or f"Event {event_id}",
        "start_date": start,
        "end_date": end,
        "type": type,
    }


@pytest.fixture
def november():
    """Window covering November 2025 (days 1-30)."""
    return DayWindow.for_month(2025, 11)


@pytest.fixture
def sample_events():
    """Mixed multi-day and single-day events in November 2025."""
    return [
        make_event("launch", "2025-11-03", "2025-11-07", title="Winter collection launch", type="launch"),
        make_event("review", "2025-11-05", title="Client review"),
        make_event("sale", "2025-11-28", "2025-12-01", title="Black Friday sale", type="sale"),
        make_event("deadline", "2025-11-05T16:00:00Z", title="Ad copy deadline", type="deadline"),
        make_event("offsite", "2025-10-30", "2025-11-02", title="Team offsite"),
    ]


@pytest.fixture
def random_event_sets():
    """Several seeded random event sets for November 2025."""
    return [generate_events(count, 2025, 11, seed) for seed, count in enumerate((5, 20, 40, 80))]
