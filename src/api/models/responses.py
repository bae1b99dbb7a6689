"""Pydantic response models for API endpoints."""

from datetime import date

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    log_store_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOO_MANY_EVENTS = "TOO_MANY_EVENTS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class WindowOut(BaseModel):
    start: date
    end: date
    days: int


class EventLayoutOut(BaseModel):
    """Lane assignment for one event."""

    event_id: str
    start_day: int
    end_day: int
    occupied_days: list[int]
    lane: int
    multi_day: bool
    continues_before: bool
    continues_after: bool


class RenderPlanOut(BaseModel):
    """Events drawn in one day cell; overflow_count feeds the "+N more" label."""

    day: int
    date: date
    visible_events: list[str]
    overflow_count: int


class LayoutResponse(BaseModel):
    """Lane layout for a window."""

    window: WindowOut
    lane_count: int
    layouts: list[EventLayoutOut]
    render_plans: list[RenderPlanOut]


class UpcomingEventOut(BaseModel):
    id: str
    title: str
    start_date: date
    type: str
    color: str


class MonthRef(BaseModel):
    year: int
    month: int


class MonthViewResponse(LayoutResponse):
    """Month view: layout plus grid padding, today marker, navigation and upcoming events."""

    year: int
    month: int
    grid: list[int | None]
    today: int | None = None
    previous_month: MonthRef
    next_month: MonthRef
    upcoming: list[UpcomingEventOut]
