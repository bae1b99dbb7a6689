"""Pydantic request models for API endpoints."""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from core.config import DEFAULT_MAX_VISIBLE, EVENT_TYPES


class EventIn(BaseModel):
    """Calendar event as posted by the dashboard (dates stay raw strings)."""

    id: str
    title: str = ""
    start_date: str
    end_date: str | None = None
    type: str | None = None

    @model_validator(mode="after")
    def check_type(self):
        if self.type is not None and self.type not in EVENT_TYPES:
            raise ValueError(f"type must be one of {', '.join(EVENT_TYPES)}")
        return self


class LayoutRequest(BaseModel):
    """
    Events plus the visible window.

    The window is either a calendar month (year + month) or an explicit
    window_start / window_end range.
    """

    events: list[EventIn] = []
    year: int | None = Field(default=None, ge=1, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)
    window_start: date | None = None
    window_end: date | None = None
    max_visible: int = Field(default=DEFAULT_MAX_VISIBLE, ge=0)

    @model_validator(mode="after")
    def check_window(self):
        has_month = self.year is not None and self.month is not None
        has_range = self.window_start is not None and self.window_end is not None
        if has_month == has_range:
            raise ValueError("Provide either year and month, or window_start and window_end")
        return self


class MonthViewRequest(BaseModel):
    """Events for a single month view."""

    events: list[EventIn] = []
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    max_visible: int = Field(default=DEFAULT_MAX_VISIBLE, ge=0)
    today: date | None = None
