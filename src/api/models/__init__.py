"""API Pydantic models."""

from .requests import EventIn, LayoutRequest, MonthViewRequest
from .responses import (
    ErrorCodes,
    ErrorResponse,
    EventLayoutOut,
    HealthResponse,
    LayoutResponse,
    MonthViewResponse,
    RenderPlanOut,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventIn",
    "LayoutRequest",
    "MonthViewRequest",
    "EventLayoutOut",
    "RenderPlanOut",
    "LayoutResponse",
    "MonthViewResponse",
]
