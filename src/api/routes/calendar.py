"""Calendar layout endpoints."""

import asyncio
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_client_ip, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import EventIn, LayoutRequest, MonthViewRequest
from api.models.responses import (
    ErrorCodes,
    EventLayoutOut,
    LayoutResponse,
    MonthRef,
    MonthViewResponse,
    RenderPlanOut,
    UpcomingEventOut,
    WindowOut,
)
from core.config import MAX_EVENTS_PER_REQUEST, MAX_WINDOW_DAYS
from core.dates import normalize_day
from core.layout import assign_lanes, build_render_plans, lane_count
from models.events import CalendarEvent, DayWindow, EventLayout, RenderPlan
from services.calendar import build_month_view, month_window, parse_event

router = APIRouter(prefix="/v1/calendar")


def to_calendar_events(events: list[EventIn]) -> list[CalendarEvent]:
    """Validate request size and convert posted events into layout input."""
    if len(events) > MAX_EVENTS_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": f"Too many events (maximum {MAX_EVENTS_PER_REQUEST})",
                "code": ErrorCodes.TOO_MANY_EVENTS,
                "details": [f"Received: {len(events)}"],
            },
        )
    return [parse_event(event.model_dump()) for event in events]


def resolve_window(body: LayoutRequest) -> DayWindow:
    """
    Build the visible window from a month or an explicit range.

    Raises:
        ValueError: if the window is longer than MAX_WINDOW_DAYS
    """
    if body.year is not None and body.month is not None:
        return month_window(body.year, body.month)

    window = DayWindow(body.window_start, body.window_end)
    if len(window) > MAX_WINDOW_DAYS:
        raise ValueError(f"Window spans {len(window)} days (maximum {MAX_WINDOW_DAYS})")
    return window


def _layout_in_thread(
    events: list[CalendarEvent], window: DayWindow, max_visible: int
) -> tuple[list[EventLayout], list[RenderPlan]]:
    """Run lane assignment and render plans off the event loop."""
    layouts = assign_lanes(events, window)
    return layouts, build_render_plans(events, layouts, window, max_visible)


def window_out(window: DayWindow) -> WindowOut:
    return WindowOut(start=window.start, end=window.end, days=len(window))


def layout_out(layout: EventLayout) -> EventLayoutOut:
    return EventLayoutOut(
        event_id=layout.event_id,
        start_day=layout.start_day,
        end_day=layout.end_day,
        occupied_days=sorted(layout.occupied_days),
        lane=layout.lane,
        multi_day=layout.is_multi_day,
        continues_before=layout.continues_before,
        continues_after=layout.continues_after,
    )


def plan_out(plan: RenderPlan) -> RenderPlanOut:
    return RenderPlanOut(
        day=plan.day,
        date=plan.date,
        visible_events=list(plan.visible_events),
        overflow_count=plan.overflow_count,
    )


def upcoming_out(event: CalendarEvent) -> UpcomingEventOut:
    return UpcomingEventOut(
        id=event["id"],
        title=event["title"],
        start_date=normalize_day(event["start_date"]),
        type=event["type"],
        color=event["color"],
    )


def _fail(request_log: RequestLog, start_time: float, status_code: int, code: str, message: str):
    request_log.status_code = status_code
    request_log.error_code = code
    request_log.error_message = message
    request_log.processing_time_ms = int((time.time() - start_time) * 1000)


@router.post("/layout", response_model=LayoutResponse)
async def layout_endpoint(
    request: Request,
    body: LayoutRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Assign lanes to events in a window and build a render plan per day.

    Layout is recomputed on every call; nothing is stored.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/layout",
        method="POST",
        client_ip=get_client_ip(request),
        event_count=len(body.events),
    )

    try:
        window = resolve_window(body)
        request_log.window_start = window.start.isoformat()
        request_log.window_end = window.end.isoformat()

        if window.is_empty:
            request_log.details.append(("warning", "Empty window, nothing laid out"))

        events = to_calendar_events(body.events)
        layouts, plans = await asyncio.to_thread(
            _layout_in_thread,
            events,
            window,
            body.max_visible,
        )
        lanes = lane_count(layouts)

        request_log.status_code = 200
        request_log.lane_count = lanes
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return LayoutResponse(
            window=window_out(window),
            lane_count=lanes,
            layouts=[layout_out(layout) for layout in layouts],
            render_plans=[plan_out(plan) for plan in plans],
        )

    except HTTPException as e:
        detail = e.detail if isinstance(e.detail, dict) else {}
        _fail(request_log, start_time, e.status_code, detail.get("code"), detail.get("error", str(e.detail)))
        raise

    except ValueError as e:
        _fail(request_log, start_time, 400, ErrorCodes.INVALID_REQUEST, str(e))
        request_log.details.append(("validation_error", str(e)))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid layout request",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [str(e)],
            },
        )

    except Exception as e:
        _fail(request_log, start_time, 500, ErrorCodes.INTERNAL_ERROR, str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        # Always log the request
        try:
            log_request(request_log)
        except Exception:
            # Don't fail the request if logging fails
            pass


@router.post("/month", response_model=MonthViewResponse)
async def month_view_endpoint(
    request: Request,
    body: MonthViewRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Month view: grid padding, lanes, day render plans and upcoming events."""
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/month",
        method="POST",
        client_ip=get_client_ip(request),
        event_count=len(body.events),
    )

    try:
        events = to_calendar_events(body.events)
        view = await asyncio.to_thread(
            build_month_view,
            events,
            body.year,
            body.month,
            body.max_visible,
            body.today,
        )
        request_log.window_start = view.window.start.isoformat()
        request_log.window_end = view.window.end.isoformat()

        request_log.status_code = 200
        request_log.lane_count = view.lane_count
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return MonthViewResponse(
            year=view.year,
            month=view.month,
            grid=view.grid,
            today=view.today,
            previous_month=MonthRef(year=view.previous_month[0], month=view.previous_month[1]),
            next_month=MonthRef(year=view.next_month[0], month=view.next_month[1]),
            window=window_out(view.window),
            lane_count=view.lane_count,
            layouts=[layout_out(layout) for layout in view.layouts],
            render_plans=[plan_out(plan) for plan in view.render_plans],
            upcoming=[upcoming_out(event) for event in view.upcoming],
        )

    except HTTPException as e:
        detail = e.detail if isinstance(e.detail, dict) else {}
        _fail(request_log, start_time, e.status_code, detail.get("code"), detail.get("error", str(e.detail)))
        raise

    except Exception as e:
        _fail(request_log, start_time, 500, ErrorCodes.INTERNAL_ERROR, str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        try:
            log_request(request_log)
        except Exception:
            pass
