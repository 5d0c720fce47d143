"""Daily plan API routes. Every write signals the notification scheduler."""

from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from daybell.domain.alert_points import today_string

plan_router = APIRouter(prefix="/plan", tags=["Plan"])

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_TIME_PATTERN = r"^\d{1,2}:\d{2}$"


class EventCreateRequest(BaseModel):
    title: str
    date: Optional[str] = Field(default=None, pattern=_DATE_PATTERN)
    start: str = Field(pattern=_TIME_PATTERN)
    end: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    description: str = ""


class EventUpdateRequest(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = Field(default=None, pattern=_DATE_PATTERN)
    start: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    end: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    description: Optional[str] = None


class PlanEvent(BaseModel):
    title: str
    start: str = Field(pattern=_TIME_PATTERN)
    end: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    description: str = ""


class EventResponse(BaseModel):
    id: str
    title: Optional[str] = ""
    date: str
    start: str
    end: Optional[str] = None
    description: Optional[str] = ""


class SchedulerStatusResponse(BaseModel):
    running: bool
    pending: Dict[str, str]
    fired: List[str]


def _today() -> str:
    return today_string(datetime.now())


@plan_router.get("/events", response_model=List[EventResponse])
async def list_events(request: Request, date: Optional[str] = None):
    store = request.app.state.store
    return store.get_events_for_date(date or _today())


@plan_router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(req: EventCreateRequest, request: Request):
    data = req.model_dump()
    data["date"] = data["date"] or _today()
    event = request.app.state.store.create_event(data)
    request.app.state.scheduler.refresh()
    return event


@plan_router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(event_id: str, req: EventUpdateRequest, request: Request):
    updates = req.model_dump(exclude_unset=True)
    event = request.app.state.store.update_event(event_id, updates)
    if event is None:
        raise HTTPException(status_code=404, detail=f"event {event_id} not found")
    request.app.state.scheduler.refresh()
    return event


@plan_router.delete("/events/{event_id}")
async def delete_event(event_id: str, request: Request):
    if not request.app.state.store.delete_event(event_id):
        raise HTTPException(status_code=404, detail=f"event {event_id} not found")
    request.app.state.scheduler.cancel_for_event(event_id)
    return {"deleted": event_id}


@plan_router.put("/today", response_model=List[EventResponse])
async def replace_today(events: List[PlanEvent], request: Request):
    """Replace the whole of today's plan and start a new alert epoch."""
    created = request.app.state.store.replace_day(
        _today(), [e.model_dump() for e in events]
    )
    request.app.state.scheduler.reset()
    return created


@plan_router.get("/scheduler", response_model=SchedulerStatusResponse)
async def scheduler_status(request: Request):
    scheduler = request.app.state.scheduler
    return SchedulerStatusResponse(
        running=scheduler.running,
        pending={key: fire_at.isoformat() for key, fire_at in scheduler.pending().items()},
        fired=sorted(scheduler.fired()),
    )


@plan_router.post("/scheduler/refresh")
async def refresh_scheduler(request: Request):
    scheduler = request.app.state.scheduler
    scheduler.refresh()
    return {"running": scheduler.running}
