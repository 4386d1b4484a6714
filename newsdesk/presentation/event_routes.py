from typing import Annotated, Final

from fastapi import APIRouter, Depends, Path

from ..application.event_service import EventService
from ..application.validation import build_with_logging
from ..domain.constants import MAX_EVENT_ID
from ..domain.entities import Event, NewEvent
from ..infrastructure.database.database import ConnectionPool, get_pool
from ..infrastructure.database.repositories import EventRepository
from .schemas import (
    DeleteResponse,
    ErrorResponse,
    EventCreate,
    EventReplace,
    EventResponse,
)

event_router: Final = APIRouter(
    prefix="/api",
    tags=["events"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input data"},
        500: {"model": ErrorResponse, "description": "Persistence error"},
    },
)

_NOT_FOUND: Final = {404: {"model": ErrorResponse, "description": "Event not found"}}

EventId = Annotated[
    int, Path(ge=1, le=MAX_EVENT_ID, description="Event identifier")
]


def get_event_service(pool: ConnectionPool = Depends(get_pool)) -> EventService:
    return EventService(EventRepository(pool))


@event_router.get("/events")
def get_events(service: EventService = Depends(get_event_service)) -> list[EventResponse]:
    return [EventResponse.from_domain(e) for e in service.list_events()]


@event_router.get("/event/{event_id}", responses=_NOT_FOUND)
def get_event(
    event_id: EventId, service: EventService = Depends(get_event_service)
) -> EventResponse:
    return EventResponse.from_domain(service.get_event(event_id))


@event_router.post("/event")
def create_event(
    payload: EventCreate, service: EventService = Depends(get_event_service)
) -> EventResponse:
    new_event = build_with_logging(
        NewEvent,
        "event",
        name=payload.name.strip(),
        description=payload.description,
        location=payload.location.strip(),
    )
    return EventResponse.from_domain(service.create_event(new_event))


@event_router.put("/event", responses=_NOT_FOUND)
def update_event(
    payload: EventReplace, service: EventService = Depends(get_event_service)
) -> EventResponse:
    """Replace every field of the event named by ``id`` in the body."""
    event = build_with_logging(
        Event,
        "event",
        id=payload.id,
        name=payload.name.strip(),
        description=payload.description,
        location=payload.location.strip(),
    )
    return EventResponse.from_domain(service.update_event(event))


@event_router.delete("/event/{event_id}", responses=_NOT_FOUND)
def delete_event(
    event_id: EventId, service: EventService = Depends(get_event_service)
) -> DeleteResponse:
    return DeleteResponse(deleted=service.delete_event(event_id))
