from typing import Final

from ..domain.entities import Event, NewEvent
from ..domain.exceptions import NotFoundError
from ..infrastructure.database.repositories import EventRepository
from ..logging_config import get_logger
from ..logging_utils import log_record_change
from ..metrics import record_event_operation

logger: Final = get_logger(__name__)


class EventService:
    """Application service for Event operations."""

    def __init__(self, repository: EventRepository):
        self.repository = repository

    def create_event(self, new_event: NewEvent) -> Event:
        event = self.repository.create(new_event)
        log_record_change("create", "events", event.id)
        record_event_operation("create")
        return event

    def get_event(self, event_id: int) -> Event:
        event = self.repository.get(event_id)
        if event is None:
            raise NotFoundError("event", event_id)
        return event

    def list_events(self) -> list[Event]:
        return self.repository.list_all()

    def update_event(self, event: Event) -> Event:
        updated = self.repository.update(event)
        if updated is None:
            logger.warning("Event update failed - not found", event_id=event.id)
            raise NotFoundError("event", event.id)
        log_record_change("update", "events", event.id)
        record_event_operation("update")
        return updated

    def delete_event(self, event_id: int) -> int:
        deleted = self.repository.delete(event_id)
        if deleted == 0:
            raise NotFoundError("event", event_id)
        log_record_change("delete", "events", event_id)
        record_event_operation("delete")
        return deleted
