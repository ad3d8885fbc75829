"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

The catalog never writes the attendee counter; only the booking lifecycle
moves it, through EventStore.adjust_attendees.
"""

from typing import Any

import structlog

from events.domain import EDITABLE_FIELDS, Event, EventId, NewEvent
from events.domain.errors import (
    CapacityBelowAttendeesError,
    EventNotFoundError,
    ForbiddenError,
    InvalidEventIdError,
)
from events.services.notifications import send_event_created
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


def parse_event_id(event_id: str) -> EventId:
    """Parse a raw identifier.

    Raises:
        InvalidEventIdError: If the event_id is not a valid UUID.
    """
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidEventIdError() from exc


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def list_events(self) -> list[Event]:
        """Return all events."""
        return self._store.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(self, new_event: NewEvent) -> Event:
        event = self._store.create_event(new_event)
        logger.info(
            "Event created",
            event_id=str(event.id),
            organizer=event.organizer_email.value,
            capacity=event.capacity.value if event.capacity else None,
        )
        send_event_created(event)
        return event

    def update_event(self, event_id: str, requester_email: str | None, changes: dict[str, Any]) -> Event:
        """Apply an organizer edit. The owner email and attendees never change.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If the requester is not the organizer.
            CapacityBelowAttendeesError: If the new capacity is below the
                seats already booked.
        """
        event = self.get_event(event_id)
        if not event.organizer_email.matches(requester_email):
            raise ForbiddenError("event")

        edits = {field: value for field, value in changes.items() if field in EDITABLE_FIELDS}
        capacity = edits.get("capacity")
        if capacity is not None and capacity.value < event.attendees:
            raise CapacityBelowAttendeesError(capacity.value, event.attendees)

        updated = self._store.update_event(event.id, edits)
        if updated is None:
            # Seats were booked between the read and the guarded write.
            current = self.get_event(event_id)
            raise CapacityBelowAttendeesError(capacity.value if capacity else 0, current.attendees)

        logger.info("Event updated", event_id=str(event.id), fields=sorted(edits))
        return updated

    def delete_event(self, event_id: str, requester_email: str) -> None:
        """Delete an event owned by the requester, cascading to its bookings.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If the requester is not the organizer.
        """
        event = self.get_event(event_id)
        if not event.organizer_email.matches(requester_email):
            raise ForbiddenError("event")
        self._store.delete_event(event.id)
        logger.info("Event deleted", event_id=str(event.id))
