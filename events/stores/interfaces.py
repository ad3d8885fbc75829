"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from typing import Any

from events.domain import Event, EventId, NewEvent


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def create_event(self, new_event: NewEvent) -> Event:
        """Persist a new event with zero attendees."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        """Apply organizer edits. Never touches the attendee counter.

        A new capacity is written only if it still covers the attendees, in
        the same statement. Returns None if the event does not exist or the
        guard refused the change.
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event and its bookings. Return False if it did not exist."""
        ...

    @abstractmethod
    def adjust_attendees(self, event_id: EventId, delta: int) -> Event | None:
        """Atomically add ``delta`` to the attendee counter.

        The write is guarded so the counter never leaves [0, capacity].
        Returns the updated event, or None if the event does not exist or the
        guard refused the change.
        """
        ...
