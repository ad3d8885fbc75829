"""Unit tests for EventService.

These test error handling and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock
from uuid import uuid4

import pytest

from events.domain import Capacity, Category, Email, Event, EventId, Money
from events.domain.errors import (
    CapacityBelowAttendeesError,
    EventNotFoundError,
    ForbiddenError,
    InvalidEventIdError,
)
from events.services.event_service import EventService
from events.stores.interfaces import EventStore


def stored_event(organizer: str = "org@example.com", capacity: int | None = None, attendees: int = 0) -> Event:
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    return Event(
        id=EventId(value=uuid4()),
        title="Jazz Night",
        description="Live music",
        date=now,
        location="Porto",
        price=Money(amount=Decimal("15")),
        capacity=Capacity(value=capacity) if capacity is not None else None,
        attendees=attendees,
        organizer_email=Email(value=organizer),
        category=Category(label="Music", value="music"),
        image_url=None,
        created_at=now,
        updated_at=now,
    )


class TestEventService:
    """Tests for EventService."""

    def test_get_event_invalid_id_raises_error(self):
        """get_event raises InvalidEventIdError for malformed UUID."""
        service = EventService(Mock(spec=EventStore))
        with pytest.raises(InvalidEventIdError):
            service.get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self):
        """get_event raises EventNotFoundError when store returns None."""
        store = Mock(spec=EventStore)
        store.get_event.return_value = None
        with pytest.raises(EventNotFoundError):
            EventService(store).get_event(str(uuid4()))

    def test_delete_event_by_organizer(self):
        """The organizer may delete their event, whatever the email case."""
        event = stored_event()
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        EventService(store).delete_event(str(event.id), "ORG@example.com")

        store.delete_event.assert_called_once_with(event.id)

    def test_delete_event_by_someone_else_is_forbidden(self):
        """delete_event raises ForbiddenError and deletes nothing."""
        event = stored_event()
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        with pytest.raises(ForbiddenError):
            EventService(store).delete_event(str(event.id), "intruder@example.com")
        store.delete_event.assert_not_called()

    def test_update_event_by_someone_else_is_forbidden(self):
        event = stored_event()
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        with pytest.raises(ForbiddenError):
            EventService(store).update_event(str(event.id), "intruder@example.com", {"title": "Mine now"})
        store.update_event.assert_not_called()

    def test_update_event_drops_fields_outside_the_editable_set(self):
        """Attendees and the organizer email are never passed to the store."""
        event = stored_event()
        store = Mock(spec=EventStore)
        store.get_event.return_value = event
        store.update_event.return_value = event

        EventService(store).update_event(
            str(event.id),
            "org@example.com",
            {"title": "Jazz Night II", "attendees": 0, "organizer_email": Email(value="x@example.com")},
        )

        store.update_event.assert_called_once_with(event.id, {"title": "Jazz Night II"})

    def test_update_event_capacity_below_attendees(self):
        event = stored_event(capacity=50, attendees=30)
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        with pytest.raises(CapacityBelowAttendeesError) as exc_info:
            EventService(store).update_event(str(event.id), "org@example.com", {"capacity": Capacity(value=20)})

        assert exc_info.value.details() == {"attendees": 30}
        store.update_event.assert_not_called()

    def test_update_event_loses_race_with_a_booking(self):
        """The guarded write refuses when seats were booked after the read."""
        event = stored_event(capacity=50, attendees=20)
        store = Mock(spec=EventStore)
        store.get_event.side_effect = [event, stored_event(capacity=50, attendees=26)]
        store.update_event.return_value = None

        with pytest.raises(CapacityBelowAttendeesError) as exc_info:
            EventService(store).update_event(str(event.id), "org@example.com", {"capacity": Capacity(value=25)})

        assert exc_info.value.details() == {"attendees": 26}
