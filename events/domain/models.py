"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from events.domain.value_objects import Capacity, Email, EventId, Money


@dataclass(frozen=True)
class Category:
    """Catalog category, kept as the label shown to users plus a slug value."""

    label: str
    value: str


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``capacity`` is None for unlimited events. ``attendees`` is owned by the
    booking lifecycle and is only ever changed through the capacity ledger.
    """

    id: EventId
    title: str
    description: str
    date: datetime
    location: str
    price: Money
    capacity: Capacity | None
    attendees: int
    organizer_email: Email
    category: Category
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_unlimited(self) -> bool:
        return self.capacity is None

    @property
    def seats_remaining(self) -> int | None:
        """Seats still free, or None when the event has no limit."""
        if self.is_unlimited:
            return None
        return max(self.capacity.value - self.attendees, 0)

    @property
    def is_sold_out(self) -> bool:
        return self.capacity is not None and self.attendees >= self.capacity.value


# Fields an organizer may change after creation. The owner email and the
# attendee counter are not among them.
EDITABLE_FIELDS = frozenset(
    {"title", "description", "date", "location", "price", "capacity", "category", "image_url"}
)


@dataclass(frozen=True)
class NewEvent:
    """Input for creating an event. Attendees always start at zero."""

    title: str
    description: str
    date: datetime
    location: str
    price: Money
    capacity: Capacity | None
    organizer_email: Email
    category: Category
    image_url: str | None = None
