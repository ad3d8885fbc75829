from events.domain.models import EDITABLE_FIELDS, Category, Event, NewEvent
from events.domain.value_objects import Capacity, Email, EventId, Money

__all__ = [
    "EDITABLE_FIELDS",
    "Event",
    "NewEvent",
    "Category",
    "EventId",
    "Email",
    "Money",
    "Capacity",
]
