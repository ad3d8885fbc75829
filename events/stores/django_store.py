"""Django ORM implementation of the EventStore."""

from functools import partial
from typing import Any

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from events import models
from events.cache import invalidate_event
from events.domain import Capacity, Category, Email, Event, EventId, Money, NewEvent
from events.stores.interfaces import EventStore


def to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(value=row.id),
        title=row.title,
        description=row.description,
        date=row.date,
        location=row.location,
        price=Money(amount=row.price),
        capacity=Capacity(value=row.capacity) if row.capacity is not None else None,
        attendees=row.attendees,
        organizer_email=Email(value=row.organizer_email),
        category=Category(label=row.category_label, value=row.category_value),
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def list_events(self) -> list[Event]:
        return [to_domain(row) for row in models.Event.objects.order_by("-created_at")]

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return to_domain(row) if row is not None else None

    def create_event(self, new_event: NewEvent) -> Event:
        row = models.Event.objects.create(
            title=new_event.title,
            description=new_event.description,
            date=new_event.date,
            location=new_event.location,
            price=new_event.price.amount,
            capacity=new_event.capacity.value if new_event.capacity else None,
            organizer_email=new_event.organizer_email.value,
            category_label=new_event.category.label,
            category_value=new_event.category.value,
            image_url=new_event.image_url,
        )
        return to_domain(row)

    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        columns: dict[str, Any] = {}
        for field, value in changes.items():
            if field == "price":
                columns["price"] = value.amount
            elif field == "capacity":
                columns["capacity"] = value.value if value is not None else None
            elif field == "category":
                columns["category_label"] = value.label
                columns["category_value"] = value.value
            else:
                columns[field] = value

        rows = models.Event.objects.filter(pk=event_id.value)
        if columns.get("capacity") is not None:
            rows = rows.filter(attendees__lte=columns["capacity"])

        updated = rows.update(**columns, updated_at=timezone.now())
        if not updated:
            return None

        transaction.on_commit(partial(invalidate_event, str(event_id.value)))
        return self.get_event(event_id)

    def delete_event(self, event_id: EventId) -> bool:
        deleted, _ = models.Event.objects.filter(pk=event_id.value).delete()
        return deleted > 0

    def adjust_attendees(self, event_id: EventId, delta: int) -> Event | None:
        if delta >= 0:
            guard = Q(capacity__isnull=True) | Q(attendees__lte=F("capacity") - delta)
        else:
            guard = Q(attendees__gte=-delta)

        # Single conditional UPDATE: the check and the increment cannot be split
        # by a concurrent writer.
        updated = models.Event.objects.filter(guard, pk=event_id.value).update(
            attendees=F("attendees") + delta,
            updated_at=timezone.now(),
        )
        if not updated:
            return None

        transaction.on_commit(partial(invalidate_event, str(event_id.value)))
        return self.get_event(event_id)
