"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField()
    date = models.DateTimeField()
    location = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    # NULL means unlimited.
    capacity = models.PositiveIntegerField(blank=True, null=True)
    attendees = models.PositiveIntegerField(default=0)
    organizer_email = models.EmailField()
    category_label = models.CharField(max_length=100)
    category_value = models.CharField(max_length=100)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_idx"),
            models.Index(fields=["organizer_email"], name="event_organizer_idx"),
            models.Index(fields=["date"], name="event_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(attendees__gte=0),
                name="event_attendees_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(capacity__isnull=True) | Q(attendees__lte=F("capacity")),
                name="event_attendees_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.title
