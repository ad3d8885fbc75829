"""Organizer emails. Best effort: a failed send is logged, never raised."""

import structlog
from django.conf import settings
from django.core.mail import send_mail

from events.domain import Event

logger = structlog.get_logger(__name__)


def send_event_created(event: Event) -> None:
    capacity_line = f"Capacity: {event.capacity.value}\n" if event.capacity else ""
    body = (
        f"Your event {event.title} has been created.\n\n"
        f"Title: {event.title}\n"
        f"Date: {event.date:%Y-%m-%d %H:%M %Z}\n"
        f"Location: {event.location}\n"
        f"Price: ${event.price}\n"
        f"{capacity_line}\n"
        "You can manage your event from the organizer dashboard.\n"
        "The Eventure Team"
    )
    try:
        send_mail(
            f"Event Created - {event.title}",
            body,
            settings.DEFAULT_FROM_EMAIL,
            [event.organizer_email.value],
        )
    except Exception:
        logger.exception("Failed to send event creation email", event_id=str(event.id))
        return
    logger.info("Event creation email sent", event_id=str(event.id))
