"""Booking emails.

Best effort: a failed send is logged and never reaches the lifecycle.
"""

import structlog
from django.conf import settings
from django.core.mail import send_mail

from bookings.domain import Booking, RefundReceipt
from events.domain import Event

logger = structlog.get_logger(__name__)


def send_booking_confirmation(booking: Booking, event: Event) -> None:
    body = (
        f"Hi {booking.name},\n\n"
        f"Your booking for {event.title} has been confirmed.\n\n"
        f"Event: {event.title}\n"
        f"Date: {event.date:%Y-%m-%d %H:%M %Z}\n"
        f"Location: {event.location}\n"
        f"Quantity: {booking.quantity.value} ticket(s)\n"
        f"Total Paid: ${booking.total_price}\n\n"
        "We look forward to seeing you at the event!\n"
        "The Eventure Team"
    )
    _send(booking, f"Booking Confirmation - {event.title}", body, kind="confirmation")


def send_booking_cancellation(booking: Booking, event: Event, refund: RefundReceipt | None) -> None:
    refund_line = f"A refund of ${refund.amount} has been issued.\n" if refund else ""
    body = (
        f"Hi {booking.name},\n\n"
        f"Your booking for {event.title} has been cancelled.\n"
        f"{refund_line}\n"
        "The Eventure Team"
    )
    _send(booking, f"Booking Cancelled - {event.title}", body, kind="cancellation")


def _send(booking: Booking, subject: str, body: str, kind: str) -> None:
    try:
        send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [booking.email.value])
    except Exception:
        logger.exception("Failed to send booking email", kind=kind, booking_id=str(booking.id))
        return
    logger.info("Booking email sent", kind=kind, booking_id=str(booking.id))
