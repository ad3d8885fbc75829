"""Cancellation with refund.

The refund is an external call and the local write is a DB transaction; they
cannot commit together. The protocol is an ordered saga:

1. refund at the provider (skipped for free bookings), then record the
   receipt on the booking. The booking is now "refunded, not cancelled",
   which is visible in storage and in the logs;
2. cancel the booking and release its seats in one transaction.

A failed refund stops the saga before anything local changes. A retried
cancellation that finds a recorded receipt skips step 1 and finishes step 2.
The provider idempotency key is derived from the booking, so two racing
cancellations produce one refund.
"""

from datetime import datetime

import structlog
from django.utils import timezone

from bookings.domain import Booking, CancellationResult, RefundReceipt
from bookings.domain.errors import (
    AlreadyCancelledError,
    BookingNotFoundError,
    CancellationWindowClosedError,
    GatewayError,
    RefundFailedError,
)
from bookings.payments.port import PaymentGateway
from bookings.services.booking_service import parse_booking_id
from bookings.services.notifications import send_booking_cancellation
from bookings.stores.interfaces import BookingStore
from events.domain import Event, Money
from events.domain.errors import EventNotFoundError, ForbiddenError
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)

REFUND_REASON = "Booking cancelled by customer"


def hours_until(moment: datetime, now: datetime) -> float:
    return (moment - now).total_seconds() / 3600


class CancellationService:
    """Runs the cancel-and-refund saga for one booking."""

    def __init__(
        self,
        bookings: BookingStore,
        events: EventStore,
        gateway: PaymentGateway,
        window_hours: int = 24,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._gateway = gateway
        self._window_hours = window_hours

    def cancel_booking(self, booking_id: str, requester_email: str | None) -> CancellationResult:
        """Cancel a booking for its owner and refund it.

        Raises:
            InvalidBookingIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            ForbiddenError: If the requester does not own the booking.
            AlreadyCancelledError: If the booking is already cancelled.
            CancellationWindowClosedError: If the event starts within the window.
            RefundFailedError: If the provider refused the refund; nothing changed.
        """
        booking, event = self._check_preconditions(booking_id, requester_email)
        refund = self._refund(booking)
        cancelled = self._finalize(booking, event, refund)
        return CancellationResult(booking=cancelled, refund=refund)

    def _check_preconditions(self, booking_id: str, requester_email: str | None) -> tuple[Booking, Event]:
        booking = self._bookings.get_booking(parse_booking_id(booking_id))
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if not booking.is_owned_by(requester_email):
            raise ForbiddenError("booking")
        if booking.is_cancelled:
            raise AlreadyCancelledError(booking_id)

        event = self._events.get_event(booking.event_id)
        if event is None:
            raise EventNotFoundError(str(booking.event_id))

        if booking.refund is not None:
            # Refunded already; only the local cancellation is left to finish.
            return booking, event

        remaining = hours_until(event.date, timezone.now())
        if remaining < self._window_hours:
            raise CancellationWindowClosedError(round(remaining, 1), self._window_hours)
        return booking, event

    def _refund(self, booking: Booking) -> RefundReceipt | None:
        """Step 1. Returns None for bookings that were never paid."""
        if not booking.payment_reference:
            return None

        if booking.refund is not None:
            logger.warning(
                "Resuming cancellation after recorded refund",
                booking_id=str(booking.id),
                refund_id=booking.refund.refund_id,
            )
            return booking.refund

        try:
            result = self._gateway.refund(
                booking.payment_reference,
                REFUND_REASON,
                idempotency_key=f"booking-{booking.id}-refund",
            )
        except GatewayError as exc:
            logger.error(
                "Refund failed, cancellation not applied",
                booking_id=str(booking.id),
                payment_reference=booking.payment_reference,
                reason=exc.message,
            )
            raise RefundFailedError(str(booking.id)) from exc

        receipt = RefundReceipt(
            refund_id=result.refund_id,
            amount=Money.from_minor_units(result.amount_minor),
            status=result.status,
        )
        if self._bookings.record_refund(booking.id, receipt) is None:
            # Another cancellation recorded first; same idempotency key, same refund.
            logger.info("Refund already recorded", booking_id=str(booking.id), refund_id=receipt.refund_id)
        else:
            logger.info(
                "Refund recorded, awaiting local cancellation",
                booking_id=str(booking.id),
                refund_id=receipt.refund_id,
                amount=str(receipt.amount),
            )
        return receipt

    def _finalize(self, booking: Booking, event: Event, refund: RefundReceipt | None) -> Booking:
        """Step 2."""
        cancelled = self._bookings.cancel_and_release(booking.id)
        if cancelled is None:
            raise AlreadyCancelledError(str(booking.id))

        logger.info(
            "Booking cancelled",
            booking_id=str(booking.id),
            event_id=str(event.id),
            released=booking.quantity.value,
            refund_id=refund.refund_id if refund else None,
        )
        send_booking_cancellation(cancelled, event, refund)
        return cancelled
