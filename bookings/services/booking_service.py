"""Booking creation against the capacity ledger.

A booking and its seats are claimed in one conditional write (see
BookingStore.create_with_seats). The read of the event that precedes it is
only a fast path for a precise error; it never decides admission on its own.

Paid bookings start ``pending`` and wait for the payment webhook. Free
bookings have nothing to clear and start ``confirmed``.
"""

from decimal import Decimal

import structlog

from bookings.domain import Booking, BookingId, BookingStatus, NewBooking, Quantity
from bookings.domain.errors import (
    CapacityExceededError,
    InvalidBookingIdError,
    PaymentNotRequiredError,
    PaymentReferenceInUseError,
    PaymentReferenceRequiredError,
    SoldOutError,
)
from bookings.payments.port import PaymentGateway, PaymentIntent
from bookings.services.notifications import send_booking_confirmation
from bookings.stores.interfaces import BookingStore
from events.domain import Email, Event, Money
from events.domain.errors import DomainError, EventNotFoundError
from events.services.event_service import parse_event_id
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


def parse_booking_id(booking_id: str) -> BookingId:
    try:
        return BookingId.from_string(booking_id)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidBookingIdError() from exc


def no_room_error(event: Event, quantity: Quantity) -> DomainError | None:
    """The capacity error for booking ``quantity`` seats, or None if they fit."""
    remaining = event.seats_remaining
    if remaining is None:
        return None
    if remaining <= 0:
        return SoldOutError()
    if quantity.value > remaining:
        return CapacityExceededError(remaining)
    return None


class BookingService:
    """Service for creating and reading bookings."""

    def __init__(
        self,
        bookings: BookingStore,
        events: EventStore,
        gateway: PaymentGateway,
        currency: str = "usd",
        claim_attempts: int = 3,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._gateway = gateway
        self._currency = currency
        self._claim_attempts = max(claim_attempts, 1)

    def list_bookings(self, email: str) -> list[Booking]:
        return self._bookings.list_bookings_for_email(email)

    def create_payment_intent(self, event_id: str, quantity: int) -> PaymentIntent:
        """Open a provider payment for ``quantity`` seats at the server-held price.

        Nothing is claimed here; seats are claimed when the booking is created.

        Raises:
            EventNotFoundError, SoldOutError, CapacityExceededError,
            PaymentNotRequiredError, GatewayError
        """
        event = self._require_event(event_id)
        seats = Quantity(value=quantity)
        error = no_room_error(event, seats)
        if error is not None:
            raise error

        amount = event.price.times(seats.value)
        if amount.is_zero():
            raise PaymentNotRequiredError()

        intent = self._gateway.create_payment_intent(
            amount.minor_units(),
            self._currency,
            metadata={"event_id": str(event.id), "quantity": str(seats.value)},
        )
        logger.info(
            "Payment intent created",
            event_id=str(event.id),
            payment_reference=intent.reference,
            amount_minor=intent.amount_minor,
        )
        return intent

    def create_booking(
        self,
        event_id: str,
        name: str,
        email: str,
        quantity: int,
        payment_reference: str | None = None,
        quoted_total: Decimal | None = None,
    ) -> Booking:
        """Create a booking and claim its seats.

        ``quoted_total`` is what the client displayed; the charged total is
        always recomputed from the event price.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            PaymentReferenceRequiredError: If a paid booking has no payment reference.
            PaymentReferenceInUseError: If the payment already backs a booking.
            SoldOutError: If no seats are left.
            CapacityExceededError: If fewer than ``quantity`` seats are left.
        """
        event = self._require_event(event_id)
        seats = Quantity(value=quantity)
        owner = Email(value=email)
        total = event.price.times(seats.value)

        if quoted_total is not None and Money(amount=quoted_total) != total:
            logger.warning(
                "Client quoted total differs from server price",
                event_id=str(event.id),
                quoted=str(quoted_total),
                charged=str(total),
            )

        if total.is_zero():
            status = BookingStatus.CONFIRMED
        else:
            if not payment_reference:
                raise PaymentReferenceRequiredError()
            status = BookingStatus.PENDING

        if payment_reference and self._bookings.find_by_payment_reference(payment_reference) is not None:
            raise PaymentReferenceInUseError()

        error = no_room_error(event, seats)
        if error is not None:
            raise error

        new_booking = NewBooking(
            event_id=event.id,
            name=name.strip(),
            email=owner,
            quantity=seats,
            total_price=total,
            event_title=event.title,
            status=status,
            payment_reference=payment_reference or None,
        )

        for attempt in range(1, self._claim_attempts + 1):
            claim = self._bookings.create_with_seats(new_booking)
            if claim.booking is not None:
                break
            if claim.event is None:
                raise EventNotFoundError(event_id)
            error = no_room_error(claim.event, seats)
            if error is not None:
                raise error
            # Seats were released between the refused write and the re-read.
            logger.info("Seat claim retried", event_id=str(event.id), attempt=attempt)
        else:
            raise no_room_error(claim.event, seats) or CapacityExceededError(claim.event.seats_remaining or 0)

        booking = claim.booking
        logger.info(
            "Booking created",
            booking_id=str(booking.id),
            event_id=str(event.id),
            quantity=seats.value,
            status=booking.status.value,
            attendees=claim.event.attendees,
        )
        if booking.is_confirmed:
            send_booking_confirmation(booking, claim.event)
        return booking

    def _require_event(self, event_id: str) -> Event:
        event = self._events.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event
