"""Domain models for the booking lifecycle.

Bookings are persisted (bookings/models.py). Tickets are not: a ticket is a
projection of a booking and its event plus a freshly minted id, and the
booking status stays the single source of truth.
"""

from dataclasses import dataclass
from datetime import datetime

from bookings.domain.value_objects import BookingId, BookingStatus, Quantity
from events.domain import Email, Event, EventId, Money


@dataclass(frozen=True)
class RefundReceipt:
    """What the payment provider returned for a refund."""

    refund_id: str
    amount: Money
    status: str


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: BookingId
    event_id: EventId
    name: str
    email: Email
    quantity: Quantity
    total_price: Money
    event_title: str
    status: BookingStatus
    payment_reference: str | None
    refund: RefundReceipt | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_cancelled(self) -> bool:
        return self.status is BookingStatus.CANCELLED

    @property
    def is_confirmed(self) -> bool:
        return self.status is BookingStatus.CONFIRMED

    @property
    def refund_pending_cancellation(self) -> bool:
        """Refunded at the provider but not yet cancelled locally."""
        return self.refund is not None and not self.is_cancelled

    def is_owned_by(self, email: str | None) -> bool:
        return self.email.matches(email)


@dataclass(frozen=True)
class NewBooking:
    """A booking about to be persisted together with its seat claim."""

    event_id: EventId
    name: str
    email: Email
    quantity: Quantity
    total_price: Money
    event_title: str
    status: BookingStatus
    payment_reference: str | None


@dataclass(frozen=True)
class CancellationResult:
    booking: Booking
    refund: RefundReceipt | None


@dataclass(frozen=True)
class Ticket:
    """Payload embedded in the scannable code."""

    ticket_id: str
    booking_id: str
    event_id: str
    email: str
    quantity: int
    issued_at: datetime | None

    def to_payload(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "booking_id": self.booking_id,
            "event_id": self.event_id,
            "email": self.email,
            "quantity": self.quantity,
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
        }


@dataclass(frozen=True)
class IssuedTicket:
    ticket: Ticket
    code: str
    qr_png: bytes
    pdf: bytes


@dataclass(frozen=True)
class VerifiedTicket:
    """A ticket that checked out, with the live booking and event records."""

    ticket_id: str
    booking: Booking
    event: Event
