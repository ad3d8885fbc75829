"""Ticket issuance and verification.

Issuing never writes anything: each call mints a new ticket id over the same
booking. Verification therefore keys off the embedded booking id and always
answers from the live booking and event.
"""

from uuid import uuid4

import structlog
from django.utils import timezone

from bookings.domain import IssuedTicket, Ticket, VerifiedTicket
from bookings.domain.errors import (
    BookingNotConfirmedError,
    BookingNotFoundError,
    InvalidTicketFormatError,
    TicketMismatchError,
    TicketNotFoundError,
    TicketRevokedError,
)
from bookings.domain.value_objects import BookingId
from bookings.services.booking_service import parse_booking_id
from bookings.stores.interfaces import BookingStore
from bookings.tickets import codec
from bookings.tickets.rendering import render_qr_png, render_ticket_pdf
from events.domain.errors import EventNotFoundError, ForbiddenError
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


def new_ticket_id() -> str:
    return f"TKT-{uuid4().hex[:12].upper()}"


class TicketService:
    """Service for issuing and checking tickets."""

    def __init__(self, bookings: BookingStore, events: EventStore) -> None:
        self._bookings = bookings
        self._events = events

    def issue_ticket(self, booking_id: str, requester_email: str | None) -> IssuedTicket:
        """Issue a ticket for a confirmed booking.

        Raises:
            InvalidBookingIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            ForbiddenError: If the requester does not own the booking.
            BookingNotConfirmedError: If the booking is not confirmed.
        """
        booking = self._bookings.get_booking(parse_booking_id(booking_id))
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if not booking.is_owned_by(requester_email):
            raise ForbiddenError("booking")
        if not booking.is_confirmed:
            raise BookingNotConfirmedError(booking.status.value)

        event = self._events.get_event(booking.event_id)
        if event is None:
            raise EventNotFoundError(str(booking.event_id))

        ticket = Ticket(
            ticket_id=new_ticket_id(),
            booking_id=str(booking.id),
            event_id=str(event.id),
            email=booking.email.value,
            quantity=booking.quantity.value,
            issued_at=timezone.now(),
        )
        code = codec.encode(ticket)
        qr_png = render_qr_png(code)
        pdf = render_ticket_pdf(ticket, booking, event, qr_png)

        logger.info("Ticket issued", ticket_id=ticket.ticket_id, booking_id=ticket.booking_id)
        return IssuedTicket(ticket=ticket, code=code, qr_png=qr_png, pdf=pdf)

    def verify_ticket(self, code: str) -> VerifiedTicket:
        """Check a presented ticket code against live booking state.

        Raises:
            InvalidTicketFormatError: If the code does not decode.
            TicketNotFoundError: If the booking does not exist.
            TicketRevokedError: If the booking is cancelled.
            TicketMismatchError: If the ticket's event is not the booking's event.
        """
        ticket = codec.decode(code)
        try:
            booking_id = BookingId.from_string(ticket.booking_id)
        except ValueError as exc:
            raise InvalidTicketFormatError() from exc

        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            raise TicketNotFoundError(ticket.booking_id)
        if booking.is_cancelled:
            logger.warning("Revoked ticket presented", ticket_id=ticket.ticket_id, booking_id=ticket.booking_id)
            raise TicketRevokedError(ticket.booking_id)
        if ticket.event_id != str(booking.event_id):
            logger.warning(
                "Ticket event mismatch",
                ticket_id=ticket.ticket_id,
                booking_id=ticket.booking_id,
                ticket_event_id=ticket.event_id,
            )
            raise TicketMismatchError(ticket.booking_id)

        event = self._events.get_event(booking.event_id)
        if event is None:
            raise TicketNotFoundError(ticket.booking_id)

        logger.info("Ticket verified", ticket_id=ticket.ticket_id, booking_id=ticket.booking_id)
        return VerifiedTicket(ticket_id=ticket.ticket_id, booking=booking, event=event)
