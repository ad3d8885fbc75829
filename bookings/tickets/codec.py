"""Scannable ticket payload.

The payload is the ticket's JSON, signed with the project secret so a
scanner can tell a ticket this system issued from a hand-edited one.
"""

from datetime import datetime

from django.core import signing

from bookings.domain import Ticket
from bookings.domain.errors import InvalidTicketFormatError

SALT = "bookings.tickets"


def encode(ticket: Ticket) -> str:
    return signing.dumps(ticket.to_payload(), salt=SALT, compress=True)


def decode(code: str) -> Ticket:
    """Parse a presented code back into a Ticket.

    Raises:
        InvalidTicketFormatError: On a bad signature or a payload without
            ticket and booking ids.
    """
    try:
        payload = signing.loads(code, salt=SALT)
    except (signing.BadSignature, ValueError, TypeError) as exc:
        raise InvalidTicketFormatError() from exc

    if not isinstance(payload, dict) or not payload.get("ticket_id") or not payload.get("booking_id"):
        raise InvalidTicketFormatError()

    try:
        issued_at = datetime.fromisoformat(payload["issued_at"]) if payload.get("issued_at") else None
        quantity = int(payload.get("quantity") or 0)
    except (TypeError, ValueError) as exc:
        raise InvalidTicketFormatError() from exc

    return Ticket(
        ticket_id=str(payload["ticket_id"]),
        booking_id=str(payload["booking_id"]),
        event_id=str(payload.get("event_id") or ""),
        email=str(payload.get("email") or ""),
        quantity=quantity,
        issued_at=issued_at,
    )
