"""Domain error codes for the booking lifecycle.

Every failure a caller can remedy differently has its own code; none of them
collapse into a generic error.
"""

from enum import Enum
from typing import Any

from events.domain.errors import DomainError


class BookingErrorCode(Enum):
    """Domain error codes."""

    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    INVALID_BOOKING_ID = "INVALID_BOOKING_ID"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    SOLD_OUT = "SOLD_OUT"
    PAYMENT_REFERENCE_REQUIRED = "PAYMENT_REFERENCE_REQUIRED"
    PAYMENT_REFERENCE_IN_USE = "PAYMENT_REFERENCE_IN_USE"
    PAYMENT_NOT_REQUIRED = "PAYMENT_NOT_REQUIRED"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    CANCELLATION_WINDOW_CLOSED = "CANCELLATION_WINDOW_CLOSED"
    BOOKING_NOT_CONFIRMED = "BOOKING_NOT_CONFIRMED"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    REFUND_FAILED = "REFUND_FAILED"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"
    INVALID_TICKET_FORMAT = "INVALID_TICKET_FORMAT"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    TICKET_REVOKED = "TICKET_REVOKED"
    TICKET_MISMATCH = "TICKET_MISMATCH"


class BookingNotFoundError(DomainError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class InvalidBookingIdError(DomainError):
    """Raised when a booking ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.INVALID_BOOKING_ID,
            message="Invalid booking ID format",
        )


class CapacityExceededError(DomainError):
    """Raised when the requested quantity does not fit in the seats left."""

    def __init__(self, remaining: int) -> None:
        super().__init__(
            code=BookingErrorCode.CAPACITY_EXCEEDED,
            message=f"Only {remaining} ticket(s) remain for this event",
        )
        self.remaining = remaining

    def details(self) -> dict[str, Any]:
        return {"remaining": self.remaining}


class SoldOutError(DomainError):
    """Raised when no seats are left at all."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.SOLD_OUT,
            message="This event is sold out",
        )


class PaymentReferenceRequiredError(DomainError):
    """Raised when a paid booking arrives without a payment reference."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.PAYMENT_REFERENCE_REQUIRED,
            message="A payment reference is required for paid bookings",
        )


class AlreadyCancelledError(DomainError):
    """Raised when cancelling a booking that is already cancelled."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.ALREADY_CANCELLED,
            message="Booking is already cancelled",
        )
        self.booking_id = booking_id


class CancellationWindowClosedError(DomainError):
    """Raised when cancellation is requested too close to the event."""

    def __init__(self, hours_until_event: float, window_hours: int) -> None:
        super().__init__(
            code=BookingErrorCode.CANCELLATION_WINDOW_CLOSED,
            message=(
                f"Bookings cannot be cancelled within {window_hours} hours of the event "
                f"({hours_until_event} hours left)"
            ),
        )
        self.hours_until_event = hours_until_event
        self.window_hours = window_hours

    def details(self) -> dict[str, Any]:
        return {"hours_until_event": self.hours_until_event, "window_hours": self.window_hours}


class BookingNotConfirmedError(DomainError):
    """Raised when a ticket is requested for a booking that is not confirmed."""

    def __init__(self, status: str) -> None:
        super().__init__(
            code=BookingErrorCode.BOOKING_NOT_CONFIRMED,
            message="Tickets are only available for confirmed bookings",
        )
        self.status = status

    def details(self) -> dict[str, Any]:
        return {"status": self.status}


class GatewayError(DomainError):
    """Raised by payment gateway adapters when the provider call fails."""

    def __init__(self, operation: str, reason: str = "Payment provider request failed") -> None:
        super().__init__(
            code=BookingErrorCode.GATEWAY_ERROR,
            message=reason,
        )
        self.operation = operation


class RefundFailedError(DomainError):
    """Raised when the refund failed, so the cancellation was not applied."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.REFUND_FAILED,
            message="Refund failed, cancellation not applied",
        )
        self.booking_id = booking_id


class SignatureInvalidError(DomainError):
    """Raised when a webhook payload fails the provider signature check."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.SIGNATURE_INVALID,
            message="Webhook signature verification failed",
        )


class InvalidTicketFormatError(DomainError):
    """Raised when a presented ticket payload cannot be decoded."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.INVALID_TICKET_FORMAT,
            message="Invalid ticket format",
        )


class TicketNotFoundError(DomainError):
    """Raised when a ticket references a booking that does not exist."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )
        self.booking_id = booking_id


class TicketRevokedError(DomainError):
    """Raised when a ticket's booking has been cancelled."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.TICKET_REVOKED,
            message="Ticket has been cancelled",
        )
        self.booking_id = booking_id


class TicketMismatchError(DomainError):
    """Raised when a ticket's event does not match its booking's event."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=BookingErrorCode.TICKET_MISMATCH,
            message="Event mismatch",
        )
        self.booking_id = booking_id


class PaymentReferenceInUseError(DomainError):
    """Raised when a payment reference already backs another booking."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.PAYMENT_REFERENCE_IN_USE,
            message="This payment has already been used for a booking",
        )


class PaymentNotRequiredError(DomainError):
    """Raised when a payment intent is requested for a free booking."""

    def __init__(self) -> None:
        super().__init__(
            code=BookingErrorCode.PAYMENT_NOT_REQUIRED,
            message="This booking is free and needs no payment",
        )
