from bookings.domain.models import (
    Booking,
    CancellationResult,
    IssuedTicket,
    NewBooking,
    RefundReceipt,
    Ticket,
    VerifiedTicket,
)
from bookings.domain.value_objects import BookingId, BookingStatus, Quantity

__all__ = [
    "Booking",
    "NewBooking",
    "CancellationResult",
    "RefundReceipt",
    "Ticket",
    "IssuedTicket",
    "VerifiedTicket",
    "BookingId",
    "BookingStatus",
    "Quantity",
]
