"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every write that changes
a booking's status is conditional on the status it expects to replace, so
two writers racing on one booking cannot both win.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from bookings.domain import Booking, BookingId, BookingStatus, NewBooking, RefundReceipt
from events.domain import Event


@dataclass(frozen=True)
class SeatClaim:
    """Outcome of create_with_seats.

    On success ``booking`` is set. On refusal ``booking`` is None and
    ``event`` is the snapshot read in the refused transaction (None when the
    event no longer exists).
    """

    booking: Booking | None
    event: Event | None


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def find_by_payment_reference(self, payment_reference: str) -> Booking | None:
        """Return the booking paid through ``payment_reference``, if any."""
        ...

    @abstractmethod
    def list_bookings_for_email(self, email: str) -> list[Booking]:
        """Return the bookings owned by ``email``, newest first."""
        ...

    @abstractmethod
    def create_with_seats(self, new_booking: NewBooking) -> SeatClaim:
        """Claim the seats and persist the booking in one transaction."""
        ...

    @abstractmethod
    def settle_payment(self, payment_reference: str, status: BookingStatus) -> Booking | None:
        """Move the pending booking paid through ``payment_reference`` to ``status``.

        Settling to cancelled releases the booking's seats in the same
        transaction. Returns None when no pending booking matched.
        """
        ...

    @abstractmethod
    def record_refund(self, booking_id: BookingId, receipt: RefundReceipt) -> Booking | None:
        """Attach a refund receipt to a booking that has none and is not cancelled."""
        ...

    @abstractmethod
    def cancel_and_release(self, booking_id: BookingId) -> Booking | None:
        """Cancel a non-cancelled booking and release its seats in one transaction.

        Returns None when the booking was already cancelled.
        """
        ...
