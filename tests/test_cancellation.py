"""Tests for the cancel-and-refund flow.

Run with: pytest tests/test_cancellation.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from bookings.domain import BookingStatus, RefundReceipt
from bookings.domain.errors import (
    AlreadyCancelledError,
    BookingNotFoundError,
    CancellationWindowClosedError,
    InvalidBookingIdError,
    RefundFailedError,
    TicketRevokedError,
)
from events.domain import Money
from events.domain.errors import ForbiddenError
from events.models import Event


def hours_from_now(hours: float):
    return timezone.now() + timedelta(hours=hours)


@pytest.mark.django_db
class TestCancellationPolicy:
    """Bookings can be cancelled up to 24 hours before the event"""

    def test_cancel_25_hours_before(self, make_event, paid_booking, cancellation_service):
        row = make_event(date=hours_from_now(25))
        booking = paid_booking(row)

        result = cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert result.booking.status is BookingStatus.CANCELLED

    def test_cancel_23_hours_before_is_refused(self, make_event, paid_booking, cancellation_service, gateway):
        row = make_event(date=hours_from_now(23))
        booking = paid_booking(row, quantity=2)

        with pytest.raises(CancellationWindowClosedError) as exc_info:
            cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert exc_info.value.window_hours == 24
        assert exc_info.value.hours_until_event == 23.0
        assert gateway.calls_to("refund") == []
        row.refresh_from_db()
        assert row.attendees == 2

    def test_just_under_24_hours_is_refused(self, make_event, paid_booking, cancellation_service, booking_store):
        """The window is checked on the exact time left, not on the rounded hours."""
        row = make_event(date=timezone.now() + timedelta(hours=23, minutes=59, seconds=30))
        booking = paid_booking(row)

        with pytest.raises(CancellationWindowClosedError) as exc_info:
            cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert exc_info.value.hours_until_event == 24.0
        assert booking_store.get_booking(booking.id).status is BookingStatus.PENDING


@pytest.mark.django_db
class TestCancelBooking:
    """Tests for CancellationService.cancel_booking"""

    def test_cancel_refunds_and_releases_seats(
        self, make_event, paid_booking, cancellation_service, booking_store, gateway, mailoutbox
    ):
        row = make_event(price=Decimal("30.00"), capacity=5)
        booking = paid_booking(row, quantity=2)

        result = cancellation_service.cancel_booking(str(booking.id), "ADA@example.com")

        assert result.refund is not None
        assert result.refund.amount == Money(amount=Decimal("60.00"))
        refund_call = gateway.calls_to("refund")[0]
        assert refund_call["payment_reference"] == booking.payment_reference
        assert refund_call["idempotency_key"] == f"booking-{booking.id}-refund"

        stored = booking_store.get_booking(booking.id)
        assert stored.status is BookingStatus.CANCELLED
        assert stored.refund.refund_id == result.refund.refund_id
        row.refresh_from_db()
        assert row.attendees == 0
        assert len(mailoutbox) == 1

    def test_free_booking_cancels_without_refund(self, make_event, booking_service, cancellation_service, gateway):
        row = make_event(price=Decimal("0"))
        booking = booking_service.create_booking(str(row.pk), "Ada", "ada@example.com", 1)

        result = cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert result.refund is None
        assert gateway.calls_to("refund") == []
        row.refresh_from_db()
        assert row.attendees == 0

    def test_only_the_owner_may_cancel(self, make_event, paid_booking, cancellation_service, booking_store):
        booking = paid_booking(make_event())

        with pytest.raises(ForbiddenError):
            cancellation_service.cancel_booking(str(booking.id), "mallory@example.com")
        assert booking_store.get_booking(booking.id).status is BookingStatus.PENDING

    def test_second_cancel_is_refused(self, make_event, paid_booking, cancellation_service, gateway):
        row = make_event(capacity=3)
        booking = paid_booking(row, quantity=1)
        cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        with pytest.raises(AlreadyCancelledError):
            cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert len(gateway.calls_to("refund")) == 1
        row.refresh_from_db()
        assert row.attendees == 0

    def test_unknown_booking(self, db, cancellation_service):
        with pytest.raises(BookingNotFoundError):
            cancellation_service.cancel_booking(str(uuid4()), "ada@example.com")

    def test_invalid_booking_id(self, db, cancellation_service):
        with pytest.raises(InvalidBookingIdError):
            cancellation_service.cancel_booking("123", "ada@example.com")


@pytest.mark.django_db
class TestRefundFailures:
    """A refund failure leaves the booking exactly as it was"""

    def test_refund_failure_keeps_booking(self, make_event, paid_booking, cancellation_service, booking_store, gateway):
        row = make_event()
        booking = paid_booking(row, quantity=2)
        gateway.configure(should_succeed=False, failure_reason="Charge already disputed")

        with pytest.raises(RefundFailedError):
            cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        stored = booking_store.get_booking(booking.id)
        assert stored.status is BookingStatus.PENDING
        assert stored.refund is None
        row.refresh_from_db()
        assert row.attendees == 2

    def test_retry_after_recorded_refund_skips_the_provider(
        self, make_event, paid_booking, cancellation_service, booking_store, gateway
    ):
        """Refunded but not yet cancelled: the retry only finishes the local step."""
        row = make_event()
        booking = paid_booking(row)
        receipt = RefundReceipt(refund_id="re_earlier", amount=Money(amount=Decimal("25.00")), status="succeeded")
        assert booking_store.record_refund(booking.id, receipt).refund_pending_cancellation

        result = cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert result.refund.refund_id == "re_earlier"
        assert gateway.calls_to("refund") == []
        assert result.booking.status is BookingStatus.CANCELLED
        row.refresh_from_db()
        assert row.attendees == 0

    def test_retry_after_recorded_refund_inside_the_window(
        self, make_event, paid_booking, cancellation_service, booking_store, ticket_service, gateway
    ):
        """A booking refunded before the window closed can still be finished after it closed."""
        row = make_event()
        booking = paid_booking(row)
        booking_store.settle_payment(booking.payment_reference, BookingStatus.CONFIRMED)
        issued = ticket_service.issue_ticket(str(booking.id), "ada@example.com")
        receipt = RefundReceipt(refund_id="re_1", amount=Money(amount=Decimal("25.00")), status="succeeded")
        booking_store.record_refund(booking.id, receipt)
        Event.objects.filter(pk=row.pk).update(date=hours_from_now(20))

        result = cancellation_service.cancel_booking(str(booking.id), "ada@example.com")

        assert result.booking.status is BookingStatus.CANCELLED
        assert result.refund.refund_id == "re_1"
        assert gateway.calls_to("refund") == []
        row.refresh_from_db()
        assert row.attendees == 0
        with pytest.raises(TicketRevokedError):
            ticket_service.verify_ticket(issued.code)

    def test_refund_receipt_is_recorded_once(self, make_event, paid_booking, booking_store):
        booking = paid_booking(make_event())
        first = RefundReceipt(refund_id="re_1", amount=Money(amount=Decimal("25")), status="succeeded")
        second = RefundReceipt(refund_id="re_2", amount=Money(amount=Decimal("25")), status="succeeded")

        assert booking_store.record_refund(booking.id, first) is not None
        assert booking_store.record_refund(booking.id, second) is None
        assert booking_store.get_booking(booking.id).refund.refund_id == "re_1"
