"""Django ORM implementation of the BookingStore.

Seat movements go through EventStore.adjust_attendees inside the same
transaction.atomic() block as the booking write, so a booking row and its
share of the attendee counter commit or roll back together.
"""

import structlog
from django.db import transaction
from django.utils import timezone

from bookings import models
from bookings.domain import Booking, BookingId, BookingStatus, NewBooking, Quantity, RefundReceipt
from bookings.stores.interfaces import BookingStore, SeatClaim
from events.domain import Email, EventId, Money
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)

CANCELLED = models.Booking.Status.CANCELLED


def to_domain(row: models.Booking) -> Booking:
    refund = None
    if row.refund_id:
        refund = RefundReceipt(
            refund_id=row.refund_id,
            amount=Money(amount=row.refund_amount or 0),
            status=row.refund_status or "",
        )
    return Booking(
        id=BookingId(value=row.id),
        event_id=EventId(value=row.event_id),
        name=row.name,
        email=Email(value=row.email),
        quantity=Quantity(value=row.quantity),
        total_price=Money(amount=row.total_price),
        event_title=row.event_title,
        status=BookingStatus(row.status),
        payment_reference=row.payment_reference,
        refund=refund,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoBookingStore(BookingStore):
    """PostgreSQL-backed booking store using Django ORM."""

    def __init__(self, event_store: EventStore) -> None:
        self._events = event_store

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id.value).first()
        return to_domain(row) if row is not None else None

    def find_by_payment_reference(self, payment_reference: str) -> Booking | None:
        row = models.Booking.objects.filter(payment_reference=payment_reference).first()
        return to_domain(row) if row is not None else None

    def list_bookings_for_email(self, email: str) -> list[Booking]:
        rows = models.Booking.objects.filter(email=email.strip().lower()).order_by("-created_at")
        return [to_domain(row) for row in rows]

    def create_with_seats(self, new_booking: NewBooking) -> SeatClaim:
        with transaction.atomic():
            event = self._events.adjust_attendees(new_booking.event_id, new_booking.quantity.value)
            if event is None:
                return SeatClaim(booking=None, event=self._events.get_event(new_booking.event_id))

            row = models.Booking.objects.create(
                event_id=new_booking.event_id.value,
                name=new_booking.name,
                email=new_booking.email.value,
                quantity=new_booking.quantity.value,
                total_price=new_booking.total_price.amount,
                event_title=new_booking.event_title,
                status=new_booking.status.value,
                payment_reference=new_booking.payment_reference,
            )
        return SeatClaim(booking=to_domain(row), event=event)

    def settle_payment(self, payment_reference: str, status: BookingStatus) -> Booking | None:
        with transaction.atomic():
            row = (
                models.Booking.objects.select_for_update()
                .filter(payment_reference=payment_reference, status=BookingStatus.PENDING.value)
                .first()
            )
            if row is None:
                return None

            updated = models.Booking.objects.filter(pk=row.pk, status=BookingStatus.PENDING.value).update(
                status=status.value,
                updated_at=timezone.now(),
            )
            if not updated:
                return None

            if status is BookingStatus.CANCELLED:
                self._release_seats(row)

            row.refresh_from_db()
        return to_domain(row)

    def record_refund(self, booking_id: BookingId, receipt: RefundReceipt) -> Booking | None:
        updated = (
            models.Booking.objects.filter(pk=booking_id.value, refund_id__isnull=True)
            .exclude(status=CANCELLED)
            .update(
                refund_id=receipt.refund_id,
                refund_amount=receipt.amount.amount,
                refund_status=receipt.status,
                updated_at=timezone.now(),
            )
        )
        if not updated:
            return None
        return self.get_booking(booking_id)

    def cancel_and_release(self, booking_id: BookingId) -> Booking | None:
        with transaction.atomic():
            row = models.Booking.objects.select_for_update().filter(pk=booking_id.value).first()
            if row is None or row.status == CANCELLED:
                return None

            updated = (
                models.Booking.objects.filter(pk=row.pk)
                .exclude(status=CANCELLED)
                .update(status=CANCELLED, updated_at=timezone.now())
            )
            if not updated:
                return None

            self._release_seats(row)
            row.refresh_from_db()
        return to_domain(row)

    def _release_seats(self, row: models.Booking) -> None:
        event = self._events.adjust_attendees(EventId(value=row.event_id), -row.quantity)
        if event is None:
            # The counter is guarded at zero; a refusal here means it was
            # already lower than this booking's share.
            logger.error(
                "Attendee counter refused seat release",
                booking_id=str(row.pk),
                event_id=str(row.event_id),
                quantity=row.quantity,
            )
