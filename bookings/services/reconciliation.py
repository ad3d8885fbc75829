"""Payment reconciliation: provider webhooks drive pending bookings.

    pending --succeeded--------> confirmed
    pending --failed/canceled--> cancelled (seats released)

confirmed and cancelled are terminal here. Every notification is handled on
its own: a replay, a foreign payment or an unknown kind is a no-op, never an
error, because the provider retries failed deliveries.
"""

from enum import Enum

import structlog

from bookings.domain import BookingStatus
from bookings.domain.errors import SignatureInvalidError
from bookings.payments.port import PaymentGateway, ProviderEvent, ProviderEventKind
from bookings.services.notifications import send_booking_confirmation
from bookings.stores.interfaces import BookingStore
from events.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)

TARGET_STATUS = {
    ProviderEventKind.SUCCEEDED: BookingStatus.CONFIRMED,
    ProviderEventKind.FAILED: BookingStatus.CANCELLED,
    ProviderEventKind.CANCELED: BookingStatus.CANCELLED,
}


class ReconciliationOutcome(Enum):
    APPLIED = "applied"
    ALREADY_SETTLED = "already_settled"
    NO_MATCH = "no_match"
    IGNORED = "ignored"


class PaymentReconciler:
    """Applies verified provider notifications to booking status."""

    def __init__(
        self,
        bookings: BookingStore,
        events: EventStore,
        gateway: PaymentGateway,
        webhook_secret: str,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._gateway = gateway
        self._webhook_secret = webhook_secret

    def handle_webhook(self, payload: bytes, signature: str | None) -> ReconciliationOutcome:
        """Verify a raw delivery, then apply it.

        Raises:
            SignatureInvalidError: If the delivery does not verify. Nothing is
                applied in that case.
        """
        try:
            provider_event = self._gateway.verify_and_parse_webhook(payload, signature or "", self._webhook_secret)
        except SignatureInvalidError:
            logger.error("Webhook signature verification failed", security=True, payload_bytes=len(payload))
            raise
        return self.apply(provider_event)

    def apply(self, provider_event: ProviderEvent) -> ReconciliationOutcome:
        log = logger.bind(
            event_type=provider_event.event_type,
            provider_event_id=provider_event.event_id,
            payment_reference=provider_event.payment_reference,
        )

        target = TARGET_STATUS.get(provider_event.kind)
        if target is None:
            log.info("Unhandled webhook event type")
            return ReconciliationOutcome.IGNORED

        if not provider_event.payment_reference:
            log.warning("Webhook event carries no payment reference")
            return ReconciliationOutcome.NO_MATCH

        booking = self._bookings.settle_payment(provider_event.payment_reference, target)
        if booking is None:
            existing = self._bookings.find_by_payment_reference(provider_event.payment_reference)
            if existing is None:
                log.info("No booking for payment")
                return ReconciliationOutcome.NO_MATCH
            log.info("Booking already settled", booking_id=str(existing.id), status=existing.status.value)
            return ReconciliationOutcome.ALREADY_SETTLED

        log.info("Booking payment reconciled", booking_id=str(booking.id), status=booking.status.value)
        if booking.is_confirmed:
            event = self._events.get_event(booking.event_id)
            if event is not None:
                send_booking_confirmation(booking, event)
        return ReconciliationOutcome.APPLIED
