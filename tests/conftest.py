"""Pytest configuration and shared fixtures."""

import json
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from bookings.payments import reset_gateway, set_gateway
from bookings.payments.fake_adapter import FakeGateway, sign_payload
from bookings.services.booking_service import BookingService
from bookings.services.cancellation import CancellationService
from bookings.services.reconciliation import PaymentReconciler
from bookings.services.ticket_service import TicketService
from bookings.stores.django_store import DjangoBookingStore
from events.models import Event
from events.stores.django_store import DjangoEventStore

WEBHOOK_SECRET = "whsec_test_secret"
ORGANIZER = "organizer@example.com"
CUSTOMER = "ada@example.com"


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def gateway(settings) -> FakeGateway:
    """Every test talks to a fresh fake provider."""
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture
def make_event(db):
    """Create an event row. Defaults: $25.00, 10 seats, a week from now."""

    def make(**overrides) -> Event:
        fields = {
            "title": "PyCon Meetup",
            "description": "Talks and snacks",
            "date": timezone.now() + timedelta(days=7),
            "location": "Berlin",
            "price": Decimal("25.00"),
            "capacity": 10,
            "attendees": 0,
            "organizer_email": ORGANIZER,
            "category_label": "Technology",
            "category_value": "technology",
        }
        fields.update(overrides)
        return Event.objects.create(**fields)

    return make


@pytest.fixture
def event_store() -> DjangoEventStore:
    return DjangoEventStore()


@pytest.fixture
def booking_store(event_store) -> DjangoBookingStore:
    return DjangoBookingStore(event_store)


@pytest.fixture
def booking_service(booking_store, event_store, gateway) -> BookingService:
    return BookingService(booking_store, event_store, gateway)


@pytest.fixture
def cancellation_service(booking_store, event_store, gateway) -> CancellationService:
    return CancellationService(booking_store, event_store, gateway, window_hours=24)


@pytest.fixture
def ticket_service(booking_store, event_store) -> TicketService:
    return TicketService(booking_store, event_store)


@pytest.fixture
def reconciler(booking_store, event_store, gateway) -> PaymentReconciler:
    return PaymentReconciler(booking_store, event_store, gateway, WEBHOOK_SECRET)


@pytest.fixture
def paid_booking(booking_service):
    """Create a pending paid booking through a fresh payment intent."""

    def make(event: Event, quantity: int = 1, email: str = CUSTOMER):
        intent = booking_service.create_payment_intent(str(event.pk), quantity)
        return booking_service.create_booking(
            event_id=str(event.pk),
            name="Ada Lovelace",
            email=email,
            quantity=quantity,
            payment_reference=intent.reference,
        )

    return make


@pytest.fixture
def webhook_delivery():
    """Build a signed Stripe-shaped delivery: (raw body, signature)."""

    def make(event_type: str, payment_reference: str | None, secret: str = WEBHOOK_SECRET):
        body = json.dumps(
            {
                "id": "evt_test_1",
                "type": event_type,
                "data": {"object": {"id": payment_reference, "object": "payment_intent"}},
            }
        ).encode()
        return body, sign_payload(body, secret)

    return make
