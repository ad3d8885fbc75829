"""Concurrent booking against one event.

SQLite serialises writers, so on the default settings this module is skipped.
It needs a PostgreSQL server and the postgres extra; config.settings switches
to PostgreSQL whenever POSTGRES_DB is set:

    pip install -e ".[postgres,test]"
    POSTGRES_DB=eventure POSTGRES_USER=postgres POSTGRES_PASSWORD=postgres \\
        pytest tests/test_concurrency.py -v

pytest-django creates and drops the test_eventure database itself, so the
user needs CREATEDB. Run it as its own step next to the SQLite run: a
"skipped" here means the PostgreSQL step is missing, not that it passed.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from django.db import connection, connections

from bookings.domain.errors import CapacityExceededError, SoldOutError
from bookings.models import Booking as BookingRow
from bookings.services.booking_service import BookingService
from bookings.stores.django_store import DjangoBookingStore
from events.stores.django_store import DjangoEventStore

pytestmark = pytest.mark.skipif(connection.vendor != "postgresql", reason="needs PostgreSQL row locking")


@pytest.mark.django_db(transaction=True)
class TestConcurrentBooking:
    def test_last_seat_goes_to_exactly_one_buyer(self, make_event, gateway):
        row = make_event(capacity=10, attendees=9, price=Decimal("0"))

        def attempt(i: int) -> str:
            events = DjangoEventStore()
            service = BookingService(DjangoBookingStore(events), events, gateway)
            try:
                service.create_booking(str(row.pk), f"Buyer {i}", f"buyer{i}@example.com", 1)
                return "booked"
            except (SoldOutError, CapacityExceededError):
                return "refused"
            finally:
                connections.close_all()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(8)))

        assert results.count("booked") == 1
        row.refresh_from_db()
        assert row.attendees == 10
        assert BookingRow.objects.filter(event=row).count() == 1

    def test_overlapping_requests_never_oversell(self, make_event, gateway):
        row = make_event(capacity=20, price=Decimal("0"))

        def attempt(i: int) -> int:
            events = DjangoEventStore()
            service = BookingService(DjangoBookingStore(events), events, gateway)
            try:
                return service.create_booking(str(row.pk), f"Buyer {i}", f"buyer{i}@example.com", 3).quantity.value
            except (SoldOutError, CapacityExceededError):
                return 0
            finally:
                connections.close_all()

        with ThreadPoolExecutor(max_workers=10) as pool:
            booked = sum(pool.map(attempt, range(10)))

        row.refresh_from_db()
        assert booked == row.attendees == 18
