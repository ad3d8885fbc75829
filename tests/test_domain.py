"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from bookings.domain import BookingId, Quantity
from events.domain import Capacity, Category, Email, Event, EventId, Money


def make_event(capacity: int | None, attendees: int) -> Event:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return Event(
        id=EventId(value=uuid4()),
        title="Workshop",
        description="",
        date=now,
        location="Lisbon",
        price=Money(amount=Decimal("10")),
        capacity=Capacity(value=capacity) if capacity is not None else None,
        attendees=attendees,
        organizer_email=Email(value="org@example.com"),
        category=Category(label="Tech", value="tech"),
        image_url=None,
        created_at=now,
        updated_at=now,
    )


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(amount=Decimal("19.99")).amount == Decimal("19.99")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(amount=Decimal("0")).is_zero()

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(amount=Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(amount=Decimal("5"))) == "5.00"

    def test_money_times_and_minor_units(self):
        """Totals are exact in cents."""
        total = Money(amount=Decimal("19.99")).times(3)
        assert total == Money(amount=Decimal("59.97"))
        assert total.minor_units() == 5997

    def test_money_from_minor_units(self):
        assert Money.from_minor_units(2500) == Money(amount=Decimal("25.00"))


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with positive value."""
        assert Capacity(value=1).value == 1

    def test_capacity_rejects_zero(self):
        """Unlimited events carry no Capacity, so zero is invalid."""
        with pytest.raises(ValueError):
            Capacity(value=0)


class TestEmail:
    """Tests for Email value object."""

    def test_email_is_normalised(self):
        assert Email(value="  Ada@Example.COM ").value == "ada@example.com"

    def test_email_rejects_missing_at(self):
        with pytest.raises(ValueError):
            Email(value="not-an-email")

    def test_email_matches_case_insensitively(self):
        email = Email(value="ada@example.com")
        assert email.matches("ADA@example.com ")
        assert not email.matches("bob@example.com")
        assert not email.matches(None)


class TestIdentifiers:
    """Tests for EventId and BookingId."""

    def test_event_id_from_string(self):
        value = uuid4()
        assert EventId.from_string(str(value)).value == value

    def test_event_id_rejects_garbage(self):
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")

    def test_booking_id_str_round_trips(self):
        value = uuid4()
        assert str(BookingId.from_string(str(value))) == str(value)


class TestQuantity:
    """Tests for Quantity value object."""

    def test_quantity_rejects_zero(self):
        with pytest.raises(ValueError):
            Quantity(value=0)

    def test_quantity_accepts_one(self):
        assert Quantity(value=1).value == 1


class TestEventSeats:
    """Tests for the seat properties of Event."""

    def test_seats_remaining(self):
        event = make_event(capacity=10, attendees=9)
        assert event.seats_remaining == 1
        assert not event.is_sold_out

    def test_sold_out_at_capacity(self):
        event = make_event(capacity=10, attendees=10)
        assert event.seats_remaining == 0
        assert event.is_sold_out

    def test_unlimited_event_never_sells_out(self):
        event = make_event(capacity=None, attendees=5000)
        assert event.is_unlimited
        assert event.seats_remaining is None
        assert not event.is_sold_out

