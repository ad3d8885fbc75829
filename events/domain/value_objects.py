"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self
from uuid import UUID

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        object.__setattr__(self, "amount", Decimal(self.amount).quantize(CENTS, rounding=ROUND_HALF_UP))

    @classmethod
    def from_minor_units(cls, minor_units: int) -> Self:
        return cls(amount=Decimal(minor_units) / 100)

    def times(self, quantity: int) -> "Money":
        return Money(amount=self.amount * quantity)

    def minor_units(self) -> int:
        """Amount in the smallest currency unit, as payment providers expect."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Seat limit of an event. Unlimited events carry no Capacity at all."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be at least 1")


@dataclass(frozen=True)
class Email:
    """Owner identity. Compared trimmed and lower-cased."""

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip().lower()
        if "@" not in normalized or normalized.startswith("@") or normalized.endswith("@"):
            raise ValueError("Invalid email address")
        object.__setattr__(self, "value", normalized)

    def matches(self, other: str | None) -> bool:
        """True when ``other`` names the same address once normalised."""
        if not other:
            return False
        return other.strip().lower() == self.value

    def __str__(self) -> str:
        return self.value
