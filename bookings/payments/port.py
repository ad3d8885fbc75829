"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any service code.

Adapters raise GatewayError when the provider call fails and
SignatureInvalidError when a webhook does not verify. They never retry.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class ProviderEventKind(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


# Provider event types the reconciler understands. Everything else is UNKNOWN.
EVENT_KINDS = {
    "payment_intent.succeeded": ProviderEventKind.SUCCEEDED,
    "payment_intent.payment_failed": ProviderEventKind.FAILED,
    "payment_intent.canceled": ProviderEventKind.CANCELED,
}


@dataclass(frozen=True)
class PaymentIntent:
    """A payment the client still has to complete with the provider."""

    reference: str
    client_secret: str
    amount_minor: int
    currency: str


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund accepted by the provider."""

    refund_id: str
    amount_minor: int
    status: str


@dataclass(frozen=True)
class ProviderEvent:
    """A verified webhook notification."""

    kind: ProviderEventKind
    payment_reference: str | None
    event_type: str
    event_id: str | None = None


def provider_event_from_payload(payload: dict) -> ProviderEvent:
    """Build a ProviderEvent from a Stripe-shaped event body."""
    event_type = payload.get("type") or ""
    data_object = (payload.get("data") or {}).get("object") or {}
    return ProviderEvent(
        kind=EVENT_KINDS.get(event_type, ProviderEventKind.UNKNOWN),
        payment_reference=data_object.get("id"),
        event_type=event_type,
        event_id=payload.get("id"),
    )


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        """Create a payment intent for ``amount_minor`` (cents)."""
        ...

    @abstractmethod
    def refund(
        self,
        payment_reference: str,
        reason: str,
        idempotency_key: str,
    ) -> RefundResult:
        """Refund the full amount of a previous payment."""
        ...

    @abstractmethod
    def verify_and_parse_webhook(
        self,
        payload: bytes,
        signature: str,
        secret: str,
    ) -> ProviderEvent:
        """Verify that a webhook payload is authentically from the gateway and parse it."""
        ...
