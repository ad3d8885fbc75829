"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Automated tests with predictable outcomes
- Development without real gateway credentials

Webhooks are signed with HMAC-SHA256 over the raw body, so tests can
produce deliveries that verify and deliveries that do not.
"""

import hashlib
import hmac
import json
from uuid import uuid4

from bookings.domain.errors import GatewayError, SignatureInvalidError
from bookings.payments.port import (
    PaymentGateway,
    PaymentIntent,
    ProviderEvent,
    RefundResult,
    provider_event_from_payload,
)


def sign_payload(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []
        self.intents: dict[str, int] = {}
        self._refunds_by_key: dict[str, RefundResult] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "metadata": metadata,
            }
        )
        if not self.should_succeed:
            raise GatewayError("create_payment_intent", self.failure_reason)

        reference = f"pi_fake_{uuid4().hex[:16]}"
        self.intents[reference] = amount_minor
        return PaymentIntent(
            reference=reference,
            client_secret=f"{reference}_secret_{uuid4().hex[:8]}",
            amount_minor=amount_minor,
            currency=currency,
        )

    def refund(
        self,
        payment_reference: str,
        reason: str,
        idempotency_key: str,
    ) -> RefundResult:
        self.calls.append(
            {
                "method": "refund",
                "payment_reference": payment_reference,
                "reason": reason,
                "idempotency_key": idempotency_key,
            }
        )
        if not self.should_succeed:
            raise GatewayError("refund", self.failure_reason)

        # Same key, same refund: mirrors the provider's idempotency handling.
        if idempotency_key in self._refunds_by_key:
            return self._refunds_by_key[idempotency_key]

        result = RefundResult(
            refund_id=f"re_fake_{uuid4().hex[:12]}",
            amount_minor=self.intents.get(payment_reference, 0),
            status="succeeded",
        )
        self._refunds_by_key[idempotency_key] = result
        return result

    def verify_and_parse_webhook(
        self,
        payload: bytes,
        signature: str,
        secret: str,
    ) -> ProviderEvent:
        if not signature or not hmac.compare_digest(sign_payload(payload, secret), signature):
            raise SignatureInvalidError()
        try:
            body = json.loads(payload)
        except ValueError as exc:
            raise SignatureInvalidError() from exc
        if not isinstance(body, dict):
            raise SignatureInvalidError()
        return provider_event_from_payload(body)
