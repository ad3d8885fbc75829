"""Stripe payment gateway adapter.

Uses the stripe-python SDK to:
- Create PaymentIntents
- Process refunds
- Verify webhook signatures using Stripe's signing secret
"""

import json

import stripe
import structlog

from bookings.domain.errors import GatewayError, SignatureInvalidError
from bookings.payments.port import (
    PaymentGateway,
    PaymentIntent,
    ProviderEvent,
    RefundResult,
    provider_event_from_payload,
)

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_minor,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe payment intent creation failed", error=str(exc), amount=amount_minor)
            raise GatewayError("create_payment_intent") from exc

        return PaymentIntent(
            reference=intent["id"],
            client_secret=intent["client_secret"],
            amount_minor=intent["amount"],
            currency=intent["currency"],
        )

    def refund(
        self,
        payment_reference: str,
        reason: str,
        idempotency_key: str,
    ) -> RefundResult:
        try:
            refund = stripe.Refund.create(
                api_key=self.api_key,
                payment_intent=payment_reference,
                reason="requested_by_customer",
                metadata={"reason": reason},
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe refund failed", error=str(exc), payment_reference=payment_reference)
            raise GatewayError("refund", "Refund request was rejected by the payment provider") from exc

        return RefundResult(
            refund_id=refund["id"],
            amount_minor=refund["amount"],
            status=refund["status"],
        )

    def verify_and_parse_webhook(
        self,
        payload: bytes,
        signature: str,
        secret: str,
    ) -> ProviderEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise SignatureInvalidError() from exc

        return provider_event_from_payload(json.loads(payload))
