"""Tests for the payment gateway adapters.

Run with: pytest tests/test_gateway.py -v
"""

import hashlib
import hmac
import json
import time

import pytest
from django.test import override_settings

from bookings.domain.errors import GatewayError, SignatureInvalidError
from bookings.payments import get_gateway, reset_gateway
from bookings.payments.fake_adapter import FakeGateway, sign_payload
from bookings.payments.port import ProviderEventKind, provider_event_from_payload
from bookings.payments.stripe_adapter import StripeGateway

SECRET = "whsec_adapter"


def stripe_signature(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def intent_event(event_type: str, reference: str = "pi_123") -> bytes:
    return json.dumps(
        {"id": "evt_1", "object": "event", "type": event_type, "data": {"object": {"id": reference}}}
    ).encode()


class TestProviderEvents:
    @pytest.mark.parametrize(
        "event_type, kind",
        [
            ("payment_intent.succeeded", ProviderEventKind.SUCCEEDED),
            ("payment_intent.payment_failed", ProviderEventKind.FAILED),
            ("payment_intent.canceled", ProviderEventKind.CANCELED),
            ("customer.created", ProviderEventKind.UNKNOWN),
        ],
    )
    def test_event_kinds(self, event_type, kind):
        event = provider_event_from_payload(json.loads(intent_event(event_type)))
        assert event.kind is kind
        assert event.payment_reference == "pi_123"
        assert event.event_id == "evt_1"

    def test_payload_without_object(self):
        event = provider_event_from_payload({"type": "payment_intent.succeeded"})
        assert event.payment_reference is None


class TestFakeGateway:
    def test_refund_is_idempotent_per_key(self):
        gateway = FakeGateway()
        intent = gateway.create_payment_intent(2500, "usd", metadata={})

        first = gateway.refund(intent.reference, "test", idempotency_key="booking-1-refund")
        second = gateway.refund(intent.reference, "test", idempotency_key="booking-1-refund")

        assert first == second
        assert first.amount_minor == 2500

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Insufficient funds")

        with pytest.raises(GatewayError) as exc_info:
            gateway.create_payment_intent(100, "usd", metadata={})
        assert exc_info.value.message == "Insufficient funds"

    def test_webhook_verification(self):
        gateway = FakeGateway()
        payload = intent_event("payment_intent.succeeded")

        event = gateway.verify_and_parse_webhook(payload, sign_payload(payload, SECRET), SECRET)

        assert event.kind is ProviderEventKind.SUCCEEDED
        with pytest.raises(SignatureInvalidError):
            gateway.verify_and_parse_webhook(payload, sign_payload(payload, "other"), SECRET)

    def test_signed_non_json_is_rejected(self):
        payload = b"not json"
        with pytest.raises(SignatureInvalidError):
            FakeGateway().verify_and_parse_webhook(payload, sign_payload(payload, SECRET), SECRET)


class TestStripeWebhookVerification:
    """Signature checks run locally; no request reaches Stripe."""

    def test_valid_signature(self):
        payload = intent_event("payment_intent.payment_failed", "pi_abc")

        event = StripeGateway(api_key="sk_test").verify_and_parse_webhook(payload, stripe_signature(payload, SECRET), SECRET)

        assert event.kind is ProviderEventKind.FAILED
        assert event.payment_reference == "pi_abc"

    def test_wrong_secret(self):
        payload = intent_event("payment_intent.succeeded")
        with pytest.raises(SignatureInvalidError):
            StripeGateway(api_key="sk_test").verify_and_parse_webhook(
                payload, stripe_signature(payload, "whsec_other"), SECRET
            )

    def test_malformed_header(self):
        payload = intent_event("payment_intent.succeeded")
        with pytest.raises(SignatureInvalidError):
            StripeGateway(api_key="sk_test").verify_and_parse_webhook(payload, "garbage", SECRET)

    def test_stale_timestamp(self):
        payload = intent_event("payment_intent.succeeded")
        old = int(time.time()) - 3600
        with pytest.raises(SignatureInvalidError):
            StripeGateway(api_key="sk_test").verify_and_parse_webhook(payload, stripe_signature(payload, SECRET, old), SECRET)


class TestGatewayFactory:
    def test_fake_by_default(self):
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    @override_settings(PAYMENT_GATEWAY="stripe", STRIPE_API_KEY="sk_test_123")
    def test_stripe_when_configured(self):
        reset_gateway()
        gateway = get_gateway()
        assert isinstance(gateway, StripeGateway)
        assert gateway.api_key == "sk_test_123"
