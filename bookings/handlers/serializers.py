"""Serializers for booking requests and responses."""

from rest_framework import serializers

from events.handlers.serializers import EventSerializer


class RefundSerializer(serializers.Serializer):
    refund_id = serializers.CharField()
    amount = serializers.DecimalField(source="amount.amount", max_digits=10, decimal_places=2)
    status = serializers.CharField()


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    name = serializers.CharField()
    email = serializers.CharField(source="email.value")
    quantity = serializers.IntegerField(source="quantity.value")
    total_price = serializers.DecimalField(source="total_price.amount", max_digits=10, decimal_places=2)
    event_title = serializers.CharField()
    status = serializers.CharField(source="status.value")
    payment_reference = serializers.CharField(allow_null=True)
    refund = RefundSerializer(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


MAX_QUANTITY = 100


class PaymentIntentRequestSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)


class BookingCreateSerializer(serializers.Serializer):
    """Validates the input shape of POST /api/bookings."""

    event_id = serializers.CharField()
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    payment_reference = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    # Display hint only; the charged total is recomputed server-side.
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class OwnerSerializer(serializers.Serializer):
    email = serializers.EmailField()


class TicketVerifySerializer(serializers.Serializer):
    payload = serializers.CharField()


class VerifiedTicketSerializer(serializers.Serializer):
    ticket_id = serializers.CharField()
    booking = BookingSerializer()
    event = EventSerializer()
